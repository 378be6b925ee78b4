"""User authentication controller endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_password_hasher, get_token_manager
from app.core.security import PasswordHasher, TokenManager
from app.domains.user.service import UserService
from app.exceptions.base import BaseAppException, StorageError, ValidationError
from app.exceptions.user import InvalidCredentialsError, UserAlreadyExistsError
from app.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_manager: TokenManager = Depends(get_token_manager),
):
    """Register a new user and sign them in.

    Username, email and password are all required. The username and the
    email must both be unused.
    """
    if not register_data.username or not register_data.email or not register_data.password:
        raise ValidationError("All fields are required")

    user_service = UserService(db)

    try:
        existing_user = await user_service.find_user_by_username_or_email(
            register_data.username, register_data.email
        )
        if existing_user:
            raise UserAlreadyExistsError()

        password_hash = hasher.hash(register_data.password)
        user = await user_service.create_user(
            username=register_data.username,
            email=register_data.email,
            password_hash=password_hash,
        )
        token = token_manager.issue(user.id, user.username)
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Registration error")
        raise StorageError("Internal server error") from e

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_manager: TokenManager = Depends(get_token_manager),
):
    """Authenticate with a username (or email) and password.

    An unknown user and a wrong password give the same response.
    """
    if not login_data.username or not login_data.password:
        raise ValidationError("Username and password are required")

    try:
        user = await UserService(db).find_user_by_username_or_email(login_data.username)

        if user is None:
            hasher.dummy_verify()
            raise InvalidCredentialsError()

        if not hasher.verify(login_data.password, user.password_hash):
            raise InvalidCredentialsError()

        token = token_manager.issue(user.id, user.username)
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Login error")
        raise StorageError("Internal server error") from e

    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserSummary.model_validate(user),
    )
