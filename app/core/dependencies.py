# app/core/dependencies.py
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import PasswordHasher, TokenClaims, TokenManager
from app.database import get_db
from app.exceptions.user import MissingTokenError
from app.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

# auto_error is off so a missing header gets this application's own 401 envelope
security = HTTPBearer(auto_error=False)

__all__ = [
    "get_db",
    "get_blob_store",
    "get_token_manager",
    "get_password_hasher",
    "get_current_user",
]


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_manager: TokenManager = Depends(get_token_manager),
) -> TokenClaims:
    """Resolve the caller from the ``Authorization: Bearer`` header.

    Returns:
        TokenClaims: user id and username carried by the token

    Raises:
        MissingTokenError: no bearer credentials were sent
        InvalidTokenError: the token is forged, malformed or expired
    """
    if not credentials or not credentials.credentials:
        raise MissingTokenError()

    claims = token_manager.verify(credentials.credentials)

    # Add user info to request state for logging
    request.state.user_id = claims.user_id

    return claims
