# app/domains/user/service.py
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.user import UserAlreadyExistsError
from models import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_user_by_username_or_email(
        self, username: str, email: Optional[str] = None
    ) -> Optional[User]:
        """Find a user whose username or email matches.

        With only ``username`` given, the value is compared against both
        columns, so a login may name either.
        """
        email = username if email is None else email
        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email)).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create_user(self, username: str, email: str, password_hash: str) -> User:
        """Create a new user.

        The unique constraints decide concurrent registrations of the same
        name: the losing insert is reported as ``UserAlreadyExistsError``.
        """
        user = User(username=username, email=email, password_hash=password_hash)

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("Registration for %s lost a uniqueness race", username)
            raise UserAlreadyExistsError() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
