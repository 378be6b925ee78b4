"""
Provides the User model for the application's database schema.

Attributes
----------
username : sqlalchemy.Column
    Login name, unique across all users.
email : sqlalchemy.Column
    Email address, unique across all users. Also accepted as a login name.
password_hash : sqlalchemy.Column
    bcrypt digest of the password. Never leaves the data layer.
created_at : sqlalchemy.Column
    Registration time.

Relationships
-------------
files : sqlalchemy.orm.relationship
    One-to-many relationship with `StoredFile`. The foreign key is declared
    with ``ON DELETE CASCADE`` so the database removes a user's file records
    together with the user.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from .base import BaseModel, utcnow


class User(BaseModel):
    """
    Represents a registered user.

    :ivar username: Unique login name.
    :type username: str
    :ivar email: Unique email address.
    :type email: str
    :ivar password_hash: Opaque password digest.
    :type password_hash: str
    """

    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    files = relationship(
        "StoredFile",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
