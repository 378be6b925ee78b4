"""User-related Pydantic schemas for request/response validation."""

from typing import Optional

from pydantic import Field, field_validator

from .base import BaseSchema


class RegisterRequest(BaseSchema):
    """Schema for user registration request.

    Fields are optional at the schema level so that a missing field is
    reported with the same 400 message as an empty one.
    """

    username: Optional[str] = Field(None, max_length=50, description="Unique login name")
    email: Optional[str] = Field(None, max_length=100, description="Unique email address")
    password: Optional[str] = Field(None, description="Plaintext password")

    @field_validator("username", "email")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Surrounding whitespace is not part of a login name."""
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseSchema):
    """Schema for login request. ``username`` may also hold an email address."""

    username: Optional[str] = Field(None, description="Username or email")
    password: Optional[str] = Field(None, description="Plaintext password")

    @field_validator("username")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if isinstance(v, str) else v


class UserSummary(BaseSchema):
    """Public view of a user. The password digest is never part of it."""

    id: int
    username: str
    email: str


class AuthResponse(BaseSchema):
    """Schema for authentication response."""

    message: str
    token: str
    user: UserSummary
