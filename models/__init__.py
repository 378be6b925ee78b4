"""
Models package initialization.
"""

from .base import Base, BaseModel
from .file import StoredFile
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "StoredFile",
]
