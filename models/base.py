"""
Defines a base model for SQLAlchemy ORM with common attributes.

This module provides the declarative base shared by every table and an
abstract model carrying the integer primary key. Timestamps are stored as
timezone-aware UTC values.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """
    Base model class for database entities.

    :ivar id: Generated numeric identifier for the record.
    :type id: int
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
