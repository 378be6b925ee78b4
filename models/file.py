"""
File model for uploaded file metadata.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel, utcnow


class StoredFile(BaseModel):
    """
    Metadata for one uploaded blob.

    ``filename`` is the generated name on disk; ``original_name`` is the name
    the client sent, which may contain non-ASCII characters.
    """

    __tablename__ = "files"

    filename = Column(String(255), unique=True, nullable=False)
    original_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100))
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="files")

    def __repr__(self) -> str:
        return f"<StoredFile id={self.id} filename={self.filename!r} user_id={self.user_id}>"
