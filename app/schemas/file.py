"""File-related Pydantic schemas."""

from datetime import datetime
from typing import Optional

from models import StoredFile

from .base import BaseSchema, CamelSchema


class FileSummary(CamelSchema):
    """Metadata of one stored file as returned to its owner."""

    id: int
    filename: str
    original_name: str
    size: int
    mime_type: Optional[str] = None
    uploaded_at: datetime

    @classmethod
    def from_record(cls, record: StoredFile) -> "FileSummary":
        return cls(
            id=record.id,
            filename=record.filename,
            original_name=record.original_name,
            size=record.file_size,
            mime_type=record.mime_type,
            uploaded_at=record.uploaded_at,
        )


class FileUploadResponse(BaseSchema):
    """Schema for a successful upload."""

    message: str = "File uploaded successfully"
    file: FileSummary


class FileListResponse(BaseSchema):
    """The caller's files, newest first."""

    files: list[FileSummary]
