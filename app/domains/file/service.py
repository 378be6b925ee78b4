"""File metadata service layer."""

import logging
from typing import Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.file import FilePermissionError, FileRecordNotFoundError
from models import StoredFile

logger = logging.getLogger(__name__)


class FileService:
    """Service class for file metadata."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_file_record(
        self,
        user_id: int,
        filename: str,
        original_name: str,
        file_path: str,
        file_size: int,
        mime_type: Optional[str] = None,
    ) -> StoredFile:
        """Insert the metadata row for a blob that is already on disk."""
        record = StoredFile(
            user_id=user_id,
            filename=filename,
            original_name=original_name,
            file_path=file_path,
            file_size=file_size,
            mime_type=mime_type,
        )

        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

    async def list_files_for_user(self, user_id: int) -> list[StoredFile]:
        """All of a user's files, newest first."""
        stmt = (
            select(StoredFile)
            .where(StoredFile.user_id == user_id)
            .order_by(desc(StoredFile.uploaded_at), desc(StoredFile.id))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_file_record(self, file_id: int) -> Optional[StoredFile]:
        result = await self.db.execute(select(StoredFile).where(StoredFile.id == file_id))
        return result.scalar_one_or_none()

    async def get_owned_file(self, file_id: int, user_id: int) -> StoredFile:
        """Get a file record, ensuring it belongs to the user."""
        record = await self.get_file_record(file_id)
        if record is None:
            raise FileRecordNotFoundError()

        if record.user_id != user_id:
            logger.warning("User %s was denied access to file %s", user_id, file_id)
            raise FilePermissionError()

        return record

    async def delete_file_record(self, file_id: int) -> bool:
        """Delete a file record. Returns False when there was nothing to delete."""
        try:
            result = await self.db.execute(delete(StoredFile).where(StoredFile.id == file_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
        return result.rowcount > 0
