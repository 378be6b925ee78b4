# ruff: noqa: SIM117
"""
Unit tests for FileService.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.domains.file.service import FileService
from app.exceptions.file import FilePermissionError, FileRecordNotFoundError
from tests.factories import StoredFileFactory


class TestFileService:
    """Test cases for FileService."""

    @pytest.mark.asyncio
    async def test_create_file_record(self, test_db, test_user):
        service = FileService(test_db)

        record = await service.create_file_record(
            user_id=test_user.id,
            filename="1700000000000-42_א.txt",
            original_name="א.txt",
            file_path="./uploads/1700000000000-42_א.txt",
            file_size=5,
            mime_type="text/plain",
        )

        assert record.id is not None
        assert record.original_name == "א.txt"
        assert record.file_size == 5
        assert record.uploaded_at is not None

    @pytest.mark.asyncio
    async def test_create_file_record_without_mime_type(self, test_db, test_user):
        record = await FileService(test_db).create_file_record(
            user_id=test_user.id,
            filename="1-1_blob",
            original_name="blob",
            file_path="./uploads/1-1_blob",
            file_size=1,
        )

        assert record.mime_type is None

    @pytest.mark.asyncio
    async def test_create_file_record_database_error(self, test_db, test_user):
        service = FileService(test_db)

        with patch.object(test_db, "commit", side_effect=SQLAlchemyError("Database error")):
            with patch.object(test_db, "rollback") as mock_rollback:
                with pytest.raises(SQLAlchemyError):
                    await service.create_file_record(
                        user_id=test_user.id,
                        filename="x",
                        original_name="x",
                        file_path="x",
                        file_size=1,
                    )
                mock_rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_list_files_newest_first(self, test_db, test_user, test_user_2):
        now = datetime.now(timezone.utc)
        older = StoredFileFactory.build(user_id=test_user.id, uploaded_at=now - timedelta(hours=1))
        newer = StoredFileFactory.build(user_id=test_user.id, uploaded_at=now)
        foreign = StoredFileFactory.build(user_id=test_user_2.id, uploaded_at=now)
        test_db.add_all([older, newer, foreign])
        await test_db.commit()

        records = await FileService(test_db).list_files_for_user(test_user.id)

        assert [r.id for r in records] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_list_files_same_timestamp_uses_id(self, test_db, test_user):
        now = datetime.now(timezone.utc)
        first = StoredFileFactory.build(user_id=test_user.id, uploaded_at=now)
        second = StoredFileFactory.build(user_id=test_user.id, uploaded_at=now)
        test_db.add(first)
        await test_db.flush()
        test_db.add(second)
        await test_db.commit()

        records = await FileService(test_db).list_files_for_user(test_user.id)

        assert [r.id for r in records] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_list_files_empty(self, test_db, test_user):
        assert await FileService(test_db).list_files_for_user(test_user.id) == []

    @pytest.mark.asyncio
    async def test_get_owned_file(self, test_db, stored_file, test_user):
        record = await FileService(test_db).get_owned_file(stored_file.id, test_user.id)

        assert record.id == stored_file.id

    @pytest.mark.asyncio
    async def test_get_owned_file_not_found(self, test_db, test_user):
        with pytest.raises(FileRecordNotFoundError):
            await FileService(test_db).get_owned_file(99999, test_user.id)

    @pytest.mark.asyncio
    async def test_get_owned_file_other_user(self, test_db, stored_file, test_user_2):
        with pytest.raises(FilePermissionError):
            await FileService(test_db).get_owned_file(stored_file.id, test_user_2.id)

    @pytest.mark.asyncio
    async def test_delete_file_record(self, test_db, stored_file):
        service = FileService(test_db)
        file_id = stored_file.id

        assert await service.delete_file_record(file_id) is True
        assert await service.get_file_record(file_id) is None
        assert await service.delete_file_record(file_id) is False
