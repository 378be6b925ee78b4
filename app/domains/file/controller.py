"""File API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_blob_store, get_current_user, get_db
from app.core.security import TokenClaims
from app.domains.file.service import FileService
from app.exceptions.base import BaseAppException, StorageError
from app.exceptions.file import BlobMissingError, NoFileUploadedError
from app.schemas.base import MessageResponse
from app.schemas.file import FileListResponse, FileSummary, FileUploadResponse
from app.services.blob_store import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/files",
    tags=["files"],
    dependencies=[Depends(get_current_user)],  # Global token validation for all routes
)


@router.post("/upload", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    current_user: TokenClaims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Store one uploaded file for the current user."""
    if file is None:
        raise NoFileUploadedError()

    try:
        blob = await blob_store.save(file)
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Upload error while writing to disk")
        raise StorageError("File upload failed") from e

    try:
        record = await FileService(db).create_file_record(
            user_id=current_user.user_id,
            filename=blob.filename,
            original_name=blob.original_name,
            file_path=blob.path,
            file_size=blob.size,
            mime_type=blob.mime_type,
        )
    except Exception as e:
        logger.exception("Upload error while saving metadata")
        blob_store.delete(blob.path)
        raise StorageError("File upload failed") from e

    return FileUploadResponse(file=FileSummary.from_record(record))


@router.get("", response_model=FileListResponse)
async def list_files(
    current_user: TokenClaims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's files, newest first."""
    try:
        records = await FileService(db).list_files_for_user(current_user.user_id)
    except Exception as e:
        logger.exception("Get files error")
        raise StorageError("Failed to retrieve files") from e

    return FileListResponse(files=[FileSummary.from_record(record) for record in records])


@router.get("/{file_id}/download")
async def download_file(
    file_id: int = Path(..., description="File ID"),
    current_user: TokenClaims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Stream a file back under its original name."""
    try:
        record = await FileService(db).get_owned_file(file_id, current_user.user_id)
        path = blob_store.resolve(record.file_path)
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Download error")
        raise StorageError("File download failed") from e

    if path is None:
        logger.warning("File %s has a record but no bytes at %s", record.id, record.file_path)
        raise BlobMissingError()

    return FileResponse(
        path,
        filename=record.original_name,
        media_type=record.mime_type or "application/octet-stream",
    )


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: int = Path(..., description="File ID"),
    current_user: TokenClaims = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete a file record and then its bytes.

    If removing the bytes fails after the record is gone, the blob is left
    orphaned on disk and the request still succeeds.
    """
    service = FileService(db)

    try:
        record = await service.get_owned_file(file_id, current_user.user_id)
        file_path = record.file_path
        await service.delete_file_record(record.id)
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Delete error")
        raise StorageError("File deletion failed") from e

    blob_store.delete(file_path)

    return MessageResponse(message="File deleted successfully")
