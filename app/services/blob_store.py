"""Local disk storage for uploaded file bytes."""

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.exceptions.file import FilenameTooLongError, PayloadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROBE_FILENAME = ".write-test"
MAX_BASE_NAME_LENGTH = 100
MAX_EXTENSION_BYTES = 32
# Filesystems cap a name at 255 bytes; the in-progress copy adds "." and ".part"
MAX_STORAGE_NAME_BYTES = 255 - len("..part")
MAX_ORIGINAL_NAME_LENGTH = 255
UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


@dataclass(frozen=True)
class StoredBlob:
    """Result of writing one upload to disk."""

    filename: str
    original_name: str
    path: str
    size: int
    mime_type: str | None


def repair_transport_filename(name: str) -> str:
    """
    Undo the latin-1 decoding that multipart filenames often go through.

    UTF-8 bytes read one byte per character turn ``א.txt`` into ``×\\x90.txt``.
    Re-encoding as latin-1 recovers the bytes. Names that are already proper
    Unicode (not latin-1 encodable) and genuine latin-1 names (not valid UTF-8)
    come back unchanged.
    """
    try:
        return name.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return name


def sanitize_filename(name: str) -> str:
    """Replace path-hostile characters with ``_``; all letters, Hebrew included, are kept."""
    return UNSAFE_FILENAME_CHARS.sub("_", name)


def truncate_utf8(text: str, max_bytes: int) -> str:
    """Longest prefix of ``text`` whose UTF-8 encoding fits in ``max_bytes``."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def generate_storage_name(original_name: str) -> str:
    """``<epochMillis>-<randomInt>_<sanitizedBase><extension>``

    The result always fits in ``MAX_STORAGE_NAME_BYTES`` of UTF-8, so long
    CJK or emoji names are cut shorter than long Latin ones.
    """
    base, extension = os.path.splitext(original_name)
    prefix = f"{int(time.time() * 1000)}-{secrets.randbelow(1_000_000_000)}_"
    safe_extension = truncate_utf8(sanitize_filename(extension), MAX_EXTENSION_BYTES)
    budget = MAX_STORAGE_NAME_BYTES - len(prefix) - len(safe_extension.encode("utf-8"))
    safe_base = truncate_utf8(sanitize_filename(base)[:MAX_BASE_NAME_LENGTH], budget)
    return f"{prefix}{safe_base}{safe_extension}"


class BlobStore:
    """
    Persists raw upload bytes in a single directory.

    :ivar upload_dir: Directory holding one file per stored blob.
    :type upload_dir: Path
    :ivar max_size: Largest accepted upload in bytes.
    :type max_size: int
    """

    def __init__(self, upload_dir: str | Path, max_size: int = 10 * 1024 * 1024):
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size

    def prepare(self) -> bool:
        """Create the directory if needed and confirm it is writable.

        Problems are logged, not raised: uploads fail at request time instead.
        """
        logger.info("📂 Setting up upload directory: %s", self.upload_dir)
        try:
            if not self.upload_dir.exists():
                logger.info("📂 Creating upload directory: %s", self.upload_dir)
                self.upload_dir.mkdir(parents=True, exist_ok=True)

            probe = self.upload_dir / PROBE_FILENAME
            probe.write_text("test")
            probe.unlink()
        except OSError as e:
            logger.warning("❌ Error with upload directory %s: %s", self.upload_dir, e)
            return False

        logger.info("✅ Upload directory is writable")
        return True

    async def save(self, upload: UploadFile) -> StoredBlob:
        """Write ``upload`` under a fresh name.

        The bytes go to a ``.part`` file first and are renamed into place only
        once the whole payload is within the size limit.
        """
        original_name = repair_transport_filename(upload.filename or "")
        if len(original_name) > MAX_ORIGINAL_NAME_LENGTH:
            raise FilenameTooLongError(MAX_ORIGINAL_NAME_LENGTH)
        filename = generate_storage_name(original_name)
        final_path = self.upload_dir / filename
        part_path = self.upload_dir / f".{filename}.part"

        size = 0
        completed = False
        try:
            with open(part_path, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_size:
                        raise PayloadTooLargeError(self.max_size)
                    await run_in_threadpool(out.write, chunk)
            await run_in_threadpool(os.replace, part_path, final_path)
            completed = True
        finally:
            if not completed:
                part_path.unlink(missing_ok=True)

        logger.info("Stored %s (%d bytes) as %s", original_name, size, filename)
        return StoredBlob(
            filename=filename,
            original_name=original_name,
            path=str(final_path),
            size=size,
            mime_type=upload.content_type,
        )

    def resolve(self, path: str) -> Path | None:
        """Absolute path of a stored blob, or None when nothing is on disk."""
        resolved = Path(path).resolve()
        if not resolved.is_file():
            return None
        return resolved

    def delete(self, path: str) -> bool:
        """Remove a stored blob. A file that is already gone counts as removed."""
        try:
            Path(path).resolve().unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s from disk, blob is orphaned: %s", path, e)
            return False
        return True
