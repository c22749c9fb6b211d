"""
Local file storage for attachment content.
"""

import asyncio
import uuid
from pathlib import Path

from rent_tracker.core.config import settings
from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.logger import LoggerMixin
from rent_tracker.schemas.attachment import UploadedFile

OCTET_STREAM = "application/octet-stream"

# Extension -> accepted content types
ALLOWED_FILE_TYPES: dict[str, tuple[str, ...]] = {
    ".pdf": ("application/pdf",),
    ".jpg": ("image/jpeg", "image/jpg", OCTET_STREAM),
    ".jpeg": ("image/jpeg", "image/jpg", OCTET_STREAM),
    ".png": ("image/png", OCTET_STREAM),
    ".gif": ("image/gif", OCTET_STREAM),
    ".doc": ("application/msword", OCTET_STREAM),
    ".docx": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        OCTET_STREAM,
    ),
    ".xls": ("application/vnd.ms-excel", OCTET_STREAM),
    ".xlsx": (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        OCTET_STREAM,
    ),
    ".txt": ("text/plain", OCTET_STREAM),
}


class FileStorageService(LoggerMixin):
    """Stores uploaded files under a single upload root."""

    def __init__(self, upload_dir: str | Path | None = None) -> None:
        self.root = Path(upload_dir or settings.UPLOAD_DIR).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def validate_file_type(self, content_type: str, file_name: str) -> bool:
        """Check that the extension is allowed and matches the content type."""
        if not content_type or not file_name:
            return False

        extension = Path(file_name).suffix.lower()
        allowed = ALLOWED_FILE_TYPES.get(extension)
        if allowed is None:
            self.logger.warning("File extension not allowed", extension=extension)
            return False

        return content_type.lower() in allowed

    def _resolve(self, storage_path: str) -> Path:
        if not storage_path or not storage_path.strip():
            raise ValidationError(
                "storage_path cannot be null or empty", field="storage_path"
            )
        path = (self.root / storage_path).resolve()
        if not path.is_relative_to(self.root):
            self.logger.warning("Rejected storage path", storage_path=storage_path)
            raise ValidationError(
                "Storage path escapes the upload directory", field="storage_path"
            )
        return path

    async def upload_file(self, upload: UploadedFile) -> str:
        """Write an upload to storage and return its storage path."""
        if upload.size == 0:
            raise ValidationError("File is empty", field="file")
        if upload.size > settings.MAX_UPLOAD_SIZE_BYTES:
            raise ValidationError(
                f"File exceeds the maximum upload size of "
                f"{settings.MAX_UPLOAD_SIZE_BYTES} bytes",
                field="file",
            )
        if not self.validate_file_type(upload.content_type, upload.file_name):
            raise ValidationError(
                f"File type not allowed. Content-Type: {upload.content_type}, "
                f"Extension: {Path(upload.file_name).suffix}. "
                f"Allowed file types: {', '.join(ALLOWED_FILE_TYPES)}",
                field="file",
            )

        storage_path = f"{uuid.uuid4()}_{Path(upload.file_name).name}"
        try:
            await asyncio.to_thread(
                self._resolve(storage_path).write_bytes, upload.content
            )
        except OSError as e:
            self.logger.error(
                "Failed to upload file", file_name=upload.file_name, error=str(e)
            )
            raise

        self.logger.info(
            "Uploaded file", storage_path=storage_path, size_bytes=upload.size
        )
        return storage_path

    async def download_file(self, storage_path: str) -> bytes:
        """Read stored file content.

        Raises:
            FileNotFoundError: If nothing is stored at the path.
        """
        path = self._resolve(storage_path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError) as e:
            self.logger.warning("File not found", storage_path=storage_path)
            raise FileNotFoundError(f"File not found: {storage_path}") from e

    async def delete_file(self, storage_path: str) -> None:
        """Remove a stored file; a missing file is not an error."""
        path = self._resolve(storage_path)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            self.logger.error(
                "Failed to delete file", storage_path=storage_path, error=str(e)
            )
            raise
        self.logger.info("Deleted file", storage_path=storage_path)
