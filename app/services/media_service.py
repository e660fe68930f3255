# app/services/media_service.py

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from pathlib import Path
from typing import List, Optional
import aiofiles
import logging
import os
import time

from app.core.config import settings
from app.core.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from app.models.media_file import MediaFile
from app.repositories.media_repo import MediaRepository
from app.schemas.user_schema import CurrentUser

logger = logging.getLogger(__name__)

MEDIA_PREFIX = "media_"
CHUNK_SIZE = 1024 * 1024

ALLOWED_MIME_TYPES = frozenset({
    # images
    "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp",
    # video
    "video/mp4", "video/avi", "video/mov", "video/wmv", "video/mkv",
    # audio
    "audio/mp3", "audio/wav", "audio/ogg", "audio/aac", "audio/m4a",
    # documents
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain", "text/csv",
    # archives
    "application/zip", "application/x-rar-compressed", "application/x-7z-compressed",
})


def is_valid_media_filename(filename: Optional[str]) -> bool:
    """Only bare `media_*` names are accepted; anything with a path component is rejected"""
    if not filename or not filename.startswith(MEDIA_PREFIX):
        return False
    return "/" not in filename and "\\" not in filename and ".." not in filename


def media_url(filename: str) -> str:
    return f"{settings.MEDIA_URL_PREFIX}/{filename}"


def remove_file_quietly(path: Path) -> None:
    """Best-effort cleanup; failures are logged, never raised"""
    try:
        if path.exists():
            os.remove(path)
    except OSError as e:
        logger.error(f"Failed to remove file {path}: {e}")


class MediaService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = MediaRepository(db)

    @staticmethod
    def upload_dir() -> Path:
        path = Path(settings.MEDIA_UPLOAD_DIR)
        os.makedirs(path, exist_ok=True)
        return path

    def _new_file_path(self, original_name: str) -> Path:
        upload_dir = self.upload_dir()
        ext = os.path.splitext(original_name)[1].lower()
        stamp = int(time.time() * 1000)
        path = upload_dir / f"{MEDIA_PREFIX}{stamp}{ext}"
        # two uploads in the same millisecond
        while path.exists():
            stamp += 1
            path = upload_dir / f"{MEDIA_PREFIX}{stamp}{ext}"
        return path

    def _validate_upload(self, file: Optional[UploadFile]) -> UploadFile:
        if file is None or not file.filename:
            raise ValidationError("No file uploaded")

        if file.content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                f"File type not allowed: {file.content_type}. "
                "Accepted types: images, videos, audio, documents and archives."
            )

        if file.size is not None and file.size > settings.MEDIA_MAX_FILE_SIZE:
            raise ValidationError(self._too_large_message())

        return file

    @staticmethod
    def _too_large_message() -> str:
        return f"File too large. Max size is {settings.MEDIA_MAX_FILE_SIZE // (1024 * 1024)}MB"

    async def _write_file(self, file: UploadFile, path: Path) -> int:
        """Stream the upload to disk, enforcing the size ceiling; returns bytes written"""
        written = 0
        async with aiofiles.open(path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.MEDIA_MAX_FILE_SIZE:
                    raise ValidationError(self._too_large_message())
                await out.write(chunk)
        return written

    async def upload(self, file: Optional[UploadFile], user: CurrentUser, base_url: str) -> dict:
        """
        Validate and store one uploaded file.

        Nothing is written for a rejected type. Once the file is on disk, any
        failure removes it again before the error is returned.
        """
        file = self._validate_upload(file)
        path = self._new_file_path(file.filename)

        try:
            size = await self._write_file(file, path)
            media_file = await self.repo.create_media_file(
                MediaFile(
                    filename=path.name,
                    original_name=file.filename,
                    mimetype=file.content_type,
                    size=size,
                    tenant_id=user.tenant_id,
                    uploaded_by=user.id,
                )
            )
        except ValidationError:
            remove_file_quietly(path)
            raise
        except Exception as e:
            logger.error(f"Upload of {file.filename} failed: {e}", exc_info=True)
            remove_file_quietly(path)
            raise InternalError()

        logger.info(f"User {user.id} uploaded {media_file.filename} ({media_file.size} bytes)")
        return {
            "message": "File uploaded successfully",
            "file_url": f"{base_url.rstrip('/')}{media_url(media_file.filename)}",
            "original_name": media_file.original_name,
            "filename": media_file.filename,
            "mimetype": media_file.mimetype,
            "size": media_file.size,
        }

    async def list_files(self, user: CurrentUser) -> List[dict]:
        """Files visible to the user that are still on disk, newest first"""
        upload_dir = self.upload_dir()
        files = []
        for media_file in await self.repo.list_for_user(user):
            if not (upload_dir / media_file.filename).exists():
                logger.warning(f"Media file {media_file.filename} is recorded but missing on disk")
                continue
            files.append({
                "filename": media_file.filename,
                "url": media_url(media_file.filename),
                "size": media_file.size,
                "uploaded_at": media_file.created_at,
            })
        return files

    async def delete_file(self, filename: str, user: CurrentUser) -> None:
        if not is_valid_media_filename(filename):
            raise ValidationError("Invalid file name")

        media_file = await self.repo.get_by_filename(filename)
        if media_file is None:
            raise NotFoundError("File not found")

        if not self.repo.is_visible_to(media_file, user):
            logger.warning(f"User {user.id} tried to delete {filename} outside their scope")
            raise ForbiddenError("Access denied")

        path = self.upload_dir() / filename
        file_exists = path.exists()

        await self.repo.delete_media_file(media_file)
        if not file_exists:
            logger.warning(f"Removed stale media record {filename}")
            raise NotFoundError("File not found")

        os.remove(path)
        logger.info(f"User {user.id} deleted {filename}")
