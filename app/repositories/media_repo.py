# app/repositories/media_repo.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional
import logging

from app.models.media_file import MediaFile
from app.schemas.user_schema import CurrentUser

logger = logging.getLogger(__name__)


class MediaRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _scope(user: CurrentUser) -> list:
        # Tenant users share their tenant's files; tenant-less users see their own
        if user.tenant_id:
            return [MediaFile.tenant_id == user.tenant_id]
        return [MediaFile.tenant_id.is_(None), MediaFile.uploaded_by == user.id]

    async def create_media_file(self, media_file: MediaFile) -> MediaFile:
        try:
            self.db.add(media_file)
            await self.db.flush()
            await self.db.commit()
            return media_file
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to record media file {media_file.filename}: {e}", exc_info=True)
            raise

    async def get_by_filename(self, filename: str) -> Optional[MediaFile]:
        stmt = select(MediaFile).where(MediaFile.filename == filename)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_for_user(self, user: CurrentUser) -> List[MediaFile]:
        """Files visible to the user, newest first"""
        stmt = (
            select(MediaFile)
            .where(MediaFile.filename.startswith("media_"), *self._scope(user))
            .order_by(MediaFile.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    def is_visible_to(self, media_file: MediaFile, user: CurrentUser) -> bool:
        if user.tenant_id:
            return media_file.tenant_id == user.tenant_id
        return media_file.tenant_id is None and media_file.uploaded_by == user.id

    async def delete_media_file(self, media_file: MediaFile) -> None:
        try:
            await self.db.delete(media_file)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete media record {media_file.filename}: {e}", exc_info=True)
            raise
