# app/routers/media_router.py

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.security import get_current_user
from app.schemas.base_schema import MessageOut
from app.schemas.media_schema import MediaListOut, MediaUploadOut
from app.schemas.user_schema import CurrentUser
from app.services.media_service import MediaService

router = APIRouter(
    prefix="/api/media",
    tags=["Media"],
    dependencies=[Depends(get_current_user)]
)


def public_base_url(request: Request) -> str:
    """
    scheme://host as the client sees it (behind a proxy too),
    so the returned URL can be fetched by third parties.
    """
    protocol = request.headers.get("x-forwarded-proto") or request.url.scheme or "https"
    host = request.headers.get("host") or request.url.netloc
    return f"{protocol}://{host}"


@router.post("/upload", response_model=MediaUploadOut, summary="Upload a media file")
async def upload_media_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload one file (form field `file`) for use in campaigns.

    - images, videos, audio, office documents, plain text / CSV and archives
    - at most 50MB
    """
    service = MediaService(db)
    return await service.upload(file, current_user, public_base_url(request))


@router.get("", response_model=MediaListOut, summary="List media files")
async def list_media_files(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MediaService(db)
    return {"files": await service.list_files(current_user)}


@router.delete("/{filename}", response_model=MessageOut)
async def delete_media_file(
    filename: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MediaService(db)
    await service.delete_file(filename, current_user)
    return MessageOut(message="File removed successfully")
