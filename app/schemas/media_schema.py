# app/schemas/media_schema.py
from datetime import datetime
from typing import List

from app.schemas.base_schema import CamelModel


class MediaUploadOut(CamelModel):
    message: str
    file_url: str
    original_name: str
    filename: str
    mimetype: str
    size: int


class MediaFileOut(CamelModel):
    filename: str
    url: str
    size: int
    uploaded_at: datetime


class MediaListOut(CamelModel):
    files: List[MediaFileOut]
