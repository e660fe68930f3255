# app/schemas/chatwoot_schema.py
from typing import List

from pydantic import Field

from app.schemas.base_schema import CamelModel


class TagMapping(CamelModel):
    """Contacts carrying `chatwoot_tag` are filed under `category_id`"""
    chatwoot_tag: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)


class SyncRequest(CamelModel):
    tag_mappings: List[TagMapping] = Field(..., min_length=1)


class ChatwootTagOut(CamelModel):
    name: str
    # distinct contacts carrying the tag
    count: int


class ChatwootTagsOut(CamelModel):
    tags: List[ChatwootTagOut]


class SyncResultOut(CamelModel):
    imported: int
    updated: int
