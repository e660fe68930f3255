# app/routers/chatwoot_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

import httpx

from app.core.database import get_db
from app.core.security import get_current_user
from app.schemas.chatwoot_schema import ChatwootTagsOut, SyncRequest, SyncResultOut
from app.schemas.user_schema import CurrentUser
from app.services.chatwoot_service import ChatwootService

router = APIRouter(
    prefix="/api/chatwoot",
    tags=["Chatwoot"],
    dependencies=[Depends(get_current_user)]
)


def get_chatwoot_transport() -> Optional[httpx.AsyncBaseTransport]:
    """HTTP transport for the Chatwoot client (overridden in tests)"""
    return None


@router.get("/tags", response_model=ChatwootTagsOut, summary="List Chatwoot tags")
async def get_chatwoot_tags(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_chatwoot_transport)
):
    """
    Labels found in the tenant's Chatwoot conversations with their contact counts.
    Returns 400 with guidance when Chatwoot is not configured for the tenant.
    """
    service = ChatwootService(db, transport=transport)
    return {"tags": await service.get_tags(current_user.tenant_id)}


@router.post("/sync", response_model=SyncResultOut, summary="Import contacts from Chatwoot")
async def sync_chatwoot_contacts(
    body: SyncRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_chatwoot_transport)
):
    service = ChatwootService(db, transport=transport)
    return await service.sync_contacts(current_user.tenant_id, body.tag_mappings)
