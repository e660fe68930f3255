# app/routers/notification_router.py

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.errors import ValidationError
from app.core.security import get_current_user
from app.models.notification import Notification
from app.schemas.base_schema import MessageOut
from app.schemas.notification_schema import (
    AlreadyReadOut,
    MarkAllReadOut,
    MarkReadOut,
    NotificationOut,
    NotificationPageOut,
    NotificationQuery,
    NotificationSummaryOut,
    PaginationOut,
    UnreadCountOut,
)
from app.schemas.user_schema import CurrentUser
from app.services.notification_service import NotificationService
from app.core.config import settings

router = APIRouter(
    prefix="/api/notifications",
    tags=["Notifications"],
    dependencies=[Depends(get_current_user)]  # every route requires a token
)


def notification_query(
    page: int = Query(1),
    limit: int = Query(settings.NOTIFICATIONS_PAGE_SIZE),
    read: Optional[str] = Query(None, description="'true', 'false' or 'all'"),
    method: Optional[str] = Query(None, description="IN_APP, EMAIL, WEBHOOK or 'all'"),
) -> NotificationQuery:
    """Validate the listing filters at the boundary"""
    try:
        return NotificationQuery(page=page, limit=limit, read=read, method=method)
    except PydanticValidationError as e:
        raise ValidationError(e.errors(include_url=False, include_context=False))


@router.get(
    "",
    response_model=NotificationPageOut,
    summary="List my notifications"
)
async def get_notifications(
    query: NotificationQuery = Depends(notification_query),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Paginated inbox of the current user.
    Unread notifications come first, newest first within each group.
    The frontend polls this endpoint.
    """
    service = NotificationService(db)
    notifications, pagination = await service.list_notifications(current_user.id, query)
    return NotificationPageOut(
        notifications=[NotificationOut.model_validate(n) for n in notifications],
        pagination=PaginationOut(**pagination._asdict()),
    )


@router.get("/summary", response_model=NotificationSummaryOut, summary="Inbox summary")
async def get_notifications_summary(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    return await service.get_summary(current_user.id)


@router.get("/unread-count", response_model=UnreadCountOut)
async def get_unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    return UnreadCountOut(unread_count=await service.get_unread_count(current_user.id))


@router.post("/mark-all-read", response_model=MarkAllReadOut)
async def mark_all_as_read(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    count = await service.mark_all_as_read(current_user.id)
    return MarkAllReadOut(message=f"{count} notifications marked as read", count=count)


@router.post(
    "/{notification_id}/mark-read",
    response_model=MarkReadOut,
    summary="Mark a notification as read"
)
async def mark_as_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Called when the user opens a notification.
    Marking an already-read notification is a no-op and returns a message.
    """
    service = NotificationService(db)
    result = await service.mark_notification_as_read(notification_id, current_user.id)
    if isinstance(result, Notification):
        return NotificationOut.model_validate(result)
    return AlreadyReadOut(message=result)


@router.delete("/{notification_id}", response_model=MessageOut)
async def delete_notification(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    await service.delete_notification(notification_id, current_user.id)
    return MessageOut(message="Notification deleted")
