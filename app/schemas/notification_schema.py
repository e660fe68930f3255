# app/schemas/notification_schema.py

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from app.core.config import settings
from app.models.alert import AlertSeverityEnum, AlertTypeEnum
from app.models.notification import NotificationMethodEnum
from app.schemas.base_schema import CamelModel


# --- Query parameters ---

class NotificationQuery(CamelModel):
    """
    Every filter the inbox listing understands.

    - read: None (no filter) / True / False. "all" is accepted and means None.
    - method: None (no filter) or one delivery channel. "all" means None.
    """
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1)
    read: Optional[bool] = None
    method: Optional[NotificationMethodEnum] = None

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, v: int) -> int:
        if v > settings.NOTIFICATIONS_MAX_PAGE_SIZE:
            raise ValueError(f"limit must be at most {settings.NOTIFICATIONS_MAX_PAGE_SIZE}")
        return v

    @field_validator("read", mode="before")
    @classmethod
    def parse_read(cls, v):
        if v is None or isinstance(v, bool):
            return v
        value = str(v).strip().lower()
        if value in ("", "all"):
            return None
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError("read must be 'true', 'false' or 'all'")

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, v):
        if v is None or isinstance(v, NotificationMethodEnum):
            return v
        value = str(v).strip()
        if value in ("", "all"):
            return None
        return value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# --- Output ---

class TenantBrief(CamelModel):
    id: str
    name: str
    slug: str


class AlertOut(CamelModel):
    id: str
    type: AlertTypeEnum
    severity: AlertSeverityEnum
    title: str
    message: str
    tenant_id: Optional[str] = None
    resolved: bool
    created_at: datetime
    tenant: Optional[TenantBrief] = None


class NotificationOut(CamelModel):
    """A notification with its alert (and the alert's tenant) loaded"""
    id: str
    user_id: str
    alert_id: str
    method: NotificationMethodEnum
    sent: bool
    sent_at: Optional[datetime] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    alert: Optional[AlertOut] = None


class PaginationOut(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool


class NotificationPageOut(CamelModel):
    notifications: List[NotificationOut]
    pagination: PaginationOut


class UnreadCountOut(CamelModel):
    unread_count: int


class MarkAllReadOut(CamelModel):
    message: str
    count: int


class AlreadyReadOut(CamelModel):
    message: str
    already_read: Literal[True] = True


MarkReadOut = Union[NotificationOut, AlreadyReadOut]


# --- Summary ---

class TenantName(CamelModel):
    name: str


class AlertSummaryOut(CamelModel):
    type: AlertTypeEnum
    severity: AlertSeverityEnum
    title: str
    message: str
    tenant: Optional[TenantName] = None


class RecentNotificationOut(CamelModel):
    id: str
    alert_id: str
    method: NotificationMethodEnum
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    alert: Optional[AlertSummaryOut] = None


class NotificationCountsOut(CamelModel):
    total: int
    unread: int
    read: int


class NotificationSummaryOut(CamelModel):
    summary: NotificationCountsOut
    recent: List[RecentNotificationOut]
