# app/repositories/notification_repo.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, update
from sqlalchemy.orm import selectinload
from typing import List, Optional, Sequence
import logging

from app.models.alert import Alert
from app.models.notification import Notification, NotificationMethodEnum
from app.schemas.notification_schema import NotificationQuery
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# alert + alert.tenant, loaded eagerly (no lazy loads under AsyncSession)
_WITH_ALERT = selectinload(Notification.alert).selectinload(Alert.tenant)


class NotificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _filters(self, user_id: str, query: Optional[NotificationQuery] = None) -> list:
        conditions = [Notification.user_id == user_id]
        if query is not None:
            if query.read is not None:
                conditions.append(Notification.read.is_(query.read))
            if query.method is not None:
                conditions.append(Notification.method == query.method)
        return conditions

    async def list_notifications_by_user(self, user_id: str, query: NotificationQuery) -> List[Notification]:
        """
        One page of the user's notifications.
        Unread first, then newest first within each group.
        """
        stmt = (
            select(Notification)
            .where(*self._filters(user_id, query))
            .options(_WITH_ALERT)
            .order_by(Notification.read.asc(), Notification.created_at.desc(), Notification.id)
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_notifications(self, user_id: str, query: Optional[NotificationQuery] = None) -> int:
        stmt = select(func.count(Notification.id)).where(*self._filters(user_id, query))
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def list_recent(self, user_id: str, limit: int) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .options(_WITH_ALERT)
            .order_by(Notification.created_at.desc(), Notification.id)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_notification_by_id(self, notification_id: str, with_alert: bool = False) -> Optional[Notification]:
        """
        Fetch one notification by id (used for the ownership check).
        """
        stmt = select(Notification).where(Notification.id == notification_id)
        if with_alert:
            stmt = stmt.options(_WITH_ALERT)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def mark_as_read(self, notification: Notification) -> Notification:
        now = utcnow()
        notification.read = True
        notification.read_at = now
        notification.updated_at = now
        try:
            await self.db.flush()
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to mark notification {notification.id} as read: {e}", exc_info=True)
            raise

        return notification

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of the user as read; returns the affected row count"""
        now = utcnow()
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True, read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to mark all notifications as read for user {user_id}: {e}", exc_info=True)
            raise
        return result.rowcount

    async def delete_notification(self, notification: Notification) -> None:
        try:
            await self.db.delete(notification)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete notification {notification.id}: {e}", exc_info=True)
            raise

    async def create_notifications(
        self,
        alert_id: str,
        user_ids: Sequence[str],
        method: NotificationMethodEnum = NotificationMethodEnum.in_app,
    ) -> List[Notification]:
        """Insert one unread notification per user for the alert"""
        notifications = [
            Notification(alert_id=alert_id, user_id=user_id, method=method, read=False)
            for user_id in user_ids
        ]
        if not notifications:
            return []
        try:
            self.db.add_all(notifications)
            await self.db.flush()
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create notifications for alert {alert_id}: {e}", exc_info=True)
            raise
        return notifications
