# app/services/notification_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Tuple, Union

from app.core.config import settings
from app.core.errors import ForbiddenError, NotFoundError
from app.models.alert import Alert
from app.models.notification import Notification
from app.repositories.notification_repo import NotificationRepository
from app.repositories.user_repo import UserRepository
from app.schemas.notification_schema import NotificationQuery
from app.utils.pagination import Pagination, paginate

import logging

logger = logging.getLogger(__name__)

ALREADY_READ_MESSAGE = "Notification was already marked as read"


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = NotificationRepository(db)
        self.user_repo = UserRepository(db)

    # --- Queries ---

    async def list_notifications(
        self,
        user_id: str,
        query: NotificationQuery
    ) -> Tuple[List[Notification], Pagination]:
        """
        (API) One page of the requester's inbox plus pagination metadata.
        Both queries run on the request session, one after the other.
        """
        notifications = await self.repo.list_notifications_by_user(user_id, query)
        total = await self.repo.count_notifications(user_id, query)
        return notifications, paginate(total=total, page=query.page, limit=query.limit)

    async def get_unread_count(self, user_id: str) -> int:
        return await self.repo.count_unread(user_id)

    async def get_summary(self, user_id: str) -> dict:
        """
        (API) Totals plus the most recent notifications, newest first.
        """
        total = await self.repo.count_notifications(user_id)
        unread = await self.repo.count_unread(user_id)
        recent = await self.repo.list_recent(user_id, settings.NOTIFICATIONS_RECENT_LIMIT)
        return {
            "summary": {"total": total, "unread": unread, "read": total - unread},
            "recent": recent,
        }

    # --- Mutations ---

    async def _get_owned(self, notification_id: str, user_id: str, with_alert: bool = False) -> Notification:
        notification = await self.repo.get_notification_by_id(notification_id, with_alert=with_alert)

        if not notification:
            raise NotFoundError("Notification not found")

        # Only the owner may touch a notification
        if notification.user_id != user_id:
            logger.warning(f"User {user_id} tried to access notification {notification_id} owned by {notification.user_id}")
            raise ForbiddenError("Access denied")

        return notification

    async def mark_notification_as_read(
        self,
        notification_id: str,
        user_id: str
    ) -> Union[Notification, str]:
        """
        (API) Mark one notification as read.
        Returns the updated notification, or a message when it was already read
        (in which case nothing is written and read_at keeps its value).
        """
        notification = await self._get_owned(notification_id, user_id, with_alert=True)

        if notification.read:
            return ALREADY_READ_MESSAGE

        return await self.repo.mark_as_read(notification)

    async def mark_all_as_read(self, user_id: str) -> int:
        count = await self.repo.mark_all_as_read(user_id)
        logger.info(f"Marked {count} notifications as read for user {user_id}")
        return count

    async def delete_notification(self, notification_id: str, user_id: str) -> None:
        notification = await self._get_owned(notification_id, user_id)
        await self.repo.delete_notification(notification)
        logger.info(f"Deleted notification {notification_id} for user {user_id}")

    # --- Internal ---

    async def notify_alert_recipients(self, alert: Alert) -> int:
        """
        (Internal) Fan an alert out as IN_APP notifications.

        System-wide alerts go to SUPERADMIN users only; tenant alerts also go to
        that tenant's ADMIN / TENANT_ADMIN users.
        """
        user_ids = await self.user_repo.list_alert_recipient_ids(alert.tenant_id)
        created = await self.repo.create_notifications(alert.id, user_ids)
        logger.info(f"Created {len(created)} notifications for alert {alert.id} ({alert.type.value})")
        return len(created)
