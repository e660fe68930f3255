# app/models/notification.py

import uuid
import enum
from sqlalchemy import Column, Boolean, Enum, CHAR, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.time_utils import utcnow


class NotificationMethodEnum(str, enum.Enum):
    in_app = "IN_APP"
    email = "EMAIL"
    webhook = "WEBHOOK"


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("notifications_user_id_read_idx", "user_id", "read"),
    )

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner of the notification; every query and mutation is keyed on it
    user_id = Column(CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    alert_id = Column(CHAR(36), ForeignKey("alerts.id", ondelete="CASCADE"), nullable=False, index=True)

    # Delivery channel
    method = Column(Enum(NotificationMethodEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)

    sent = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime(timezone=True))

    # read_at is set exactly when read is True
    read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="notifications")
    alert = relationship("Alert", back_populates="notifications")
