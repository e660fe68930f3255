# app/models/alert.py
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, Enum, CHAR, ForeignKey, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.time_utils import utcnow


class AlertTypeEnum(str, enum.Enum):
    quota_warning = "QUOTA_WARNING"
    quota_exceeded = "QUOTA_EXCEEDED"
    system_error = "SYSTEM_ERROR"
    tenant_inactive = "TENANT_INACTIVE"
    session_failed = "SESSION_FAILED"
    campaign_failed = "CAMPAIGN_FAILED"
    database_error = "DATABASE_ERROR"
    api_error = "API_ERROR"
    backup_failed = "BACKUP_FAILED"
    security_alert = "SECURITY_ALERT"


class AlertSeverityEnum(str, enum.Enum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    critical = "CRITICAL"


class Alert(Base):
    """
    Alerts are raised by the alerting subsystem; the notification inbox
    only reads them for display.
    """
    __tablename__ = "alerts"
    __table_args__ = (
        Index("alerts_type_severity_idx", "type", "severity"),
    )

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(Enum(AlertTypeEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    severity = Column(Enum(AlertSeverityEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # NULL tenant means a system-wide alert
    tenant_id = Column(CHAR(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    user_id = Column(CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    alert_metadata = Column("metadata", JSON)

    resolved = Column(Boolean, default=False, nullable=False)
    resolved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    tenant = relationship("Tenant")
    notifications = relationship(
        "Notification",
        back_populates="alert",
        cascade="all, delete-orphan",
    )
