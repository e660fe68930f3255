# models/user.py
import uuid
import enum
from sqlalchemy import Column, String, Boolean, Enum, CHAR, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.time_utils import utcnow


class UserRoleEnum(str, enum.Enum):
    superadmin = "SUPERADMIN"
    admin = "ADMIN"
    tenant_admin = "TENANT_ADMIN"
    user = "USER"


class User(Base):
    __tablename__ = "users"

    id = Column(CHAR(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(Enum(UserRoleEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    # SUPERADMIN users have no tenant
    tenant_id = Column(CHAR(36), ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="users")
    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
    )
