# app/models/tenant.py
import uuid
from sqlalchemy import Column, String, Boolean, CHAR, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.time_utils import utcnow


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    users = relationship("User", back_populates="tenant")
    settings = relationship(
        "TenantSettings",
        back_populates="tenant",
        uselist=False,
        cascade="all, delete-orphan",
    )


class TenantSettings(Base):
    """Per-tenant integration settings (only the Chatwoot block is used here)"""
    __tablename__ = "tenant_settings"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(CHAR(36), ForeignKey("tenants.id", ondelete="CASCADE"), unique=True, nullable=False)

    chatwoot_url = Column(String(500))
    chatwoot_account_id = Column(String(50))
    chatwoot_api_token = Column(String(255))

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="settings")

    @property
    def chatwoot_configured(self) -> bool:
        return bool(self.chatwoot_url and self.chatwoot_account_id and self.chatwoot_api_token)
