# app/models/media_file.py
import uuid
from sqlalchemy import Column, String, Integer, CHAR, ForeignKey, DateTime
from app.core.database import Base
from app.utils.time_utils import utcnow


class MediaFile(Base):
    """
    One row per file in the media upload directory.
    Records who uploaded the file so listing and deletion can be scoped.
    """
    __tablename__ = "media_files"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    filename = Column(String(255), unique=True, nullable=False, index=True)
    original_name = Column(String(500), nullable=False)
    mimetype = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)

    tenant_id = Column(CHAR(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    uploaded_by = Column(CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
