# app/utils/time_utils.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time, used for every timestamp the app writes"""
    return datetime.now(timezone.utc)
