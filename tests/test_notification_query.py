import pytest
from pydantic import ValidationError

from app.models.notification import NotificationMethodEnum
from app.schemas.notification_schema import NotificationQuery


def test_defaults():
    q = NotificationQuery()
    assert (q.page, q.limit, q.read, q.method) == (1, 20, None, None)
    assert q.offset == 0


def test_offset():
    assert NotificationQuery(page=3, limit=20).offset == 40


@pytest.mark.parametrize("raw, expected", [
    (None, None), ("all", None), ("", None),
    ("true", True), ("false", False), ("TRUE", True),
    (True, True),
])
def test_read_filter(raw, expected):
    assert NotificationQuery(read=raw).read is expected


def test_method_filter():
    assert NotificationQuery(method="WEBHOOK").method is NotificationMethodEnum.webhook
    assert NotificationQuery(method="all").method is None


@pytest.mark.parametrize("kwargs", [
    {"read": "yes"},
    {"method": "SMS"},
    {"method": "email"},
    {"page": 0},
    {"limit": 0},
    {"limit": 101},
])
def test_invalid(kwargs):
    with pytest.raises(ValidationError):
        NotificationQuery(**kwargs)
