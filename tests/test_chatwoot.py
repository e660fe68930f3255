import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select

from app.main import app
from app.models.contact import Category, Contact
from app.models.tenant import TenantSettings
from app.models.user import User, UserRoleEnum
from app.routers.chatwoot_router import get_chatwoot_transport
from app.services.chatwoot_service import aggregate_tags
from app.utils.phone import normalize_phone

from conftest import add_all, auth_headers


def conversation(conv_id, labels, sender_id=None, name=None, phone=None, email=None):
    sender = None
    if sender_id is not None:
        sender = {"id": sender_id, "name": name, "email": email, "phone_number": phone, "identifier": None}
    return {"id": conv_id, "account_id": 7, "inbox_id": 1, "status": "open", "labels": labels, "meta": {"sender": sender}}


CONVERSATIONS = [
    conversation(1, ["vip", "lead"], 10, "Maria", "+55 11 98765-4321", "maria@example.com"),
    conversation(2, ["vip"], 10, "Maria", "+55 11 98765-4321"),
    conversation(3, ["lead"], 11, "João", "11 91234-5678"),
    conversation(4, ["lead"], 12, "No Phone", None),
    conversation(5, ["lead"], 13, "Bad Phone", "12345"),
    conversation(6, ["lead"]),
    conversation(7, [], 14, "Untagged", "+5511955554444"),
]


class FakeChatwoot:
    """Serves CONVERSATIONS on page 1 and records every request"""

    def __init__(self, conversations=CONVERSATIONS, status_code=200):
        self.conversations = conversations
        self.status_code = status_code
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code)
        page = int(request.url.params.get("page", "1"))
        payload = self.conversations if page == 1 else []
        return httpx.Response(200, json={"data": {"meta": {"all_count": len(self.conversations)}, "payload": payload}})

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_chatwoot():
    fake = FakeChatwoot()
    app.dependency_overrides[get_chatwoot_transport] = lambda: fake.transport
    return fake


@pytest_asyncio.fixture
async def configured(session_factory, tenant):
    await add_all(
        session_factory,
        TenantSettings(
            tenant_id=tenant.id,
            chatwoot_url="https://chat.example.com/",
            chatwoot_account_id="7",
            chatwoot_api_token="cw-token",
        ),
        Category(id="cat-vip", tenant_id=tenant.id, name="VIP"),
        Category(id="cat-lead", tenant_id=tenant.id, name="Leads"),
    )


async def contacts(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(Contact).order_by(Contact.phone))
        return result.scalars().all()


# --- Pure helpers ---

def test_aggregate_tags_counts_distinct_senders():
    assert aggregate_tags(CONVERSATIONS) == [
        {"name": "lead", "count": 4},
        {"name": "vip", "count": 1},
    ]


def test_aggregate_tags_empty():
    assert aggregate_tags([]) == []


@pytest.mark.parametrize("raw, expected", [
    ("+55 11 98765-4321", "+5511987654321"),
    ("(11) 98765-4321", "+5511987654321"),
    ("12345", None),
    ("", None),
    (None, None),
    ("not a phone", None),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw, "BR") == expected


# --- Tags ---

@pytest.mark.asyncio
async def test_get_tags(client, configured, fake_chatwoot, alice):
    res = await client.get("/api/chatwoot/tags", headers=auth_headers(alice))
    assert res.status_code == 200
    assert res.json() == {"tags": [{"name": "lead", "count": 4}, {"name": "vip", "count": 1}]}

    first = fake_chatwoot.requests[0]
    assert first.url.path == "/api/v1/accounts/7/conversations"
    assert first.headers["api_access_token"] == "cw-token"


@pytest.mark.asyncio
async def test_get_tags_not_configured(client, fake_chatwoot, alice):
    res = await client.get("/api/chatwoot/tags", headers=auth_headers(alice))
    assert res.status_code == 400
    detail = res.json()["detail"]
    assert detail["error"] == "Chatwoot not configured"
    assert "Integrations" in detail["message"]
    assert fake_chatwoot.requests == []


@pytest.mark.asyncio
async def test_get_tags_without_tenant(client, session_factory, fake_chatwoot):
    root = User(id="root", email="root@test", name="Root", role=UserRoleEnum.superadmin)
    await add_all(session_factory, root)

    res = await client.get("/api/chatwoot/tags", headers=auth_headers(root))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_get_tags_vendor_error(client, configured, fake_chatwoot, alice):
    fake_chatwoot.status_code = 401
    res = await client.get("/api/chatwoot/tags", headers=auth_headers(alice))
    assert res.status_code == 500
    assert "cw-token" not in res.text


# --- Sync ---

@pytest.mark.asyncio
async def test_sync_imports_and_updates(client, session_factory, tenant, configured, fake_chatwoot, alice):
    existing = Contact(tenant_id=tenant.id, name="Old João", phone="+5511912345678", notes="met at fair")
    await add_all(session_factory, existing)

    body = {"tagMappings": [
        {"chatwootTag": "vip", "categoryId": "cat-vip"},
        {"chatwootTag": "lead", "categoryId": "cat-lead"},
    ]}
    res = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert res.status_code == 200
    assert res.json() == {"imported": 1, "updated": 1}

    joao, maria = await contacts(session_factory)

    # Maria is reached by "vip" first and is not processed again for "lead"
    assert maria.phone == "+5511987654321"
    assert maria.name == "Maria"
    assert maria.email == "maria@example.com"
    assert maria.category_id == "cat-vip"
    assert maria.notes == "Imported from Chatwoot - Tag: vip"

    assert joao.id == existing.id
    assert joao.name == "João"
    assert joao.category_id == "cat-lead"
    assert joao.notes == "met at fair\nImported from Chatwoot - Tag: lead"


@pytest.mark.asyncio
async def test_sync_twice_updates_instead_of_duplicating(client, session_factory, configured, fake_chatwoot, alice):
    body = {"tagMappings": [{"chatwootTag": "lead", "categoryId": "cat-lead"}]}

    first = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert first.json() == {"imported": 2, "updated": 0}

    second = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert second.json() == {"imported": 0, "updated": 2}
    assert len(await contacts(session_factory)) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"tagMappings": []}, {"tagMappings": [{"chatwootTag": "vip"}]}])
async def test_sync_requires_mappings(client, configured, fake_chatwoot, alice, body):
    res = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert res.status_code == 400
    assert fake_chatwoot.requests == []


@pytest.mark.asyncio
async def test_sync_unknown_category(client, configured, fake_chatwoot, alice):
    body = {"tagMappings": [{"chatwootTag": "vip", "categoryId": "cat-missing"}]}
    res = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert res.status_code == 400
    assert fake_chatwoot.requests == []


@pytest.mark.asyncio
async def test_sync_not_configured(client, fake_chatwoot, alice):
    body = {"tagMappings": [{"chatwootTag": "vip", "categoryId": "cat-vip"}]}
    res = await client.post("/api/chatwoot/sync", json=body, headers=auth_headers(alice))
    assert res.status_code == 400
    assert res.json()["detail"]["error"] == "Chatwoot not configured"
