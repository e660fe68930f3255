# app/services/chatwoot_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional, Set
import logging

import httpx

from app.core.config import settings
from app.core.errors import InternalError, UpstreamConfigurationError, ValidationError
from app.models.contact import Contact
from app.models.tenant import TenantSettings
from app.repositories.contact_repo import ContactRepository
from app.schemas.chatwoot_schema import TagMapping
from app.utils.chatwoot_client import ChatwootAPIError, ChatwootClient
from app.utils.phone import normalize_phone

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "Chatwoot not configured"
NOT_CONFIGURED_GUIDANCE = "Configure Chatwoot on the Integrations page before syncing contacts."


def _sender(conversation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return (conversation.get("meta") or {}).get("sender")


def aggregate_tags(conversations: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Count distinct contacts (sender ids) per label, sorted by label name.
    Conversations without a sender id are ignored.
    """
    contacts_by_tag: Dict[str, Set[Any]] = {}
    for conv in conversations:
        sender = _sender(conv)
        labels = conv.get("labels") or []
        if not labels or not sender or sender.get("id") is None:
            continue
        for tag in labels:
            contacts_by_tag.setdefault(tag, set()).add(sender["id"])

    return [
        {"name": name, "count": len(ids)}
        for name, ids in sorted(contacts_by_tag.items(), key=lambda item: item[0].lower())
    ]


def import_note(tag: str) -> str:
    return f"Imported from Chatwoot - Tag: {tag}"


class ChatwootService:
    def __init__(self, db: AsyncSession, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.db = db
        self.repo = ContactRepository(db)
        # Injected in tests; None means a real network transport
        self.transport = transport

    async def _client(self, tenant_id: Optional[str]) -> ChatwootClient:
        if not tenant_id:
            raise ValidationError("Tenant ID not found")

        tenant_settings: Optional[TenantSettings] = await self.repo.get_tenant_settings(tenant_id)
        if tenant_settings is None or not tenant_settings.chatwoot_configured:
            logger.info(f"Chatwoot requested for tenant {tenant_id} without configuration")
            raise UpstreamConfigurationError(NOT_CONFIGURED_ERROR, NOT_CONFIGURED_GUIDANCE)

        return ChatwootClient(
            base_url=tenant_settings.chatwoot_url,
            account_id=tenant_settings.chatwoot_account_id,
            api_token=tenant_settings.chatwoot_api_token,
            timeout=settings.CHATWOOT_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    async def _fetch_conversations(self, client: ChatwootClient, action: str) -> List[Dict[str, Any]]:
        try:
            return await client.list_conversations()
        except ChatwootAPIError as e:
            logger.error(f"Chatwoot {action} failed: {e}", exc_info=True)
            raise InternalError(f"Error while {action} from Chatwoot")

    async def get_tags(self, tenant_id: Optional[str]) -> List[Dict[str, Any]]:
        """
        (API) Labels used in the tenant's Chatwoot conversations,
        each with the number of distinct contacts carrying it.
        """
        client = await self._client(tenant_id)
        conversations = await self._fetch_conversations(client, "fetching tags")
        return aggregate_tags(conversations)

    async def sync_contacts(self, tenant_id: Optional[str], tag_mappings: List[TagMapping]) -> Dict[str, int]:
        """
        (API) Import the contacts behind each Chatwoot tag into the mapped category.

        - senders without a valid phone number are skipped
        - a phone number is processed once per run, by the first mapping that reaches it
        - existing contacts (same tenant + phone) are updated, others created
        """
        if not tag_mappings:
            raise ValidationError("Tag mappings are required")

        client = await self._client(tenant_id)

        wanted = {m.category_id for m in tag_mappings}
        known = await self.repo.get_existing_category_ids(tenant_id, wanted)
        missing = wanted - known
        if missing:
            raise ValidationError(f"Unknown categories: {', '.join(sorted(missing))}")

        conversations = await self._fetch_conversations(client, "syncing contacts")

        imported = 0
        updated = 0
        processed: Set[str] = set()

        try:
            for mapping in tag_mappings:
                for conv in conversations:
                    if mapping.chatwoot_tag not in (conv.get("labels") or []):
                        continue

                    sender = _sender(conv)
                    if not sender:
                        logger.info(f"Conversation {conv.get('id')} has no sender, skipping")
                        continue

                    phone = normalize_phone(sender.get("phone_number"), settings.PHONE_DEFAULT_REGION)
                    if phone is None:
                        logger.info(f"Contact {sender.get('name')} has no valid phone ({sender.get('phone_number')}), skipping")
                        continue

                    if phone in processed:
                        continue
                    processed.add(phone)

                    existing = await self.repo.get_contact_by_phone(tenant_id, phone)
                    if existing:
                        existing.name = sender.get("name") or existing.name
                        existing.email = sender.get("email") or existing.email
                        existing.category_id = mapping.category_id
                        existing.notes = (
                            f"{existing.notes}\n{import_note(mapping.chatwoot_tag)}"
                            if existing.notes else import_note(mapping.chatwoot_tag)
                        )
                        updated += 1
                    else:
                        self.repo.add_contact(Contact(
                            tenant_id=tenant_id,
                            name=sender.get("name") or "No name",
                            phone=phone,
                            email=sender.get("email"),
                            category_id=mapping.category_id,
                            notes=import_note(mapping.chatwoot_tag),
                        ))
                        imported += 1

            await self.repo.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Chatwoot contact sync failed for tenant {tenant_id}: {e}", exc_info=True)
            raise InternalError("Error while syncing contacts")

        logger.info(f"Chatwoot sync for tenant {tenant_id}: {imported} imported, {updated} updated")
        return {"imported": imported, "updated": updated}
