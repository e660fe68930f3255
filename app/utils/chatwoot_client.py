# app/utils/chatwoot_client.py
"""Thin client for the Chatwoot REST API."""

from typing import Any, Dict, List, Optional
import logging

import httpx

logger = logging.getLogger(__name__)

# Safety stop for the conversation pager
MAX_PAGES = 50


class ChatwootAPIError(Exception):
    """Chatwoot answered with an error status or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChatwootClient:
    def __init__(
        self,
        base_url: str,
        account_id: str,
        api_token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.api_token = api_token
        self.timeout = timeout
        self.transport = transport

    @property
    def conversations_url(self) -> str:
        return f"{self.base_url}/api/v1/accounts/{self.account_id}/conversations"

    async def list_conversations(self) -> List[Dict[str, Any]]:
        """All conversations of the account, following the `page` parameter until a page comes back empty"""
        conversations: List[Dict[str, Any]] = []
        headers = {"api_access_token": self.api_token}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for page in range(1, MAX_PAGES + 1):
                try:
                    resp = await client.get(
                        self.conversations_url,
                        params={"page": page, "status": "all"},
                        headers=headers,
                    )
                except httpx.HTTPError as e:
                    raise ChatwootAPIError(f"Chatwoot request failed: {e}") from e

                if resp.status_code != 200:
                    raise ChatwootAPIError(
                        f"Chatwoot error: {resp.status_code} - {resp.reason_phrase}",
                        status_code=resp.status_code,
                    )

                payload = (resp.json().get("data") or {}).get("payload") or []
                if not payload:
                    break
                conversations.extend(payload)
            else:
                logger.warning(f"Stopped reading Chatwoot conversations after {MAX_PAGES} pages")

        return conversations
