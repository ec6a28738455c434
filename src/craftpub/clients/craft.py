"""Async client for the Craft document API"""

import logging

import httpx

from craftpub.core.models import Block, DocumentSummary
from craftpub.errors import FetchError, UnexpectedResponseError


logger = logging.getLogger(__name__)


class CraftClient:
    """Reads the document list and document blocks with a bearer token."""

    def __init__(self, api_url: str, token: str, http: httpx.AsyncClient):
        self.api_url = api_url.rstrip('/')
        self.token = token
        self.http = http

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "Authorization": f"Bearer {self.token}"}

    async def _get(self, path: str, what: str, params: dict = None):
        response = await self.http.get(f"{self.api_url}{path}", headers=self._headers(), params=params)
        if not response.is_success:
            raise FetchError(f"Failed to fetch {what}: {response.status_code} {response.reason_phrase}")
        return response.json()

    async def list_documents(self) -> list[DocumentSummary]:
        """Return every document visible to the token. Accepts a bare list or {"items": [...]}."""
        data = await self._get("/documents", "documents")
        if isinstance(data, dict) and isinstance(data.get("items"), list):
            data = data["items"]
        if not isinstance(data, list):
            raise UnexpectedResponseError("Unexpected response format from Craft API")
        return [DocumentSummary.model_validate(d) for d in data]

    async def get_blocks(self, document_id: str) -> list[Block]:
        """Return the document's blocks; the first one is the page block."""
        data = await self._get("/blocks", "document", params={"id": document_id})
        items = data if isinstance(data, list) else [data]
        logger.debug("Fetched %d top-level block(s) for %s", len(items), document_id)
        return [Block.model_validate(b) for b in items]
