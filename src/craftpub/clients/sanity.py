"""Async client for the Sanity HTTP API: GROQ queries, mutations, and asset uploads"""

import json
import logging
from typing import Any, Optional

import httpx

from craftpub.errors import UnexpectedResponseError


logger = logging.getLogger(__name__)


class Patch:
    """Pending `set` patch on one document; nothing is sent until commit()."""

    def __init__(self, client: "SanityClient", doc_id: str):
        self.client = client
        self.doc_id = doc_id
        self.fields: dict[str, Any] = {}

    def set(self, fields: dict[str, Any]) -> "Patch":
        self.fields.update(fields)
        return self

    async def commit(self) -> dict[str, Any]:
        return await self.client.mutate({"patch": {"id": self.doc_id, "set": self.fields}})


class Assets:
    def __init__(self, client: "SanityClient"):
        self.client = client

    async def upload(
        self,
        kind: str,
        data: bytes,
        filename: str,
        content_type: str = "application/octet-stream",
        ) -> dict[str, Any]:
        """Upload raw bytes as an image or file asset and return the asset document."""
        response = await self.client.http.post(
            f"{self.client.base_url}/assets/{kind}s/{self.client.dataset}",
            params={"filename": filename},
            content=data,
            headers={**self.client.headers(), "Content-Type": content_type},
        )
        response.raise_for_status()
        return response.json()["document"]


class SanityClient:
    """Thin wrapper over the Sanity data and asset endpoints for one project/dataset."""

    def __init__(
        self,
        project_id: str,
        dataset: str,
        token: str,
        http: httpx.AsyncClient,
        api_version: str = "2024-01-01",
        ):
        self.project_id = project_id
        self.dataset = dataset
        self.token = token
        self.http = http
        self.base_url = f"https://{project_id}.api.sanity.io/v{api_version.lstrip('v')}"
        self.assets = Assets(self)

    @classmethod
    def from_settings(cls, settings, http: httpx.AsyncClient) -> "SanityClient":
        return cls(
            settings.sanity_project_id, settings.sanity_dataset, settings.sanity_token,
            http, settings.sanity_api_version,
        )

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def fetch(self, query: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Run a GROQ query; params are passed as JSON-encoded `$name` arguments."""
        query_params = {"query": query}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)
        response = await self.http.get(
            f"{self.base_url}/data/query/{self.dataset}",
            params=query_params,
            headers=self.headers(),
        )
        response.raise_for_status()
        return response.json().get("result")

    async def mutate(self, mutation: dict[str, Any]) -> dict[str, Any]:
        """Apply one mutation synchronously and return the resulting document."""
        logger.debug("Sanity mutation: %s", ", ".join(mutation))
        response = await self.http.post(
            f"{self.base_url}/data/mutate/{self.dataset}",
            params={"returnDocuments": "true", "visibility": "sync"},
            json={"mutations": [mutation]},
            headers=self.headers(),
        )
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            raise UnexpectedResponseError(f"Sanity mutation returned no results: {list(mutation)}")
        return results[0]["document"]

    async def create(self, doc: dict[str, Any]) -> dict[str, Any]:
        return await self.mutate({"create": doc})

    async def create_or_replace(self, doc: dict[str, Any]) -> dict[str, Any]:
        return await self.mutate({"createOrReplace": doc})

    def patch(self, doc_id: str) -> Patch:
        return Patch(self, doc_id)
