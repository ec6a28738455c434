"""Post persistence: payload mapping and publish/draft upsert by slug"""

import logging
from typing import Any, Optional
from uuid import uuid4

from craftpub.config import RecordKind
from craftpub.core.models import Post, utc_now
from craftpub.core.utils.paths import get_path, set_path


logger = logging.getLogger(__name__)

DRAFTS_PREFIX = "drafts."


def build_payload(post: Post, kind: RecordKind) -> dict[str, Any]:
    """Map logical post fields onto the configured Sanity field paths.

    Fields without a destination, and fields whose value is None, are left out.
    """
    payload: dict[str, Any] = {"_type": kind.type}
    for name, value in post.model_dump().items():
        dest = kind.fields.get(name)
        if not dest or value is None:
            continue
        if name == "slug":
            value = {"_type": "slug", "current": value}
        set_path(payload, dest, value)
    return payload


class PostWriter:
    """Writes a post to Sanity, keyed by slug among published (non-draft) documents."""

    def __init__(self, client, kind: RecordKind):
        self.client = client
        self.kind = kind

    def _slug_query(self, drafts: bool) -> str:
        scope = '(_id in path("drafts.**"))' if drafts else '!(_id in path("drafts.**"))'
        title = self.kind.fields.get("title") or "title"
        return f'*[_type == $type && {scope} && {self.kind.slug_field}.current == $slug][0]{{ _id, {title} }}'

    async def find_published(self, slug: str) -> Optional[dict[str, Any]]:
        return await self.client.fetch(self._slug_query(drafts=False), {"type": self.kind.type, "slug": slug})

    async def find_draft(self, slug: str) -> Optional[dict[str, Any]]:
        return await self.client.fetch(self._slug_query(drafts=True), {"type": self.kind.type, "slug": slug})

    async def draft_id(self, slug: str, published: Optional[dict[str, Any]]) -> str:
        """Return the draft id for slug: shadow of the published id, an existing draft, or a new one."""
        if published:
            return f"{DRAFTS_PREFIX}{published['_id']}"
        existing = await self.find_draft(slug)
        if existing:
            logger.info("Existing draft found (ID: %s)", existing["_id"])
            return existing["_id"]
        return f"{DRAFTS_PREFIX}{uuid4()}"

    async def upsert(self, post: Post, draft: bool = False) -> dict[str, Any]:
        """Create, patch, or draft-write the post and return the stored document."""
        published = await self.find_published(post.slug)
        payload = build_payload(post, self.kind)

        if draft:
            target = await self.draft_id(post.slug, published)
            logger.info("Writing draft (ID: %s)", target)
            return await self.client.create_or_replace({**payload, "_id": target})

        if published:
            logger.info("Updating published post (ID: %s)", published["_id"])
            return await self.client.patch(published["_id"]).set(payload).commit()

        published_at = self.kind.fields.get("published_at")
        if published_at and not get_path(payload, published_at):
            set_path(payload, published_at, utc_now())
        logger.info("Creating new published post")
        return await self.client.create(payload)
