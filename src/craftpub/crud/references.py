"""Author and category reference resolution: exact, then approximate, then create"""

import logging
from typing import Any, Optional

from craftpub.config import RecordKind
from craftpub.core.portable import reference
from craftpub.core.utils.distance import find_similar
from craftpub.core.utils.keys import KeyFactory
from craftpub.core.utils.slug import slugify


logger = logging.getLogger(__name__)


class NameResolver:
    """Maps free-text names onto records of one kind, creating records that do not exist.

    A name within `threshold` edits of an existing label (case-insensitive) is
    treated as a typo of that label and reuses its record.
    """

    def __init__(self, client, kind: RecordKind, threshold: int = 2):
        self.client = client
        self.kind = kind
        self.threshold = threshold

    async def fetch_all(self) -> list[dict[str, Any]]:
        label, slug = self.kind.label_field, self.kind.slug_field
        return await self.client.fetch(
            f"*[_type == $type]{{ _id, {label}, {slug} }}", {"type": self.kind.type},
        ) or []

    async def find_exact(self, name: str) -> Optional[dict[str, Any]]:
        return await self.client.fetch(
            f"*[_type == $type && {self.kind.label_field} == $name][0]",
            {"type": self.kind.type, "name": name},
        )

    async def create(self, name: str) -> dict[str, Any]:
        doc = {
            "_type": self.kind.type,
            self.kind.label_field: name,
            self.kind.slug_field: {"_type": "slug", "current": slugify(name)},
        }
        if description := self.kind.fields.get("description"):
            doc[description] = f"Auto-created {self.kind.type} for {name}"
        created = await self.client.create(doc)
        logger.info("Created %s %r (ID: %s)", self.kind.type, name, created["_id"])
        return created

    async def _match(self, name: str, candidates: list[dict[str, Any]]) -> str:
        """Return the id of the record `name` resolves to, creating one if needed."""
        label = self.kind.label_field
        existing = await self.find_exact(name)
        if existing:
            logger.info("%s found: %s (ID: %s)", self.kind.type, existing.get(label), existing["_id"])
            return existing["_id"]

        similar = find_similar(name, candidates, label, self.threshold)
        if similar:
            match, distance = similar
            logger.warning(
                'Possible typo: "%s" resolved to existing %s "%s" (distance: %d)',
                name, self.kind.type, match[label], distance,
            )
            return match["_id"]

        return (await self.create(name))["_id"]

    async def resolve(self, name: str) -> dict[str, Any]:
        """Return a reference for a single name (e.g. the post author)."""
        candidates = await self.fetch_all()
        return reference(await self._match(name, candidates))

    async def resolve_many(self, names: list[str], keys: KeyFactory, prefix: str = "cat") -> list[dict[str, Any]]:
        """Return keyed references for names in order, skipping empty entries."""
        candidates = await self.fetch_all()
        refs = []
        for name in names:
            if not name:
                continue
            refs.append(reference(await self._match(name, candidates), keys(prefix)))
        return refs
