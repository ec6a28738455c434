"""Root test configuration: environment isolation and an in-memory Sanity client"""

import os
import re
from copy import deepcopy
from itertools import count

import httpx
import pytest

from craftpub.config import ENV_ALIASES, Settings
from craftpub.core.utils.paths import get_path


COND_RE = re.compile(r'([\w.]+) == \$(\w+)')
DRAFTS_SCOPE = '(_id in path("drafts.**"))'


class FakePatch:
    def __init__(self, store: "FakeSanity", doc_id: str):
        self.store = store
        self.doc_id = doc_id
        self.fields = {}

    def set(self, fields):
        self.fields.update(deepcopy(fields))
        return self

    async def commit(self):
        self.store.mutations.append(("patch", self.doc_id))
        doc = self.store.get(self.doc_id)
        doc.update(self.fields)
        return deepcopy(doc)


class FakeAssets:
    def __init__(self):
        self.uploads = []
        self.fail = False
        self._ids = count(1)

    async def upload(self, kind, data, filename, content_type="application/octet-stream"):
        if self.fail:
            raise httpx.HTTPError("upload rejected")
        self.uploads.append({"kind": kind, "data": data, "filename": filename, "content_type": content_type})
        return {"_id": f"image-asset-{next(self._ids)}", "_type": "sanity.imageAsset"}


class FakeSanity:
    """Dataset held in a list; understands the equality filters and draft scoping used by craftpub."""

    def __init__(self, docs=None):
        self.docs = [deepcopy(d) for d in docs or []]
        self.queries = []
        self.mutations = []
        self.assets = FakeAssets()
        self._ids = count(1)

    def get(self, doc_id):
        return next(d for d in self.docs if d["_id"] == doc_id)

    def of_type(self, type_):
        return [d for d in self.docs if d.get("_type") == type_]

    async def fetch(self, query, params=None):
        params = params or {}
        self.queries.append((query, params))
        rows = self.docs
        if "!" + DRAFTS_SCOPE in query:
            rows = [r for r in rows if not r["_id"].startswith("drafts.")]
        elif DRAFTS_SCOPE in query:
            rows = [r for r in rows if r["_id"].startswith("drafts.")]
        for field, param in COND_RE.findall(query):
            rows = [r for r in rows if get_path(r, field) == params[param]]
        if "][0]" in query:
            return deepcopy(rows[0]) if rows else None
        return deepcopy(rows)

    async def create(self, doc):
        doc = deepcopy(doc)
        doc.setdefault("_id", f"gen-{next(self._ids)}")
        self.mutations.append(("create", doc["_id"]))
        self.docs.append(doc)
        return deepcopy(doc)

    async def create_or_replace(self, doc):
        doc = deepcopy(doc)
        self.mutations.append(("createOrReplace", doc["_id"]))
        self.docs = [d for d in self.docs if d["_id"] != doc["_id"]] + [doc]
        return deepcopy(doc)

    def patch(self, doc_id):
        return FakePatch(self, doc_id)


@pytest.fixture(name="sanity")
def sanity_fixture():
    """Empty in-memory Sanity dataset; tests append documents to `.docs` as needed."""
    return FakeSanity()


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        craft_api_url="https://craft.test/api",
        craft_token="craft-token",
        sanity_project_id="proj",
        sanity_dataset="test",
        sanity_token="sanity-token",
    )


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Drop craftpub env vars from the outer environment so tests see only their own."""
    for name in list(os.environ):
        if name.startswith("CRAFTPUB_") or name in ENV_ALIASES.values():
            monkeypatch.delenv(name, raising=False)
