"""Unit tests for crud/posts.py"""

import pytest

from craftpub.config import RecordKind, SanitySchema
from craftpub.core.models import Post
from craftpub.crud.posts import PostWriter, build_payload


KIND = SanitySchema().post


def _post(**kwargs) -> Post:
    data = {"title": "Hello", "slug": "x", "published_at": "2024-01-01T00:00:00.000Z"}
    data.update(kwargs)
    return Post(**data)


def _published(doc_id="p1", slug="x"):
    return {"_id": doc_id, "_type": "post", "title": "Old", "slug": {"_type": "slug", "current": slug}}


# --- build_payload ---

def test_build_payload_maps_fields():
    author = {"_type": "reference", "_ref": "a1"}
    payload = build_payload(_post(author=author, seo_title="S", seo_description="D", featured=False), KIND)
    assert payload["_type"] == "post"
    assert payload["title"] == "Hello"
    assert payload["slug"] == {"_type": "slug", "current": "x"}
    assert payload["publishedAt"] == "2024-01-01T00:00:00.000Z"
    assert payload["author"] == author
    assert payload["seo"] == {"metaTitle": "S", "metaDescription": "D"}
    assert payload["featured"] is False


def test_build_payload_omits_none_and_unmapped():
    kind = RecordKind(type="article", fields={"title": "headline", "slug": "slug", "excerpt": None})
    payload = build_payload(_post(excerpt="dropped", tags=["t"]), kind)
    assert payload == {"_type": "article", "headline": "Hello", "slug": {"_type": "slug", "current": "x"}}


def test_build_payload_skips_none_values():
    payload = build_payload(_post(published_at=None), KIND)
    assert "publishedAt" not in payload
    assert "mainImage" not in payload
    assert "seo" not in payload


# --- published mode ---

@pytest.mark.asyncio
async def test_publish_creates_when_absent(sanity):
    stored = await PostWriter(sanity, KIND).upsert(_post())
    assert sanity.mutations == [("create", stored["_id"])]
    assert not stored["_id"].startswith("drafts.")
    assert stored["slug"]["current"] == "x"


@pytest.mark.asyncio
async def test_publish_fills_published_at(sanity):
    stored = await PostWriter(sanity, KIND).upsert(_post(published_at=None))
    assert stored["publishedAt"].endswith("Z")


@pytest.mark.asyncio
async def test_publish_patches_existing(sanity):
    """A slug with a published record is patched, never created again."""
    sanity.docs.append(_published())
    writer = PostWriter(sanity, KIND)
    stored = await writer.upsert(_post(title="New"))
    await writer.upsert(_post(title="Newer"))

    assert stored["_id"] == "p1" and stored["title"] == "New"
    assert sanity.mutations == [("patch", "p1"), ("patch", "p1")]
    assert len(sanity.of_type("post")) == 1


@pytest.mark.asyncio
async def test_publish_ignores_existing_draft(sanity):
    sanity.docs.append({**_published("drafts.d1"), "_id": "drafts.d1"})
    stored = await PostWriter(sanity, KIND).upsert(_post())
    assert not stored["_id"].startswith("drafts.")
    assert sanity.get("drafts.d1")["title"] == "Old"


# --- draft mode ---

@pytest.mark.asyncio
async def test_draft_shadows_published(sanity):
    sanity.docs.append(_published())
    writer = PostWriter(sanity, KIND)
    first = await writer.upsert(_post(title="Draft"), draft=True)
    second = await writer.upsert(_post(title="Draft 2"), draft=True)

    assert first["_id"] == second["_id"] == "drafts.p1"
    assert sanity.mutations == [("createOrReplace", "drafts.p1"), ("createOrReplace", "drafts.p1")]
    assert sanity.get("p1")["title"] == "Old"


@pytest.mark.asyncio
async def test_draft_id_stable_for_unpublished_slug(sanity):
    writer = PostWriter(sanity, KIND)
    first = await writer.upsert(_post(), draft=True)
    second = await writer.upsert(_post(title="Again"), draft=True)

    assert first["_id"].startswith("drafts.")
    assert second["_id"] == first["_id"]
    assert len(sanity.of_type("post")) == 1
    assert all(op == "createOrReplace" for op, _ in sanity.mutations)


@pytest.mark.asyncio
async def test_draft_writes_full_payload(sanity):
    stored = await PostWriter(sanity, KIND).upsert(_post(excerpt="E"), draft=True)
    assert stored["excerpt"] == "E"
    assert stored["_type"] == "post"


@pytest.mark.asyncio
async def test_new_drafts_for_different_slugs_get_distinct_ids(sanity):
    writer = PostWriter(sanity, KIND)
    a = await writer.upsert(_post(slug="a"), draft=True)
    b = await writer.upsert(_post(slug="b"), draft=True)
    assert a["_id"] != b["_id"]
