"""Publish pipeline: Craft document -> metadata, references, body -> Sanity post"""

import logging
from typing import Optional

import httpx

from craftpub.clients.craft import CraftClient
from craftpub.clients.sanity import SanityClient
from craftpub.config import Settings
from craftpub.core.convert import ContentConverter
from craftpub.core.metadata import extract_metadata
from craftpub.core.models import Block, BlockType, DocumentSummary, Post, PublishResult
from craftpub.core.portable import image_block
from craftpub.core.utils.keys import KeyFactory
from craftpub.crud.assets import ImageUploader
from craftpub.crud.posts import PostWriter
from craftpub.crud.references import NameResolver
from craftpub.errors import DocumentNotFoundError, UnexpectedResponseError


logger = logging.getLogger(__name__)


def find_document(documents: list[DocumentSummary], query: str) -> DocumentSummary:
    """Return the first document whose title contains query (case-insensitive)."""
    needle = query.lower()
    for doc in documents:
        if doc.title and needle in doc.title.lower():
            return doc
    raise DocumentNotFoundError(query, [d.title or "Untitled" for d in documents])


def extract_main_image(blocks: list[Block]) -> Optional[str]:
    """Return the URL of the first image block, if any."""
    for block in blocks:
        if block.type == BlockType.image and block.url:
            return block.url
    return None


async def run_publish(
    settings: Settings,
    query: str,
    draft: bool = False,
    http: Optional[httpx.AsyncClient] = None,
    sanity=None,
    ) -> PublishResult:
    """Synchronize the Craft document matching query into Sanity.

    An HTTP client with the configured timeout is opened for the run unless
    one is passed in. `sanity` defaults to a SanityClient on that HTTP client.
    """
    if http is None:
        async with httpx.AsyncClient(timeout=settings.timeout) as client:
            return await run_publish(settings, query, draft, client, sanity)
    if sanity is None:
        sanity = SanityClient.from_settings(settings, http)

    craft = CraftClient(settings.craft_api_url, settings.craft_token, http)
    schema = settings.sanity
    keys = KeyFactory()

    logger.info("[1/6] Fetching document list")
    target = find_document(await craft.list_documents(), query)
    logger.info("Target document: %s (ID: %s)", target.title, target.id)

    logger.info("[2/6] Fetching document blocks")
    blocks = await craft.get_blocks(target.id)
    if not blocks:
        raise UnexpectedResponseError(f"Craft returned no blocks for document {target.id}")
    page = blocks[0]

    logger.info("[3/6] Extracting metadata")
    metadata = extract_metadata(page, settings.metadata)
    logger.info("Metadata: %s", metadata.model_dump(exclude_none=True))

    logger.info("[4/6] Resolving author and categories")
    author = await NameResolver(sanity, schema.author, settings.match_threshold).resolve(metadata.author)
    categories = await NameResolver(sanity, schema.category, settings.match_threshold).resolve_many(
        metadata.category, keys)

    logger.info("[5/6] Converting content")
    uploader = ImageUploader(sanity, http)
    main_image = None
    if main_image_url := extract_main_image(page.content):
        if asset_id := await uploader.upload_from_url(main_image_url, "main-image.jpg"):
            main_image = image_block(asset_id)
    body = await ContentConverter(settings.metadata, uploader, keys).convert(page.content)
    logger.info("Content converted: %d block(s)", len(body))

    logger.info("[6/6] Writing post to Sanity")
    post = Post(
        **metadata.model_dump(exclude={"author", "category"}),
        author=author,
        categories=categories,
        body=body,
        main_image=main_image,
    )
    stored = await PostWriter(sanity, schema.post).upsert(post, draft=draft)
    return PublishResult(document_title=target.title or "Untitled", post=stored)
