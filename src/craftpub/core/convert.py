"""Craft block to Portable Text conversion"""

import logging
import re

from craftpub.core.models import Block, BlockType
from craftpub.core.portable import HEADING_STYLES, image_block, text_block
from craftpub.core.utils.keys import KeyFactory


logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r'^#{1,6}\s+')
EMPHASIS_RE = re.compile(r'\*\*|\*')


def clean_text(markdown: str) -> str:
    """Strip a leading heading marker and all bold/italic asterisks."""
    return EMPHASIS_RE.sub('', HEADING_RE.sub('', markdown))


class ContentConverter:
    """Turns a page's child blocks into a Portable Text body.

    A block starting with a metadata marker opens a metadata run; everything
    up to the next line block is dropped, so multi-line values (tags, SEO text)
    never leak into the body.
    """

    def __init__(self, markers: dict[str, str], uploader, keys: KeyFactory):
        self.markers = markers
        self.uploader = uploader
        self.keys = keys

    async def convert(self, blocks: list[Block]) -> list[dict]:
        body = []
        skipping = False
        for block in blocks:
            if block.starts_with_marker(self.markers):
                skipping = True
                continue
            if block.type == BlockType.line:
                skipping = False
                continue
            if skipping:
                continue

            if block.type == BlockType.text:
                if not block.markdown.strip():
                    continue
                style = HEADING_STYLES.get(block.text_style, "normal")
                body.append(text_block(self.keys("block"), clean_text(block.markdown), style))
            elif block.type == BlockType.image and block.url:
                key = self.keys("image")
                logger.info("Uploading inline image %s", key)
                asset_id = await self.uploader.upload_from_url(block.url, f"inline-{key}.jpg")
                if asset_id:
                    body.append(image_block(asset_id, key))
        return body
