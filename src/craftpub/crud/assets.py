"""Image download and re-upload to the Sanity asset store"""

import logging
from typing import Optional

import httpx

from craftpub.errors import CraftpubError, FetchError


logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


class ImageUploader:
    """Copies remote images into Sanity. Failures are logged and yield None."""

    def __init__(self, client, http: httpx.AsyncClient):
        self.client = client
        self.http = http

    async def upload_from_url(self, url: str, filename: str = "image.jpg") -> Optional[str]:
        """Return the uploaded asset id, or None if the download or upload failed."""
        try:
            logger.info("Downloading image from: %s", url)
            response = await self.http.get(url, follow_redirects=True)
            if not response.is_success:
                raise FetchError(f"Failed to fetch image: {response.status_code} {response.reason_phrase}")
            data = response.content
            logger.info("Uploading to Sanity (%d bytes)", len(data))
            asset = await self.client.assets.upload(
                "image", data,
                filename=filename,
                content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            )
            asset_id = asset["_id"]
        except (httpx.HTTPError, CraftpubError, KeyError, TypeError, ValueError) as e:
            logger.warning("Image upload failed for %s: %s", url, e)
            return None
        logger.info("Image uploaded: %s", asset_id)
        return asset_id
