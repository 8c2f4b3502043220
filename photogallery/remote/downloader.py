"""Raw image byte downloads."""

from __future__ import annotations

import logging
import time

from photogallery.remote.http import HttpClientMixin, validate_url
from photogallery.types import DownloadedImage, utc_now

logger = logging.getLogger(__name__)


class HttpImageDownloader(HttpClientMixin):
    """Downloads image bytes, measuring the roundtrip and stamping completion.

    Redirects are followed (Picsum download URLs redirect to a CDN).
    Satisfies the ``ImageDownloader`` protocol.
    """

    async def download(self, url: str) -> DownloadedImage:
        validate_url(url)
        start = time.perf_counter()
        response = await self._get(url)
        duration = time.perf_counter() - start
        logger.debug("Downloaded %d bytes from %s in %.3fs", len(response.content), url, duration)
        return DownloadedImage(data=response.content, duration=duration, downloaded_at=utc_now())
