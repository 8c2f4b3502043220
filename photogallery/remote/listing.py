"""Client for the paginated image listing endpoint (Picsum ``/v2/list``)."""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from photogallery.errors import DecodeError
from photogallery.remote.http import HttpClientMixin, validate_url
from photogallery.types import ListingEntry

logger = logging.getLogger(__name__)

_LISTING_ADAPTER = TypeAdapter(list[ListingEntry])


def decode_listing(payload: bytes) -> list[ListingEntry]:
    """Decode a listing response body into typed entries.

    Raises DecodeError on malformed JSON or a payload that is not an
    array of listing objects.
    """
    try:
        return _LISTING_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(f"Malformed listing response: {exc.error_count()} error(s)") from exc


class PicsumListFetcher(HttpClientMixin):
    """Fetches listing pages over HTTPS with ``page`` and ``limit`` query parameters.

    Satisfies the ``ListFetcher`` protocol.
    """

    async def fetch_list(self, url: str, page: int, limit: int) -> list[ListingEntry]:
        validate_url(url)
        response = await self._get(url, params={"page": str(page), "limit": str(limit)})
        entries = decode_listing(response.content)
        logger.debug("Fetched %d listing entries (page=%d, limit=%d)", len(entries), page, limit)
        return entries
