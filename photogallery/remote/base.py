"""Protocols for the remote listing and download clients."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from photogallery.types import DownloadedImage, ListingEntry


@runtime_checkable
class ListFetcher(Protocol):
    """Protocol for fetching a page of image metadata.

    Implementations: PicsumListFetcher.
    """

    async def fetch_list(self, url: str, page: int, limit: int) -> list[ListingEntry]:
        """Fetch one page of the listing endpoint.

        Args:
            url: Base URL of the listing endpoint.
            page: 1-based page number.
            limit: Entries per page.

        Returns:
            Decoded listing entries, possibly empty.
        """
        ...


@runtime_checkable
class ImageDownloader(Protocol):
    """Protocol for downloading raw image bytes.

    Implementations: HttpImageDownloader.
    """

    async def download(self, url: str) -> DownloadedImage:
        """Download the bytes behind ``url``, timing the roundtrip."""
        ...
