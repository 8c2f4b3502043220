"""Image acquisition service.

Composes the listing client, downloader and store into "add one random
image", and forwards list/delete/reorder operations to the store.

Workflow of ``add_random_image``:
    1. Fetch one listing page
    2. Pick an entry uniformly at random
    3. Download its bytes
    4. Persist bytes + metadata through the store

Cancellation is checked before each network call; a call in flight runs to
completion. Errors propagate unchanged and nothing is persisted unless
the download succeeded.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence

from photogallery.config import GalleryConfig, RemoteConfig
from photogallery.ordering import reorder
from photogallery.remote.base import ImageDownloader, ListFetcher
from photogallery.remote.downloader import HttpImageDownloader
from photogallery.remote.listing import PicsumListFetcher
from photogallery.storage.base import ImageStore
from photogallery.storage.store import SqlImageStore
from photogallery.types import ImageRecord, OrderingRequest, SortState
from photogallery.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class AcquisitionService:
    """Entry point for every gallery operation that touches the network or the store."""

    def __init__(
        self,
        list_fetcher: ListFetcher,
        downloader: ImageDownloader,
        store: ImageStore,
        config: RemoteConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.list_fetcher = list_fetcher
        self.downloader = downloader
        self.store = store
        self.config = config or RemoteConfig()
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: GalleryConfig) -> AcquisitionService:
        """Wire the production clients and the SQLite store from configuration."""
        remote = config.remote
        return cls(
            list_fetcher=PicsumListFetcher(
                timeout_seconds=remote.timeout_seconds, user_agent=remote.user_agent
            ),
            downloader=HttpImageDownloader(
                timeout_seconds=remote.timeout_seconds, user_agent=remote.user_agent
            ),
            store=SqlImageStore(config.storage),
            config=remote,
        )

    async def add_random_image(
        self, cancel_token: CancellationToken | None = None
    ) -> ImageRecord | None:
        """Fetch the listing, download one random entry and persist it.

        Returns None when the listing page is empty.
        """
        token = cancel_token or CancellationToken()
        cfg = self.config

        token.raise_if_cancelled("fetching the listing")
        entries = await self.list_fetcher.fetch_list(cfg.list_url, cfg.page, cfg.page_size)
        if not entries:
            logger.info("Listing page %d is empty, nothing to add", cfg.page)
            return None

        entry = self._rng.choice(entries)
        token.raise_if_cancelled("downloading the image")
        downloaded = await self.downloader.download(entry.download_url)

        return await self.store.create(
            downloaded.data,
            author=entry.author,
            download_duration=downloaded.duration,
            acquired_at=downloaded.downloaded_at,
            source_download_url=entry.download_url,
            source_list_url=entry.url,
            remote_id=entry.id,
        )

    async def load_all(self) -> list[ImageRecord]:
        return await self.store.list_all()

    async def delete(self, ids: Iterable[str]) -> None:
        await self.store.delete(set(ids))

    async def update_ordering(self, request: OrderingRequest) -> None:
        await self.store.update_ranks(request)

    async def apply_sort(
        self, records: Sequence[ImageRecord], sort_state: SortState
    ) -> list[ImageRecord]:
        """Reorder ``records`` and persist only the ranks that changed."""
        ordered, request = reorder(records, sort_state.key, sort_state.ascending)
        if request:
            await self.update_ordering(request)
            logger.info(
                "Sorted by %s (%s): %d rank change(s)",
                sort_state.key.value,
                "asc" if sort_state.ascending else "desc",
                len(request),
            )
        return ordered
