"""Protocol for image persistence."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from photogallery.types import ImageRecord, OrderingRequest


@runtime_checkable
class ImageStore(Protocol):
    """Protocol for persisting image bytes plus their metadata.

    Implementations: SqlImageStore.
    """

    async def create(
        self,
        data: bytes,
        *,
        author: str | None,
        download_duration: float | None,
        acquired_at: datetime | None,
        source_download_url: str | None,
        source_list_url: str | None,
        remote_id: str | None,
    ) -> ImageRecord:
        """Write ``data`` to a new blob and insert its record with rank ``max + 1``."""
        ...

    async def delete(self, ids: Iterable[str]) -> None:
        """Remove the matching records and their blobs. Unknown ids are ignored."""
        ...

    async def list_all(self) -> list[ImageRecord]:
        """All records ascending by rank (ties by id)."""
        ...

    async def update_ranks(self, request: OrderingRequest) -> None:
        """Set ``rank`` for every id in ``request``; empty request is a no-op."""
        ...

    async def read_bytes(self, record: ImageRecord) -> bytes:
        """Load the blob behind ``record``."""
        ...

    def path_for(self, record: ImageRecord) -> Path:
        """Absolute path of the blob behind ``record``."""
        ...

    def close(self) -> None:
        """Release database connections."""
        ...
