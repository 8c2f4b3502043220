"""Test builders and in-memory doubles for photogallery."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from PIL import Image

from photogallery.errors import NotFoundError
from photogallery.types import DownloadedImage, ImageRecord, ListingEntry, OrderingRequest

T0 = datetime(2025, 8, 27, 12, 0, tzinfo=timezone.utc)


def png_bytes(width: int = 4, height: int = 3) -> bytes:
    """Encode a solid-colour PNG of the given size."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def at(minutes: int) -> datetime:
    """T0 shifted by ``minutes``."""
    return T0 + timedelta(minutes=minutes)


def make_record(
    record_id: str,
    author: str | None = "Author",
    acquired_at: datetime | None = T0,
    rank: int = 0,
) -> ImageRecord:
    return ImageRecord(
        id=record_id,
        file_path=f"images/{record_id}",
        rank=rank,
        author=author,
        download_duration=0.5,
        acquired_at=acquired_at,
    )


def make_entry(remote_id: str, author: str = "Author") -> ListingEntry:
    return ListingEntry(
        id=remote_id,
        author=author,
        width=100,
        height=100,
        url=f"https://example.test/photos/{remote_id}",
        download_url=f"https://example.test/id/{remote_id}/100/100",
    )


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeListFetcher:
    """Returns a fixed listing (or raises) and records every call."""

    def __init__(self, entries: list[ListingEntry] | None = None) -> None:
        self.entries = entries if entries is not None else [make_entry("01", "Author1")]
        self.error: Exception | None = None
        self.on_fetch: Callable[[], None] | None = None
        self.calls: list[tuple[str, int, int]] = []

    async def fetch_list(self, url: str, page: int, limit: int) -> list[ListingEntry]:
        self.calls.append((url, page, limit))
        if self.on_fetch is not None:
            self.on_fetch()
        if self.error is not None:
            raise self.error
        return list(self.entries)


class FakeDownloader:
    """Returns fixed bytes (or raises) and records every requested URL."""

    def __init__(self) -> None:
        self.response = DownloadedImage(data=png_bytes(), duration=25.3, downloaded_at=T0)
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def download(self, url: str) -> DownloadedImage:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


class MemoryImageStore:
    """In-memory ImageStore with the same rank and delete semantics as SqlImageStore."""

    def __init__(self) -> None:
        self.records: dict[str, ImageRecord] = {}
        self.blobs: dict[str, bytes] = {}
        self.error: Exception | None = None
        self.rank_updates: list[OrderingRequest] = []
        self.deleted: list[set[str]] = []
        # Ids whose blob is gone: delete drops their rows, then raises NotFoundError
        self.missing_blobs: set[str] = set()
        self._next_id = 0

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def add(self, record: ImageRecord, data: bytes = b"data") -> ImageRecord:
        self.records[record.id] = record
        self.blobs[record.id] = data
        return record

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
        self._check()
        self._next_id += 1
        record_id = f"id-{self._next_id:04d}"
        ranks = [r.rank for r in self.records.values()]
        record = ImageRecord(
            id=record_id,
            file_path=f"images/{record_id}",
            rank=max(ranks) + 1 if ranks else 0,
            author=author,
            download_duration=download_duration,
            acquired_at=acquired_at,
            source_list_url=source_list_url,
            source_download_url=source_download_url,
            remote_id=remote_id,
        )
        return self.add(record, data)

    async def delete(self, ids: Iterable[str]) -> None:
        self._check()
        wanted = set(ids)
        self.deleted.append(wanted)
        removed = wanted & set(self.records)
        for record_id in removed:
            self.records.pop(record_id)
            self.blobs.pop(record_id, None)
        missing = sorted(removed & self.missing_blobs)
        if missing:
            raise NotFoundError(f"Backing files missing for: {', '.join(missing)}", ids=missing)

    async def list_all(self) -> list[ImageRecord]:
        self._check()
        return sorted(self.records.values(), key=lambda r: (r.rank, r.id))

    async def update_ranks(self, request: OrderingRequest) -> None:
        self._check()
        if not request:
            return
        self.rank_updates.append(dict(request))
        for record_id, rank in request.items():
            if record_id in self.records:
                self.records[record_id] = self.records[record_id].with_rank(rank)

    async def read_bytes(self, record: ImageRecord) -> bytes:
        try:
            return self.blobs[record.id]
        except KeyError as exc:
            raise NotFoundError(f"missing blob {record.id}", ids=[record.id]) from exc

    def path_for(self, record: ImageRecord) -> Path:
        return Path("/memory") / record.file_path

    def close(self) -> None:
        pass
