"""Core data types for photogallery.

Every layer produces/consumes these types:
- remote clients return ListingEntry and DownloadedImage
- the store persists and returns ImageRecord
- the ordering engine and session exchange ImageRecord sequences,
  OrderingRequest deltas and SortState
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from pydantic import BaseModel

UNKNOWN_AUTHOR = "Unknown Author"

# record id -> new rank
OrderingRequest = dict[str, int]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SortKey(str, enum.Enum):
    """Field a gallery is ordered by."""

    author = "author"
    acquired_at = "acquired_at"
    manual = "manual"


class GalleryMode(str, enum.Enum):
    """Interaction mode of a gallery session.

    browsing:  manual reordering allowed, no selection
    selecting: items can be selected for deletion, reordering suppressed
    """

    browsing = "browsing"
    selecting = "selecting"


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops the offset on read)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Remote types
# ---------------------------------------------------------------------------


class ListingEntry(BaseModel):
    """One element of the listing endpoint response."""

    id: str
    author: str
    width: int
    height: int
    url: str
    download_url: str


@dataclass(frozen=True)
class DownloadedImage:
    """Raw bytes of a finished download plus timing information."""

    data: bytes
    duration: float
    downloaded_at: datetime


# ---------------------------------------------------------------------------
# Persisted types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImageRecord:
    """A saved image and its metadata.

    ``rank`` is the only field that changes after creation; use
    ``with_rank`` to derive the updated value.
    """

    id: str
    file_path: str
    rank: int
    author: str | None = None
    download_duration: float | None = None
    acquired_at: datetime | None = None
    source_list_url: str | None = None
    source_download_url: str | None = None
    remote_id: str | None = None

    @property
    def display_author(self) -> str:
        return self.author or UNKNOWN_AUTHOR

    def with_rank(self, rank: int) -> ImageRecord:
        if rank == self.rank:
            return self
        return replace(self, rank=rank)

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "id": self.id,
            "file_path": self.file_path,
            "rank": self.rank,
            "author": self.author,
            "download_duration": self.download_duration,
            "acquired_at": self.acquired_at.isoformat() if self.acquired_at else None,
            "source_list_url": self.source_list_url,
            "source_download_url": self.source_download_url,
            "remote_id": self.remote_id,
        }


@dataclass(frozen=True)
class SortState:
    """Sort selection passed between the session and the ordering engine."""

    key: SortKey = SortKey.manual
    ascending: bool = True
