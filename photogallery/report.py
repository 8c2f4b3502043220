"""Collection summary: totals, today's acquisitions and per-author counts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timezone

from photogallery.types import ImageRecord, ensure_utc, utc_now


@dataclass
class GalleryReport:
    """Summary statistics of a gallery."""

    total: int
    acquired_today: int
    unique_authors: int
    # (author, count), most prolific first, ties by name
    by_author: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "acquired_today": self.acquired_today,
            "unique_authors": self.unique_authors,
            "by_author": [{"author": a, "count": c} for a, c in self.by_author],
        }


def build_report(records: Iterable[ImageRecord], today: date | None = None) -> GalleryReport:
    """Summarize ``records``.

    Args:
        records: Gallery records in any order.
        today: UTC date counted as "today" (defaults to the current UTC date).
    """
    records = list(records)
    today = today or utc_now().date()

    acquired_today = sum(
        1 for r in records
        if r.acquired_at is not None and ensure_utc(r.acquired_at).astimezone(timezone.utc).date() == today
    )
    counts = Counter(r.display_author for r in records)
    by_author = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    return GalleryReport(
        total=len(records),
        acquired_today=acquired_today,
        unique_authors=len(counts),
        by_author=by_author,
    )
