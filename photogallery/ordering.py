"""Deterministic gallery ordering.

``reorder`` sorts records by a SortKey and returns the rank delta to persist:

    author:      (casefolded author, acquisition time, id)
    acquired_at: (acquisition time, casefolded author, id)
    manual:      current order, no changes

Descending order reverses the whole key, so the author/date sorts are
total orders and ascending/descending results are exact mirror images.
Ranks are renumbered to the 0-based position after sorting and only the
records whose rank actually changed end up in the OrderingRequest.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from photogallery.types import ImageRecord, OrderingRequest, SortKey, ensure_utc

# Records without an acquisition time sort as if acquired at the Unix epoch
MISSING_TIMESTAMP = datetime(1970, 1, 1, tzinfo=timezone.utc)


def normalized_author(record: ImageRecord) -> str:
    """Casefolded display name; a missing author sorts as "Unknown Author"."""
    return record.display_author.casefold()


def acquisition_time(record: ImageRecord) -> datetime:
    return ensure_utc(record.acquired_at) or MISSING_TIMESTAMP


def _author_key(record: ImageRecord) -> tuple[str, datetime, str]:
    return (normalized_author(record), acquisition_time(record), record.id)


def _acquired_key(record: ImageRecord) -> tuple[datetime, str, str]:
    return (acquisition_time(record), normalized_author(record), record.id)


def renumber(items: Sequence[ImageRecord]) -> tuple[list[ImageRecord], OrderingRequest]:
    """Assign each record its positional rank; return records and the changed subset."""
    renumbered: list[ImageRecord] = []
    request: OrderingRequest = {}
    for position, record in enumerate(items):
        if record.rank != position:
            request[record.id] = position
        renumbered.append(record.with_rank(position))
    return renumbered, request


def reorder(
    items: Sequence[ImageRecord],
    key: SortKey,
    ascending: bool = True,
) -> tuple[list[ImageRecord], OrderingRequest]:
    """Sort ``items`` by ``key`` and compute the rank changes to persist.

    Args:
        items: Records in their current display order.
        key: Sort field. ``manual`` keeps the current order untouched.
        ascending: Sort direction; applies to every tie-break level.

    Returns:
        (records in new order with updated ranks, id -> new rank for changed records)
    """
    key = SortKey(key)
    if key is SortKey.manual:
        return list(items), {}

    sort_key = _author_key if key is SortKey.author else _acquired_key
    ordered = sorted(items, key=sort_key, reverse=not ascending)
    return renumber(ordered)


def move(
    items: Sequence[ImageRecord],
    record_id: str,
    to_index: int,
) -> tuple[list[ImageRecord], OrderingRequest]:
    """Move one record to ``to_index`` (clamped) and renumber positionally.

    Raises KeyError if ``record_id`` is not among ``items``.
    """
    ordered = list(items)
    for index, record in enumerate(ordered):
        if record.id == record_id:
            break
    else:
        raise KeyError(record_id)

    moved = ordered.pop(index)
    to_index = max(0, min(to_index, len(ordered)))
    ordered.insert(to_index, moved)
    return renumber(ordered)
