"""Gallery session: selection mode, sort state and change events.

A session sits between a front end and the AcquisitionService.
It keeps the displayed records, the selection and the active SortState,
and publishes an event after every operation:

    ListUpdated(items)        records changed and the gallery is non-empty
    EmptyList()               the gallery has no records
    OperationFailed(message)  the operation failed; state was rolled back or
                              reloaded to match the store

Errors are logged and reported through OperationFailed, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from photogallery.errors import GalleryError
from photogallery.ordering import move as move_record
from photogallery.service import AcquisitionService
from photogallery.types import GalleryMode, ImageRecord, SortKey, SortState
from photogallery.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListUpdated:
    items: list[ImageRecord] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyList:
    pass


@dataclass(frozen=True)
class OperationFailed:
    message: str


ChangeEvent = ListUpdated | EmptyList | OperationFailed


class ChangeFeed:
    """Single-consumer queue of change events."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()

    def publish(self, event: ChangeEvent) -> None:
        self._queue.put_nowait(event)

    async def next(self) -> ChangeEvent:
        return await self._queue.get()

    def drain(self) -> list[ChangeEvent]:
        """Return every queued event without waiting."""
        events: list[ChangeEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class GallerySession:
    """Per-gallery interaction state driving an AcquisitionService."""

    def __init__(self, service: AcquisitionService, feed: ChangeFeed | None = None) -> None:
        self.service = service
        self.feed = feed or ChangeFeed()
        self.items: list[ImageRecord] = []
        self.selection: set[str] = set()
        self.mode = GalleryMode.browsing
        self.sort_state = SortState()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def can_delete(self) -> bool:
        return bool(self.selection)

    @property
    def all_selected(self) -> bool:
        return len(self.selection) == len(self.items)

    def is_active_sort(self, key: SortKey, ascending: bool = True) -> bool:
        """Whether ``key``/``ascending`` is the current sort (direction ignored for manual)."""
        if key is SortKey.manual:
            return self.sort_state.key is SortKey.manual
        return self.sort_state == SortState(key, ascending)

    # ------------------------------------------------------------------
    # Selection mode
    # ------------------------------------------------------------------

    def enter_selection(self) -> None:
        self.mode = GalleryMode.selecting

    def cancel_selection(self) -> None:
        self.selection.clear()
        self.mode = GalleryMode.browsing

    def toggle(self, record_id: str) -> None:
        if record_id in self.selection:
            self.selection.discard(record_id)
        else:
            self.selection.add(record_id)

    def select_all(self) -> None:
        self.selection = {record.id for record in self.items}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load(self) -> None:
        try:
            self.items = await self.service.load_all()
        except GalleryError as exc:
            self._fail("Error loading images. Please, try again", exc)
            return
        self._emit()

    async def add_random(self, cancel_token: CancellationToken | None = None) -> ImageRecord | None:
        try:
            record = await self.service.add_random_image(cancel_token)
        except GalleryError as exc:
            self._fail("Error adding new image. Please, try again", exc)
            return None
        if record is None:
            return None
        self.items.append(record)
        # A new image lands at the end, which breaks any active sort
        self.sort_state = SortState()
        self._emit()
        return record

    async def delete(self, record_id: str) -> None:
        if not any(record.id == record_id for record in self.items):
            return
        try:
            await self.service.delete({record_id})
        except GalleryError as exc:
            await self._resync_after_delete()
            self._fail("Error deleting the image. Please, try again", exc)
            return
        self.items = [record for record in self.items if record.id != record_id]
        self.selection.discard(record_id)
        self._emit()

    async def delete_selected(self) -> None:
        ids = set(self.selection)
        if not ids:
            return
        try:
            await self.service.delete(ids)
        except GalleryError as exc:
            await self._resync_after_delete()
            self._fail("Error deleting the image. Please, try again", exc)
            return
        self.items = [record for record in self.items if record.id not in ids]
        self.selection.clear()
        self.mode = GalleryMode.browsing
        self._emit()

    async def set_sort(self, key: SortKey, ascending: bool = True) -> None:
        self.sort_state = SortState(SortKey(key), ascending)
        if self.sort_state.key is SortKey.manual:
            return
        previous = self.items
        try:
            self.items = await self.service.apply_sort(previous, self.sort_state)
        except GalleryError as exc:
            self.items = previous
            self._fail("Error sorting images. Please, try again", exc)
            return
        self._emit()

    async def move(self, record_id: str, to_index: int) -> bool:
        """Manual drag-reorder. Suppressed (returns False) while selecting."""
        if self.mode is GalleryMode.selecting:
            logger.debug("Ignoring reorder of %s while selecting", record_id)
            return False
        try:
            ordered, request = move_record(self.items, record_id, to_index)
        except KeyError:
            return False
        previous = self.items
        self.items = ordered
        self.sort_state = SortState()
        try:
            await self.service.update_ordering(request)
        except GalleryError as exc:
            self.items = previous
            self._fail("Error reordering images. Please, try again", exc)
            return False
        self._emit()
        return True

    # ------------------------------------------------------------------

    async def _resync_after_delete(self) -> None:
        """Reload items after a failed delete, which may have removed some rows.

        Publishes the reloaded list when it differs from the current items.
        Keeps the current items when the reload fails too.
        """
        try:
            stored = await self.service.load_all()
        except GalleryError as exc:
            logger.warning("Cannot reload images after failed delete: %s", exc)
            return
        if [r.id for r in stored] == [r.id for r in self.items]:
            return
        self.items = stored
        self.selection &= {record.id for record in stored}
        if not self.selection:
            self.mode = GalleryMode.browsing
        self._emit()

    def _emit(self) -> None:
        if self.items:
            self.feed.publish(ListUpdated(list(self.items)))
        else:
            self.feed.publish(EmptyList())

    def _fail(self, message: str, exc: Exception) -> None:
        logger.error("%s (%s)", message, exc)
        self.feed.publish(OperationFailed(message))
