"""Cooperative cancellation flag for multi-step operations."""

from __future__ import annotations

import threading

from photogallery.errors import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation flag.

    Operations poll the token between steps; a step that has already
    started (e.g. a network roundtrip) is never interrupted.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, step: str = "operation") -> None:
        """Raise OperationCancelledError if ``cancel`` was called."""
        if self._event.is_set():
            raise OperationCancelledError(f"Cancelled before {step}")
