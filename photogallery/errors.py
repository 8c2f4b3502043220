"""Error types for gallery operations."""

from __future__ import annotations


class GalleryError(Exception):
    """Base exception for gallery operations."""


class NetworkError(GalleryError):
    """Raised when a remote call fails (bad URL, non-200 status, transport failure)."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"[{url}] {message}")


class DecodeError(GalleryError):
    """Raised when a listing response cannot be decoded."""


class StorageError(GalleryError):
    """Raised on disk or database failures."""


class NotFoundError(GalleryError):
    """Raised when a record's backing file is missing."""

    def __init__(self, message: str, ids: list[str] | None = None) -> None:
        self.ids = ids or []
        super().__init__(message)


class OperationCancelledError(GalleryError):
    """Raised when an operation is abandoned through its cancellation token."""
