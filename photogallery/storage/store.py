"""SQLite-backed image store with blobs on disk.

Layout under ``StorageConfig.root_dir``:
    images/<id>   — one blob per record, named by the record id
    gallery.db    — one ``saved_images`` row per record

Blocking SQLAlchemy and filesystem work runs in ``asyncio.to_thread``.
Mutating calls (create, delete, update_ranks) are serialized through a
single writer lock, held until the worker thread returns even if the
caller is cancelled, and each commits in one transaction; ``list_all`` runs
unlocked and sees either the pre- or post-write state.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from photogallery.config import StorageConfig
from photogallery.errors import NotFoundError, StorageError
from photogallery.storage.models import Base, SavedImage
from photogallery.types import ImageRecord, OrderingRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_sqlite_engine(database_path: Path) -> Engine:
    """Engine usable from worker threads (``asyncio.to_thread``)."""
    return create_engine(
        f"sqlite:///{database_path}",
        connect_args={"check_same_thread": False},
    )


class SqlImageStore:
    """Persists image bytes as files and metadata through SQLAlchemy.

    Satisfies the ``ImageStore`` protocol.
    """

    def __init__(self, config: StorageConfig, engine: Engine | None = None) -> None:
        self._config = config
        self._root = config.root_dir
        try:
            config.images_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create image directory {config.images_dir}: {exc}") from exc

        self._engine = engine or create_sqlite_engine(config.database_path)
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot initialize database: {exc}") from exc
        self._sessions = sessionmaker(self._engine, expire_on_commit=False)
        self._write_lock = asyncio.Lock()

    def close(self) -> None:
        self._engine.dispose()

    def path_for(self, record: ImageRecord) -> Path:
        return self._root / record.file_path

    # ------------------------------------------------------------------
    # Async API
    # ------------------------------------------------------------------

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
        row = SavedImage(
            id=str(uuid.uuid4()),
            author=author,
            download_duration=download_duration,
            acquired_at=acquired_at,
            source_download_url=source_download_url,
            source_list_url=source_list_url,
            remote_id=remote_id,
        )
        row.file_path = f"{self._config.images_dirname}/{row.id}"
        record = await self._write(self._create_sync, row, data)
        logger.info("Saved image %s (author=%s, rank=%d)", record.id, record.author, record.rank)
        return record

    async def delete(self, ids: Iterable[str]) -> None:
        wanted = set(ids)
        if not wanted:
            return
        await self._write(self._delete_sync, wanted)

    async def list_all(self) -> list[ImageRecord]:
        return await asyncio.to_thread(self._list_sync)

    async def update_ranks(self, request: OrderingRequest) -> None:
        if not request:
            return
        await self._write(self._update_ranks_sync, dict(request))

    async def read_bytes(self, record: ImageRecord) -> bytes:
        return await asyncio.to_thread(self._read_sync, record)

    async def _write(self, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking write in a worker thread under the writer lock.

        A worker thread cannot be interrupted, so when the calling task is
        cancelled the lock stays held until the worker finishes and only
        then is the cancellation re-raised. The write itself may still
        have committed.
        """
        async with self._write_lock:
            worker = asyncio.ensure_future(asyncio.to_thread(func, *args))
            try:
                return await asyncio.shield(worker)
            except asyncio.CancelledError:
                while not worker.done():
                    try:
                        await asyncio.wait({worker})
                    except asyncio.CancelledError:
                        continue
                error = worker.exception()
                if error is not None:
                    logger.error("Write %s failed after cancellation: %s", func.__name__, error)
                else:
                    logger.warning("Write %s completed after its caller was cancelled", func.__name__)
                raise

    # ------------------------------------------------------------------
    # Blocking implementations
    # ------------------------------------------------------------------

    def _create_sync(self, row: SavedImage, data: bytes) -> ImageRecord:
        blob = self._root / row.file_path
        try:
            blob.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Cannot write image file {blob}: {exc}") from exc

        try:
            with self._sessions.begin() as session:
                max_rank = session.scalar(select(func.max(SavedImage.rank)))
                row.rank = 0 if max_rank is None else max_rank + 1
                session.add(row)
                session.flush()
                return row.to_record()
        except SQLAlchemyError as exc:
            # Insert failed after the write: drop the orphaned blob
            self._discard_blob(blob)
            raise StorageError(f"Cannot insert image record {row.id}: {exc}") from exc

    def _delete_sync(self, ids: set[str]) -> None:
        try:
            with self._sessions.begin() as session:
                rows = session.scalars(select(SavedImage).where(SavedImage.id.in_(list(ids)))).all()
                removed = [(row.id, row.file_path) for row in rows]
                for row in rows:
                    session.delete(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot delete image records: {exc}") from exc

        missing: list[str] = []
        failed: list[str] = []
        for record_id, file_path in removed:
            blob = self._root / file_path
            try:
                blob.unlink()
            except FileNotFoundError:
                logger.error("Backing file missing for deleted image %s: %s", record_id, blob)
                missing.append(record_id)
            except OSError as exc:
                logger.error("Cannot remove backing file for image %s: %s", record_id, exc)
                failed.append(record_id)

        logger.info("Deleted %d image(s)", len(removed))
        if failed:
            raise StorageError(f"Cannot remove backing files for: {', '.join(sorted(failed))}")
        if missing:
            raise NotFoundError(
                f"Backing files missing for: {', '.join(sorted(missing))}",
                ids=sorted(missing),
            )

    def _list_sync(self) -> list[ImageRecord]:
        try:
            with self._sessions() as session:
                rows = session.scalars(
                    select(SavedImage).order_by(SavedImage.rank, SavedImage.id)
                ).all()
                return [row.to_record() for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot list image records: {exc}") from exc

    def _update_ranks_sync(self, request: OrderingRequest) -> None:
        try:
            with self._sessions.begin() as session:
                rows = session.scalars(
                    select(SavedImage).where(SavedImage.id.in_(list(request)))
                ).all()
                for row in rows:
                    row.rank = request[row.id]
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot update image ranks: {exc}") from exc
        logger.debug("Updated rank of %d image(s)", len(rows))

    def _read_sync(self, record: ImageRecord) -> bytes:
        blob = self.path_for(record)
        try:
            return blob.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"Backing file missing for image {record.id}: {blob}", ids=[record.id]) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read image file {blob}: {exc}") from exc

    def _discard_blob(self, blob: Path) -> None:
        try:
            blob.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Cannot remove orphaned image file %s: %s", blob, exc)
        else:
            logger.warning("Removed orphaned image file %s", blob)
