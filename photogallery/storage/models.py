"""SQLAlchemy model for saved images."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from photogallery.types import ImageRecord, ensure_utc


class Base(DeclarativeBase):
    pass


class SavedImage(Base):
    """One downloaded image. The bytes live on disk at ``file_path``.

    All columns are write-once except ``rank``.
    """

    __tablename__ = "saved_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    file_path: Mapped[str] = mapped_column(String(512), unique=True)
    author: Mapped[str | None] = mapped_column(String(255))
    rank: Mapped[int] = mapped_column(Integer, index=True)
    download_duration: Mapped[float | None] = mapped_column(Float)
    acquired_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    source_list_url: Mapped[str | None] = mapped_column(Text)
    source_download_url: Mapped[str | None] = mapped_column(Text)
    remote_id: Mapped[str | None] = mapped_column(String(64))

    def to_record(self) -> ImageRecord:
        return ImageRecord(
            id=self.id,
            file_path=self.file_path,
            rank=self.rank,
            author=self.author,
            download_duration=self.download_duration,
            acquired_at=ensure_utc(self.acquired_at),
            source_list_url=self.source_list_url,
            source_download_url=self.source_download_url,
            remote_id=self.remote_id,
        )

    def __repr__(self) -> str:
        return f"<SavedImage(id={self.id}, rank={self.rank}, author={self.author!r})>"
