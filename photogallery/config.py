"""Configuration models for photogallery.

Pydantic v2 models with defaults, so no config file is required.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class RemoteConfig(BaseModel):
    """Configuration for the listing endpoint and image downloads."""

    list_url: str = Field("https://picsum.photos/v2/list", description="Paginated listing endpoint")
    page: int = Field(1, ge=1, description="Listing page to pick a random image from")
    page_size: int = Field(30, ge=1, description="Entries requested per listing page")
    timeout_seconds: float = Field(30.0, gt=0, description="Per-request timeout")
    user_agent: str = Field("photogallery/0.1", description="User-Agent header sent on every request")


class StorageConfig(BaseModel):
    """Configuration for the local blob directory and database."""

    root_dir: Path = Field(
        default_factory=lambda: Path.home() / ".photogallery",
        description="Application-private directory holding blobs and the database",
    )
    images_dirname: str = Field("images", description="Blob directory name under root_dir")
    database_name: str = Field("gallery.db", description="SQLite database file under root_dir")

    @property
    def images_dir(self) -> Path:
        return self.root_dir / self.images_dirname

    @property
    def database_path(self) -> Path:
        return self.root_dir / self.database_name


class GalleryConfig(BaseModel):
    """Top-level configuration for photogallery."""

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> GalleryConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def default(cls) -> GalleryConfig:
        """Return configuration with all defaults."""
        return cls()
