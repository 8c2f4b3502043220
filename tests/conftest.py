"""Shared test fixtures for photogallery."""

from __future__ import annotations

import random

import pytest

from photogallery.config import RemoteConfig, StorageConfig
from photogallery.service import AcquisitionService
from photogallery.storage.store import SqlImageStore
from tests.helpers import FakeDownloader, FakeListFetcher, MemoryImageStore


@pytest.fixture
def storage_config(tmp_path) -> StorageConfig:
    return StorageConfig(root_dir=tmp_path / "gallery")


@pytest.fixture
def sql_store(storage_config):
    store = SqlImageStore(storage_config)
    yield store
    store.close()


@pytest.fixture
def list_fetcher() -> FakeListFetcher:
    return FakeListFetcher()


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def memory_store() -> MemoryImageStore:
    return MemoryImageStore()


@pytest.fixture
def remote_config() -> RemoteConfig:
    return RemoteConfig(list_url="https://example.test/v2/list", page=1, page_size=30)


@pytest.fixture
def service(list_fetcher, downloader, memory_store, remote_config) -> AcquisitionService:
    return AcquisitionService(
        list_fetcher=list_fetcher,
        downloader=downloader,
        store=memory_store,
        config=remote_config,
        rng=random.Random(0),
    )

