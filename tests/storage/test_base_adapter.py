"""
Unit tests for the neutral records and the BlobStorageAdapter contract.

Run with:
    pytest tests/storage/test_base_adapter.py -v
"""

import dataclasses
from datetime import datetime, timezone
from typing import List

import pytest

from blobby_gcs.storage.base_adapter import (
    BlobStorageAdapter,
    FetchedObject,
    FileInfo,
    ListPage,
)


class TestFileInfo:
    """Test the neutral metadata record."""

    def test_to_dict_omits_absent_fields(self):
        """Test only populated fields are rendered."""
        info = FileInfo(key="a.txt", size=0)

        assert info.to_dict() == {"Key": "a.txt", "Size": 0}

    def test_to_dict_full(self):
        """Test the neutral vocabulary."""
        modified = datetime(2017, 7, 24, tzinfo=timezone.utc)
        info = FileInfo(
            key="a.txt",
            etag="X",
            size=1,
            last_modified=modified,
            cache_control="no-cache",
            content_type="text/plain",
            custom_headers={"k": "v"},
        )

        assert info.to_dict() == {
            "Key": "a.txt",
            "ETag": "X",
            "Size": 1,
            "LastModified": modified,
            "CacheControl": "no-cache",
            "ContentType": "text/plain",
            "CustomHeaders": {"k": "v"},
        }

    def test_from_dict(self):
        """Test neutral dicts build records and empty values are dropped."""
        info = FileInfo.from_dict({
            "Key": "a.txt",
            "ETag": "",
            "AccessControl": "public",
            "CustomHeaders": {"k": "v"},
            "Unknown": "ignored",
        })

        assert info == FileInfo(key="a.txt", access_control="public", custom_headers={"k": "v"})

    def test_immutable(self):
        """Test records cannot be reassigned after construction."""
        info = FileInfo(key="a.txt")

        with pytest.raises(dataclasses.FrozenInstanceError):
            info.key = "b.txt"


class TestFetchedObject:
    """Test fetch results."""

    def test_unpacks(self):
        """Test results unpack into info and content."""
        info, content = FetchedObject(FileInfo(key="a"), b"data")

        assert info.key == "a"
        assert content == b"data"


class InMemoryAdapter(BlobStorageAdapter):
    """Adapter serving pre-built pages, for exercising iter_files."""

    def __init__(self, pages: List[ListPage]):
        self.pages = pages
        self.requested = []

    async def fetch_info(self, file_key, *, acl=None):
        raise NotImplementedError

    async def fetch(self, file_key, *, acl=None):
        raise NotImplementedError

    async def store(self, file_key, upload):
        raise NotImplementedError

    async def set_acl(self, file_key, acl):
        raise NotImplementedError

    async def remove(self, file_key):
        raise NotImplementedError

    async def remove_directory(self, prefix):
        raise NotImplementedError

    async def list(self, dir, *, last_key=None, max_keys=None, delimiter=None, deep_query=False):
        self.requested.append(last_key)
        return self.pages[len(self.requested) - 1]


class TestIterFiles:
    """Test pagination over the abstract interface."""

    @pytest.mark.asyncio
    async def test_walks_all_pages(self):
        """Test every page is requested with the previous token."""
        adapter = InMemoryAdapter([
            ListPage(files=[FileInfo(key="a")], last_key="t1"),
            ListPage(files=[FileInfo(key="b"), FileInfo(key="c")], last_key="t2"),
            ListPage(files=[]),
        ])

        keys = [info.key async for info in adapter.iter_files("")]

        assert keys == ["a", "b", "c"]
        assert adapter.requested == [None, "t1", "t2"]

    @pytest.mark.asyncio
    async def test_starts_from_token(self):
        """Test iteration can resume from a continuation token."""
        adapter = InMemoryAdapter([ListPage(files=[FileInfo(key="z")])])

        keys = [info.key async for info in adapter.iter_files("", last_key="resume")]

        assert keys == ["z"]
        assert adapter.requested == ["resume"]

    def test_abstract(self):
        """Test the interface cannot be instantiated directly."""
        with pytest.raises(TypeError):
            BlobStorageAdapter()
