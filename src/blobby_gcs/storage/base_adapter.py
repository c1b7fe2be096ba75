"""
Base Storage Adapter Interface for blobby-gcs.

Defines the neutral (S3-like) records every adapter returns and the abstract
interface the GCS adapter implements, so callers can swap storage backends
without touching call sites.

Neutral vocabulary:
- Key, ETag, Size, LastModified, CacheControl, ContentType,
  ContentEncoding, ContentLanguage, AccessControl, CustomHeaders
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, NamedTuple, Optional

from ..exceptions import (  # noqa: F401
    ConfigurationError,
    FetchError,
    HTTPRequestError,
    ResponseParseError,
    StorageError,
    StoreError,
)


# Neutral field name -> FileInfo attribute
NEUTRAL_FIELDS = {
    "Key": "key",
    "ETag": "etag",
    "Size": "size",
    "LastModified": "last_modified",
    "CacheControl": "cache_control",
    "ContentType": "content_type",
    "ContentEncoding": "content_encoding",
    "ContentLanguage": "content_language",
    "AccessControl": "access_control",
}


@dataclass(frozen=True)
class FileInfo:
    """Neutral metadata for a stored object.

    Absent fields are None; custom_headers is always a dict.
    """

    key: Optional[str] = None
    etag: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    cache_control: Optional[str] = None
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    content_language: Optional[str] = None
    access_control: Optional[str] = None
    custom_headers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Render the neutral vocabulary, omitting absent fields."""
        result = {}
        for neutral, attr in NEUTRAL_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                result[neutral] = value
        if self.custom_headers:
            result["CustomHeaders"] = dict(self.custom_headers)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileInfo":
        """Build a FileInfo from neutral field names; unknown names are ignored."""
        kwargs = {attr: data[neutral] for neutral, attr in NEUTRAL_FIELDS.items() if data.get(neutral)}
        custom = data.get("CustomHeaders")
        if custom:
            kwargs["custom_headers"] = dict(custom)
        return cls(**kwargs)


@dataclass
class ListPage:
    """One page of a listing call."""

    files: List[FileInfo] = field(default_factory=list)
    dirs: List[str] = field(default_factory=list)
    last_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.last_key is not None


class FetchedObject(NamedTuple):
    """Result of a content fetch: neutral metadata plus the full payload."""

    info: FileInfo
    content: bytes


@dataclass
class BlobUpload:
    """Input to store(): payload plus neutral write headers.

    headers uses the neutral vocabulary: CacheControl, ContentType,
    AccessControl ("public..." / "private...") and CustomHeaders.
    """

    buffer: bytes
    headers: Dict[str, Any] = field(default_factory=dict)


class BlobStorageAdapter(ABC):
    """
    Abstract base class for blob storage adapters.

    Design Principles:
    - Async I/O for all operations (non-blocking for the caller)
    - Neutral records in, neutral records out
    - Provider errors propagate unless the operation documents a wrapper

    Key Format:
    - Object keys: "images/logo.png"
    - Directory prefixes: "images/" (trailing slash), "" for the bucket root
    """

    @abstractmethod
    async def fetch_info(self, file_key: str, *, acl: Optional[str] = None) -> FileInfo:
        """
        Fetch object metadata without content.

        Args:
            file_key: Object key
            acl: "public" reads through the anonymous public endpoint

        Returns:
            FileInfo for the object
        """
        pass

    @abstractmethod
    async def fetch(self, file_key: str, *, acl: Optional[str] = None) -> FetchedObject:
        """
        Fetch object metadata and content.

        Raises:
            FetchError: If an authenticated download fails
            HTTPRequestError: If the public endpoint answers with non-200
        """
        pass

    @abstractmethod
    async def store(self, file_key: str, upload: BlobUpload) -> FileInfo:
        """
        Write an object and return its metadata as stored.

        Raises:
            StoreError: If the upload fails or its response cannot be parsed
        """
        pass

    @abstractmethod
    async def set_acl(self, file_key: str, acl: str) -> None:
        """Make an object public ("public...") or private (anything else)."""
        pass

    @abstractmethod
    async def remove(self, file_key: str) -> None:
        """Delete a single object."""
        pass

    @abstractmethod
    async def remove_directory(self, prefix: str) -> None:
        """Delete every object under a directory prefix."""
        pass

    @abstractmethod
    async def list(
        self,
        dir: str,
        *,
        last_key: Optional[str] = None,
        max_keys: Optional[int] = None,
        delimiter: Optional[str] = None,
        deep_query: bool = False,
    ) -> ListPage:
        """
        List one page of objects under a directory prefix.

        Args:
            dir: Directory to query ("" for the bucket root)
            last_key: Continuation token from a previous page
            max_keys: Maximum number of objects to return
            delimiter: Overrides the delimiter implied by deep_query
            deep_query: List the whole key space under dir, not one level

        Returns:
            ListPage with files, dirs and the next continuation token
        """
        pass

    async def iter_files(self, dir: str, **list_options: Any) -> AsyncIterator[FileInfo]:
        """
        Iterate over every object under dir, following continuation tokens.

        Yields:
            FileInfo records in listing order
        """
        last_key = list_options.pop("last_key", None)
        while True:
            page = await self.list(dir, last_key=last_key, **list_options)
            for info in page.files:
                yield info
            if not page.has_more:
                return
            last_key = page.last_key
