"""blobby-gcs: a neutral blob storage interface over Google Cloud Storage."""

from .config import AdapterConfig
from .exceptions import (
    ConfigurationError,
    FetchError,
    HTTPRequestError,
    ResponseParseError,
    StorageError,
    StoreError,
)
from .storage import (
    BlobStorageAdapter,
    BlobUpload,
    FetchedObject,
    FileInfo,
    GCSBlobAdapter,
    ListPage,
)

__version__ = "0.3.0"

__all__ = [
    "AdapterConfig",
    "BlobStorageAdapter",
    "BlobUpload",
    "ConfigurationError",
    "FetchError",
    "FetchedObject",
    "FileInfo",
    "GCSBlobAdapter",
    "HTTPRequestError",
    "ListPage",
    "ResponseParseError",
    "StorageError",
    "StoreError",
]
