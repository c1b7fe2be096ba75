"""
Storage package for blobby-gcs.

This package normalizes Google Cloud Storage behind a small blob interface:
- fetch_info / fetch: metadata or content, private or through the public endpoint
- store: write a buffer with neutral headers
- set_acl: public/private visibility
- remove / remove_directory: single key or whole prefix
- list: one page at a time, caller-controlled pagination

Architecture:
- BlobStorageAdapter: Abstract interface for blob backends
- GCSBlobAdapter: Google Cloud Storage implementation
- translation: Pure mapping between GCS fields and the neutral vocabulary
- PublicObjectClient: Anonymous GET/HEAD against storage.googleapis.com

Usage:
    from blobby_gcs.config import AdapterConfig

    adapter = GCSBlobAdapter(AdapterConfig(project="my-gcp-project", bucket="my-bucket"))
    info = await adapter.fetch_info("src/main.py")
    page = await adapter.list("src/")
"""

from .base_adapter import (
    BlobStorageAdapter,
    BlobUpload,
    FetchedObject,
    FileInfo,
    ListPage,
)
from .gcs_adapter import GCSBlobAdapter
from .public_http import PublicObjectClient

__all__ = [
    "BlobStorageAdapter",
    "BlobUpload",
    "FetchedObject",
    "FileInfo",
    "GCSBlobAdapter",
    "ListPage",
    "PublicObjectClient",
]
