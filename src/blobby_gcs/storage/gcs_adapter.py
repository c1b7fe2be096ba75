"""
Google Cloud Storage Adapter for blobby-gcs.

Implements BlobStorageAdapter for one GCS bucket:
- Authenticated reads, writes, deletes and listings through google-cloud-storage
- Anonymous reads of public objects through the public HTTP endpoint
- Translation of GCS metadata into the neutral (S3-like) vocabulary

The client library is synchronous; every call runs in a worker thread so
the event loop is never blocked and each operation resolves exactly once.
"""

import asyncio
import dataclasses
import logging
import mimetypes
from typing import Any, List, Optional, Tuple

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError

from ..config import AdapterConfig
from .base_adapter import (
    BlobStorageAdapter,
    BlobUpload,
    FetchedObject,
    FetchError,
    FileInfo,
    ListPage,
    ResponseParseError,
    StoreError,
)
from .public_http import PublicObjectClient
from .translation import (
    blob_metadata,
    info_from_headers,
    info_from_metadata,
    normalize_prefix,
    options_from_info,
    relative_dirs,
    resolve_delimiter,
)

logger = logging.getLogger(__name__)

PUBLIC_ACL = "public"


class GCSBlobAdapter(BlobStorageAdapter):
    """
    Google Cloud Storage adapter bound to a single bucket.

    Usage:
        adapter = GCSBlobAdapter(AdapterConfig(project="my-gcp-project", bucket="blobby-cache-us"))

        # Write with headers in the neutral vocabulary
        info = await adapter.store("docs/readme.txt", BlobUpload(
            buffer=b"hello world",
            headers={"ContentType": "text/plain", "CustomHeaders": {"owner": "ops"}},
        ))

        # Read back, privately or through the public endpoint
        info, content = await adapter.fetch("docs/readme.txt")
        info = await adapter.fetch_info("docs/readme.txt", acl="public")

        # Page through a directory
        page = await adapter.list("docs", max_keys=100)
        page = await adapter.list("docs", max_keys=100, last_key=page.last_key)

    Security:
    - Application Default Credentials (Workload Identity or
      GOOGLE_APPLICATION_CREDENTIALS); nothing is configured here
    - Public reads are anonymous and only succeed for publicly readable objects
    """

    def __init__(self, config: AdapterConfig, client: Optional[storage.Client] = None):
        """
        Initialize the adapter.

        Args:
            config: Adapter options; project and bucket are required
            client: Pre-built storage client (defaults to one for config.project)

        Raises:
            ConfigurationError: If project or bucket is missing
        """
        self.config = config.validate()
        self.project_id = config.project
        self.bucket_name = config.bucket

        self.client = client or storage.Client(project=self.project_id)
        self.bucket = self.client.bucket(self.bucket_name)
        self.public = PublicObjectClient(
            self.bucket_name,
            host=config.public_host,
            scheme=config.public_scheme,
            timeout=config.http_timeout,
        )

        logger.info(f"Initialized GCS adapter: project={self.project_id}, bucket={self.bucket_name}")

    @classmethod
    def from_env(cls, project: Optional[str] = None, bucket: Optional[str] = None) -> "GCSBlobAdapter":
        """Build an adapter from GCP_PROJECT_ID / GCS_BUCKET_NAME and friends."""
        return cls(AdapterConfig.from_env(project=project, bucket=bucket))

    def public_url(self, file_key: str) -> str:
        """Anonymous URL of an object; only readable when the object is public."""
        return self.public.object_url(file_key)

    def _full_name(self, file_key: str) -> str:
        return f"{self.bucket_name}/{file_key}"

    async def fetch_info(self, file_key: str, *, acl: Optional[str] = None) -> FileInfo:
        """
        Fetch object metadata without content.

        Public objects are read with an anonymous HEAD request; everything
        else goes through the authenticated client.
        """
        if acl == PUBLIC_ACL:
            headers = await asyncio.to_thread(self.public.head, file_key)
            return info_from_headers(headers)

        blob = self.bucket.blob(file_key)
        try:
            await asyncio.to_thread(blob.reload)
        except GoogleCloudError as e:
            logger.error(f"Failed to get metadata for {self._full_name(file_key)}: {e}")
            raise

        logger.debug(f"Fetched metadata for {self._full_name(file_key)}")
        return info_from_metadata(blob_metadata(blob))

    def _download(self, blob: storage.Blob) -> bytes:
        content = blob.download_as_bytes()
        # The download only carries part of the resource (no timestamps or
        # custom metadata); read the rest for the generation just downloaded.
        blob.reload(if_generation_match=blob.generation)
        return content

    async def fetch(self, file_key: str, *, acl: Optional[str] = None) -> FetchedObject:
        """
        Fetch object metadata and content.

        The whole payload is buffered in memory before returning.

        Raises:
            FetchError: If the authenticated download completes with a non-success status
            HTTPRequestError: If the public endpoint answers with non-200
        """
        if acl == PUBLIC_ACL:
            headers, content = await asyncio.to_thread(self.public.get, file_key)
            return FetchedObject(info_from_headers(headers), content)

        blob = self.bucket.blob(file_key)
        try:
            content = await asyncio.to_thread(self._download, blob)
        except GoogleCloudError as e:
            logger.error(f"Failed to download {self._full_name(file_key)}: {e}")
            raise FetchError(self.bucket_name, file_key, status_code=e.code) from e

        info = info_from_metadata(blob_metadata(blob))
        if info.size is None:
            info = dataclasses.replace(info, size=len(content))

        logger.debug(f"Downloaded {len(content)} bytes from {self._full_name(file_key)}")
        return FetchedObject(info, content)

    async def store(self, file_key: str, upload: BlobUpload) -> FileInfo:
        """
        Write an object in a single upload.

        Implementation:
        1. Derive write options from the neutral headers
        2. Apply resource fields (cache control, custom metadata) to the blob
        3. Upload the buffer with the content type and predefined ACL
        4. Translate the object resource returned by the upload

        Raises:
            StoreError: If the upload completes with a non-success status
            ResponseParseError: If the upload response is not a JSON object resource
        """
        options = options_from_info(upload.headers)
        metadata = options["metadata"]

        content_type = metadata.get("contentType")
        if not content_type:
            content_type, _ = mimetypes.guess_type(file_key)

        blob = self.bucket.blob(file_key)
        if metadata.get("cacheControl"):
            blob.cache_control = metadata["cacheControl"]
        if metadata.get("metadata"):
            blob.metadata = metadata["metadata"]

        try:
            await asyncio.to_thread(
                blob.upload_from_string,
                upload.buffer,
                content_type=content_type,
                predefined_acl=options["predefined_acl"],
            )
        except GoogleCloudError as e:
            logger.error(f"Failed to upload {self._full_name(file_key)}: {e}")
            raise StoreError(self.bucket_name, file_key, status_code=e.code) from e
        except ValueError as e:
            logger.error(f"Unreadable upload response for {self._full_name(file_key)}: {e}")
            raise ResponseParseError(self.bucket_name, file_key) from e

        logger.info(f"Stored {len(upload.buffer)} bytes at {self._full_name(file_key)}")
        return info_from_metadata(blob_metadata(blob))

    async def set_acl(self, file_key: str, acl: str) -> None:
        """Make an object public ("public...") or private (anything else)."""
        blob = self.bucket.blob(file_key)
        make_public = (acl or "").startswith("public")

        try:
            if make_public:
                await asyncio.to_thread(blob.make_public)
            else:
                await asyncio.to_thread(blob.make_private)
        except GoogleCloudError as e:
            logger.error(f"Failed to set ACL on {self._full_name(file_key)}: {e}")
            raise

        logger.info(f"Set {'public' if make_public else 'private'} ACL on {self._full_name(file_key)}")

    async def remove(self, file_key: str) -> None:
        """Delete a single object; NotFound propagates for missing keys."""
        blob = self.bucket.blob(file_key)
        try:
            await asyncio.to_thread(blob.delete)
        except GoogleCloudError as e:
            logger.error(f"Failed to delete {self._full_name(file_key)}: {e}")
            raise

        logger.info(f"Deleted file: {self._full_name(file_key)}")

    def _delete_prefix(self, prefix: str) -> int:
        blobs = list(self.client.list_blobs(self.bucket_name, prefix=prefix))
        if blobs:
            self.bucket.delete_blobs(blobs)
        return len(blobs)

    async def remove_directory(self, prefix: str) -> None:
        """
        Delete every object under a directory prefix.

        The prefix always ends with "/" unless it is the bucket root, so
        removing "logs" never touches "logs-archive/".
        """
        prefix = normalize_prefix(prefix)
        try:
            deleted = await asyncio.to_thread(self._delete_prefix, prefix)
        except GoogleCloudError as e:
            logger.error(f"Failed to delete prefix {self._full_name(prefix)}: {e}")
            raise

        logger.info(f"Deleted {deleted} files under {self._full_name(prefix)}")

    def _list_page(
        self,
        prefix: str,
        delimiter: str,
        last_key: Optional[str],
        max_keys: Optional[int],
    ) -> Tuple[List[Any], List[str], Optional[str]]:
        iterator = self.client.list_blobs(
            self.bucket_name,
            prefix=prefix,
            delimiter=delimiter or None,
            page_token=last_key,
            max_results=max_keys,
        )
        page = next(iterator.pages, None)
        if page is None:
            return [], [], None

        blobs = list(page)
        dirs = relative_dirs(getattr(page, "prefixes", ()), prefix, delimiter)
        return blobs, dirs, iterator.next_page_token

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

        Paging is left to the caller: feed ListPage.last_key back in as
        last_key to get the next page.
        """
        prefix = normalize_prefix(dir)
        delimiter = resolve_delimiter(delimiter, deep_query)

        try:
            blobs, dirs, next_token = await asyncio.to_thread(
                self._list_page, prefix, delimiter, last_key, max_keys
            )
        except GoogleCloudError as e:
            logger.error(f"Failed to list files with prefix {self._full_name(prefix)}: {e}")
            raise

        files = [info_from_metadata(blob_metadata(blob)) for blob in blobs]
        logger.debug(
            f"Listed {len(files)} files and {len(dirs)} dirs under {self._full_name(prefix)}, "
            f"more={next_token is not None}"
        )
        return ListPage(files=files, dirs=dirs, last_key=next_token or None)


# Export public API
__all__ = ["GCSBlobAdapter"]
