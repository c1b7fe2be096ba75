"""
Exception hierarchy for blobby-gcs.

Provider errors (google.api_core.exceptions) and transport errors
(requests.RequestException) are not wrapped unless an operation says so.
"""

from typing import Optional


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class ConfigurationError(StorageError, ValueError):
    """Raised when a required adapter option is missing or invalid."""

    pass


class HTTPRequestError(StorageError):
    """Raised when an anonymous request to the public endpoint fails."""

    def __init__(self, status_code: int, path: str):
        self.status_code = status_code
        self.path = path
        super().__init__(f"http.request.error: {status_code} for {path}")


class FetchError(StorageError):
    """Raised when an authenticated download does not complete with success."""

    def __init__(self, bucket: str, key: str, status_code: Optional[int] = None):
        self.bucket = bucket
        self.key = key
        self.status_code = status_code
        super().__init__(f"gcp.storage.fetch.error: for {bucket}/{key}")


class StoreError(StorageError):
    """Raised when an upload does not complete with success."""

    def __init__(self, bucket: str, key: str, status_code: Optional[int] = None, reason: str = ""):
        self.bucket = bucket
        self.key = key
        self.status_code = status_code
        message = f"gcp.storage.store.error: for {bucket}/{key}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ResponseParseError(StoreError):
    """Raised when a successful upload returns a body that is not an object resource."""

    def __init__(self, bucket: str, key: str):
        super().__init__(bucket, key, status_code=200, reason="response body is not valid JSON")
