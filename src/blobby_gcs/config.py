"""
Adapter configuration.

Options come from explicit arguments first and the environment second:
- GCP_PROJECT_ID: Google Cloud project (required)
- GCS_BUCKET_NAME: target bucket (required)
- BLOBBY_PUBLIC_HOST: host serving public objects (default: storage.googleapis.com)
- BLOBBY_PUBLIC_SCHEME: scheme for public reads (default: http)
- BLOBBY_HTTP_TIMEOUT: seconds before a public read gives up (default: no timeout)

Credentials are not configured here; the storage client uses
Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS or
Workload Identity).
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_HOST = "storage.googleapis.com"
DEFAULT_PUBLIC_SCHEME = "http"


@dataclass
class AdapterConfig:
    """Options for a GCS blob adapter bound to one bucket."""

    project: Optional[str] = None
    bucket: Optional[str] = None
    public_host: str = DEFAULT_PUBLIC_HOST
    public_scheme: str = DEFAULT_PUBLIC_SCHEME
    http_timeout: Optional[float] = None

    def validate(self) -> "AdapterConfig":
        """
        Check required options.

        Raises:
            ConfigurationError: If project or bucket is missing
        """
        if not self.project:
            raise ConfigurationError("options.project is required")
        if not self.bucket:
            raise ConfigurationError("options.bucket is required")
        if self.http_timeout is not None and self.http_timeout <= 0:
            raise ConfigurationError("options.http_timeout must be positive")
        return self

    @classmethod
    def from_env(
        cls,
        project: Optional[str] = None,
        bucket: Optional[str] = None,
    ) -> "AdapterConfig":
        """Build a config from the environment; explicit arguments win."""
        timeout = os.getenv("BLOBBY_HTTP_TIMEOUT")
        try:
            http_timeout = float(timeout) if timeout else None
        except ValueError:
            raise ConfigurationError(f"BLOBBY_HTTP_TIMEOUT is not a number: {timeout!r}")

        config = cls(
            project=project or os.getenv("GCP_PROJECT_ID"),
            bucket=bucket or os.getenv("GCS_BUCKET_NAME"),
            public_host=os.getenv("BLOBBY_PUBLIC_HOST", DEFAULT_PUBLIC_HOST),
            public_scheme=os.getenv("BLOBBY_PUBLIC_SCHEME", DEFAULT_PUBLIC_SCHEME),
            http_timeout=http_timeout,
        )
        logger.debug(f"Loaded adapter config: project={config.project}, bucket={config.bucket}")
        return config
