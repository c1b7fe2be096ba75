"""
Unit tests for AdapterConfig.

Run with:
    pytest tests/test_config.py -v
"""

import pytest

from blobby_gcs.config import DEFAULT_PUBLIC_HOST, AdapterConfig
from blobby_gcs.exceptions import ConfigurationError, StorageError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the config reads."""
    for name in (
        "GCP_PROJECT_ID",
        "GCS_BUCKET_NAME",
        "BLOBBY_PUBLIC_HOST",
        "BLOBBY_PUBLIC_SCHEME",
        "BLOBBY_HTTP_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestValidation:
    """Test required option checks."""

    def test_valid(self):
        """Test a complete config validates and returns itself."""
        config = AdapterConfig(project="p", bucket="b")

        assert config.validate() is config

    def test_missing_project(self):
        """Test a missing project is a configuration error."""
        with pytest.raises(ConfigurationError, match="options.project is required"):
            AdapterConfig(bucket="b").validate()

    def test_missing_bucket(self):
        """Test an empty bucket is a configuration error."""
        with pytest.raises(ConfigurationError, match="options.bucket is required"):
            AdapterConfig(project="p", bucket="").validate()

    def test_bad_timeout(self):
        """Test non-positive timeouts are rejected."""
        with pytest.raises(ConfigurationError):
            AdapterConfig(project="p", bucket="b", http_timeout=0).validate()

    def test_error_hierarchy(self):
        """Test configuration errors are both storage errors and ValueErrors."""
        error = ConfigurationError("x")

        assert isinstance(error, StorageError)
        assert isinstance(error, ValueError)


class TestFromEnv:
    """Test environment loading."""

    def test_reads_environment(self, clean_env):
        """Test every variable is picked up."""
        clean_env.setenv("GCP_PROJECT_ID", "env-project")
        clean_env.setenv("GCS_BUCKET_NAME", "env-bucket")
        clean_env.setenv("BLOBBY_PUBLIC_HOST", "localhost:4443")
        clean_env.setenv("BLOBBY_PUBLIC_SCHEME", "https")
        clean_env.setenv("BLOBBY_HTTP_TIMEOUT", "2.5")

        config = AdapterConfig.from_env()

        assert config == AdapterConfig(
            project="env-project",
            bucket="env-bucket",
            public_host="localhost:4443",
            public_scheme="https",
            http_timeout=2.5,
        )

    def test_defaults(self, clean_env):
        """Test defaults when only required values are set."""
        config = AdapterConfig.from_env(project="p", bucket="b")

        assert config.public_host == DEFAULT_PUBLIC_HOST
        assert config.public_scheme == "http"
        assert config.http_timeout is None

    def test_arguments_win(self, clean_env):
        """Test explicit arguments override the environment."""
        clean_env.setenv("GCP_PROJECT_ID", "env-project")
        clean_env.setenv("GCS_BUCKET_NAME", "env-bucket")

        config = AdapterConfig.from_env(project="arg-project", bucket="arg-bucket")

        assert config.project == "arg-project"
        assert config.bucket == "arg-bucket"

    def test_missing_values_are_not_validated_early(self, clean_env):
        """Test loading succeeds and validation reports the gap."""
        config = AdapterConfig.from_env()

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_bad_timeout(self, clean_env):
        """Test a non-numeric timeout is a configuration error."""
        clean_env.setenv("BLOBBY_HTTP_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="BLOBBY_HTTP_TIMEOUT"):
            AdapterConfig.from_env(project="p", bucket="b")
