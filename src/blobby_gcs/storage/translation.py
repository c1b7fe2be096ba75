"""
Field translation between Google Cloud Storage and the neutral vocabulary.

Three directions are supported:
- response headers (public HTTP endpoint) -> FileInfo
- object resource metadata (JSON API / client) -> FileInfo
- neutral write headers -> GCS write options

All functions here are pure; none of them perform I/O.

Object resource example:
    {
        "name": "test.txt",
        "bucket": "blobby-cache-us",
        "contentType": "text/plain",
        "timeCreated": "2017-07-24T23:14:54.880Z",
        "size": "13",
        "cacheControl": "public, max-age=36000",
        "metadata": {"custom-key": "custom-value"},
        "etag": "CP+J6I+Go9UCEAQ="
    }
"""

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .base_adapter import NEUTRAL_FIELDS, FileInfo

logger = logging.getLogger(__name__)

# Lower-cased response header -> neutral field
HEADERS_TO_INFO = MappingProxyType({
    "cache-control": "CacheControl",
    "content-encoding": "ContentEncoding",
    "content-language": "ContentLanguage",
    "content-type": "ContentType",
    "last-modified": "LastModified",
    "content-length": "Size",
    "etag": "ETag",
})

# Object resource field -> neutral field
METADATA_TO_INFO = MappingProxyType({
    "cacheControl": "CacheControl",
    "contentEncoding": "ContentEncoding",
    "contentLanguage": "ContentLanguage",
    "contentType": "ContentType",
    "etag": "ETag",
    "name": "Key",
    "size": "Size",
    "timeCreated": "LastModified",
})

# Neutral write header -> object resource field
INFO_TO_OPTIONS = MappingProxyType({
    "CacheControl": "cacheControl",
    "ContentType": "contentType",
})

CUSTOM_HEADER_PATTERN = re.compile(r"^x-goog-meta-(.+)$", re.IGNORECASE)

PUBLIC_READ_ACL = "publicRead"
PRIVATE_ACL = "private"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 or RFC 1123 timestamp; returns None when unparseable."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_size(value: Any) -> Optional[int]:
    """Parse a byte count; returns None for anything that is not a non-negative integer."""
    try:
        size = int(value)
    except (TypeError, ValueError):
        return None
    return size if size >= 0 else None


def _build_info(fields: Dict[str, Any], custom_headers: Dict[str, str]) -> FileInfo:
    """Convert neutral-named raw values into a FileInfo, parsing and dropping as needed."""
    kwargs = {}
    for neutral, value in fields.items():
        if neutral == "LastModified":
            value = parse_timestamp(value)
        elif neutral == "Size":
            value = parse_size(value)
        if value is None:
            logger.debug(f"Dropping unparseable {neutral} value: {fields[neutral]!r}")
            continue
        kwargs[NEUTRAL_FIELDS[neutral]] = value
    return FileInfo(custom_headers=custom_headers, **kwargs)


def info_from_headers(headers: Mapping[str, Any]) -> FileInfo:
    """
    Translate HTTP response headers into a FileInfo.

    Args:
        headers: Response headers (any casing)

    Returns:
        FileInfo with recognised headers mapped and x-goog-meta-* headers
        collected into custom_headers
    """
    fields = {}
    custom_headers = {}

    for name, value in headers.items():
        neutral = HEADERS_TO_INFO.get(name.lower())
        if not neutral:
            custom = CUSTOM_HEADER_PATTERN.match(name)
            if custom:
                custom_headers[custom.group(1)] = value
            continue
        if not value:
            continue
        fields[neutral] = value

    return _build_info(fields, custom_headers)


def info_from_metadata(meta: Mapping[str, Any]) -> FileInfo:
    """
    Translate a GCS object resource into a FileInfo.

    Args:
        meta: Object resource fields (camelCase, as returned by the JSON API)

    Returns:
        FileInfo; the nested "metadata" map becomes custom_headers
    """
    fields = {}
    for name, value in meta.items():
        neutral = METADATA_TO_INFO.get(name)
        if not neutral or not value:
            continue
        fields[neutral] = value

    custom_headers = dict(meta.get("metadata") or {})
    return _build_info(fields, custom_headers)


def options_from_info(headers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Derive GCS write options from neutral write headers.

    Returns:
        {"metadata": {...resource fields...}, "predefined_acl": str or None}
    """
    headers = headers or {}
    metadata = {}
    for neutral, resource_field in INFO_TO_OPTIONS.items():
        value = headers.get(neutral)
        if value:
            metadata[resource_field] = value

    custom_headers = headers.get("CustomHeaders")
    if custom_headers:
        metadata["metadata"] = dict(custom_headers)

    predefined_acl = None
    access_control = headers.get("AccessControl") or ""
    if access_control.startswith("public"):
        predefined_acl = PUBLIC_READ_ACL
    elif access_control.startswith("private"):
        predefined_acl = PRIVATE_ACL

    return {"metadata": metadata, "predefined_acl": predefined_acl}


def blob_metadata(blob: Any) -> Dict[str, Any]:
    """
    Build an object-resource shaped dict from a Blob's public properties.

    Only properties the client has populated are included. Size goes back
    to the string form the JSON API uses, so an empty object keeps "0".
    """
    meta = {
        "name": blob.name,
        "etag": blob.etag,
        "size": None if blob.size is None else str(blob.size),
        "cacheControl": blob.cache_control,
        "contentEncoding": blob.content_encoding,
        "contentLanguage": blob.content_language,
        "contentType": blob.content_type,
        "timeCreated": blob.time_created,
        "metadata": blob.metadata,
    }
    return {name: value for name, value in meta.items() if value is not None}


def normalize_prefix(dir: str) -> str:
    """Make a directory prefix end with "/" unless it is the bucket root."""
    if not dir or dir.endswith("/"):
        return dir
    return f"{dir}/"


def resolve_delimiter(delimiter: Optional[str] = None, deep_query: bool = False) -> str:
    """Explicit delimiter wins; deep queries are flat; otherwise list one level."""
    if isinstance(delimiter, str):
        return delimiter
    return "" if deep_query else "/"


def relative_dirs(prefixes: Optional[Iterable[str]], prefix: str, delimiter: str) -> List[str]:
    """Turn provider common prefixes into directory names relative to prefix."""
    dirs = []
    for common in sorted(prefixes or ()):
        name = common[len(prefix):] if common.startswith(prefix) else common
        if delimiter and name.endswith(delimiter):
            name = name[: -len(delimiter)]
        if name:
            dirs.append(name)
    return dirs
