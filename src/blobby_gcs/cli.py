#!/usr/bin/env python3
"""Command line access to a bucket through the blob adapter.

Usage:
    blobby-gcs [--project PROJECT] [--bucket BUCKET] [--json] COMMAND ...

Examples:
    # Metadata through the authenticated client
    blobby-gcs info docs/readme.txt

    # Content through the anonymous public endpoint
    blobby-gcs get docs/readme.txt --public -o readme.txt

    # Upload with headers and custom metadata
    blobby-gcs put docs/readme.txt ./readme.txt --cache-control "public, max-age=300" --meta owner=ops

    # Walk every page of a directory
    blobby-gcs ls docs --deep --all

Environment Variables:
    GCP_PROJECT_ID: Default project if --project not provided
    GCS_BUCKET_NAME: Default bucket if --bucket not provided
    GOOGLE_APPLICATION_CREDENTIALS: Path to service account key (for local testing)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import AdapterConfig
from .exceptions import ConfigurationError
from .storage import BlobUpload, FileInfo, GCSBlobAdapter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging (stdout for INFO+, stderr for ERROR+)."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    level = logging.DEBUG if verbose else logging.INFO

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(lambda record: record.levelno < logging.ERROR)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.ERROR)

    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(level)


def _info_to_json(info: FileInfo) -> Dict[str, Any]:
    data = info.to_dict()
    if "LastModified" in data:
        data["LastModified"] = data["LastModified"].isoformat()
    return data


def _parse_meta(pairs: Optional[List[str]]) -> Dict[str, str]:
    meta = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ConfigurationError(f"--meta expects key=value, got {pair!r}")
        meta[name] = value
    return meta


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blobby-gcs",
        description="Read, write and list objects of a Google Cloud Storage bucket",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--project", default=None, help="GCP project (overrides GCP_PROJECT_ID)")
    parser.add_argument("--bucket", default=None, help="Bucket name (overrides GCS_BUCKET_NAME)")
    parser.add_argument("--json", action="store_true", help="Output results in JSON format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Show object metadata")
    info.add_argument("key")
    info.add_argument("--public", action="store_true", help="Read through the public endpoint")

    get = commands.add_parser("get", help="Download an object")
    get.add_argument("key")
    get.add_argument("--public", action="store_true", help="Read through the public endpoint")
    get.add_argument("-o", "--output", type=Path, default=None, help="Write content to this file")

    put = commands.add_parser("put", help="Upload a file")
    put.add_argument("key")
    put.add_argument("file", type=Path)
    put.add_argument("--content-type", default=None)
    put.add_argument("--cache-control", default=None)
    put.add_argument("--acl", choices=["public", "private"], default=None)
    put.add_argument("--meta", action="append", metavar="KEY=VALUE", help="Custom metadata (repeatable)")

    rm = commands.add_parser("rm", help="Delete an object")
    rm.add_argument("key")

    rmdir = commands.add_parser("rmdir", help="Delete every object under a prefix")
    rmdir.add_argument("prefix")

    ls = commands.add_parser("ls", help="List objects under a directory")
    ls.add_argument("dir", nargs="?", default="")
    ls.add_argument("--deep", action="store_true", help="List the whole key space under dir")
    ls.add_argument("--delimiter", default=None)
    ls.add_argument("--max-keys", type=int, default=None)
    ls.add_argument("--last-key", default=None, help="Continuation token from a previous page")
    ls.add_argument("--all", action="store_true", help="Follow continuation tokens to the end")

    acl = commands.add_parser("acl", help="Make an object public or private")
    acl.add_argument("key")
    acl.add_argument("acl", choices=["public", "private"])

    return parser


async def run_command(adapter: GCSBlobAdapter, args: argparse.Namespace) -> Dict[str, Any]:
    """Execute one subcommand and return its JSON-serializable result."""
    acl = "public" if getattr(args, "public", False) else None

    if args.command == "info":
        info = await adapter.fetch_info(args.key, acl=acl)
        return {"file": _info_to_json(info)}

    if args.command == "get":
        info, content = await adapter.fetch(args.key, acl=acl)
        result = {"file": _info_to_json(info), "bytes": len(content)}
        if args.output:
            args.output.write_bytes(content)
            result["output"] = str(args.output)
        elif not args.json:
            sys.stdout.buffer.write(content)
            sys.stdout.flush()
        return result

    if args.command == "put":
        headers = {
            "ContentType": args.content_type,
            "CacheControl": args.cache_control,
            "AccessControl": args.acl,
        }
        headers = {name: value for name, value in headers.items() if value}
        meta = _parse_meta(args.meta)
        if meta:
            headers["CustomHeaders"] = meta
        info = await adapter.store(args.key, BlobUpload(buffer=args.file.read_bytes(), headers=headers))
        return {"file": _info_to_json(info)}

    if args.command == "rm":
        await adapter.remove(args.key)
        return {"removed": args.key}

    if args.command == "rmdir":
        await adapter.remove_directory(args.prefix)
        return {"removed_prefix": args.prefix}

    if args.command == "acl":
        await adapter.set_acl(args.key, args.acl)
        return {"key": args.key, "acl": args.acl}

    list_options = {
        "max_keys": args.max_keys,
        "delimiter": args.delimiter,
        "deep_query": args.deep,
    }
    if args.all:
        files: List[FileInfo] = []
        dirs: List[str] = []
        last_key = args.last_key
        while True:
            page = await adapter.list(args.dir, last_key=last_key, **list_options)
            files.extend(page.files)
            dirs += [name for name in page.dirs if name not in dirs]
            if not page.has_more:
                break
            last_key = page.last_key
        return {"files": [_info_to_json(info) for info in files], "dirs": dirs, "last_key": None}

    page = await adapter.list(args.dir, last_key=args.last_key, **list_options)
    return {
        "files": [_info_to_json(info) for info in page.files],
        "dirs": page.dirs,
        "last_key": page.last_key,
    }


def _print_human(command: str, result: Dict[str, Any]) -> None:
    if "files" in result:
        for entry in result["files"]:
            print(f"{entry.get('Size', ''):>12}  {entry.get('LastModified', ''):<32}  {entry.get('Key', '')}")
        for name in result["dirs"]:
            print(f"{'DIR':>12}  {'':<32}  {name}/")
        if result["last_key"]:
            print(f"\nMore results: --last-key {result['last_key']}")
    elif "file" in result:
        if command == "get" and "output" not in result:
            return
        for name, value in result["file"].items():
            print(f"{name}: {value}")
    else:
        print(", ".join(f"{name}={value}" for name, value in result.items()))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = AdapterConfig.from_env(project=args.project, bucket=args.bucket)
        adapter = GCSBlobAdapter(config)
        result = asyncio.run(run_command(adapter, args))

    except ConfigurationError as e:
        logger.error(f"Configuration error: {str(e)}")
        if args.json:
            print(json.dumps({"status": "error", "error_type": "configuration", "message": str(e)}, indent=2))
        else:
            print(f"\nERROR: {str(e)}", file=sys.stderr)
            print("\nSet GCP_PROJECT_ID / GCS_BUCKET_NAME or use --project / --bucket.", file=sys.stderr)
        return 1

    except Exception as e:
        logger.error(f"Command {args.command} failed: {str(e)}", exc_info=args.verbose)
        if args.json:
            print(json.dumps({"status": "error", "error_type": "runtime", "message": str(e)}, indent=2))
        else:
            print(f"\nFATAL ERROR: {str(e)}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps({"status": "success", "command": args.command, "result": result}, indent=2))
    else:
        _print_human(args.command, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
