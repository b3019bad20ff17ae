"""
Command-line access to S3-compatible storage.

Usage:
    s3files buckets
    s3files ls <bucket>
    s3files put <bucket> <file_path> [object_key]
    s3files get <bucket> <object_key> [dest]
    s3files rm <bucket> <object_key> [object_key ...]
    s3files mb <bucket>
    s3files rb <bucket>
    s3files exists <bucket>

Credentials come from S3_ACCESS_ID, S3_SECRET_KEY, S3_TOKEN, S3_REGION and
S3_ENDPOINT (a .env file in the working directory is loaded first).
"""
import os
import sys
import time
import logging
import argparse
from typing import Optional, List

from .client import StorageClient
from .errors import StorageError


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def format_size(bytes_size: float) -> str:
    """Format bytes to human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} TB"


def format_time(seconds: float) -> str:
    """Format seconds to human-readable time."""
    if seconds < 60:
        return f"{seconds:.0f}s"
    elif seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging; verbose also shows botocore request/retry logs."""
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "warning").upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if verbose:
        logging.getLogger("botocore").setLevel(logging.DEBUG)


def cmd_buckets(client: StorageClient, args) -> int:
    buckets = client.list_buckets()
    for bucket in buckets:
        created = bucket.get("CreationDate")
        created = created.isoformat() if hasattr(created, "isoformat") else (created or "")
        print(f"{bucket.get('Name', '')}\t{created}")
    return EXIT_OK


def cmd_ls(client: StorageClient, args) -> int:
    for key in client.list(args.bucket):
        print(key)
    return EXIT_OK


def cmd_put(client: StorageClient, args) -> int:
    if not os.path.exists(args.file_path):
        print(f"❌ Error: File not found: {args.file_path}", file=sys.stderr)
        return EXIT_ERROR

    with open(args.file_path, 'rb') as f:
        content = f.read()

    object_key = args.object_key or os.path.basename(args.file_path)
    print(f"📤 Uploading {format_size(len(content))} to {args.bucket}/{object_key}...")

    start = time.time()
    key = client.upload(args.bucket, object_key, content)
    print(f"✓ Upload completed in {format_time(time.time() - start)}")
    print(f"   Key: {key}")
    return EXIT_OK


def cmd_get(client: StorageClient, args) -> int:
    content = client.download(args.bucket, args.object_key)
    dest = args.dest or os.path.basename(args.object_key.rstrip('/'))

    try:
        with open(dest, 'wb') as f:
            f.write(content)
    except OSError as e:
        print(f"❌ Error: Cannot write {dest}: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(f"✓ Saved {args.object_key} to {dest} ({format_size(len(content))})")
    return EXIT_OK


def cmd_rm(client: StorageClient, args) -> int:
    client.delete(args.bucket, args.object_keys)
    print(f"✓ Deleted {len(args.object_keys)} object(s) from {args.bucket}")
    return EXIT_OK


def cmd_mb(client: StorageClient, args) -> int:
    client.create_bucket(args.bucket)
    print(f"✓ Created bucket {args.bucket} in {client.config.region}")
    return EXIT_OK


def cmd_rb(client: StorageClient, args) -> int:
    client.delete_bucket(args.bucket)
    print(f"✓ Deleted bucket {args.bucket}")
    return EXIT_OK


def cmd_exists(client: StorageClient, args) -> int:
    if client.bucket_exists(args.bucket):
        print(f"✓ Bucket {args.bucket} exists")
        return EXIT_OK
    print(f"Bucket {args.bucket} does not exist")
    return EXIT_NOT_FOUND


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3files",
        description="Manage buckets and files in S3-compatible storage",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log provider requests")
    parser.add_argument("--env-prefix", default="S3_", help="Environment variable prefix (default: S3_)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("buckets", help="List buckets")
    p.set_defaults(func=cmd_buckets)

    p = sub.add_parser("ls", help="List files in a bucket")
    p.add_argument("bucket")
    p.set_defaults(func=cmd_ls)

    p = sub.add_parser("put", help="Upload a local file")
    p.add_argument("bucket")
    p.add_argument("file_path")
    p.add_argument("object_key", nargs="?", help="Defaults to the file name")
    p.set_defaults(func=cmd_put)

    p = sub.add_parser("get", help="Download a file")
    p.add_argument("bucket")
    p.add_argument("object_key")
    p.add_argument("dest", nargs="?", help="Defaults to the key's base name")
    p.set_defaults(func=cmd_get)

    p = sub.add_parser("rm", help="Delete files")
    p.add_argument("bucket")
    p.add_argument("object_keys", nargs="+")
    p.set_defaults(func=cmd_rm)

    p = sub.add_parser("mb", help="Create a bucket in the configured region")
    p.add_argument("bucket")
    p.set_defaults(func=cmd_mb)

    p = sub.add_parser("rb", help="Delete an empty bucket")
    p.add_argument("bucket")
    p.set_defaults(func=cmd_rb)

    p = sub.add_parser("exists", help="Check whether a bucket exists")
    p.add_argument("bucket")
    p.set_defaults(func=cmd_exists)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run a single storage command and return the exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        client = StorageClient.from_env(prefix=args.env_prefix)
        return args.func(client, args)
    except StorageError as e:
        logger.debug("Storage command failed", exc_info=True)
        print(f"❌ Storage Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\n⚠️  Cancelled by user", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
