"""S3-compatible object storage for bucket and file operations."""

from .client import StorageClient, is_not_found
from .config import StorageConfig
from .errors import (
    StorageError,
    ConfigError,
    InvalidArgumentError,
    ProviderError,
    StorageConnectionError,
    StorageAuthError,
    StorageNotFoundError,
    InvariantViolationError,
    PartialDeleteError,
)
from .files import FileStorage
from .transfer import Uploader, Downloader, UploadResult

__all__ = [
    "StorageClient",
    "StorageConfig",
    "FileStorage",
    "Uploader",
    "Downloader",
    "UploadResult",
    "StorageError",
    "ConfigError",
    "InvalidArgumentError",
    "ProviderError",
    "StorageConnectionError",
    "StorageAuthError",
    "StorageNotFoundError",
    "InvariantViolationError",
    "PartialDeleteError",
    "is_not_found",
]
