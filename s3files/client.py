"""
S3-compatible storage client for bucket and object operations.

Works with AWS S3 and S3-compatible providers (Selectel, Cloudflare R2, MinIO)
through a custom endpoint.
"""
import logging
from typing import List, Dict, Optional

import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    ParamValidationError,
    PartialCredentialsError,
)
from s3transfer.exceptions import RetriesExceededError

from .config import StorageConfig
from .errors import (
    InvalidArgumentError,
    InvariantViolationError,
    PartialDeleteError,
    ProviderError,
    StorageAuthError,
    StorageConnectionError,
    StorageNotFoundError,
)
from .transfer import Uploader, Downloader


logger = logging.getLogger(__name__)


NOT_FOUND_CODES = {"404", "NoSuchBucket", "NoSuchKey", "NotFound"}
AUTH_ERROR_CODES = {
    "403",
    "AccessDenied",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "InvalidToken",
    "ExpiredToken",
}

# Raised by managed transfers outside the botocore hierarchy
TRANSFER_ERRORS = (Boto3Error, RetriesExceededError)
PROVIDER_ERRORS = (ClientError, BotoCoreError) + TRANSFER_ERRORS


def error_code(error: Exception) -> str:
    """Return the provider error code of a ClientError, or empty string."""
    if isinstance(error, ClientError):
        return str(error.response.get("Error", {}).get("Code", ""))
    return ""


def is_not_found(error: Exception) -> bool:
    """Check whether a provider error means the bucket or object is missing."""
    return error_code(error) in NOT_FOUND_CODES


def wrap_provider_error(error: Exception, message: str) -> ProviderError:
    """
    Translate a botocore exception into the ProviderError family.

    The original exception is kept as __cause__ by the caller's
    ``raise ... from error``.
    """
    text = f"{message}: {error}"
    if isinstance(error, (NoCredentialsError, PartialCredentialsError)):
        return StorageAuthError(text)
    if isinstance(error, ClientError):
        code = error_code(error)
        if code in NOT_FOUND_CODES:
            return StorageNotFoundError(text)
        if code in AUTH_ERROR_CODES:
            return StorageAuthError(text)
        return ProviderError(text)
    if isinstance(error, ParamValidationError):
        return ProviderError(text)
    if isinstance(error, (BotoCoreError,) + TRANSFER_ERRORS):
        return StorageConnectionError(text)
    return ProviderError(text)


def has_extension(key: str) -> bool:
    """Keys like 'dir/' or 'README' are not files; '.env' counts as one."""
    base = key.rsplit("/", 1)[-1]
    return "." in base


def _require(value, message: str) -> None:
    if not value:
        raise InvalidArgumentError(message)


class StorageClient:
    """
    Bucket-scoped file storage facade over a boto3 S3 client.

    The client and both transfer helpers are fixed at construction, so one
    instance can be shared between threads as long as the boto3 client is.
    """

    def __init__(
        self,
        config: StorageConfig,
        client=None,
        uploader: Optional[Uploader] = None,
        downloader: Optional[Downloader] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize the storage client.

        Args:
            config: Validated storage settings
            client: Existing boto3 S3 client (built from config when omitted)
            uploader: Upload helper (derived from client when omitted)
            downloader: Download helper (derived from client when omitted)
            log: Logger to use instead of the module logger

        Raises:
            StorageConnectionError: The boto3 client could not be created
        """
        self.config = config
        self.logger = log or logger

        if client is None:
            client = self._init_client(config)
        self.client = client

        transfer_config = config.transfer_config()
        self.uploader = uploader or Uploader(client, transfer_config)
        self.downloader = downloader or Downloader(client, transfer_config)

    def _init_client(self, config: StorageConfig):
        """Create the boto3 client for the configured endpoint and region."""
        try:
            client = boto3.client("s3", **config.client_kwargs())
        except Exception as e:
            raise StorageConnectionError(
                f"Failed to initialize storage client: {str(e)}"
            ) from e

        endpoint = config.endpoint or "AWS default endpoint"
        self.logger.info(f"Initialized S3 client (region: {config.region}, endpoint: {endpoint})")
        return client

    @classmethod
    def from_env(cls, prefix: str = "S3_", **kwargs) -> "StorageClient":
        """Build a client from S3_* environment variables."""
        return cls(StorageConfig.from_env(prefix=prefix), **kwargs)

    def list(self, bucket: str) -> List[str]:
        """
        List file keys in a bucket.

        Only keys with an extension are returned, in provider order. A single
        ListObjects page is read (up to 1000 keys); there is no pagination.

        Raises:
            InvalidArgumentError: Empty bucket name
            ProviderError: Listing failed
        """
        _require(bucket, "empty bucket name")

        try:
            response = self.client.list_objects(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"ListObjects failed for bucket {bucket}: {e}")
            raise wrap_provider_error(e, f"ListObjects error (bucket: {bucket})") from e

        keys = [
            obj["Key"]
            for obj in response.get("Contents", [])
            if obj.get("Key") and has_extension(obj["Key"])
        ]
        self.logger.debug(f"Found {len(keys)} files in bucket {bucket}")
        return keys

    def upload(self, bucket: str, key: str, content: bytes) -> str:
        """
        Upload content to bucket/key, overwriting any existing object.

        Returns:
            Key of the stored object

        Raises:
            InvalidArgumentError: Empty bucket name or content
            ProviderError: Upload failed
            InvariantViolationError: Upload succeeded without a key
        """
        _require(bucket, "empty bucket name")
        _require(content, "empty file content")

        try:
            result = self.uploader.upload(bucket, key, content)
        except PROVIDER_ERRORS as e:
            self.logger.error(f"Upload of {bucket}/{key} failed: {e}")
            raise wrap_provider_error(e, f"failed to upload file {bucket}/{key}") from e

        if result is None or not result.key:
            raise InvariantViolationError(f"received empty s3 file key for {bucket}/{key}")

        self.logger.info(f"Uploaded {bucket}/{result.key} ({len(content)} bytes)")
        return result.key

    def download(self, bucket: str, key: str) -> bytes:
        """
        Download an object into memory.

        The whole object is buffered before returning, so memory use grows
        with object size.

        Raises:
            InvalidArgumentError: Empty bucket name or key
            StorageNotFoundError: Object does not exist
            ProviderError: Download failed
        """
        _require(bucket, "empty bucket name")
        _require(key, "empty file path")

        try:
            return self.downloader.download(bucket, key)
        except PROVIDER_ERRORS as e:
            self.logger.error(f"Download of {bucket}/{key} failed: {e}")
            raise wrap_provider_error(e, f"failed to download file {bucket}/{key}") from e

    def delete(self, bucket: str, keys: List[str]) -> None:
        """
        Delete several objects with one DeleteObjects request.

        Raises:
            InvalidArgumentError: Empty bucket name or key list
            ProviderError: Request failed
            PartialDeleteError: First requested key the provider did not
                report as deleted
        """
        _require(bucket, "empty bucket name")
        _require(keys, "empty file paths list")

        try:
            response = self.client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": key} for key in keys]},
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"DeleteObjects failed for bucket {bucket}: {e}")
            raise wrap_provider_error(e, f"DeleteObjects error (bucket: {bucket})") from e

        deleted = {item.get("Key") for item in response.get("Deleted", [])}
        for key in keys:
            if key not in deleted:
                raise PartialDeleteError(key)

        self.logger.info(f"Deleted {len(keys)} objects from {bucket}")

    def list_buckets(self) -> List[Dict]:
        """Return bucket descriptors (Name, CreationDate) for the account."""
        try:
            response = self.client.list_buckets()
        except (ClientError, BotoCoreError) as e:
            raise wrap_provider_error(e, "couldn't list buckets for your account") from e

        return response.get("Buckets", [])

    def bucket_exists(self, bucket: str) -> bool:
        """
        Probe a bucket with HeadBucket.

        Returns:
            False when the provider reports the bucket as not found

        Raises:
            InvalidArgumentError: Empty bucket name
            ProviderError: Any other failure, including access denied
        """
        _require(bucket, "empty bucket name")

        try:
            self.client.head_bucket(Bucket=bucket)
        except ClientError as e:
            if is_not_found(e):
                self.logger.debug(f"Bucket {bucket} does not exist")
                return False
            raise wrap_provider_error(e, f"couldn't check bucket {bucket}") from e
        except BotoCoreError as e:
            raise wrap_provider_error(e, f"couldn't check bucket {bucket}") from e

        return True

    def create_bucket(self, bucket: str) -> None:
        """Create a bucket in the configured region."""
        _require(bucket, "empty bucket name")

        region = self.config.region
        params = {"Bucket": bucket}
        # us-east-1 is the default location and rejects an explicit constraint
        if region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            self.client.create_bucket(**params)
        except (ClientError, BotoCoreError) as e:
            raise wrap_provider_error(
                e, f"couldn't create bucket {bucket} in region {region}"
            ) from e

        self.logger.info(f"Created bucket {bucket} in region {region}")

    def delete_bucket(self, bucket: str) -> None:
        """Delete an empty bucket. Non-empty buckets fail at the provider."""
        _require(bucket, "empty bucket name")

        try:
            self.client.delete_bucket(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            raise wrap_provider_error(e, f"couldn't delete bucket {bucket}") from e

        self.logger.info(f"Deleted bucket {bucket}")
