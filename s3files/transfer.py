"""
Managed transfers on top of a boto3 S3 client.

Both helpers reuse the client they are given, so they share its connection
pool. Large bodies are split into multipart uploads and ranged GETs according
to the TransferConfig.
"""
import io
import logging
from dataclasses import dataclass
from typing import Optional

from boto3.s3.transfer import TransferConfig


logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    """Location of an uploaded object."""
    bucket: str
    key: str


class Uploader:
    """Chunked writer for in-memory content."""

    def __init__(self, client, config: Optional[TransferConfig] = None):
        self.client = client
        self.config = config or TransferConfig()

    def upload(self, bucket: str, key: str, content: bytes) -> UploadResult:
        """
        Write content to bucket/key, using multipart above the threshold.

        Returns:
            UploadResult for the stored object
        """
        logger.debug(f"Uploading {len(content)} bytes to {bucket}/{key}")
        self.client.upload_fileobj(
            io.BytesIO(content),
            bucket,
            key,
            Config=self.config,
        )
        return UploadResult(bucket=bucket, key=key)


class Downloader:
    """Concurrent ranged reader that buffers the whole object."""

    def __init__(self, client, config: Optional[TransferConfig] = None):
        self.client = client
        self.config = config or TransferConfig()

    def download(self, bucket: str, key: str) -> bytes:
        """Read bucket/key fully into memory."""
        buffer = io.BytesIO()
        self.client.download_fileobj(bucket, key, buffer, Config=self.config)
        logger.debug(f"Downloaded {buffer.tell()} bytes from {bucket}/{key}")
        return buffer.getvalue()
