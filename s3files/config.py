"""
Connection settings for S3-compatible object storage.

Values are usually read from the environment (or a .env file):

    S3_ACCESS_ID     access key id (required)
    S3_SECRET_KEY    secret access key (required)
    S3_TOKEN         session token (optional)
    S3_REGION        region, e.g. ru-1 or us-east-1 (required)
    S3_ENDPOINT      custom endpoint URL for non-AWS providers (optional)
"""
import os
from typing import Optional, Dict

from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .errors import ConfigError


# Field name -> environment variable suffix
ENV_FIELDS: Dict[str, str] = {
    "access_id": "ACCESS_ID",
    "secret_key": "SECRET_KEY",
    "token": "TOKEN",
    "region": "REGION",
    "endpoint": "ENDPOINT",
}

REQUIRED_FIELDS = ("access_id", "secret_key", "region")

MB = 1024 * 1024


class StorageConfig(BaseModel):
    """Credentials, endpoint and transfer tuning for the storage client."""

    model_config = {"frozen": True}

    access_id: str = Field(..., description="Access key id")
    secret_key: str = Field(..., description="Secret access key")
    token: Optional[str] = Field(default=None, description="Session token")
    region: str = Field(..., description="Region the buckets live in")
    endpoint: Optional[str] = Field(
        default=None, description="Custom endpoint URL (S3-compatible providers)"
    )

    # Transport, passed straight to botocore. None keeps botocore defaults.
    connect_timeout: Optional[float] = Field(default=None, gt=0)
    read_timeout: Optional[float] = Field(default=None, gt=0)
    addressing_style: Optional[str] = Field(
        default=None, description="'path' or 'virtual'; path when endpoint is set"
    )

    # Multipart upload / ranged download tuning
    multipart_threshold: int = Field(default=8 * MB, ge=5 * MB)
    multipart_chunksize: int = Field(default=8 * MB, ge=5 * MB)
    max_concurrency: int = Field(default=10, ge=1, le=100)

    @field_validator("access_id", "secret_key", "region")
    @classmethod
    def validate_required(cls, v: str, info) -> str:
        """Reject blank values for required settings."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip()

    @field_validator("token", "endpoint")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: Optional[str]) -> Optional[str]:
        """Endpoint must be an http(s) URL."""
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must start with http:// or https://")
        return v

    @field_validator("addressing_style")
    @classmethod
    def validate_addressing_style(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("path", "virtual", "auto"):
            raise ValueError("addressing_style must be 'path', 'virtual' or 'auto'")
        return v

    @classmethod
    def from_env(cls, prefix: str = "S3_", dotenv: bool = True) -> "StorageConfig":
        """
        Build configuration from environment variables.

        Args:
            prefix: Variable name prefix (S3_ gives S3_ACCESS_ID etc.)
            dotenv: Load a .env file first (existing variables win)

        Returns:
            Validated StorageConfig

        Raises:
            ConfigError: Required variables are missing or a value is invalid
        """
        if dotenv:
            load_dotenv()

        values = {}
        for field, suffix in ENV_FIELDS.items():
            value = os.getenv(f"{prefix}{suffix}")
            if value:
                values[field] = value

        missing = [f"{prefix}{ENV_FIELDS[f]}" for f in REQUIRED_FIELDS if f not in values]
        if missing:
            raise ConfigError(
                f"Missing required storage settings: {', '.join(missing)}. "
                "Check environment variables."
            )

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigError(f"Invalid storage settings: {e}") from e

    def client_kwargs(self) -> dict:
        """Keyword arguments for boto3.client('s3', ...)."""
        kwargs = {
            "aws_access_key_id": self.access_id,
            "aws_secret_access_key": self.secret_key,
            "region_name": self.region,
            "config": self.botocore_config(),
        }
        if self.token:
            kwargs["aws_session_token"] = self.token
        if self.endpoint:
            kwargs["endpoint_url"] = self.endpoint
        return kwargs

    def botocore_config(self) -> Config:
        """Signature v4 client config with the configured timeouts."""
        options = {"signature_version": "s3v4"}
        if self.connect_timeout is not None:
            options["connect_timeout"] = self.connect_timeout
        if self.read_timeout is not None:
            options["read_timeout"] = self.read_timeout

        # S3-compatible providers rarely support virtual-hosted buckets
        style = self.addressing_style or ("path" if self.endpoint else None)
        if style:
            options["s3"] = {"addressing_style": style}

        return Config(**options)

    def transfer_config(self) -> TransferConfig:
        """Multipart settings shared by the uploader and downloader."""
        return TransferConfig(
            multipart_threshold=self.multipart_threshold,
            multipart_chunksize=self.multipart_chunksize,
            max_concurrency=self.max_concurrency,
        )
