"""Exceptions raised by the storage client."""


class StorageError(Exception):
    """Base storage error."""
    pass


class ConfigError(StorageError):
    """Storage configuration is missing or invalid."""
    pass


class InvalidArgumentError(StorageError, ValueError):
    """Caller passed an empty bucket, key, content or key list."""
    pass


class ProviderError(StorageError):
    """The storage provider call failed."""
    pass


class StorageConnectionError(ProviderError):
    """Storage provider is unreachable or connection failed."""
    pass


class StorageAuthError(ProviderError):
    """Storage authentication failed."""
    pass


class StorageNotFoundError(ProviderError):
    """Storage resource not found (bucket, object)."""
    pass


class InvariantViolationError(StorageError):
    """Provider reported success but returned unexpected data."""
    pass


class PartialDeleteError(StorageError):
    """Batch delete succeeded but a requested key was not confirmed."""

    def __init__(self, missing_key: str):
        self.missing_key = missing_key
        super().__init__(f'file "{missing_key}" was not deleted')
