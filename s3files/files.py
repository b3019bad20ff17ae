"""File storage interface implemented by StorageClient."""
from typing import List, Dict, Protocol, runtime_checkable


@runtime_checkable
class FileStorage(Protocol):
    """Bucket and object operations callers depend on."""

    def list(self, bucket: str) -> List[str]:
        ...

    def upload(self, bucket: str, key: str, content: bytes) -> str:
        ...

    def download(self, bucket: str, key: str) -> bytes:
        ...

    def delete(self, bucket: str, keys: List[str]) -> None:
        ...

    def list_buckets(self) -> List[Dict]:
        ...

    def create_bucket(self, bucket: str) -> None:
        ...

    def bucket_exists(self, bucket: str) -> bool:
        ...

    def delete_bucket(self, bucket: str) -> None:
        ...
