"""Shared fixtures for storage tests."""

import os
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from s3files import StorageClient, StorageConfig


def client_error(code: str, operation: str, message: str = "error") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


class FakeS3:
    """In-memory stand-in for the boto3 S3 client calls the facade makes."""

    def __init__(self):
        self.buckets = {}

    def _objects(self, bucket, operation):
        if bucket not in self.buckets:
            raise client_error('NoSuchBucket', operation, 'The specified bucket does not exist')
        return self.buckets[bucket]

    def upload_fileobj(self, Fileobj, Bucket, Key, Config=None):
        self._objects(Bucket, 'PutObject')[Key] = Fileobj.read()

    def download_fileobj(self, Bucket, Key, Fileobj, Config=None):
        objects = self._objects(Bucket, 'HeadObject')
        if Key not in objects:
            raise client_error('404', 'HeadObject', 'Not Found')
        Fileobj.write(objects[Key])

    def list_objects(self, Bucket):
        objects = self._objects(Bucket, 'ListObjects')
        return {'Contents': [{'Key': k, 'Size': len(v)} for k, v in objects.items()]}

    def delete_objects(self, Bucket, Delete):
        objects = self._objects(Bucket, 'DeleteObjects')
        deleted = []
        for item in Delete['Objects']:
            objects.pop(item['Key'], None)
            deleted.append({'Key': item['Key']})
        return {'Deleted': deleted}

    def list_buckets(self):
        return {'Buckets': [{'Name': name} for name in self.buckets]}

    def head_bucket(self, Bucket):
        if Bucket not in self.buckets:
            raise client_error('404', 'HeadBucket', 'Not Found')
        return {}

    def create_bucket(self, Bucket, CreateBucketConfiguration=None):
        if Bucket in self.buckets:
            raise client_error('BucketAlreadyOwnedByYou', 'CreateBucket')
        self.buckets[Bucket] = {}
        return {'Location': f'/{Bucket}'}

    def delete_bucket(self, Bucket):
        if self._objects(Bucket, 'DeleteBucket'):
            raise client_error('BucketNotEmpty', 'DeleteBucket', 'The bucket you tried to delete is not empty')
        del self.buckets[Bucket]


@pytest.fixture
def mock_env_vars():
    """Set up required environment variables for testing."""
    env = {
        'S3_ACCESS_ID': 'test-key',
        'S3_SECRET_KEY': 'test-secret',
        'S3_REGION': 'ru-1',
        'S3_ENDPOINT': 'https://s3.example.com',
    }
    with patch.dict(os.environ, env, clear=True):
        yield env


@pytest.fixture
def storage_config():
    return StorageConfig(
        access_id='test-key',
        secret_key='test-secret',
        region='ru-1',
        endpoint='https://s3.example.com',
    )


@pytest.fixture
def mock_s3():
    return MagicMock()


@pytest.fixture
def storage_client(storage_config, mock_s3):
    """Storage client wired to a MagicMock boto3 client."""
    return StorageClient(storage_config, client=mock_s3)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def fake_storage(storage_config, fake_s3):
    """Storage client backed by the in-memory fake."""
    return StorageClient(storage_config, client=fake_s3)
