"""Unit tests for storage configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from s3files import StorageConfig, ConfigError


class TestStorageConfig:
    """Tests for StorageConfig validation."""

    def test_required_fields(self):
        config = StorageConfig(access_id='key', secret_key='secret', region='ru-1')

        assert config.token is None
        assert config.endpoint is None

    @pytest.mark.parametrize('field', ['access_id', 'secret_key', 'region'])
    def test_blank_required_field(self, field):
        values = {'access_id': 'key', 'secret_key': 'secret', 'region': 'ru-1'}
        values[field] = '   '

        with pytest.raises(ValidationError) as exc:
            StorageConfig(**values)

        assert field in str(exc.value)

    def test_blank_optional_fields_become_none(self):
        config = StorageConfig(
            access_id='key', secret_key='secret', region='ru-1', token='', endpoint=' '
        )

        assert config.token is None
        assert config.endpoint is None

    def test_endpoint_must_be_url(self):
        with pytest.raises(ValidationError):
            StorageConfig(
                access_id='key', secret_key='secret', region='ru-1', endpoint='s3.example.com'
            )

    def test_config_is_immutable(self, storage_config):
        with pytest.raises(ValidationError):
            storage_config.region = 'us-east-1'

    def test_client_kwargs(self):
        config = StorageConfig(
            access_id='key',
            secret_key='secret',
            token='session',
            region='ru-1',
            endpoint='https://s3.example.com',
        )

        kwargs = config.client_kwargs()

        assert kwargs['aws_access_key_id'] == 'key'
        assert kwargs['aws_secret_access_key'] == 'secret'
        assert kwargs['aws_session_token'] == 'session'
        assert kwargs['region_name'] == 'ru-1'
        assert kwargs['endpoint_url'] == 'https://s3.example.com'

    def test_client_kwargs_without_optional(self):
        kwargs = StorageConfig(access_id='key', secret_key='secret', region='ru-1').client_kwargs()

        assert 'aws_session_token' not in kwargs
        assert 'endpoint_url' not in kwargs

    def test_botocore_config_path_style_for_custom_endpoint(self, storage_config):
        config = storage_config.botocore_config()

        assert config.signature_version == 's3v4'
        assert config.s3 == {'addressing_style': 'path'}

    def test_botocore_config_timeouts(self):
        config = StorageConfig(
            access_id='key', secret_key='secret', region='ru-1',
            connect_timeout=5, read_timeout=30,
        ).botocore_config()

        assert config.connect_timeout == 5
        assert config.read_timeout == 30
        assert config.s3 is None

    def test_transfer_config(self):
        config = StorageConfig(
            access_id='key', secret_key='secret', region='ru-1',
            multipart_chunksize=16 * 1024 * 1024, max_concurrency=4,
        ).transfer_config()

        assert config.multipart_chunksize == 16 * 1024 * 1024
        assert config.max_concurrency == 4


class TestFromEnv:
    """Tests for StorageConfig.from_env()."""

    def test_reads_prefixed_variables(self, mock_env_vars):
        config = StorageConfig.from_env(dotenv=False)

        assert config.access_id == 'test-key'
        assert config.secret_key == 'test-secret'
        assert config.region == 'ru-1'
        assert config.endpoint == 'https://s3.example.com'

    def test_custom_prefix(self):
        env = {
            'BACKUP_ACCESS_ID': 'key',
            'BACKUP_SECRET_KEY': 'secret',
            'BACKUP_REGION': 'ru-7',
            'BACKUP_TOKEN': 'session',
        }
        with patch.dict(os.environ, env, clear=True):
            config = StorageConfig.from_env(prefix='BACKUP_', dotenv=False)

        assert config.region == 'ru-7'
        assert config.token == 'session'

    def test_missing_variables_listed(self):
        with patch.dict(os.environ, {'S3_REGION': 'ru-1'}, clear=True):
            with pytest.raises(ConfigError) as exc:
                StorageConfig.from_env(dotenv=False)

        assert 'S3_ACCESS_ID' in str(exc.value)
        assert 'S3_SECRET_KEY' in str(exc.value)
        assert 'S3_REGION' not in str(exc.value)

    def test_invalid_value(self, mock_env_vars):
        with patch.dict(os.environ, {'S3_ENDPOINT': 'ftp://s3.example.com'}):
            with pytest.raises(ConfigError):
                StorageConfig.from_env(dotenv=False)

    def test_loads_dotenv(self, mock_env_vars):
        with patch('s3files.config.load_dotenv') as mock_load:
            StorageConfig.from_env()

        mock_load.assert_called_once()
