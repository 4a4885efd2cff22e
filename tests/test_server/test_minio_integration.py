"""Integration tests for presigned uploads against MinIO.

These tests verify that the storage backend can issue upload URLs that a
client can PUT to, and delete the resulting objects, when MinIO is
running (e.g. in Docker Compose).
"""
import os
import urllib.request
from typing import Final

import boto3
import pytest
from botocore.client import BaseClient
from botocore.exceptions import ClientError

from tagshelf.apps.files.infrastructure.storage import FileStorage

_TEST_BUCKET: Final = 'tagshelf'
_TEST_FILE_KEY: Final = 'integration01'
_TEST_FILE_CONTENT: Final = b'Hello from MinIO integration test!'


def _minio_settings() -> dict[str, str]:
    return {
        'endpoint_url': os.getenv('MINIO_ENDPOINT', 'http://minio:9000'),
        'access_key': os.getenv('MINIO_ROOT_USER', 'minioadmin'),
        'secret_key': os.getenv('MINIO_ROOT_PASSWORD', 'minioadmin'),
    }


@pytest.fixture
def s3_client() -> BaseClient:
    """Create S3 client for MinIO.

    Returns:
        Configured boto3 S3 client for MinIO.
    """
    minio = _minio_settings()
    return boto3.client(
        's3',
        endpoint_url=minio['endpoint_url'],
        aws_access_key_id=minio['access_key'],
        aws_secret_access_key=minio['secret_key'],
        region_name='us-east-1',
    )


@pytest.fixture
def storage(s3_client: BaseClient) -> FileStorage:
    """Storage backend pointed at the MinIO test bucket.

    Args:
        s3_client: boto3 S3 client, used to ensure the bucket exists.

    Returns:
        FileStorage instance.
    """
    try:
        s3_client.head_bucket(Bucket=_TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=_TEST_BUCKET)

    return FileStorage(
        bucket_name=_TEST_BUCKET,
        region_name='us-east-1',
        **_minio_settings(),
    )


@pytest.mark.integration
def test_presigned_upload_and_delete(
    s3_client: BaseClient,
    storage: FileStorage,
) -> None:
    """Test a client can upload through a presigned URL.

    Args:
        s3_client: boto3 S3 client.
        storage: Storage backend under test.
    """
    upload_url = storage.issue_upload_url(_TEST_FILE_KEY, 'text/plain', 60)

    request = urllib.request.Request(
        upload_url,
        data=_TEST_FILE_CONTENT,
        method='PUT',
        headers={'Content-Type': 'text/plain'},
    )
    with urllib.request.urlopen(request) as response:  # noqa: S310
        assert response.status == 200

    head = s3_client.head_object(Bucket=_TEST_BUCKET, Key=_TEST_FILE_KEY)
    assert head['ContentLength'] == len(_TEST_FILE_CONTENT)

    storage.delete(_TEST_FILE_KEY)

    with pytest.raises(ClientError) as exc_info:
        s3_client.head_object(Bucket=_TEST_BUCKET, Key=_TEST_FILE_KEY)

    assert exc_info.value.response['Error']['Code'] == '404'
