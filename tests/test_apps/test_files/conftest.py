"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from moto import mock_aws

from tagshelf.apps.files.models import File, FileKind, Tag, TagParent

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with tagshelf bucket.

    Yields:
        boto3 S3 resource with tagshelf bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='tagshelf')

        yield conn


@pytest.fixture
def make_tag(db):
    """Factory for tags written straight to the database.

    Returns:
        Callable creating a Tag for a user.
    """
    def factory(owner, name, color='#ffffff', parent=None):
        tag = Tag.objects.create(user=owner, name=name, color=color)
        if parent is not None:
            TagParent.objects.create(child=tag, parent=parent)
        return tag

    return factory


@pytest.fixture
def make_file(db):
    """Factory for file records with optional tags.

    Returns:
        Callable creating a File for a user.
    """
    def factory(owner, file_id, name, tags=(), kind=FileKind.IMAGE):
        file_instance = File.objects.create(
            id=file_id,
            user=owner,
            name=name,
            kind=kind,
        )
        file_instance.tags.add(*tags)
        return file_instance

    return factory
