"""Business logic for file operations."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from tagshelf.apps.files.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from tagshelf.apps.files.infrastructure.identifiers import generate_id
from tagshelf.apps.files.logic.association_operations import (
    attach_tags,
    files_with_all_tags,
    files_with_any_tag,
)
from tagshelf.apps.files.models import File, FileKind

if TYPE_CHECKING:
    from tagshelf.apps.files.infrastructure.storage import FileStorage

logger = logging.getLogger(__name__)


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def get_upload_url_expiry() -> int:
    """Get presigned upload URL lifetime in seconds.

    Returns:
        Expiry from settings or default of 3600 (1 hour).
    """
    return getattr(settings, 'UPLOAD_URL_EXPIRY', 3600)


@dataclass(frozen=True)
class UploadTicket:
    """Where and under which file id a client should upload."""

    file_id: str
    upload_url: str
    expires_in: int


def _validate_file_fields(name: str, kind: str) -> None:
    if not name:
        raise InvalidArgumentError('Filename is required')
    if kind not in FileKind.values:
        raise InvalidArgumentError(f'Invalid file type: {kind}')


def get_file(owner_id: int, file_id: str) -> File:
    """Get a file owned by the caller.

    Args:
        owner_id: Caller's user ID.
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        NotFoundError: If the file does not exist.
        UnauthorizedError: If the file belongs to another user.
    """
    try:
        file_instance = File.objects.get(id=file_id)
    except File.DoesNotExist as error:
        raise NotFoundError(f'File not found: {file_id}') from error

    if file_instance.user_id != owner_id:
        logger.warning(
            'User %s tried to access file %s owned by %s',
            owner_id,
            file_id,
            file_instance.user_id,
        )
        raise UnauthorizedError('Unauthorized')
    return file_instance


def create_file(owner_id: int, file_id: str, name: str, kind: str) -> File:
    """Create a file metadata record.

    Args:
        owner_id: Owner of the file.
        file_id: ID of the file, also its object key.
        name: Display name (original filename).
        kind: One of ``image``, ``video``, ``link``.

    Returns:
        Created File instance.

    Raises:
        InvalidArgumentError: If name or kind is invalid.
        ConflictError: If a file with this ID already exists.
    """
    _validate_file_fields(name, kind)
    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                id=file_id,
                user_id=owner_id,
                name=name,
                kind=kind,
            )
    except IntegrityError as error:
        logger.warning('File ID already in use: %s', file_id)
        raise ConflictError(f'File already exists: {file_id}') from error

    logger.info(
        'File record created: %s (ID: %s, user: %s)',
        name,
        file_id,
        owner_id,
    )
    return file_instance


def create_upload_url(
    owner_id: int,
    filename: str,
    content_type: str,
    kind: str,
) -> UploadTicket:
    """Reserve a file id and issue a presigned upload URL for it.

    No database record is created: the client uploads the object first
    and then calls :func:`finalize_upload`.

    Args:
        owner_id: Caller's user ID.
        filename: Name of the file being uploaded.
        content_type: MIME type the client will upload with.
        kind: One of ``image``, ``video``, ``link``.

    Returns:
        UploadTicket with the new file id and presigned URL.

    Raises:
        InvalidArgumentError: If any argument is empty or invalid.
    """
    _validate_file_fields(filename, kind)
    if not content_type:
        raise InvalidArgumentError('Content type is required')

    file_id = generate_id()
    expires_in = get_upload_url_expiry()
    upload_url = _get_storage().issue_upload_url(
        file_id,
        content_type,
        expires_in,
    )
    logger.info(
        'Upload URL created for %s (ID: %s, user: %s)',
        filename,
        file_id,
        owner_id,
    )
    return UploadTicket(
        file_id=file_id,
        upload_url=upload_url,
        expires_in=expires_in,
    )


def finalize_upload(
    owner_id: int,
    file_id: str,
    name: str,
    kind: str,
    tag_ids: Sequence[str] | None = None,
) -> File:
    """Record a finished upload and tag it.

    The file record and its tag associations are created in one
    transaction: an invalid tag leaves no record behind.

    Args:
        owner_id: Caller's user ID.
        file_id: ID returned by :func:`create_upload_url`.
        name: Display name.
        kind: One of ``image``, ``video``, ``link``.
        tag_ids: Optional tags to attach, all owned by the caller.

    Returns:
        Created File instance.

    Raises:
        InvalidArgumentError: If fields or tags are invalid.
        ConflictError: If the file was already finalized.
    """
    if not file_id:
        raise InvalidArgumentError('File ID is required')

    with transaction.atomic():
        file_instance = create_file(owner_id, file_id, name, kind)
        if tag_ids:
            attach_tags(file_id, tag_ids)

    logger.info('Upload finalized: %s (user: %s)', file_id, owner_id)
    return file_instance


def delete_file(owner_id: int, file_id: str) -> None:
    """Delete a file's object from storage, then its record.

    The two steps are not transactional. If the object is gone but the
    record cannot be deleted, the record is left behind as an orphan
    (never the other way round) and the error is logged and re-raised.

    Args:
        owner_id: Caller's user ID.
        file_id: ID of file to delete.

    Raises:
        NotFoundError: If the file does not exist.
        UnauthorizedError: If the file belongs to another user.
        Exception: If storage or DB deletion fails.
    """
    file_instance = get_file(owner_id, file_id)
    storage_name = file_instance.storage_key

    logger.info('Deleting file: ID=%s, key=%s', file_id, storage_name)

    # Step 1: Remove the object; a failure here leaves everything intact
    _get_storage().delete(storage_name)

    # Step 2: Remove the record (associations cascade)
    try:
        with transaction.atomic():
            file_instance.delete()
    except Exception:
        logger.exception(
            'Object deleted but DB delete failed (orphaned record): ID=%s',
            file_id,
        )
        raise

    logger.info('File record deleted from database: ID=%s', file_id)


def list_files(
    owner_id: int,
    tag_id: str | None = None,
    tag_ids: Sequence[str] | None = None,
    search: str | None = None,
) -> QuerySet[File]:
    """List the caller's files filtered by tags and name.

    ``tag_id`` keeps files carrying that tag. Otherwise a non-empty
    ``tag_ids`` keeps files carrying all of them. ``search`` is a
    case-insensitive substring match on the name. Results are ordered by
    file id and come with their tags prefetched.

    Args:
        owner_id: Caller's user ID.
        tag_id: Single tag filter.
        tag_ids: All-of tag filter, ignored when ``tag_id`` is given.
        search: Name substring.

    Returns:
        QuerySet of File objects.
    """
    files = File.objects.filter(user_id=owner_id)

    if tag_id:
        candidate_ids = files_with_any_tag(tag_id)
    elif tag_ids:
        candidate_ids = files_with_all_tags(tag_ids)
    else:
        candidate_ids = None

    if candidate_ids is not None:
        if not candidate_ids:
            logger.debug('No files match tag filter for user %s', owner_id)
            return File.objects.none()
        files = files.filter(id__in=candidate_ids)

    if search:
        files = files.filter(name__icontains=search)

    return files.order_by('id').prefetch_related('tags')
