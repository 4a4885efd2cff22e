"""Business logic for attaching tags to files and filtering by tags."""

import logging
from collections.abc import Iterable

from django.db import transaction
from django.db.models import Count

from tagshelf.apps.files.exceptions import InvalidArgumentError, NotFoundError
from tagshelf.apps.files.models import File, Tag, TagAssociation

logger = logging.getLogger(__name__)


def _get_file_for_update(file_id: str) -> File:
    try:
        return File.objects.select_for_update().get(id=file_id)
    except File.DoesNotExist as error:
        raise NotFoundError(f'File not found: {file_id}') from error


def attach_tags(file_id: str, tag_ids: Iterable[str]) -> int:
    """Attach tags to a file.

    Every tag must belong to the file's owner. The ownership check and
    the inserts run in one transaction. Tags already attached to the file
    are skipped.

    Args:
        file_id: ID of the file.
        tag_ids: IDs of tags to attach.

    Returns:
        Number of association rows created.

    Raises:
        NotFoundError: If the file does not exist.
        InvalidArgumentError: If any tag is missing or owned by someone else.
    """
    tag_ids = list(tag_ids)
    if not tag_ids:
        return 0

    with transaction.atomic():
        file_instance = _get_file_for_update(file_id)

        owned_count = Tag.objects.filter(
            id__in=tag_ids,
            user_id=file_instance.user_id,
        ).count()
        if owned_count != len(tag_ids):
            logger.warning(
                'Rejected tags for file %s: %d of %d owned by user %s',
                file_id,
                owned_count,
                len(tag_ids),
                file_instance.user_id,
            )
            raise InvalidArgumentError(
                'One or more tags are invalid or do not belong to the user',
            )

        already_attached = set(
            TagAssociation.objects.filter(
                file_id=file_id,
                tag_id__in=tag_ids,
            ).values_list('tag_id', flat=True),
        )
        created = TagAssociation.objects.bulk_create([
            TagAssociation(file_id=file_id, tag_id=tag_id)
            for tag_id in tag_ids
            if tag_id not in already_attached
        ])

    logger.info('Attached %d tags to file %s', len(created), file_id)
    return len(created)


def detach_tags(file_id: str, tag_ids: Iterable[str]) -> int:
    """Remove tags from a file.

    Tags that are not attached are ignored.

    Returns:
        Number of association rows deleted.
    """
    deleted, _ = TagAssociation.objects.filter(
        file_id=file_id,
        tag_id__in=list(tag_ids),
    ).delete()
    logger.info('Detached %d tags from file %s', deleted, file_id)
    return deleted


def files_with_any_tag(tag_id: str) -> set[str]:
    """IDs of files carrying the given tag."""
    return set(
        TagAssociation.objects.filter(
            tag_id=tag_id,
        ).values_list('file_id', flat=True),
    )


def files_with_all_tags(tag_ids: Iterable[str]) -> set[str]:
    """IDs of files carrying every one of the given tags.

    Counts, per file, how many of the requested tags it has and keeps the
    files whose count matches the number of requested tags.

    Args:
        tag_ids: Requested tag IDs. An empty collection matches nothing.

    Returns:
        Set of file IDs.
    """
    wanted = set(tag_ids)
    if not wanted:
        return set()

    return set(
        TagAssociation.objects.filter(
            tag_id__in=wanted,
        ).values(
            'file_id',
        ).annotate(
            tag_count=Count('tag_id', distinct=True),
        ).filter(
            tag_count=len(wanted),
        ).values_list('file_id', flat=True),
    )
