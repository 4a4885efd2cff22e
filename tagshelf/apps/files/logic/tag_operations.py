"""Business logic for tag CRUD operations."""

import logging
import re
from typing import Final

from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from tagshelf.apps.files.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from tagshelf.apps.files.infrastructure.identifiers import generate_id
from tagshelf.apps.files.models import (
    TAG_COLOR_PATTERN,
    TAG_DEFAULT_COLOR,
    Tag,
)

logger = logging.getLogger(__name__)

_COLOR_RE: Final = re.compile(TAG_COLOR_PATTERN)


def validate_tag_name(name: str) -> None:
    """Reject empty tag names.

    Raises:
        InvalidArgumentError: If name is empty.
    """
    if not name:
        raise InvalidArgumentError('Tag name is required')


def validate_tag_color(color: str) -> None:
    """Reject colors that are not ``#RRGGBB`` hex codes.

    Raises:
        InvalidArgumentError: If color has the wrong format.
    """
    if not _COLOR_RE.fullmatch(color):
        raise InvalidArgumentError('Color must be a valid hex code')


def check_tag_owner(tag: Tag, owner_id: int) -> None:
    """Ensure the tag belongs to the caller.

    Raises:
        UnauthorizedError: If the tag has a different owner.
    """
    if tag.user_id != owner_id:
        logger.warning(
            'User %s tried to access tag %s owned by %s',
            owner_id,
            tag.id,
            tag.user_id,
        )
        raise UnauthorizedError('Unauthorized')


def get_tag(owner_id: int, tag_id: str, *, for_update: bool = False) -> Tag:
    """Get a tag owned by the caller.

    Args:
        owner_id: Caller's user ID.
        tag_id: ID of the tag.
        for_update: Lock the row until the surrounding transaction ends.

    Returns:
        Tag instance.

    Raises:
        NotFoundError: If the tag does not exist.
        UnauthorizedError: If the tag belongs to another user.
    """
    queryset = Tag.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        tag = queryset.get(id=tag_id)
    except Tag.DoesNotExist as error:
        raise NotFoundError(f'Tag not found: {tag_id}') from error
    check_tag_owner(tag, owner_id)
    return tag


def create_tag(owner_id: int, name: str, color: str | None = None) -> Tag:
    """Create a new tag for the caller.

    Tag names are not unique: a user may have several tags with the
    same name.

    Args:
        owner_id: Caller's user ID.
        name: Non-empty tag name.
        color: Optional ``#RRGGBB`` color, white by default.

    Returns:
        Created Tag instance.

    Raises:
        InvalidArgumentError: If name or color is malformed.
        ConflictError: If the generated ID is already taken.
    """
    validate_tag_name(name)
    if color is None:
        color = TAG_DEFAULT_COLOR
    else:
        validate_tag_color(color)

    tag_id = generate_id()
    try:
        with transaction.atomic():
            tag = Tag.objects.create(
                id=tag_id,
                user_id=owner_id,
                name=name,
                color=color,
            )
    except IntegrityError as error:
        logger.warning('Tag ID already in use: %s', tag_id)
        raise ConflictError(f'Tag already exists: {tag_id}') from error

    logger.info('Tag created: %s (ID: %s, user: %s)', name, tag_id, owner_id)
    return tag


def list_tags(owner_id: int) -> QuerySet[Tag]:
    """List the caller's tags ordered by name."""
    return Tag.objects.filter(user_id=owner_id).order_by('name')


def update_tag(
    owner_id: int,
    tag_id: str,
    name: str | None = None,
    color: str | None = None,
) -> Tag:
    """Rename and/or recolor a tag.

    An empty changeset is a successful no-op.

    Args:
        owner_id: Caller's user ID.
        tag_id: ID of the tag to update.
        name: New name, if changing.
        color: New color, if changing.

    Returns:
        The (possibly unchanged) Tag instance.

    Raises:
        NotFoundError: If the tag does not exist.
        UnauthorizedError: If the tag belongs to another user.
        InvalidArgumentError: If name or color is malformed.
    """
    if name is not None:
        validate_tag_name(name)
    if color is not None:
        validate_tag_color(color)

    with transaction.atomic():
        tag = get_tag(owner_id, tag_id, for_update=True)

        update_fields = []
        if name is not None:
            tag.name = name
            update_fields.append('name')
        if color is not None:
            tag.color = color
            update_fields.append('color')

        if not update_fields:
            logger.debug('No updates provided for tag %s', tag_id)
            return tag

        tag.save(update_fields=update_fields)

    logger.info('Tag updated: %s (%s)', tag_id, ', '.join(update_fields))
    return tag


def delete_tag(owner_id: int, tag_id: str) -> None:
    """Delete a tag.

    Its hierarchy edges (as parent or child) and file associations are
    removed by database cascade; former children become roots.

    Args:
        owner_id: Caller's user ID.
        tag_id: ID of the tag to delete.

    Raises:
        NotFoundError: If the tag does not exist.
        UnauthorizedError: If the tag belongs to another user.
    """
    with transaction.atomic():
        tag = get_tag(owner_id, tag_id, for_update=True)
        tag.delete()

    logger.info('Tag deleted: %s (user: %s)', tag_id, owner_id)
