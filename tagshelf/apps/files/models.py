"""Database models for files app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

from tagshelf.apps.files.infrastructure.identifiers import generate_id

# Constants for field max lengths
_ID_MAX_LENGTH: Final = 21  # Room for nanoid-sized identifiers
_FILE_NAME_MAX_LENGTH: Final = 255
_FILE_KIND_MAX_LENGTH: Final = 16
_TAG_NAME_MAX_LENGTH: Final = 100
_TAG_COLOR_MAX_LENGTH: Final = 7  # Hex color: #RRGGBB

TAG_COLOR_PATTERN: Final = r'^#[0-9A-Fa-f]{6}$'
TAG_DEFAULT_COLOR: Final = '#ffffff'


class FileKind(models.TextChoices):
    """What a file record points at."""

    IMAGE = 'image', 'Image'
    VIDEO = 'video', 'Video'
    LINK = 'link', 'Link'


@final
class Tag(models.Model):
    """User-defined tag for organizing files.

    Tags are scoped to individual users. Names are not unique per user:
    two tags with the same name may coexist.
    """

    id = models.CharField(
        primary_key=True,
        max_length=_ID_MAX_LENGTH,
        default=generate_id,
        editable=False,
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tags',
        db_index=True,
    )

    name = models.CharField(
        max_length=_TAG_NAME_MAX_LENGTH,
    )

    color = models.CharField(
        max_length=_TAG_COLOR_MAX_LENGTH,
        default=TAG_DEFAULT_COLOR,
        validators=[RegexValidator(TAG_COLOR_PATTERN)],
        help_text='Hex color code for UI display (e.g., #FF5733)',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Tag'  # type: ignore[mutable-override]
        verbose_name_plural = 'Tags'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['user', 'name'],
                name='tags_user_name_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'

    def as_summary(self) -> dict[str, str]:
        """Compact representation attached to file listings.

        Returns:
            Dict with id, name and color.
        """
        return {'id': self.id, 'name': self.name, 'color': self.color}


@final
class TagParent(models.Model):
    """Hierarchy edge: ``child`` is a subtag of ``parent``.

    The child is the primary key, so a tag has at most one parent and the
    edges of one user form a forest. Deleting either tag removes the edge.
    """

    child = models.OneToOneField(
        Tag,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='parent_link',
    )

    parent = models.ForeignKey(
        Tag,
        on_delete=models.CASCADE,
        related_name='child_links',
        db_index=True,
    )

    class Meta:
        """Model metadata."""

        db_table = 'files_subtag_of'
        verbose_name = 'Tag parent'  # type: ignore[mutable-override]
        verbose_name_plural = 'Tag parents'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.parent_id} -> {self.child_id}'


@final
class File(models.Model):
    """Metadata of a file stored in S3-compatible storage.

    The file id doubles as the object key in the bucket. The record does
    not guarantee the object exists: it is created once the client upload
    has finished, and the object is removed before the record is.
    """

    id = models.CharField(
        primary_key=True,
        max_length=_ID_MAX_LENGTH,
        default=generate_id,
        editable=False,
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    name = models.CharField(
        max_length=_FILE_NAME_MAX_LENGTH,
    )

    kind = models.CharField(
        max_length=_FILE_KIND_MAX_LENGTH,
        choices=FileKind.choices,
    )

    tags = models.ManyToManyField(
        Tag,
        through='TagAssociation',
        related_name='files',
        blank=True,
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['user', 'name'],
                name='files_user_name_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.name}'

    @property
    def storage_key(self) -> str:
        """Object key of this file in the bucket."""
        return self.id

    def get_tag_summaries(self) -> list[dict[str, str]]:
        """Tags currently attached to the file.

        Uses prefetched tags when available.

        Returns:
            List of ``{id, name, color}`` dicts.
        """
        return [tag.as_summary() for tag in self.tags.all()]


@final
class TagAssociation(models.Model):
    """Join row between a file and one of its tags."""

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='associations',
    )

    tag = models.ForeignKey(
        Tag,
        on_delete=models.CASCADE,
        related_name='associations',
    )

    class Meta:
        """Model metadata."""

        db_table = 'files_has_tag'
        verbose_name = 'Tag association'  # type: ignore[mutable-override]
        verbose_name_plural = 'Tag associations'  # type: ignore[mutable-override]

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['tag', 'file'],
                name='has_tag_tag_file_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.file_id} #{self.tag_id}'
