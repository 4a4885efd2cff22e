"""Django admin configuration for files app."""


from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.html import format_html

from tagshelf.apps.files.models import File, Tag, TagAssociation, TagParent


class TagAssociationInline(admin.TabularInline):  # type: ignore[type-arg]
    """Tags attached to a file."""

    model = TagAssociation
    extra = 0
    raw_id_fields = ['tag']


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'name',
        'id',
        'user',
        'kind',
        'tag_count',
    ]

    list_filter = [
        'kind',
        'user',
    ]

    search_fields = [
        'id',
        'name',
    ]

    readonly_fields = [
        'id',
    ]

    inlines = [TagAssociationInline]

    fieldsets = (
        ('File Information', {
            'fields': ('id', 'name', 'kind', 'user'),
        }),
    )

    def tag_count(self, obj: File) -> int:
        """Count of tags attached to the file.

        Args:
            obj: File instance.

        Returns:
            Number of tags.
        """
        return obj.tags.count()
    tag_count.short_description = 'Tags'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user')


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin[Tag]):
    """Admin interface for Tag model."""

    list_display = [
        'name',
        'user',
        'color_display',
        'parent_display',
        'file_count',
        'created_at',
    ]

    list_filter = [
        'user',
        'created_at',
    ]

    search_fields = [
        'name',
    ]

    fieldsets = (
        ('Tag Information', {
            'fields': ('name', 'user', 'color'),
        }),
        ('Metadata', {
            'fields': ('created_at',),
        }),
    )

    readonly_fields = ['created_at']

    def color_display(self, obj: Tag) -> str:
        """Display color swatch with hex code.

        Args:
            obj: Tag instance.

        Returns:
            HTML formatted color swatch and code.
        """
        return format_html(
            '<span style="background-color: {color}; '
            'padding: 2px 10px; border: 1px solid #ccc;">'
            '&nbsp;</span> {color}',
            color=obj.color,
        )
    color_display.short_description = 'Color'  # type: ignore[attr-defined]

    def parent_display(self, obj: Tag) -> str:
        """Display the parent tag's name.

        Args:
            obj: Tag instance.

        Returns:
            Parent name, or '-' for a root tag.
        """
        try:
            return obj.parent_link.parent.name
        except TagParent.DoesNotExist:
            return '-'
    parent_display.short_description = 'Parent'  # type: ignore[attr-defined]

    def file_count(self, obj: Tag) -> int:
        """Count of files with this tag.

        Args:
            obj: Tag instance.

        Returns:
            Number of files tagged with this tag.
        """
        return obj.files.count()
    file_count.short_description = 'Files'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Tag]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related(
            'user',
            'parent_link__parent',
        )
