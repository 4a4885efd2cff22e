"""Exceptions for files app.

Every error carries a human readable message and an ``http_status``
hint so the HTTP layer can surface it verbatim.
"""

from typing import ClassVar


class LibraryError(Exception):
    """Base class for tag and file errors."""

    http_status: ClassVar[int] = 400


class NotFoundError(LibraryError):
    """Raised when a referenced tag or file does not exist."""

    http_status: ClassVar[int] = 404


class UnauthorizedError(LibraryError):
    """Raised when the entity exists but belongs to another owner."""

    http_status: ClassVar[int] = 401


class InvalidArgumentError(LibraryError):
    """Raised on malformed input (empty names, bad colors, self-parent)."""


class CycleDetectedError(LibraryError):
    """Raised when setting a parent would create a cycle."""

    def __init__(self, child_id: str, parent_id: str) -> None:
        """Initialize CycleDetectedError.

        Args:
            child_id: Tag that was about to receive a parent.
            parent_id: Requested parent, already a descendant of the child.
        """
        self.child_id = child_id
        self.parent_id = parent_id
        super().__init__(
            'This would create a circular dependency in the tag hierarchy '
            f'({parent_id} is a descendant of {child_id})',
        )


class DepthExceededError(LibraryError):
    """Raised when attaching a tag would exceed the maximum depth."""

    def __init__(
        self,
        max_depth: int,
        parent_depth: int,
        subtree_height: int = 0,
    ) -> None:
        """Initialize DepthExceededError.

        Args:
            max_depth: Configured maximum tag depth.
            parent_depth: Depth of the requested parent.
            subtree_height: Levels of descendants below the moved tag.
        """
        self.max_depth = max_depth
        self.parent_depth = parent_depth
        self.subtree_height = subtree_height

        message = f'Maximum tag depth of {max_depth} would be exceeded. '
        if subtree_height:
            message += (
                f'Parent is at depth {parent_depth} and the moved tag has '
                f'{subtree_height} levels of subtags.'
            )
        else:
            message += f'Parent is already at depth {parent_depth}.'
        super().__init__(message)


class ConflictError(LibraryError):
    """Raised on storage-level uniqueness violations."""

    http_status: ClassVar[int] = 409
