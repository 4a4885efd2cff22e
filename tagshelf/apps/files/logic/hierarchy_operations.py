"""Business logic for the tag hierarchy.

Each user's tags form a forest: a tag has at most one parent, there are
no cycles and no tag sits deeper than ``MAX_TAG_DEPTH`` hops below its
root. Every call fetches the owner's edges once and walks them in memory.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from tagshelf.apps.files.exceptions import (
    CycleDetectedError,
    DepthExceededError,
    InvalidArgumentError,
)
from tagshelf.apps.files.logic.tag_operations import get_tag, list_tags
from tagshelf.apps.files.models import Tag, TagParent

logger = logging.getLogger(__name__)


def get_max_tag_depth() -> int:
    """Get maximum tag depth.

    Returns:
        Max depth from settings or default of 5.
    """
    return getattr(settings, 'MAX_TAG_DEPTH', 5)


@dataclass(frozen=True)
class TagHierarchy:
    """All tags of a user plus the parent/child edges between them."""

    tags: list[Tag]
    relationships: set[tuple[str, str]] = field(default_factory=set)


@dataclass
class _Forest:
    """In-memory adjacency of one user's hierarchy edges."""

    parent_of: dict[str, str] = field(default_factory=dict)
    children_of: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def load(cls, owner_id: int) -> '_Forest':
        """Fetch every edge whose endpoints both belong to the owner."""
        forest = cls()
        edges = TagParent.objects.filter(
            child__user_id=owner_id,
            parent__user_id=owner_id,
        ).values_list('parent_id', 'child_id')
        for parent_id, child_id in edges:
            forest.parent_of[child_id] = parent_id
            forest.children_of.setdefault(parent_id, []).append(child_id)
        return forest

    def walk_down(self, tag_id: str) -> list[tuple[str, int]]:
        """Breadth-first descendants of a tag with their relative level.

        Each tag is visited once, so corrupt data cannot loop forever.
        """
        visited = {tag_id}
        queue = deque([(tag_id, 0)])
        descendants = []
        while queue:
            current_id, level = queue.popleft()
            for child_id in self.children_of.get(current_id, []):
                if child_id in visited:
                    continue
                visited.add(child_id)
                descendants.append((child_id, level + 1))
                queue.append((child_id, level + 1))
        return descendants

    def walk_up(self, tag_id: str, limit: int) -> list[str]:
        """Ancestors of a tag, nearest first, at most ``limit`` of them."""
        ancestors: list[str] = []
        visited = {tag_id}
        current_id = tag_id
        while len(ancestors) < limit:
            parent_id = self.parent_of.get(current_id)
            if parent_id is None:
                break
            if parent_id in visited:
                logger.error('Cycle in tag hierarchy at tag %s', parent_id)
                break
            visited.add(parent_id)
            ancestors.append(parent_id)
            current_id = parent_id
        return ancestors


def _lock_owner(owner_id: int) -> None:
    """Serialize hierarchy writes of one user.

    Must be called inside a transaction. The lock on the owner row is held
    until commit, so a concurrent writer reads the edges only after this
    one has written its own.
    """
    get_user_model().objects.select_for_update().filter(pk=owner_id).first()


def would_create_cycle(forest: _Forest, child_id: str, parent_id: str) -> bool:
    """Check if ``parent_id`` is already below ``child_id``.

    Breadth-first search over children-of-children starting at the child.
    """
    visited: set[str] = set()
    queue = deque([child_id])
    while queue:
        current_id = queue.popleft()
        if current_id == parent_id:
            return True
        if current_id in visited:
            continue
        visited.add(current_id)
        queue.extend(forest.children_of.get(current_id, []))
    return False


def _depth(forest: _Forest, tag_id: str) -> int:
    # One hop past the limit is enough to tell "too deep" apart.
    return len(forest.walk_up(tag_id, get_max_tag_depth() + 1))


def get_tag_depth(owner_id: int, tag_id: str) -> int:
    """Number of parent hops from a tag to its root.

    Args:
        owner_id: Caller's user ID.
        tag_id: ID of the tag.

    Returns:
        Depth, 0 for a root. Capped at ``MAX_TAG_DEPTH + 1``.
    """
    get_tag(owner_id, tag_id)
    return _depth(_Forest.load(owner_id), tag_id)


def set_parent(owner_id: int, child_id: str, parent_id: str) -> TagParent:
    """Make ``parent_id`` the only parent of ``child_id``.

    Validation and the edge swap run in a single transaction holding the
    owner lock, so concurrent calls for the same user cannot both pass
    validation against stale edges.

    Args:
        owner_id: Caller's user ID.
        child_id: Tag receiving the parent.
        parent_id: New parent tag.

    Returns:
        Created TagParent edge.

    Raises:
        NotFoundError: If either tag does not exist.
        UnauthorizedError: If either tag belongs to another user.
        InvalidArgumentError: If a tag would be its own parent.
        CycleDetectedError: If the parent is a descendant of the child.
        DepthExceededError: If the new edge would break the depth limit.
    """
    max_depth = get_max_tag_depth()

    with transaction.atomic():
        _lock_owner(owner_id)
        child = get_tag(owner_id, child_id, for_update=True)
        parent = get_tag(owner_id, parent_id)

        if child_id == parent_id:
            raise InvalidArgumentError('A tag cannot be its own parent')

        forest = _Forest.load(owner_id)

        if would_create_cycle(forest, child_id, parent_id):
            logger.warning(
                'Rejected cycle for user %s: %s under %s',
                owner_id,
                child_id,
                parent_id,
            )
            raise CycleDetectedError(child_id, parent_id)

        parent_depth = _depth(forest, parent_id)
        if parent_depth >= max_depth:
            raise DepthExceededError(max_depth, parent_depth)

        subtree_height = max(
            (level for _, level in forest.walk_down(child_id)),
            default=0,
        )
        if parent_depth + 1 + subtree_height > max_depth:
            raise DepthExceededError(max_depth, parent_depth, subtree_height)

        TagParent.objects.filter(child_id=child_id).delete()
        edge = TagParent.objects.create(child=child, parent=parent)

    logger.info(
        'Tag parent set: %s -> %s (user: %s)',
        parent_id,
        child_id,
        owner_id,
    )
    return edge


def remove_parent(owner_id: int, child_id: str) -> None:
    """Detach a tag from its parent, making it a root.

    Removing the parent of a root tag is a no-op.

    Raises:
        NotFoundError: If the tag does not exist.
        UnauthorizedError: If the tag belongs to another user.
    """
    with transaction.atomic():
        _lock_owner(owner_id)
        get_tag(owner_id, child_id, for_update=True)
        deleted, _ = TagParent.objects.filter(child_id=child_id).delete()

    if deleted:
        logger.info('Tag parent removed: %s (user: %s)', child_id, owner_id)
    else:
        logger.debug('Tag %s has no parent, nothing to remove', child_id)


def get_hierarchy(owner_id: int) -> TagHierarchy:
    """All of the caller's tags and the edges among them.

    Args:
        owner_id: Caller's user ID.

    Returns:
        TagHierarchy with tags ordered by name and a set of
        ``(parent_id, child_id)`` pairs.
    """
    tags = list(list_tags(owner_id))
    if not tags:
        return TagHierarchy(tags=[])

    tag_ids = [tag.id for tag in tags]
    relationships = set(
        TagParent.objects.filter(
            parent_id__in=tag_ids,
            child_id__in=tag_ids,
        ).values_list('parent_id', 'child_id'),
    )
    return TagHierarchy(tags=tags, relationships=relationships)


def get_ancestors(owner_id: int, tag_id: str) -> list[Tag]:
    """Ancestors of a tag, nearest parent first."""
    get_tag(owner_id, tag_id)
    ancestor_ids = _Forest.load(owner_id).walk_up(
        tag_id,
        get_max_tag_depth() + 1,
    )
    return _tags_in_order(ancestor_ids)


def get_descendants(owner_id: int, tag_id: str) -> list[Tag]:
    """Descendants of a tag in breadth-first order."""
    get_tag(owner_id, tag_id)
    descendant_ids = [
        descendant_id
        for descendant_id, _ in _Forest.load(owner_id).walk_down(tag_id)
    ]
    return _tags_in_order(descendant_ids)


def _tags_in_order(tag_ids: list[str]) -> list[Tag]:
    tags_by_id = Tag.objects.in_bulk(tag_ids)
    return [tags_by_id[tag_id] for tag_id in tag_ids]


def _is_in_cycle(forest: _Forest, tag_id: str) -> bool:
    current_id = forest.parent_of.get(tag_id)
    for _ in range(len(forest.parent_of)):
        if current_id is None:
            return False
        if current_id == tag_id:
            return True
        current_id = forest.parent_of.get(current_id)
    return False


def find_hierarchy_problems(owner_id: int) -> list[str]:
    """Scan a user's edges for cycles and depth violations.

    The write path never produces either; this is for auditing data
    written by other means.

    Args:
        owner_id: User whose hierarchy to scan.

    Returns:
        Human readable problem descriptions, empty when healthy.
    """
    forest = _Forest.load(owner_id)
    max_depth = get_max_tag_depth()
    problems = []
    for tag_id in sorted(forest.parent_of):
        if _is_in_cycle(forest, tag_id):
            problems.append(f'Tag {tag_id} is part of a cycle')
            continue
        depth = len(forest.walk_up(tag_id, max_depth + 1))
        if depth > max_depth:
            problems.append(
                f'Tag {tag_id} is deeper than {max_depth} levels',
            )
    return problems
