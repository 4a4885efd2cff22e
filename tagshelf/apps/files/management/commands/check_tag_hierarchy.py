"""Management command to audit the integrity of tag hierarchies."""

import logging
from typing import Any

from django.core.management.base import BaseCommand, CommandError
from django.db.models import F

from tagshelf.apps.files.logic.hierarchy_operations import (
    find_hierarchy_problems,
)
from tagshelf.apps.files.models import Tag, TagParent

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Report cycles, depth violations and cross-owner tag edges."""

    help = 'Check tag hierarchies for cycles, depth and ownership problems'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--user-id',
            type=int,
            default=None,
            help='Only check tags of this user',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the check.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If any problem was found.
        """
        user_id = options['user_id']

        if user_id is None:
            owner_ids = list(
                Tag.objects.order_by('user_id').values_list(
                    'user_id',
                    flat=True,
                ).distinct(),
            )
        else:
            owner_ids = [user_id]

        problem_count = 0
        for owner_id in owner_ids:
            for problem in find_hierarchy_problems(owner_id):
                self.stderr.write(f'User {owner_id}: {problem}')
                problem_count += 1

        cross_owner = TagParent.objects.exclude(
            child__user_id=F('parent__user_id'),
        )
        if user_id is not None:
            cross_owner = cross_owner.filter(child__user_id=user_id)
        for edge in cross_owner:
            self.stderr.write(
                f'Edge {edge.parent_id} -> {edge.child_id} '
                'links tags of different users',
            )
            problem_count += 1

        if problem_count:
            logger.error(
                'Tag hierarchy check found %d problems',
                problem_count,
            )
            raise CommandError(
                f'Found {problem_count} tag hierarchy problems',
            )

        self.stdout.write(
            self.style.SUCCESS(
                f'Checked {len(owner_ids)} users, no problems found',
            ),
        )
