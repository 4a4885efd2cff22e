"""Tests for check_tag_hierarchy management command."""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from tagshelf.apps.files.models import TagParent


@pytest.mark.django_db
class TestCheckTagHierarchyCommand:
    """Tests for check_tag_hierarchy management command."""

    def test_healthy_hierarchy(self, user, other_user, make_tag):
        """Test a valid forest passes."""
        root = make_tag(user, 'root')
        make_tag(user, 'child', parent=root)
        make_tag(other_user, 'alone')

        out = StringIO()
        call_command('check_tag_hierarchy', stdout=out)

        assert 'Checked 2 users, no problems found' in out.getvalue()

    def test_reports_cycle(self, user, make_tag):
        """Test a cycle fails the check."""
        first = make_tag(user, 'first')
        second = make_tag(user, 'second', parent=first)
        TagParent.objects.create(child=first, parent=second)

        err = StringIO()
        with pytest.raises(CommandError, match='Found 2 tag hierarchy'):
            call_command('check_tag_hierarchy', stderr=err)

        assert f'Tag {first.id} is part of a cycle' in err.getvalue()

    def test_reports_cross_owner_edge(self, user, other_user, make_tag):
        """Test edges between users' tags fail the check."""
        mine = make_tag(user, 'mine')
        theirs = make_tag(other_user, 'theirs')
        TagParent.objects.create(child=theirs, parent=mine)

        err = StringIO()
        with pytest.raises(CommandError, match='Found 1 tag hierarchy'):
            call_command('check_tag_hierarchy', stderr=err)

        assert 'links tags of different users' in err.getvalue()

    def test_user_filter(self, user, other_user, make_tag):
        """Test --user-id only checks that user."""
        first = make_tag(other_user, 'first')
        second = make_tag(other_user, 'second', parent=first)
        TagParent.objects.create(child=first, parent=second)
        make_tag(user, 'fine')

        out = StringIO()
        call_command('check_tag_hierarchy', user_id=user.id, stdout=out)

        assert 'Checked 1 users, no problems found' in out.getvalue()
