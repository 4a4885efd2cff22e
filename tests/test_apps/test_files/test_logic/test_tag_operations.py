"""Tests for tag CRUD business logic."""

import pytest

from tagshelf.apps.files.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from tagshelf.apps.files.logic import tag_operations
from tagshelf.apps.files.logic.tag_operations import (
    create_tag,
    delete_tag,
    get_tag,
    list_tags,
    update_tag,
)
from tagshelf.apps.files.models import Tag, TagAssociation, TagParent


@pytest.mark.django_db
def test_create_tag_default_color(user):
    """Test tag gets white color when none is given."""
    tag = create_tag(user.id, 'holidays')

    assert tag.user == user
    assert tag.name == 'holidays'
    assert tag.color == '#ffffff'
    assert len(tag.id) == 10


@pytest.mark.django_db
def test_create_tag_custom_color(user):
    """Test tag keeps a valid custom color."""
    tag = create_tag(user.id, 'work', color='#FF5733')

    assert Tag.objects.get(id=tag.id).color == '#FF5733'


@pytest.mark.django_db
@pytest.mark.parametrize(
    'color',
    ['red', '#fff', '#GGGGGG', 'ff5733', '#ff5733\n'],
)
def test_create_tag_rejects_bad_color(user, color):
    """Test malformed colors are rejected."""
    with pytest.raises(InvalidArgumentError):
        create_tag(user.id, 'work', color=color)

    assert not Tag.objects.exists()


@pytest.mark.django_db
def test_create_tag_rejects_empty_name(user):
    """Test empty names are rejected."""
    with pytest.raises(InvalidArgumentError):
        create_tag(user.id, '')


@pytest.mark.django_db
def test_create_tag_allows_duplicate_names(user):
    """Test two tags with the same name may coexist."""
    first = create_tag(user.id, 'cats')
    second = create_tag(user.id, 'cats')

    assert first.id != second.id
    assert Tag.objects.filter(user=user, name='cats').count() == 2


@pytest.mark.django_db
def test_create_tag_id_collision(user, make_tag, monkeypatch):
    """Test a colliding generated id raises ConflictError."""
    existing = make_tag(user, 'first')
    monkeypatch.setattr(tag_operations, 'generate_id', lambda: existing.id)

    with pytest.raises(ConflictError):
        create_tag(user.id, 'second')

    assert Tag.objects.get().name == 'first'

@pytest.mark.django_db
def test_get_tag_not_found(user):
    """Test missing tag raises NotFoundError."""
    with pytest.raises(NotFoundError):
        get_tag(user.id, 'missing')


@pytest.mark.django_db
def test_get_tag_other_owner(user, other_user, make_tag):
    """Test tag of another user raises UnauthorizedError."""
    tag = make_tag(other_user, 'private')

    with pytest.raises(UnauthorizedError):
        get_tag(user.id, tag.id)


@pytest.mark.django_db
def test_list_tags_ordered_by_name(user, other_user, make_tag):
    """Test listing returns only own tags ordered by name."""
    make_tag(user, 'zebra')
    make_tag(user, 'apple')
    make_tag(user, 'mango')
    make_tag(other_user, 'banana')

    names = [tag.name for tag in list_tags(user.id)]

    assert names == ['apple', 'mango', 'zebra']


@pytest.mark.django_db
def test_update_tag_name_and_color(user, make_tag):
    """Test both fields can be changed at once."""
    tag = make_tag(user, 'old')

    update_tag(user.id, tag.id, name='new', color='#000000')

    tag.refresh_from_db()
    assert tag.name == 'new'
    assert tag.color == '#000000'


@pytest.mark.django_db
def test_update_tag_empty_changeset_is_noop(user, make_tag):
    """Test update without fields succeeds and changes nothing."""
    tag = make_tag(user, 'same', color='#123456')

    updated = update_tag(user.id, tag.id)

    assert updated.id == tag.id
    tag.refresh_from_db()
    assert tag.name == 'same'
    assert tag.color == '#123456'


@pytest.mark.django_db
def test_update_tag_rejects_empty_name(user, make_tag):
    """Test renaming to an empty string is rejected."""
    tag = make_tag(user, 'keep')

    with pytest.raises(InvalidArgumentError):
        update_tag(user.id, tag.id, name='')

    tag.refresh_from_db()
    assert tag.name == 'keep'


@pytest.mark.django_db
@pytest.mark.parametrize('color', ['red', '#12345', ''])
def test_update_tag_rejects_bad_color(user, make_tag, color):
    """Test recoloring validates the new color."""
    tag = make_tag(user, 'keep', color='#123456')

    with pytest.raises(InvalidArgumentError):
        update_tag(user.id, tag.id, color=color)

    tag.refresh_from_db()
    assert tag.color == '#123456'

@pytest.mark.django_db
def test_update_tag_other_owner(user, other_user, make_tag):
    """Test another user cannot update the tag."""
    tag = make_tag(other_user, 'theirs')

    with pytest.raises(UnauthorizedError):
        update_tag(user.id, tag.id, name='mine')

    tag.refresh_from_db()
    assert tag.name == 'theirs'


@pytest.mark.django_db
def test_delete_tag_other_owner(user, other_user, make_tag):
    """Test another user cannot delete the tag."""
    tag = make_tag(other_user, 'theirs')

    with pytest.raises(UnauthorizedError):
        delete_tag(user.id, tag.id)

    assert Tag.objects.filter(id=tag.id).exists()


@pytest.mark.django_db
def test_delete_tag_not_found(user):
    """Test deleting a missing tag raises NotFoundError."""
    with pytest.raises(NotFoundError):
        delete_tag(user.id, 'missing')


@pytest.mark.django_db
def test_delete_tag_cascades_edges_and_associations(user, make_tag, make_file):
    """Test deleting a parent tag removes its edges and associations."""
    parent = make_tag(user, 'animals')
    child = make_tag(user, 'cats', parent=parent)
    make_file(user, 'file000001', 'kitten.jpg', tags=[parent, child])

    delete_tag(user.id, parent.id)

    assert not TagParent.objects.filter(child=child).exists()
    assert not TagAssociation.objects.filter(tag_id=parent.id).exists()
    assert TagAssociation.objects.filter(tag=child).count() == 1
    assert Tag.objects.filter(id=child.id).exists()
