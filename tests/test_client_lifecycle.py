# tests/test_client_lifecycle.py
import pytest

from fcrepo_client import ConflictError, GoneError, NotFoundError
from tests.conftest import DC, contains_property, insert_literal, text_content, unique_id


def test_create_twice_conflicts(repo):
    path = unique_id()
    repo.create_object(path)
    with pytest.raises(ConflictError):
        repo.create_object(path)

def test_delete_resource_is_gone(repo):
    path = unique_id()
    resource = repo.create_object(path)
    assert resource.path == path

    resource.delete()
    with pytest.raises(GoneError) as exc:
        repo.get_object(path)
    assert "410 Gone" in str(exc.value)
    assert exc.value.status_code == 410

def test_deleted_path_cannot_be_reused(repo):
    path = unique_id()
    repo.create_object(path).delete()
    with pytest.raises(GoneError):
        repo.create_object(path)

def test_force_delete_resource_is_not_found(repo):
    path = unique_id()
    resource = repo.create_object(path)
    resource.force_delete()
    with pytest.raises(NotFoundError):
        repo.get_object(path)
    # the path is free again
    assert repo.create_object(path).path == path

def test_move_resource(repo):
    origin_path = unique_id()
    dest_path = unique_id()
    origin = repo.create_object(origin_path)
    origin.update_properties(insert_literal(DC + "identifier", "moved"))
    assert origin.path == origin_path

    moved = origin.move(dest_path)
    assert moved.path == dest_path
    dest = repo.get_object(dest_path)
    assert contains_property(DC + "identifier", "moved", dest.get_properties())

    with pytest.raises(GoneError):
        repo.get_object(origin_path)

def test_move_carries_children_and_content(repo):
    origin_path = unique_id()
    repo.create_object(origin_path)
    repo.create_datastream(f"{origin_path}/ds", text_content("payload"))
    origin = repo.get_object(origin_path)

    dest_path = unique_id()
    origin.move(dest_path)
    with repo.get_datastream(f"{dest_path}/ds").get_content() as stream:
        assert stream.read() == b"payload"

def test_force_move_resource(repo):
    origin_path = unique_id()
    dest_path = unique_id()
    origin = repo.create_object(origin_path)

    origin.force_move(dest_path)
    assert repo.get_object(dest_path).path == dest_path
    with pytest.raises(NotFoundError):
        repo.get_object(origin_path)

def test_move_onto_live_resource_conflicts(repo):
    a = repo.create_object(unique_id())
    b = repo.create_object(unique_id())
    with pytest.raises(ConflictError):
        a.move(b.path)

def test_copy_resource(repo):
    origin_path = unique_id()
    child_path = f"{origin_path}/{unique_id()}"
    dest_path = unique_id()

    origin = repo.create_object(origin_path)
    assert origin.path == origin_path
    child = repo.create_object(child_path)
    assert child.path == child_path

    copied = origin.copy(dest_path)
    dest = repo.get_object(dest_path)
    assert copied.path == dest.path == dest_path

    origin = repo.get_object(origin_path)
    assert len(origin.get_children(None)) == len(dest.get_children(None)) == 1

def test_copy_is_independent(repo):
    origin = repo.create_object(unique_id())
    ds = repo.create_datastream(f"{origin.path}/ds", text_content("original"))
    dest_path = unique_id()
    origin.copy(dest_path)

    repo.get_datastream(f"{dest_path}/ds").update_content(text_content("changed"))
    with ds.get_content() as stream:
        assert stream.read() == b"original"

    repo.create_object(f"{origin.path}/later")
    assert len(repo.get_object(dest_path).get_children()) == 1

def test_operations_under_tombstone_are_gone(repo):
    parent = repo.create_object(unique_id())
    repo.create_object(f"{parent.path}/child")
    parent.delete()
    with pytest.raises(GoneError):
        repo.get_object(f"{parent.path}/child")
    with pytest.raises(GoneError):
        repo.create_object(f"{parent.path}/other")
