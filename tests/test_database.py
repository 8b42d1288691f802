"""
Unit tests for the SQLModel-backed node and client stores.
"""

from datetime import datetime, timezone

import pytest

from nodehub.errors import StoreError


def test_create_and_get_node(temp_db):
    node = temp_db.create_node({"name": "edge-1", "type": "proxy", "host": "10.0.0.5"})

    assert node.id
    assert node.created_at is not None

    fetched = temp_db.get_node(node.id)
    assert fetched is not None
    assert fetched.name == "edge-1"
    assert fetched.type == "proxy"
    assert fetched.host == "10.0.0.5"
    assert fetched.access_url is None


def test_create_defaults_type(temp_db):
    node = temp_db.create_node({"name": "edge-1"})
    assert node.type == "custom"


def test_create_with_given_id(temp_db, unique_id):
    node = temp_db.create_node({"id": unique_id, "name": "edge-1"})
    assert node.id == unique_id
    assert temp_db.get_node(unique_id).name == "edge-1"


def test_create_duplicate_id_raises_store_error(temp_db, unique_id):
    temp_db.create_node({"id": unique_id, "name": "first"})
    with pytest.raises(StoreError):
        temp_db.create_node({"id": unique_id, "name": "second"})


def test_get_missing_node(temp_db):
    assert temp_db.get_node("does-not-exist") is None


def test_list_all_in_creation_order(temp_db):
    names = ["gamma", "alpha", "beta"]
    for name in names:
        temp_db.create_node({"name": name})

    assert [n.name for n in temp_db.list_all()] == names


def test_update_node(temp_db):
    node = temp_db.create_node({"name": "edge-1", "access_url": "https://e1"})

    updated = temp_db.update_node(node.id, {"host": "h"})

    assert updated.host == "h"
    assert updated.name == "edge-1"
    assert updated.access_url == "https://e1"
    assert updated.updated_at >= node.updated_at


def test_update_missing_node(temp_db):
    assert temp_db.update_node("does-not-exist", {"name": "x"}) is None


def test_delete_node(temp_db):
    node = temp_db.create_node({"name": "edge-1"})

    assert temp_db.delete_node(node.id) is True
    assert temp_db.get_node(node.id) is None
    assert temp_db.delete_node(node.id) is False


def test_clients_with_owners(temp_db):
    node = temp_db.create_node({"name": "edge-1"})
    user_id = temp_db.create_user("Alice", "alice@example.com")
    first = temp_db.add_client(node.id, name="laptop", user_id=user_id)
    second = temp_db.add_client(node.id, name="phone")

    clients = temp_db.list_all_with_owners()

    assert [c.id for c in clients] == [first, second]
    assert clients[0].node_id == node.id
    assert clients[0].name == "laptop"
    assert clients[0].user.name == "Alice"
    assert clients[0].user.email == "alice@example.com"
    assert clients[1].user is None


def test_clients_survive_node_delete(temp_db):
    node = temp_db.create_node({"name": "edge-1"})
    temp_db.add_client(node.id, name="laptop")

    temp_db.delete_node(node.id)

    clients = temp_db.list_all_with_owners()
    assert len(clients) == 1
    assert clients[0].node_id == node.id


def test_ping(temp_db):
    assert temp_db.ping() is True


def test_timestamps_set_on_insert_and_update(temp_db):
    node = temp_db.create_node({"name": "edge-1"})
    assert node.created_at is not None
    assert node.updated_at is not None

    updated = temp_db.update_node(node.id, {"name": "edge-2"})
    assert updated.created_at == node.created_at
    assert updated.updated_at is not None

    client_id = temp_db.add_client(node.id, name="laptop")
    assert temp_db.list_all_with_owners()[0].id == client_id
    assert temp_db.list_all_with_owners()[0].created_at is not None


def test_list_all_keeps_insertion_order_on_equal_timestamps(temp_db):
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = [f"n{i}" for i in range(20)]
    for node_id in ids:
        temp_db.create_node({"id": node_id, "name": node_id, "created_at": stamp})

    assert [n.id for n in temp_db.list_all()] == ids
