"""
Integration tests for the /rpc/{procedure} surface.
"""

import json
from unittest.mock import patch

from nodehub.database import NodeDatabase
from nodehub.errors import StoreError


def _create(client, **fields):
    response = client.post("/rpc/nodes.create", json={"input": fields})
    assert response.status_code == 200
    return response.json()["result"]


def test_get_all(client):
    _create(client, name="A")
    _create(client, name="B")

    response = client.get("/rpc/nodes.getAll")

    assert response.status_code == 200
    assert [n["name"] for n in response.json()["result"]] == ["A", "B"]


def test_create_defaults(client):
    node = _create(client, name="X")
    assert node["type"] == "custom"
    assert node["host"] is None
    assert node["accessUrl"] is None


def test_get_by_id(client):
    node = _create(client, name="A")

    response = client.get("/rpc/nodes.getById", params={"input": json.dumps(node["id"])})

    assert response.status_code == 200
    assert response.json()["result"]["id"] == node["id"]


def test_get_by_id_not_found(client):
    response = client.get("/rpc/nodes.getById", params={"input": '"nope"'})
    assert response.status_code == 404


def test_get_by_id_requires_string(client):
    response = client.get("/rpc/nodes.getById", params={"input": "42"})
    assert response.status_code == 400


def test_get_by_id_bad_json(client):
    response = client.get("/rpc/nodes.getById", params={"input": "{oops"})
    assert response.status_code == 400
    assert "Invalid JSON input" in response.json()["error"]


def test_update(client):
    node = _create(client, name="A", type="proxy")

    response = client.post(
        "/rpc/nodes.update",
        json={"input": {"id": node["id"], "data": {"host": "h"}}},
    )

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["host"] == "h"
    assert result["name"] == "A"
    assert result["type"] == "proxy"


def test_update_not_found(client):
    response = client.post(
        "/rpc/nodes.update", json={"input": {"id": "nope", "data": {"name": "B"}}}
    )
    assert response.status_code == 404
    assert "nope" in response.json()["error"]


def test_update_requires_data(client):
    response = client.post("/rpc/nodes.update", json={"input": {"id": "nope"}})
    assert response.status_code == 400


def test_delete(client):
    node = _create(client, name="A")

    response = client.post("/rpc/nodes.delete", json={"input": node["id"]})

    assert response.status_code == 200
    assert response.json()["result"] == {"success": True}
    assert client.get("/rpc/nodes.getAll").json()["result"] == []


def test_get_all_with_clients(client, temp_db):
    a = _create(client, id="a", name="N1")
    b = _create(client, id="b", name="N2")
    c1 = temp_db.add_client(b["id"])
    c2 = temp_db.add_client(a["id"])
    c3 = temp_db.add_client(a["id"])

    response = client.get("/rpc/nodes.getAllWithClients")

    result = response.json()["result"]
    assert [n["id"] for n in result] == ["a", "b"]
    assert [c["id"] for c in result[0]["items"]] == [c2, c3]
    assert [c["id"] for c in result[1]["items"]] == [c1]


def test_unknown_procedure(client):
    response = client.get("/rpc/nodes.explode")
    assert response.status_code == 404


def test_mutation_over_get_rejected(client):
    response = client.get("/rpc/nodes.create")
    assert response.status_code == 405
    assert response.headers["allow"] == "POST"


def test_query_over_post_rejected(client):
    response = client.post("/rpc/nodes.getAll", json={})
    assert response.status_code == 405


def test_create_rejects_reserved_id(client):
    response = client.post("/rpc/nodes.create", json={"input": {"id": "with-clients", "name": "X"}})
    assert response.status_code == 400
    assert "reserved" in response.json()["error"]


def test_create_store_failure(client):
    with patch.object(NodeDatabase, "create_node", side_effect=StoreError("boom")):
        response = client.post("/rpc/nodes.create", json={"input": {"name": "X"}})

    assert response.status_code == 500
    assert response.json()["error"] == "boom"


def test_get_all_with_clients_store_failure(client):
    with patch.object(NodeDatabase, "list_all_with_owners", side_effect=StoreError("boom")):
        response = client.get("/rpc/nodes.getAllWithClients")

    assert response.status_code == 500
    assert response.json()["error"] == "boom"
