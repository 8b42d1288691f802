"""
REST routes for node management.

Provides:
- GET    /nodes                 list nodes
- GET    /nodes/with-clients    list nodes with their clients grouped under them
- GET    /nodes/{node_id}       get one node
- POST   /nodes                 create a node
- PATCH  /nodes/{node_id}       partially update a node
- DELETE /nodes/{node_id}       delete a node
"""

from starlette.requests import Request
from starlette.responses import JSONResponse

from nodehub.errors import NotFoundError, StoreError
from nodehub.nodes.models import (
    NodeCreate,
    NodeListResponse,
    NodeUpdate,
    NodeWithClientsListResponse,
)
from nodehub.validation import (
    ValidationError,
    validate_model,
    validate_new_node_id,
    validate_node_id,
)


def _get_node_service(request: Request):
    """Get NodeService from app state."""
    return request.app.state.node_service


def _get_aggregation_service(request: Request):
    """Get NodeAggregationService from app state."""
    return request.app.state.aggregation_service


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")


async def list_nodes(request: Request) -> JSONResponse:
    """GET /nodes: List all nodes."""
    try:
        nodes = _get_node_service(request).list_all()
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    resp = NodeListResponse(nodes=nodes, count=len(nodes))
    return JSONResponse(_dump(resp))


async def list_nodes_with_clients(request: Request) -> JSONResponse:
    """GET /nodes/with-clients: List nodes, each with its clients under `items`."""
    try:
        nodes = _get_aggregation_service(request).list_all_with_clients()
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    resp = NodeWithClientsListResponse(nodes=nodes, count=len(nodes))
    return JSONResponse(_dump(resp))


async def get_node(request: Request) -> JSONResponse:
    """GET /nodes/{node_id}: Get a single node."""
    try:
        node_id = validate_node_id(request.path_params.get("node_id", ""))
        node = _get_node_service(request).get_by_id(node_id)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except NotFoundError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse(_dump(node))


async def create_node(request: Request) -> JSONResponse:
    """
    POST /nodes: Create a node.

    Body: {"name": "edge-1", "type": "custom", "host": "10.0.0.5",
           "accessUrl": "https://edge-1.example.com"}
    """
    try:
        data = validate_model(NodeCreate, await _read_json(request))
        if data.id:
            validate_new_node_id(data.id)
        node = _get_node_service(request).create(data)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse(_dump(node), status_code=201)


async def update_node(request: Request) -> JSONResponse:
    """
    PATCH /nodes/{node_id}: Update the fields present in the body.

    Body: any subset of {"name", "type", "host", "accessUrl"}.
    """
    try:
        node_id = validate_node_id(request.path_params.get("node_id", ""))
        patch = validate_model(NodeUpdate, await _read_json(request))
        node = _get_node_service(request).update(node_id, patch)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except NotFoundError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse(_dump(node))


async def delete_node(request: Request) -> JSONResponse:
    """DELETE /nodes/{node_id}: Delete a node."""
    try:
        node_id = validate_node_id(request.path_params.get("node_id", ""))
        result = _get_node_service(request).delete(node_id)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except NotFoundError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse(_dump(result))
