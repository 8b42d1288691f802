"""
Named remote procedures for node management.

Every procedure is reachable at /rpc/{name}:
- queries (nodes.getAll, nodes.getAllWithClients, nodes.getById) via GET,
  with an optional `input` query parameter holding JSON
- mutations (nodes.create, nodes.update, nodes.delete) via POST, with the
  body {"input": ...}

A successful call returns {"result": ...}.
"""

from dataclasses import dataclass
from typing import Any, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse

from nodehub.errors import NotFoundError, StoreError
from nodehub.logger import get_logger
from nodehub.nodes.models import NodeCreate, NodeUpdateRequest
from nodehub.validation import (
    ValidationError,
    parse_json_input,
    validate_model,
    validate_new_node_id,
    validate_node_id,
)

logger = get_logger(__name__)

QUERY = "query"
MUTATION = "mutation"


@dataclass
class Procedure:
    """A callable exposed under a dotted name."""

    name: str
    kind: str
    handler: Callable[[Request, Any], Any]


def _dump(model) -> Any:
    return model.model_dump(mode="json", by_alias=True)


def _get_all(request: Request, _payload: Any) -> list[dict]:
    return [_dump(n) for n in request.app.state.node_service.list_all()]


def _get_all_with_clients(request: Request, _payload: Any) -> list[dict]:
    nodes = request.app.state.aggregation_service.list_all_with_clients()
    return [_dump(n) for n in nodes]


def _get_by_id(request: Request, payload: Any) -> dict:
    node_id = validate_node_id(payload)
    return _dump(request.app.state.node_service.get_by_id(node_id))


def _create(request: Request, payload: Any) -> dict:
    data = validate_model(NodeCreate, payload)
    if data.id:
        validate_new_node_id(data.id)
    return _dump(request.app.state.node_service.create(data))


def _update(request: Request, payload: Any) -> dict:
    req = validate_model(NodeUpdateRequest, payload)
    node_id = validate_node_id(req.id)
    return _dump(request.app.state.node_service.update(node_id, req.data))


def _delete(request: Request, payload: Any) -> dict:
    node_id = validate_node_id(payload)
    return _dump(request.app.state.node_service.delete(node_id))


PROCEDURES: dict[str, Procedure] = {
    p.name: p
    for p in [
        Procedure("nodes.getAll", QUERY, _get_all),
        Procedure("nodes.getAllWithClients", QUERY, _get_all_with_clients),
        Procedure("nodes.getById", QUERY, _get_by_id),
        Procedure("nodes.create", MUTATION, _create),
        Procedure("nodes.update", MUTATION, _update),
        Procedure("nodes.delete", MUTATION, _delete),
    ]
}


async def call_procedure(request: Request) -> JSONResponse:
    """GET|POST /rpc/{procedure}: Invoke a named procedure."""
    name = request.path_params.get("procedure", "")
    procedure = PROCEDURES.get(name)
    if procedure is None:
        return JSONResponse({"error": f"Unknown procedure: {name}"}, status_code=404)

    expected_method = "GET" if procedure.kind == QUERY else "POST"
    if request.method != expected_method:
        return JSONResponse(
            {"error": f"{name} is a {procedure.kind}; use {expected_method}"},
            status_code=405,
            headers={"Allow": expected_method},
        )

    try:
        if procedure.kind == QUERY:
            payload = parse_json_input(request.query_params.get("input"))
        else:
            try:
                body = await request.json()
            except ValueError:
                raise ValidationError("Invalid JSON body")
            if not isinstance(body, dict):
                raise ValidationError('Body must be {"input": ...}')
            payload = body.get("input")

        result = procedure.handler(request, payload)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except NotFoundError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except StoreError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

    logger.debug(f"RPC {name} ok")
    return JSONResponse({"result": result})
