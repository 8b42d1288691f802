"""
Input validation utilities for nodehub.

Request bodies are validated by the pydantic models in `nodehub.nodes.models`;
this module covers the pieces that arrive outside a body (path ids, RPC
inputs) and turns pydantic failures into a single error type.
"""

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Path segments under /nodes that a node id would be shadowed by
RESERVED_NODE_IDS = {"with-clients"}


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def validate_node_id(node_id: Any) -> str:
    """
    Validate node ID format.

    Node IDs are server-generated UUIDs or caller-supplied strings made of
    letters, numbers, hyphens and underscores.
    """
    if not isinstance(node_id, str):
        raise ValidationError("Node ID must be a string")

    if not node_id:
        raise ValidationError("Node ID cannot be empty")

    if len(node_id) > 100:
        raise ValidationError("Node ID too long (max 100 characters)")

    if not re.match(r"^[a-zA-Z0-9\-_]+$", node_id):
        raise ValidationError(
            "Node ID can only contain letters, numbers, hyphens, and underscores"
        )

    return node_id


def validate_new_node_id(node_id: Any) -> str:
    """Validate a caller-chosen id for a node being created."""
    node_id = validate_node_id(node_id)
    if node_id in RESERVED_NODE_IDS:
        raise ValidationError(f"Node ID '{node_id}' is reserved")
    return node_id


def parse_json_input(raw: str | None) -> Any:
    """Decode the JSON `input` query parameter of an RPC query."""
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON input: {e.msg}")


def validate_model(model: type[ModelT], data: Any) -> ModelT:
    """
    Validate data against a pydantic model.

    Raises:
        ValidationError: With a readable summary of every failing field.
    """
    if not isinstance(data, dict):
        raise ValidationError("Input must be a JSON object")
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e))


def format_errors(error: PydanticValidationError) -> str:
    """Flatten pydantic errors to `field: message; field: message`."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "input"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
