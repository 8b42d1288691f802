"""
Pydantic models for the node system.

Covers:
- Domain records returned by the stores (Node, ClientRecord)
- The aggregated NodeWithClients view
- REST / RPC request and response schemas

All models serialize with camelCase aliases (`accessUrl`, `nodeId`) and
accept either camelCase or snake_case on input.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_NODE_TYPE = "custom"


class CamelModel(BaseModel):
    """Base model with camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ─── Domain Records ──────────────────────────────────────────────────


class Node(CamelModel):
    """A named, typed endpoint."""

    id: str
    name: str
    type: str = DEFAULT_NODE_TYPE
    host: str | None = None
    access_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClientOwner(CamelModel):
    """The user that owns a client."""

    id: str
    name: str
    email: str | None = None


class ClientRecord(CamelModel):
    """A client attached to a node, enriched with its owner."""

    id: int
    node_id: str
    user_id: str | None = None
    name: str = ""
    created_at: datetime | None = None
    user: ClientOwner | None = None


class NodeWithClients(Node):
    """A node plus every client whose nodeId matches it, in store order."""

    items: list[ClientRecord] = Field(default_factory=list)


# ─── Request Models ──────────────────────────────────────────────────


class NodeCreate(CamelModel):
    """POST /nodes request body and `nodes.create` input."""

    id: str | None = Field(default=None, min_length=1, max_length=100)
    name: str = Field(min_length=1)
    type: str = DEFAULT_NODE_TYPE
    host: str | None = None
    access_url: str | None = None


class NodeUpdate(CamelModel):
    """
    Partial update for a node.

    Only fields the caller actually sent are applied; host and accessUrl
    may be sent as null to clear them, name and type may not.
    """

    name: str | None = Field(default=None, min_length=1)
    type: str | None = None
    host: str | None = None
    access_url: str | None = None

    @field_validator("name", "type", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class NodeUpdateRequest(CamelModel):
    """`nodes.update` input."""

    id: str = Field(min_length=1)
    data: NodeUpdate


# ─── Response Models ─────────────────────────────────────────────────


class NodeListResponse(CamelModel):
    """GET /nodes response."""

    nodes: list[Node]
    count: int


class NodeWithClientsListResponse(CamelModel):
    """GET /nodes/with-clients response."""

    nodes: list[NodeWithClients]
    count: int


class DeleteResponse(CamelModel):
    """Acknowledgement returned by delete."""

    success: bool = True
