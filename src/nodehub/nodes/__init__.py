"""
Node system for nodehub.

Nodes are named, typed endpoints with optional host and access URL. Clients
belong to exactly one node; the aggregation service lists nodes with their
clients grouped under them.
"""

from nodehub.nodes.base import ClientStore, NodeStore
from nodehub.nodes.models import (
    ClientOwner,
    ClientRecord,
    DeleteResponse,
    Node,
    NodeCreate,
    NodeUpdate,
    NodeUpdateRequest,
    NodeWithClients,
)
from nodehub.nodes.service import NodeAggregationService, NodeService, group_by_node

__all__ = [
    "ClientStore",
    "NodeStore",
    "ClientOwner",
    "ClientRecord",
    "DeleteResponse",
    "Node",
    "NodeCreate",
    "NodeUpdate",
    "NodeUpdateRequest",
    "NodeWithClients",
    "NodeAggregationService",
    "NodeService",
    "group_by_node",
]
