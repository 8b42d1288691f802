"""
Node services.

NodeService implements the CRUD contract over a NodeStore.
NodeAggregationService joins nodes with their clients.
"""

from nodehub.errors import NotFoundError
from nodehub.logger import get_logger
from nodehub.nodes.base import ClientStore, NodeStore
from nodehub.nodes.models import (
    ClientRecord,
    DeleteResponse,
    Node,
    NodeCreate,
    NodeUpdate,
    NodeWithClients,
)

logger = get_logger(__name__)


class NodeService:
    """
    CRUD operations on nodes.

    Inputs are assumed to have passed the request models already; the
    service applies defaults and turns missing ids into NotFoundError.
    Store failures propagate unchanged.
    """

    def __init__(self, store: NodeStore):
        self.store = store

    def list_all(self) -> list[Node]:
        """Return all nodes, unfiltered, in store order."""
        return self.store.list_all()

    def get_by_id(self, node_id: str) -> Node:
        """
        Lookup a node by id.

        Raises:
            NotFoundError: If no node has this id.
        """
        node = self.store.get_node(node_id)
        if node is None:
            raise NotFoundError(node_id)
        return node

    def create(self, data: NodeCreate) -> Node:
        """
        Create a node.

        Empty host / access URL values are stored as null.
        """
        fields = {
            "name": data.name,
            "type": data.type,
            "host": data.host or None,
            "access_url": data.access_url or None,
        }
        if data.id:
            fields["id"] = data.id

        node = self.store.create_node(fields)
        logger.info(f"Created node '{node.name}' ({node.id}, type={node.type})")
        return node

    def update(self, node_id: str, patch: NodeUpdate) -> Node:
        """
        Apply a partial update; fields absent from the patch are untouched.

        Raises:
            NotFoundError: If no node has this id.
        """
        changes = patch.changes()
        if not changes:
            return self.get_by_id(node_id)

        node = self.store.update_node(node_id, changes)
        if node is None:
            raise NotFoundError(node_id)

        logger.info(f"Updated node {node_id}: {', '.join(sorted(changes))}")
        return node

    def delete(self, node_id: str) -> DeleteResponse:
        """
        Delete a node. Its clients are left in place.

        Raises:
            NotFoundError: If no node has this id.
        """
        if not self.store.delete_node(node_id):
            raise NotFoundError(node_id)

        logger.info(f"Deleted node {node_id}")
        return DeleteResponse(success=True)


def group_by_node(clients: list[ClientRecord]) -> dict[str, list[ClientRecord]]:
    """Bucket clients by nodeId, keeping their relative order."""
    grouped: dict[str, list[ClientRecord]] = {}
    for client in clients:
        grouped.setdefault(client.node_id, []).append(client)
    return grouped


class NodeAggregationService:
    """Builds the nodes-with-clients view from the two stores."""

    def __init__(self, node_store: NodeStore, client_store: ClientStore):
        self.node_store = node_store
        self.client_store = client_store

    def list_all_with_clients(self) -> list[NodeWithClients]:
        """
        Attach to every node the clients that reference it.

        Returns one entry per node in store order. Clients whose nodeId
        matches no node are left out.
        """
        nodes = self.node_store.list_all()
        clients = self.client_store.list_all_with_owners()

        by_node = group_by_node(clients)

        return [
            NodeWithClients(**node.model_dump(), items=by_node.get(node.id, []))
            for node in nodes
        ]
