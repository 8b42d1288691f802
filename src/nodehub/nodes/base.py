"""
Store contracts for the node system.

The services in `nodehub.nodes.service` only talk to persistence through
these two abstract classes; `nodehub.database.NodeDatabase` implements both.
"""

from abc import ABC, abstractmethod
from typing import Any

from nodehub.nodes.models import ClientRecord, Node


class NodeStore(ABC):
    """CRUD persistence for nodes."""

    @abstractmethod
    def list_all(self) -> list[Node]:
        """Return every node in creation order."""
        pass

    @abstractmethod
    def get_node(self, node_id: str) -> Node | None:
        """Return the node with the given id, or None."""
        pass

    @abstractmethod
    def create_node(self, fields: dict[str, Any]) -> Node:
        """
        Insert a node.

        Args:
            fields: name, type, host and access_url, plus id when the caller
                chose one. The store generates the id otherwise.

        Returns:
            The stored node.
        """
        pass

    @abstractmethod
    def update_node(self, node_id: str, changes: dict[str, Any]) -> Node | None:
        """
        Apply changes to a node.

        Returns:
            The updated node, or None if it does not exist.
        """
        pass

    @abstractmethod
    def delete_node(self, node_id: str) -> bool:
        """Delete a node. Returns False if it did not exist."""
        pass


class ClientStore(ABC):
    """Read access to node clients."""

    @abstractmethod
    def list_all_with_owners(self) -> list[ClientRecord]:
        """Return every client with its owning user attached, in store order."""
        pass
