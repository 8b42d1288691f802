"""
Exceptions raised by the node services and stores.
"""


class NodehubError(Exception):
    """Base class for nodehub errors."""

    pass


class NotFoundError(NodehubError):
    """Raised when an operation targets a node id that does not exist."""

    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class StoreError(NodehubError):
    """Raised when the underlying persistence layer fails."""

    pass
