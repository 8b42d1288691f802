"""nodehub: manage nodes and list them with their clients."""

__version__ = "0.1.0"
