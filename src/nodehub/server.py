"""
Starlette-based web server for nodehub.

This server provides a REST API with the following endpoints:
- /nodes: List and create nodes
- /nodes/with-clients: List nodes with their clients grouped under them
- /nodes/{node_id}: Get, update and delete a node
- /rpc/{procedure}: The same operations as named procedures (nodes.getAll, ...)
- /health, /ready: Liveness and readiness probes (no authentication)
"""

import os
import sys
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from nodehub.config import CONFIG
from nodehub.database import NodeDatabase, get_database
from nodehub.logger import get_logger, setup_logging
from nodehub.middleware import APIKeyAuthMiddleware, RequestLoggingMiddleware
from nodehub.nodes.service import NodeAggregationService, NodeService
from nodehub.routes.health_routes import health_check, readiness_check
from nodehub.routes.node_routes import (
    create_node,
    delete_node,
    get_node,
    list_nodes,
    list_nodes_with_clients,
    update_node,
)
from nodehub.routes.rpc_routes import call_procedure

logger = get_logger(__name__)


def create_app(
    database: NodeDatabase | None = None,
    api_keys: list[str] | None = None,
) -> Starlette:
    """
    Build the application.

    Args:
        database: Storage to use. Defaults to `get_database()`, opened on startup.
        api_keys: Accepted API keys. Defaults to CONFIG.api_keys.
    """
    keys = CONFIG.api_keys if api_keys is None else api_keys

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("Application startup - initializing services")

        db = database or get_database()
        app.state.database = db
        app.state.node_service = NodeService(db)
        app.state.aggregation_service = NodeAggregationService(db, db)

        if not keys:
            logger.warning("No API keys configured - all requests are allowed")

        yield

        logger.info("Application shutdown - disposing database engine")
        db.engine.dispose()

    return Starlette(
        debug="--debug" in sys.argv,
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Route("/ready", readiness_check, methods=["GET"]),
            Route("/nodes", list_nodes, methods=["GET"]),
            Route("/nodes", create_node, methods=["POST"]),
            Route("/nodes/with-clients", list_nodes_with_clients, methods=["GET"]),
            Route("/nodes/{node_id}", get_node, methods=["GET"]),
            Route("/nodes/{node_id}", update_node, methods=["PATCH"]),
            Route("/nodes/{node_id}", delete_node, methods=["DELETE"]),
            Route("/rpc/{procedure}", call_procedure, methods=["GET", "POST"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=CONFIG.cors_origins,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
            Middleware(RequestLoggingMiddleware),
            Middleware(APIKeyAuthMiddleware, api_keys=keys, public_paths=CONFIG.PUBLIC_PATHS),
        ],
        lifespan=lifespan,
    )


app = create_app()


def main(host: str | None = None, port: int | None = None) -> None:
    """Run the server with uvicorn."""
    import uvicorn

    if "--debug" in sys.argv:
        os.environ["LOG_LEVEL"] = "DEBUG"
        CONFIG.reload()

    setup_logging(level=CONFIG.log_level, log_file=CONFIG.log_file)

    host = host or CONFIG.host
    port = port or CONFIG.port

    logger.info(f"Starting nodehub server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=CONFIG.log_level.lower())


if __name__ == "__main__":
    main()
