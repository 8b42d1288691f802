"""
Health check endpoints.
"""
import time
from datetime import datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

from nodehub.errors import StoreError

start_time = time.time()


async def health_check(request: Request) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "uptime_seconds": int(time.time() - start_time),
    })


async def readiness_check(request: Request) -> JSONResponse:
    """
    Readiness check - verifies the database is reachable.

    Returns 200 if service is ready to accept requests, 503 otherwise.
    """
    checks = {}

    try:
        request.app.state.database.ping()
        checks["database"] = "ok"
    except StoreError as e:
        checks["database"] = f"error: {e}"

    all_ok = all(status == "ok" for status in checks.values())

    return JSONResponse(
        {
            "status": "ready" if all_ok else "not ready",
            "checks": checks,
            "timestamp": datetime.now().isoformat(),
        },
        status_code=200 if all_ok else 503,
    )
