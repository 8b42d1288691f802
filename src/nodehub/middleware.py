"""
Security and logging middleware for nodehub.

Provides API-key authentication and request logging.
"""
import hashlib
import secrets
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from nodehub.logger import get_logger

logger = get_logger(__name__)


class APIKeyAuthMiddleware(BaseHTTPMiddleware):
    """
    API key authentication middleware.

    Checks for API key in:
    1. Authorization header: "Bearer <key>"
    2. X-API-Key header: "<key>"
    3. Query parameter: "api_key=<key>"

    Configuration via environment:
        NODEHUB_API_KEYS=key1,key2,key3

    With no keys configured every request is let through.
    """

    def __init__(self, app, api_keys: Optional[list] = None,
                 public_paths: Optional[list] = None):
        super().__init__(app)
        self.public_paths = set(public_paths or ["/health", "/ready"])
        self.api_key_hashes = {hash_api_key(key) for key in api_keys or []}

    def _extract_api_key(self, request: Request) -> Optional[str]:
        """Extract API key from request."""
        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            return auth[7:]

        api_key = request.headers.get("X-API-Key")
        if api_key:
            return api_key

        return request.query_params.get("api_key")

    def _verify_api_key(self, api_key: str) -> bool:
        """Verify API key using constant-time comparison."""
        if not self.api_key_hashes:
            return True

        key_hash = hash_api_key(api_key)
        matches = [
            secrets.compare_digest(key_hash, known) for known in self.api_key_hashes
        ]
        return any(matches)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with authentication."""
        if request.url.path in self.public_paths:
            return await call_next(request)

        # CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        if not self.api_key_hashes:
            return await call_next(request)

        api_key = self._extract_api_key(request)

        if not api_key:
            logger.warning(f"Missing API key for {request.url.path}")
            return JSONResponse(
                {
                    "error": "Authentication required",
                    "message": "API key required in Authorization header or X-API-Key header"
                },
                status_code=401
            )

        if not self._verify_api_key(api_key):
            logger.warning(f"Invalid API key for {request.url.path}")
            return JSONResponse(
                {"error": "Invalid API key"},
                status_code=403
            )

        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log all requests with timing information.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response."""
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path}: {e}")
            raise

        duration = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {duration*1000:.2f}ms"
        )

        response.headers["X-Response-Time"] = f"{duration*1000:.2f}ms"

        return response


def generate_api_key() -> str:
    """Generate a secure random API key."""
    return secrets.token_urlsafe(32)


def hash_api_key(api_key: str) -> str:
    """Hash an API key for comparison."""
    return hashlib.sha256(api_key.encode()).hexdigest()
