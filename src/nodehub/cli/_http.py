"""
Shared HTTP helpers for CLI commands that talk to the running server.
"""

import os

import httpx
import typer


def get_server_url() -> str:
    """Get the server URL from environment or default."""
    explicit = os.getenv("NODEHUB_SERVER_URL")
    if explicit:
        return explicit.rstrip("/")

    host = os.getenv("NODEHUB_HOST", "localhost")
    if host == "0.0.0.0":
        host = "localhost"
    port = os.getenv("NODEHUB_PORT", "8000")
    return f"http://{host}:{port}"


def _headers() -> dict:
    """Authorization header from NODEHUB_API_KEY, if set."""
    api_key = os.getenv("NODEHUB_API_KEY")
    return {"Authorization": f"Bearer {api_key}"} if api_key else {}


def _error_detail(e: httpx.HTTPStatusError) -> str:
    try:
        return e.response.json().get("error", str(e))
    except Exception:
        return f"HTTP {e.response.status_code}"


def _request(method: str, path: str, data: dict = None, timeout: float = 10.0) -> dict:
    """Send a request to the running server and return the decoded JSON body."""
    url = f"{get_server_url()}{path}"
    try:
        resp = httpx.request(
            method, url, json=data, headers=_headers(), timeout=timeout
        )
        resp.raise_for_status()
        return resp.json()
    except httpx.ConnectError:
        typer.echo("❌ Cannot connect to nodehub server. Is it running?")
        raise typer.Exit(code=1)
    except httpx.HTTPStatusError as e:
        typer.echo(f"❌ Server error: {_error_detail(e)}")
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)


def _http_get(path: str) -> dict:
    """Make a GET request to the running server."""
    return _request("GET", path)


def _http_post(path: str, data: dict = None) -> dict:
    """Make a POST request to the running server."""
    return _request("POST", path, data or {}, timeout=30.0)


def _http_patch(path: str, data: dict = None) -> dict:
    """Make a PATCH request to the running server."""
    return _request("PATCH", path, data or {})


def _http_delete(path: str) -> dict:
    """Make a DELETE request to the running server."""
    return _request("DELETE", path)
