"""
CLI subcommands for managing nodes.

Usage:
    nodehub nodes list [--with-clients]
    nodehub nodes get <id>
    nodehub nodes create <name> [--type TYPE] [--host HOST] [--access-url URL]
    nodehub nodes update <id> [--name NAME] [--type TYPE] [--host HOST] [--access-url URL]
    nodehub nodes delete <id>
"""

import json
from typing import Optional

import typer

from nodehub.cli._http import _http_delete, _http_get, _http_patch, _http_post

nodes_app = typer.Typer(help="Manage nodes and inspect their clients")


def _print_node(node: dict, indent: str = "  ") -> None:
    typer.echo(f"{indent}{node['name']} [{node.get('type', 'custom')}]")
    typer.echo(f"{indent}   ID: {node['id']}")
    if node.get("host"):
        typer.echo(f"{indent}   Host: {node['host']}")
    if node.get("accessUrl"):
        typer.echo(f"{indent}   Access URL: {node['accessUrl']}")


@nodes_app.command("list")
def nodes_list(
    with_clients: bool = typer.Option(
        False, "--with-clients", "-c", help="Show the clients of each node"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """List all nodes."""
    data = _http_get("/nodes/with-clients" if with_clients else "/nodes")
    nodes = data.get("nodes", [])

    if as_json:
        typer.echo(json.dumps(nodes, indent=2))
        return

    if not nodes:
        typer.echo("No nodes.")
        return

    typer.echo(f"📡 Nodes ({len(nodes)}):\n")
    for node in nodes:
        _print_node(node)
        if with_clients:
            items = node.get("items", [])
            typer.echo(f"     Clients ({len(items)}):")
            for client in items:
                owner = (client.get("user") or {}).get("name", "unknown")
                typer.echo(f"       • #{client['id']} {client.get('name', '')} (owner: {owner})")
        typer.echo("")


@nodes_app.command("get")
def nodes_get(
    node_id: str = typer.Argument(help="Node ID"),
):
    """Show a single node."""
    data = _http_get(f"/nodes/{node_id}")
    _print_node(data, indent="")


@nodes_app.command("create")
def nodes_create(
    name: str = typer.Argument(help="Display name"),
    node_type: str = typer.Option("custom", "--type", "-t", help="Node type tag"),
    host: Optional[str] = typer.Option(None, "--host", help="Host name or address"),
    access_url: Optional[str] = typer.Option(
        None, "--access-url", help="URL clients use to reach the node"
    ),
):
    """Create a node."""
    data = _http_post(
        "/nodes",
        data={"name": name, "type": node_type, "host": host, "accessUrl": access_url},
    )
    typer.echo(f"✅ Created node {data['id']}")
    _print_node(data)


@nodes_app.command("update")
def nodes_update(
    node_id: str = typer.Argument(help="Node ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New display name"),
    node_type: Optional[str] = typer.Option(None, "--type", "-t", help="New type tag"),
    host: Optional[str] = typer.Option(
        None, "--host", help="New host (empty string clears it)"
    ),
    access_url: Optional[str] = typer.Option(
        None, "--access-url", help="New access URL (empty string clears it)"
    ),
):
    """Update the given fields of a node; other fields are left unchanged."""
    patch = {}
    if name is not None:
        patch["name"] = name
    if node_type is not None:
        patch["type"] = node_type
    if host is not None:
        patch["host"] = host or None
    if access_url is not None:
        patch["accessUrl"] = access_url or None

    if not patch:
        typer.echo("❌ Nothing to update. Pass at least one of --name, --type, --host, --access-url.")
        raise typer.Exit(code=1)

    data = _http_patch(f"/nodes/{node_id}", data=patch)
    typer.echo(f"✅ Updated node {data['id']}")
    _print_node(data)


@nodes_app.command("delete")
def nodes_delete(
    node_id: str = typer.Argument(help="Node ID"),
):
    """Delete a node. Its clients are not removed."""
    data = _http_delete(f"/nodes/{node_id}")
    if data.get("success"):
        typer.echo(f"✅ Deleted node {node_id}")
    else:
        typer.echo(f"❌ Failed to delete node {node_id}")
        raise typer.Exit(code=1)
