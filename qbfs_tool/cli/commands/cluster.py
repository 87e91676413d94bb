"""
Cluster Commands.

Read-only views of the physical clusters behind the router.
"""

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from qbfs_tool.cli.context import create_client, get_tool_config, handle_errors
from qbfs_tool.core.config import ToolConfig
from qbfs_tool.schemas.metastore import ClusterInfo

app = typer.Typer(help="Options for clusters")
console = Console()


@app.command("list")
def list_clusters(ctx: typer.Context) -> None:
    """
    List cluster info.

    Examples:
        qbfs-tool cluster list
    """
    config = get_tool_config(ctx)
    with handle_errors("cluster list"):
        clusters = asyncio.run(_list(config))

    table = Table(show_header=True)
    table.add_column("FS Scheme", style="cyan")
    table.add_column("FS Authority")
    table.add_column("Trash FS Path")
    table.add_column("State")

    for info in clusters:
        ident = info.cluster_identifier
        table.add_row(
            escape(ident.fs_scheme),
            escape(ident.fs_authority),
            escape(info.trash_path),
            escape(info.state),
        )

    console.print(table)


async def _list(config: ToolConfig) -> list[ClusterInfo]:
    async with create_client(config) as client:
        return await client.list_cluster_infos()
