"""
Mount Commands.

List, dump, and resolve against the router mount table. Each command
fetches a fresh snapshot; nothing is cached between invocations.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from qbfs_tool.cli.context import create_client, get_tool_config, handle_errors
from qbfs_tool.core.config import ToolConfig
from qbfs_tool.core.exceptions import DumpError
from qbfs_tool.schemas.metastore import MountInfo
from qbfs_tool.schemas.resolution import (
    VIRTUAL_PREFIX,
    Direction,
    ResolutionErrorKind,
    ResolutionResult,
)
from qbfs_tool.services.dump import dump_mounts
from qbfs_tool.services.resolver import resolve_batch

app = typer.Typer(help="Options for mount entry")
console = Console()

SEPARATOR = "-------------------------------"
NOT_SUPPORTED = "Not be supported yet."

FAILURE_MESSAGES = {
    ResolutionErrorKind.NOT_FOUND: "Not found.",
    ResolutionErrorKind.MALFORMED_INPUT: "Malformed path.",
    ResolutionErrorKind.WRONG_SCHEME: f"Wrong scheme, expected {VIRTUAL_PREFIX}.",
}


async def _fetch_mounts(config: ToolConfig) -> tuple[MountInfo, ...]:
    async with create_client(config) as client:
        return await client.list_mounts()


@app.command()
def add() -> None:
    """Add a new mount entry."""
    console.print(NOT_SUPPORTED)


@app.command()
def remove() -> None:
    """Remove a mount entry."""
    console.print(NOT_SUPPORTED)


@app.command()
def dump(
    ctx: typer.Context,
    output_file_path: Optional[Path] = typer.Option(
        None,
        "--output-file-path",
        "-o",
        help="Directory for the dump file (defaults to the current directory)",
    ),
) -> None:
    """
    Dump the mount table to local file.

    Writes JSON to <dir>/mounts.dump.<unix time>.

    Examples:
        qbfs-tool mount dump
        qbfs-tool mount dump -o /tmp
    """
    config = get_tool_config(ctx)
    with handle_errors("mount dump"):
        mounts = asyncio.run(_fetch_mounts(config))

    console.print(SEPARATOR)
    with handle_errors("mount dump"):
        try:
            target = dump_mounts(mounts, output_file_path)
        except DumpError:
            console.print("[red]ERROR: Fail to dump mounts.[/red]")
            raise

    console.print(f"SUCCEED: dump mount tables to {escape(str(target))}", highlight=False, soft_wrap=True)


@app.command("list")
def list_mounts(
    ctx: typer.Context,
    with_replica_path: bool = typer.Option(
        False, "--with-replica-path", "-r", help="Also show replica path and cluster"
    ),
    filter_cluster_id: Optional[str] = typer.Option(
        None, "--filter-cluster-id", "-c", help="Only show mounts targeting this cluster"
    ),
) -> None:
    """
    List all mount entries.

    Examples:
        qbfs-tool mount list
        qbfs-tool mount list -r -c cluster-1
    """
    config = get_tool_config(ctx)
    with handle_errors("mount list"):
        mounts = asyncio.run(_fetch_mounts(config))

    if filter_cluster_id:
        mounts = tuple(m for m in mounts if m.target_cluster_id == filter_cluster_id)

    table = Table(show_header=True)
    table.add_column("QBFS URI", style="cyan")
    table.add_column("Target FS Path")
    table.add_column("Target FS ClusterID")
    if with_replica_path:
        table.add_column("Replica FS Path")
        table.add_column("Replica FS ClusterID")

    for mount in mounts:
        row = [mount.path, mount.target_fs_path, mount.target_cluster_id]
        if with_replica_path:
            row += [mount.replica_fs_path, mount.replica_cluster_id]
        table.add_row(*(escape(cell) for cell in row))

    console.print(SEPARATOR)
    console.print(f"Mount entry size: {len(mounts)}", highlight=False)
    console.print(table)


@app.command()
def resolve(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(..., help="Paths to resolve"),
    reverse: bool = typer.Option(
        False, "--reverse", "-r", help="Resolve physical paths back to qbfs:// URIs"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Only match mount prefixes on path segment boundaries"
    ),
) -> None:
    """
    Resolve qbfs:// URIs to physical paths, or the reverse.

    Every path is resolved against the same mount table snapshot. A path that
    fails to resolve does not stop the others; the exit code is 1 if any did.

    Examples:
        qbfs-tool mount resolve qbfs://c1/a/example.txt
        qbfs-tool mount resolve -r hdfs://cluster-1/system/a.txt
    """
    config = get_tool_config(ctx)
    with handle_errors("mount resolve"):
        mounts = asyncio.run(_fetch_mounts(config))

    direction = Direction.REVERSE if reverse else Direction.FORWARD
    results = resolve_batch(mounts, paths, direction, strict=strict)

    _display_resolutions(results)

    if not all(result.ok for result in results):
        raise typer.Exit(1)


def _describe(result: ResolutionResult) -> str:
    if result.ok:
        return result.path or ""
    return FAILURE_MESSAGES[result.error]


def _display_resolutions(results: list[ResolutionResult]) -> None:
    table = Table(show_header=True)
    table.add_column("Path", style="cyan")
    table.add_column("Resolved Path")
    table.add_column("Status")

    for result in results:
        status = "[green]OK[/green]" if result.ok else f"[red]{result.error.value}[/red]"
        table.add_row(escape(result.query), escape(_describe(result)), status)

    console.print(table)
