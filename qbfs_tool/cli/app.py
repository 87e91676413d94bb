"""
CLI Application.

Root Typer app: connection options, logging flags, and the command groups.

Usage:
    qbfs-tool --help                                   # Show help

    # Service
    qbfs-tool service state                            # Probe metastore APIs
    qbfs-tool service state -n 20                      # 20 calls per API

    # Clusters
    qbfs-tool cluster list                             # List cluster info

    # Mounts
    qbfs-tool mount list                               # List mount entries
    qbfs-tool mount list -r -c cluster-1               # With replicas, one cluster
    qbfs-tool mount dump -o /tmp                       # Dump table to a file
    qbfs-tool mount resolve qbfs://c1/a/x.txt          # Virtual -> physical
    qbfs-tool mount resolve -r hdfs://cluster-1/x.txt  # Physical -> virtual

Options:
    --server_url, -u      Router API prefix
    --server_token, -t    Router token
    --conf_path, -p       YAML conf file with ServerUrl/ServerToken
    --verbose, -v         Enable verbose output
    --debug, -d           Enable debug mode (detailed logging)
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from qbfs_tool.cli.commands import cluster_app, mount_app, service_app
from qbfs_tool.cli.context import CliState
from qbfs_tool.core.config import load_logging_config
from qbfs_tool.core.logging import setup_logging

LOGO = """
 ██████╗ ██████╗ ███████╗███████╗
██╔═══██╗██╔══██╗██╔════╝██╔════╝
██║   ██║██████╔╝█████╗  ███████╗
██║▄▄ ██║██╔══██╗██╔══╝  ╚════██║
╚██████╔╝██████╔╝██║     ███████║
 ╚══▀▀═╝ ╚═════╝ ╚═╝     ╚══════╝
"""

app = typer.Typer(
    name="qbfs-tool",
    help="QBFS router CLI - mount table, clusters, path resolution, and service state.",
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(service_app, name="service")
app.add_typer(service_app, name="s", hidden=True)
app.add_typer(cluster_app, name="cluster")
app.add_typer(cluster_app, name="c", hidden=True)
app.add_typer(mount_app, name="mount")
app.add_typer(mount_app, name="m", hidden=True)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    server_url: Optional[str] = typer.Option(
        None,
        "--server_url",
        "--server-url",
        "-u",
        help="Router API prefix, e.g. http://router:8080/api",
    ),
    server_token: Optional[str] = typer.Option(
        None,
        "--server_token",
        "--server-token",
        "-t",
        help="Router token",
    ),
    conf_path: Optional[Path] = typer.Option(
        None,
        "--conf_path",
        "--conf-path",
        "-p",
        help="Conf path to store server connection url",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    QBFS router CLI.

    Inspect the router mount table and clusters, and resolve paths between
    the qbfs:// namespace and physical filesystems.
    """
    ctx.obj = CliState(
        server_url=server_url,
        server_token=server_token,
        conf_path=conf_path,
    )

    logging_config = load_logging_config(conf_path)
    if debug:
        setup_logging(level="DEBUG", config=logging_config)
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", config=logging_config)
    else:
        setup_logging(config=logging_config)

    if ctx.invoked_subcommand is None:
        console.print(LOGO, highlight=False, markup=False)
        console.print(ctx.get_help(), highlight=False, markup=False)
        raise typer.Exit()


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
