"""
Service Commands.

Health checks against the router metastore.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from qbfs_tool.cli.context import create_client, get_tool_config, handle_errors
from qbfs_tool.core.config import ToolConfig
from qbfs_tool.services.health import ProbeResult, check_service_health

app = typer.Typer(help="Options for router-server service")
console = Console()


@app.command()
def state(
    ctx: typer.Context,
    check_number: int = typer.Option(
        5, "--check-number", "-n", min=1, help="Calls per API used for the average"
    ),
) -> None:
    """
    Show the router-server service state.

    Calls the mount list and cluster list APIs N times each, concurrently,
    and reports whether they answered and their average latency.

    Examples:
        qbfs-tool service state
        qbfs-tool service state -n 20
    """
    config = get_tool_config(ctx)
    with handle_errors("service state"):
        results = asyncio.run(_state(config, check_number))

    _display_probes(results)

    if not all(result.ok for result in results):
        raise typer.Exit(1)


async def _state(config: ToolConfig, number: int) -> list[ProbeResult]:
    """Async implementation of state command."""
    async with create_client(config) as client:
        return await check_service_health(client, number)


def _display_probes(results: list[ProbeResult]) -> None:
    table = Table(show_header=True)
    table.add_column("API Name", style="cyan")
    table.add_column("State")
    table.add_column("Avg Time(ms)/Number")

    for result in results:
        color = "green" if result.ok else "red"
        table.add_row(
            result.api_name,
            f"[{color}]{result.state}[/{color}]",
            f"{result.avg_ms}(ms)/{result.number}",
        )

    console.print(table)
