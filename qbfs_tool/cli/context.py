"""
Command Context.

Per-invocation state shared by the command groups: the connection options
collected by the root callback, config resolution, client construction, and
uniform handling of application errors.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from qbfs_tool.cli.client import RouterMetastoreClient
from qbfs_tool.core.config import ToolConfig, resolve_tool_config
from qbfs_tool.core.exceptions import ApplicationError
from qbfs_tool.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

err_console = Console(stderr=True)


@dataclass
class CliState:
    """Connection options from the root callback."""

    server_url: str | None = None
    server_token: str | None = None
    conf_path: Path | None = None


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """Turn an ApplicationError into a red message and exit code 1."""
    try:
        yield
    except ApplicationError as e:
        log_with_source(logger, "cli", "error", "Command failed", action=action, code=e.code, error=e.message)
        err_console.print(f"[red]Error: {escape(e.message)}[/red]", highlight=False)
        raise typer.Exit(1) from e


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.find_object(CliState)
    return state if state is not None else CliState()


def get_tool_config(ctx: typer.Context) -> ToolConfig:
    """Resolve the endpoint and token for this invocation."""
    state = get_state(ctx)
    with handle_errors("config"):
        return resolve_tool_config(
            server_url=state.server_url,
            server_token=state.server_token,
            conf_path=state.conf_path,
        )


def create_client(config: ToolConfig) -> RouterMetastoreClient:
    """Build a fresh metastore client for one command."""
    return RouterMetastoreClient.from_config(config)
