"""
Configuration Management.

Resolves the router endpoint and token used by every command.

Sources, highest precedence first:
    --conf_path FILE      - explicit YAML conf file, replaces everything else
    --server_url/-u, --server_token/-t flags
    QBFS_SERVER_URL, QBFS_SERVER_TOKEN environment variables
    ~/.qbfs_tool/conf.yaml - default YAML conf file, optional

The resolved ToolConfig is built once per invocation and passed explicitly
into the metastore client. Nothing here is a process-wide singleton.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from qbfs_tool.core.config_schema import LoggingSchema, ToolConfSchema
from qbfs_tool.core.exceptions import ConfigurationError

DEFAULT_CONF_PATH = Path("~/.qbfs_tool/conf.yaml")


class Settings(BaseSettings):
    """Endpoint and token overrides read from QBFS_* environment variables."""

    server_url: str | None = None
    server_token: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="QBFS_",
        case_sensitive=False,
        extra="ignore",
    )


@dataclass(frozen=True)
class ToolConfig:
    """Connection settings for one command invocation."""

    server_url: str
    server_token: str = field(repr=False)
    timeout: float = 30.0
    logging: LoggingSchema = field(default_factory=LoggingSchema)


def default_conf_path() -> Path:
    """Return the expanded default conf file location."""
    return DEFAULT_CONF_PATH.expanduser()


def load_yaml_config(path: Path) -> dict[str, Any]:
    """
    Load a YAML conf file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file cannot be read, is not valid YAML,
            or is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping")
    return data


def load_conf_file(path: Path) -> ToolConfSchema:
    """Load and validate a conf file. Returns typed model instance."""
    raw = load_yaml_config(path)
    try:
        return ToolConfSchema(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e


def resolve_tool_config(
    server_url: str | None = None,
    server_token: str | None = None,
    conf_path: Path | None = None,
    default_path: Path | None = None,
) -> ToolConfig:
    """
    Merge all configuration sources into a ToolConfig.

    Args:
        server_url: Value of --server_url, if given.
        server_token: Value of --server_token, if given.
        conf_path: Value of --conf_path. The file must exist.
        default_path: Fallback conf file. Defaults to ~/.qbfs_tool/conf.yaml
            and is silently skipped when absent.

    Raises:
        ConfigurationError: If the endpoint or token is still unknown, or a
            conf file cannot be read.
    """
    if conf_path is not None:
        try:
            conf = load_conf_file(conf_path.expanduser())
        except FileNotFoundError as e:
            raise ConfigurationError(str(e)) from e
        url, token = conf.server_url, conf.server_token
    else:
        fallback = default_path if default_path is not None else default_conf_path()
        try:
            conf = load_conf_file(fallback)
        except FileNotFoundError:
            conf = ToolConfSchema()
        env = Settings()
        url = server_url or env.server_url or conf.server_url
        token = server_token or env.server_token or conf.server_token

    missing = [
        name
        for name, value in (("server_url", url), ("server_token", token))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required setting(s): {', '.join(missing)}. "
            "Pass --server_url/--server_token, set QBFS_SERVER_URL/QBFS_SERVER_TOKEN, "
            f"or write them to {DEFAULT_CONF_PATH}."
        )

    return ToolConfig(
        server_url=url.rstrip("/"),
        server_token=token,
        timeout=conf.timeout,
        logging=conf.logging,
    )


def load_logging_config(conf_path: Path | None = None) -> LoggingSchema:
    """Read only the Logging section, falling back to defaults on any problem."""
    path = conf_path.expanduser() if conf_path is not None else default_conf_path()
    try:
        return load_conf_file(path).logging
    except (FileNotFoundError, ConfigurationError):
        return LoggingSchema()
