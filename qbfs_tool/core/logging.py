"""
Centralized Logging Configuration.

All modules must use this logging setup. Do not create standalone loggers.
Defaults come from the Logging section of the conf file; the --verbose and
--debug flags override the level.

Structured fields in every JSON log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level (debug, info, warning, error, critical)
    logger      - Module path (e.g., qbfs_tool.cli.client)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    source      - Origin context, set explicitly (cli, metastore, resolver, ...)

Console output goes to stderr so tables on stdout stay pipeable.

Usage:
    from qbfs_tool.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Mounts fetched", count=12)

    from qbfs_tool.core.logging import log_with_source
    log_with_source(logger, "metastore", "debug", "API request", path="/mount/list")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from qbfs_tool.core.config_schema import LoggingSchema

VALID_SOURCES = frozenset({
    "cli",
    "metastore",
    "resolver",
    "health",
    "dump",
    "config",
    "unknown",
})
"""
Recognized log source values. Source is always set explicitly by the caller.
"""


def _resolve_log_path(configured_path: str) -> Path:
    """Expand ~ in the configured log file path."""
    return Path(configured_path).expanduser()


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    config: LoggingSchema | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the tool.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Overrides config.
        format_type: Output format ('json' or 'console'). Overrides config.
        config: Logging section of the conf file. Defaults apply when None.
        enable_file_logging: Whether to write to JSONL file. Overrides config.
    """
    config = config or LoggingSchema()

    effective_level = level if level is not None else config.level
    effective_format = format_type if format_type is not None else config.format
    effective_file_enabled = (
        enable_file_logging if enable_file_logging is not None
        else config.file.enabled
    )

    log_level = getattr(logging, effective_level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if effective_format == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            foreign_pre_chain=shared_processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if effective_file_enabled:
        log_path = _resolve_log_path(config.file.path)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=str(log_path),
                maxBytes=config.file.max_bytes,
                backupCount=config.file.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            # Console logging stays up; only the file sink is skipped.
            log_with_source(
                get_logger(__name__),
                "config",
                "warning",
                "File logging disabled",
                path=str(log_path),
                error=str(e),
            )
        else:
            file_handler.setFormatter(json_formatter)
            root_logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Args:
        logger: The logger instance
        source: Log source (cli, metastore, resolver, health, dump, config)
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **kwargs: Additional context fields

    Raises:
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "health", "info", "Probe finished", api="mount list")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
