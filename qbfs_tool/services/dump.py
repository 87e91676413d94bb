"""
Mount Table Dump.

Writes a fetched mount table to ``<dir>/mounts.dump.<unix seconds>`` as
JSON using the router's wire field names.
"""

import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter

from qbfs_tool.core.exceptions import DumpError
from qbfs_tool.core.logging import get_logger, log_with_source
from qbfs_tool.schemas.metastore import MountInfo

logger = get_logger(__name__)

DUMP_FILE_PREFIX = "mounts.dump"

_mounts_adapter = TypeAdapter(list[MountInfo])


def dump_file_path(output_dir: Path, now: float | None = None) -> Path:
    timestamp = int(now if now is not None else time.time())
    return output_dir / f"{DUMP_FILE_PREFIX}.{timestamp}"


def dump_mounts(
    mounts: Sequence[MountInfo],
    output_dir: Path | None = None,
    now: float | None = None,
) -> Path:
    """
    Serialize ``mounts`` to a timestamped file.

    Args:
        mounts: Mount table snapshot
        output_dir: Target directory. Defaults to the current working directory.
        now: Unix time used for the file suffix. Defaults to the current time.

    Returns:
        Path of the written file

    Raises:
        DumpError: If the file cannot be written
    """
    target = dump_file_path(output_dir if output_dir is not None else Path.cwd(), now)
    payload = _mounts_adapter.dump_json(list(mounts), by_alias=True)

    try:
        target.write_bytes(payload)
    except OSError as e:
        log_with_source(logger, "dump", "error", "Dump failed", path=str(target), error=str(e))
        raise DumpError(f"Fail to dump mounts to {target}: {e}") from e

    log_with_source(logger, "dump", "info", "Mount table dumped", path=str(target), count=len(mounts))
    return target
