"""
Service Health Probe.

Times the two metastore read APIs concurrently. Each probe calls its API a
fixed number of times in sequence and reports the average latency; the two
probes run as independent asyncio tasks joined with gather.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pydantic import BaseModel

from qbfs_tool.core.exceptions import ApplicationError
from qbfs_tool.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

FAILED_AVG_MS = -1


class MetastoreReader(Protocol):
    async def list_mounts(self) -> Any: ...

    async def list_cluster_infos(self) -> Any: ...


class ProbeResult(BaseModel):
    """Outcome of one timed probe."""

    api_name: str
    number: int
    avg_ms: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def state(self) -> str:
        return "OK" if self.ok else "FAIL"


async def time_calls(action: Callable[[], Awaitable[Any]], number: int) -> int:
    """
    Await ``action`` ``number`` times and return the average in milliseconds.

    Stops at the first exception and lets it propagate.
    """
    if number < 1:
        raise ValueError("number must be at least 1")

    start = time.perf_counter()
    for _ in range(number):
        await action()
    elapsed_ms = (time.perf_counter() - start) * 1000
    return int(elapsed_ms) // number


async def run_probe(api_name: str, action: Callable[[], Awaitable[Any]], number: int) -> ProbeResult:
    """Time one API. Failures are captured in the result, not raised."""
    try:
        avg_ms = await time_calls(action, number)
    except ApplicationError as e:
        log_with_source(logger, "health", "warning", "Probe failed", api=api_name, error=e.message)
        return ProbeResult(api_name=api_name, number=number, avg_ms=FAILED_AVG_MS, error=e.message)

    log_with_source(logger, "health", "info", "Probe finished", api=api_name, avg_ms=avg_ms)
    return ProbeResult(api_name=api_name, number=number, avg_ms=avg_ms)


async def check_service_health(client: MetastoreReader, number: int = 5) -> list[ProbeResult]:
    """Probe ``mount list`` and ``cluster list`` concurrently."""
    results = await asyncio.gather(
        run_probe("mount list", client.list_mounts, number),
        run_probe("cluster list", client.list_cluster_infos, number),
    )
    return list(results)
