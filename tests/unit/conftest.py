"""
Unit Test Fixtures.

Fixtures for unit tests - the router metastore is always faked.
Unit tests never open real network connections.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from qbfs_tool.core.config import ToolConfig


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def tool_config() -> ToolConfig:
    """Resolved connection settings pointing at a fake router."""
    return ToolConfig(server_url="http://router.test/api", server_token="test-token", timeout=5.0)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch) -> Any:
    """Empty HOME and no QBFS_* variables, so no real conf file leaks in."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("QBFS_SERVER_URL", raising=False)
    monkeypatch.delenv("QBFS_SERVER_TOKEN", raising=False)
    return tmp_path


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


@pytest.fixture
def router_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build an httpx.MockTransport that answers like the router.

    Usage:
        transport = router_transport(mounts=payload, clusters=[], status=200)
        client = RouterMetastoreClient("http://router.test/api", "t", transport=transport)

    Every request seen is appended to ``transport.requests``.
    """

    def factory(
        mounts: Any = None,
        clusters: Any = None,
        status: int = 200,
        body: bytes | None = None,
    ) -> httpx.MockTransport:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if status != 200:
                return httpx.Response(status, content=b"error")
            if body is not None:
                return httpx.Response(200, content=body)
            if request.url.path.endswith("/mount/list"):
                return httpx.Response(200, content=json.dumps(mounts).encode())
            if request.url.path.endswith("/cluster/meta/list"):
                return httpx.Response(200, content=json.dumps(clusters).encode())
            return httpx.Response(404)

        transport = httpx.MockTransport(handler)
        transport.requests = seen  # type: ignore[attr-defined]
        return transport

    return factory


class FakeMetastoreClient:
    """In-memory stand-in for RouterMetastoreClient used by CLI tests."""

    def __init__(self, mounts=(), clusters=(), error: Exception | None = None) -> None:
        self.mounts = tuple(mounts)
        self.clusters = list(clusters)
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def __aenter__(self) -> "FakeMetastoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed = True

    async def list_mounts(self):
        self.calls.append("list_mounts")
        if self.error is not None:
            raise self.error
        return self.mounts

    async def list_cluster_infos(self):
        self.calls.append("list_cluster_infos")
        if self.error is not None:
            raise self.error
        return self.clusters


@pytest.fixture
def fake_client_cls() -> type[FakeMetastoreClient]:
    """Provide FakeMetastoreClient for patching create_client."""
    return FakeMetastoreClient
