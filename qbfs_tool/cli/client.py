"""
Router Metastore Client.

Async HTTP client for the router metastore API. Built per command from a
resolved ToolConfig and closed when the command finishes; there is no
module-level instance.

Endpoints:
    POST {server_url}/mount/list          - mount table
    GET  {server_url}/cluster/meta/list   - cluster metadata

Every request carries the opaque token in a ``token`` header.
"""

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from qbfs_tool.core.config import ToolConfig
from qbfs_tool.core.exceptions import MetastoreRequestError, MetastoreResponseError
from qbfs_tool.core.logging import get_logger, log_with_source
from qbfs_tool.schemas.metastore import ClusterInfo, MountInfo, MountListResponse

logger = get_logger(__name__)

MOUNT_LIST_PATH = "/mount/list"
CLUSTER_LIST_PATH = "/cluster/meta/list"

_cluster_list_adapter = TypeAdapter(list[ClusterInfo] | None)


class RouterMetastoreClient:
    """
    HTTP client for the router metastore.

    Usage:
        async with RouterMetastoreClient.from_config(config) as client:
            mounts = await client.list_mounts()
            clusters = await client.list_cluster_infos()
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the metastore client.

        Args:
            base_url: Router API prefix, e.g. http://router:8080/api
            token: Opaque token sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: ToolConfig, **kwargs: Any) -> "RouterMetastoreClient":
        return cls(config.server_url, config.server_token, timeout=config.timeout, **kwargs)

    async def __aenter__(self) -> "RouterMetastoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json;charset=UTF-8",
                    "token": self._token,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str) -> bytes:
        """
        Call the metastore and return the raw body of a 200 response.

        Raises:
            MetastoreRequestError: On transport failure or a non-200 status
        """
        client = self._get_client()
        url = f"{self.base_url}{path}"

        log_with_source(logger, "metastore", "debug", "API request", method=method, url=url)

        try:
            response = await client.request(method, path)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "metastore",
                "error",
                "API request failed",
                method=method,
                url=url,
                error=str(e),
            )
            raise MetastoreRequestError(f"Errors on requesting url of [{url}]: {e}") from e

        log_with_source(
            logger,
            "metastore",
            "debug",
            "API response",
            method=method,
            url=url,
            status_code=response.status_code,
        )

        if response.status_code != 200:
            raise MetastoreRequestError(
                f"Errors on requesting url of [{url}], status code: [{response.status_code}]",
                status_code=response.status_code,
            )

        return response.content

    async def list_mounts(self) -> tuple[MountInfo, ...]:
        """Fetch the full mount table snapshot."""
        body = await self.request("POST", MOUNT_LIST_PATH)
        try:
            payload = MountListResponse.model_validate_json(body)
        except ValidationError as e:
            raise MetastoreResponseError(f"Malformed mount list response: {e}") from e

        log_with_source(logger, "metastore", "info", "Mounts fetched", count=len(payload.mounts))
        return payload.mounts

    async def list_cluster_infos(self) -> list[ClusterInfo]:
        """Fetch metadata for every mounted cluster."""
        body = await self.request("GET", CLUSTER_LIST_PATH)
        try:
            clusters = _cluster_list_adapter.validate_json(body) or []
        except ValidationError as e:
            raise MetastoreResponseError(f"Malformed cluster list response: {e}") from e

        log_with_source(logger, "metastore", "info", "Clusters fetched", count=len(clusters))
        return clusters
