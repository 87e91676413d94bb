"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Reference mount table:
    c1/a    =>  hdfs://cluster-1/system
    c1/a/b  =>  hdfs://cluster-1/log
    c2/b    =>  hdfs://cluster-2/system
"""

import logging
from collections.abc import Generator

import pytest

from qbfs_tool.schemas.metastore import MountInfo


# =============================================================================
# Mount Table Fixtures
# =============================================================================


@pytest.fixture
def mount_table() -> tuple[MountInfo, ...]:
    """The reference three-entry mount table."""
    return (
        MountInfo(path="c1/a", target_fs_path="hdfs://cluster-1/system", target_cluster_id="cluster-1"),
        MountInfo(path="c1/a/b", target_fs_path="hdfs://cluster-1/log", target_cluster_id="cluster-1"),
        MountInfo(path="c2/b", target_fs_path="hdfs://cluster-2/system", target_cluster_id="cluster-2"),
    )


@pytest.fixture
def mount_list_payload() -> dict:
    """A /mount/list response body as the router sends it."""
    return {
        "fsConfigs": {"cluster-1": "<configuration/>"},
        "mounts": [
            {
                "path": "c1/a",
                "attributes": 0,
                "targetClusterID": "cluster-1",
                "targetFsPath": "hdfs://cluster-1/system",
                "replicaFsPath": "hdfs://cluster-3/system",
                "replicaClusterID": "cluster-3",
                "switchMode": 1,
            },
            {
                "path": "c1/a/b",
                "targetClusterID": "cluster-1",
                "targetFsPath": "hdfs://cluster-1/log",
            },
            {
                "path": "c2/b",
                "targetClusterID": "cluster-2",
                "targetFsPath": "hdfs://cluster-2/system",
            },
        ],
    }


@pytest.fixture
def cluster_list_payload() -> list:
    """A /cluster/meta/list response body."""
    return [
        {
            "clusterIdentifier": {"fsScheme": "hdfs", "fsAuthority": "cluster-1"},
            "trashPrefix": "/.Trash",
            "state": "ACTIVE",
        },
        {
            "clusterIdentifier": {"FsScheme": "hdfs", "FsAuthority": "cluster-2"},
            "trashPrefix": "/user/trash",
            "state": "READONLY",
        },
    ]


# =============================================================================
# Logging Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_root_logging() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so they never outlive a test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
