"""
Schemas.

Pydantic models for metastore payloads and path resolution results.
"""

from qbfs_tool.schemas.metastore import (
    ClusterIdentifier,
    ClusterInfo,
    MountInfo,
    MountListResponse,
)
from qbfs_tool.schemas.resolution import (
    Direction,
    ResolutionErrorKind,
    ResolutionResult,
    ResolvedPath,
)

__all__ = [
    "ClusterIdentifier",
    "ClusterInfo",
    "Direction",
    "MountInfo",
    "MountListResponse",
    "ResolutionErrorKind",
    "ResolutionResult",
    "ResolvedPath",
]
