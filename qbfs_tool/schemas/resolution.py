"""
Resolution Schemas.

Tagged results returned by the path resolver. A result is either a resolved
path (with the mount that produced it) or a typed failure kind. Turning a
failure into display text is left to the presentation layer.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from qbfs_tool.schemas.metastore import MountInfo

VIRTUAL_SCHEME = "qbfs"
VIRTUAL_PREFIX = f"{VIRTUAL_SCHEME}://"


class Direction(str, Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class ResolutionErrorKind(str, Enum):
    MALFORMED_INPUT = "malformed_input"
    WRONG_SCHEME = "wrong_scheme"
    NOT_FOUND = "not_found"


class ResolvedPath(BaseModel):
    """A successful resolution."""

    model_config = ConfigDict(frozen=True)

    query: str
    path: str
    mount: MountInfo


class ResolutionResult(BaseModel):
    """
    Outcome of resolving one query.

    Exactly one of ``path`` or ``error`` is set. ``message`` carries the
    underlying exception text for logging; it is not meant for display.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    direction: Direction
    path: str | None = None
    mount: MountInfo | None = None
    error: ResolutionErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, resolved: ResolvedPath, direction: Direction) -> "ResolutionResult":
        return cls(
            query=resolved.query,
            direction=direction,
            path=resolved.path,
            mount=resolved.mount,
        )

    @classmethod
    def failure(
        cls,
        query: str,
        direction: Direction,
        error: ResolutionErrorKind,
        message: str | None = None,
    ) -> "ResolutionResult":
        return cls(query=query, direction=direction, error=error, message=message)
