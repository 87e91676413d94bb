"""
Path Resolver.

Maps paths between the qbfs:// virtual namespace and physical filesystem
paths using longest-prefix matching against a mount table snapshot.

Forward (virtual -> physical):
    qbfs://c1/a/b/example.txt  ->  hdfs://cluster-1/log/example.txt

Reverse (physical -> virtual):
    hdfs://cluster-1/log/a.txt  ->  qbfs://c1/a/b/a.txt

Matching is a plain character-prefix test, so mount ``c1/a`` also matches
``c1/ab``. This mirrors the router service. Pass ``strict=True`` to only
accept matches that end on a path segment boundary.

When two eligible entries have the same prefix length, the one that comes
first in the table wins.

All functions are pure. ``resolve_forward`` and ``resolve_reverse`` raise
ResolutionError subclasses; ``resolve_path`` and ``resolve_batch`` return
tagged ResolutionResult values instead.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from urllib.parse import unquote, urlsplit

from qbfs_tool.core.exceptions import (
    MalformedInputError,
    MountNotFoundError,
    ResolutionError,
    WrongSchemeError,
)
from qbfs_tool.core.logging import get_logger, log_with_source
from qbfs_tool.schemas.metastore import MountInfo
from qbfs_tool.schemas.resolution import (
    VIRTUAL_PREFIX,
    VIRTUAL_SCHEME,
    Direction,
    ResolutionErrorKind,
    ResolutionResult,
    ResolvedPath,
)

logger = get_logger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Characters that would change how a built qbfs:// URI parses.
_URI_RESERVED = str.maketrans({"%": "%25", "?": "%3F", "#": "%23"})

_ERROR_KINDS: dict[type[ResolutionError], ResolutionErrorKind] = {
    MalformedInputError: ResolutionErrorKind.MALFORMED_INPUT,
    WrongSchemeError: ResolutionErrorKind.WRONG_SCHEME,
    MountNotFoundError: ResolutionErrorKind.NOT_FOUND,
}


def _virtual_key(mount: MountInfo) -> str:
    return mount.path.strip()


def _target_key(mount: MountInfo) -> str:
    return mount.target_fs_path


def _on_boundary(prefix: str, candidate: str) -> bool:
    rest = candidate[len(prefix):]
    return not rest or rest.startswith("/") or prefix.endswith("/")


def find_longest_prefix(
    mounts: Iterable[MountInfo],
    candidate: str,
    key: Callable[[MountInfo], str],
    strict: bool = False,
) -> tuple[MountInfo, str] | None:
    """
    Pick the mount whose ``key`` is the longest prefix of ``candidate``.

    Returns:
        (mount, matched prefix), or None when nothing matches
    """
    best: tuple[MountInfo, str] | None = None
    for mount in mounts:
        prefix = key(mount)
        if not candidate.startswith(prefix):
            continue
        if strict and not _on_boundary(prefix, candidate):
            continue
        if best is None or len(prefix) > len(best[1]):
            best = (mount, prefix)
    return best


def _virtual_candidate(uri: str) -> str:
    """
    Parse a qbfs:// URI and return host + percent-decoded path.

    Userinfo is dropped from the authority; the port is kept. Query and
    fragment are ignored.
    """
    if _CONTROL_CHARS.search(uri):
        raise MalformedInputError(uri, "contains control characters")
    if _BAD_ESCAPE.search(uri):
        raise MalformedInputError(uri, "invalid percent-escape")

    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise MalformedInputError(uri, str(e)) from e

    if parts.scheme != VIRTUAL_SCHEME:
        raise WrongSchemeError(uri, parts.scheme, VIRTUAL_SCHEME)

    host = parts.netloc.rpartition("@")[2]
    return host + unquote(parts.path)


def resolve_forward(
    mounts: Sequence[MountInfo],
    uri: str,
    strict: bool = False,
) -> ResolvedPath:
    """
    Resolve a qbfs:// URI to its physical path.

    Raises:
        MalformedInputError: If the URI cannot be parsed
        WrongSchemeError: If the scheme is not qbfs
        MountNotFoundError: If no mount path prefixes the URI
    """
    candidate = _virtual_candidate(uri)
    match = find_longest_prefix(mounts, candidate, _virtual_key, strict)
    if match is None:
        raise MountNotFoundError(uri)

    mount, prefix = match
    return ResolvedPath(
        query=uri,
        path=mount.target_fs_path + candidate[len(prefix):],
        mount=mount,
    )


def resolve_reverse(
    mounts: Sequence[MountInfo],
    path: str,
    strict: bool = False,
) -> ResolvedPath:
    """
    Resolve a physical path back to its qbfs:// URI.

    Any string is accepted; there is no scheme check in this direction.
    ``%``, ``?`` and ``#`` in the remainder are percent-encoded so the
    result resolves forward to the same physical path.

    Raises:
        MountNotFoundError: If no mount target prefixes the path
    """
    match = find_longest_prefix(mounts, path, _target_key, strict)
    if match is None:
        raise MountNotFoundError(path)

    mount, prefix = match
    remainder = path[len(prefix):].translate(_URI_RESERVED)
    return ResolvedPath(
        query=path,
        path=VIRTUAL_PREFIX + _virtual_key(mount) + remainder,
        mount=mount,
    )


def resolve_path(
    mounts: Sequence[MountInfo],
    query: str,
    direction: Direction = Direction.FORWARD,
    strict: bool = False,
) -> ResolutionResult:
    """Resolve one query and return a tagged result. Never raises ResolutionError."""
    resolver = resolve_reverse if direction is Direction.REVERSE else resolve_forward
    try:
        resolved = resolver(mounts, query, strict=strict)
    except ResolutionError as e:
        log_with_source(
            logger,
            "resolver",
            "debug",
            "Resolution failed",
            query=query,
            direction=direction.value,
            code=e.code,
        )
        return ResolutionResult.failure(query, direction, _ERROR_KINDS[type(e)], e.message)

    log_with_source(
        logger,
        "resolver",
        "debug",
        "Resolved path",
        query=query,
        direction=direction.value,
        resolved=resolved.path,
        mount=resolved.mount.path,
    )
    return ResolutionResult.success(resolved, direction)


def resolve_batch(
    mounts: Sequence[MountInfo],
    queries: Iterable[str],
    direction: Direction = Direction.FORWARD,
    strict: bool = False,
) -> list[ResolutionResult]:
    """Resolve each query independently against the same mount table snapshot."""
    snapshot = tuple(mounts)
    return [resolve_path(snapshot, query, direction, strict) for query in queries]
