"""
Unit Tests for the Path Resolver.

Forward and reverse longest-prefix resolution against the reference mount
table, typed failures, and the ordering / round-trip properties.
"""

import itertools

import pytest

from qbfs_tool.core.exceptions import (
    MalformedInputError,
    MountNotFoundError,
    WrongSchemeError,
)
from qbfs_tool.schemas.metastore import MountInfo
from qbfs_tool.schemas.resolution import Direction, ResolutionErrorKind
from qbfs_tool.services.resolver import (
    find_longest_prefix,
    resolve_batch,
    resolve_forward,
    resolve_path,
    resolve_reverse,
)


# =============================================================================
# Forward resolution
# =============================================================================


class TestResolveForward:
    """qbfs:// URI -> physical path."""

    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("qbfs://c1/a/example.txt", "hdfs://cluster-1/system/example.txt"),
            ("qbfs://c1/a/b/example.txt", "hdfs://cluster-1/log/example.txt"),
            ("qbfs://c2/b/example.txt", "hdfs://cluster-2/system/example.txt"),
        ],
    )
    def test_resolves_reference_paths(self, mount_table, uri, expected):
        assert resolve_forward(mount_table, uri).path == expected

    def test_longest_prefix_wins(self, mount_table):
        resolved = resolve_forward(mount_table, "qbfs://c1/a/b/example.txt")
        assert resolved.mount.path == "c1/a/b"

    def test_exact_mount_point_has_empty_suffix(self, mount_table):
        assert resolve_forward(mount_table, "qbfs://c1/a").path == "hdfs://cluster-1/system"

    def test_matching_is_character_level(self, mount_table):
        """c1/a also matches c1/ab; the suffix is kept verbatim."""
        assert resolve_forward(mount_table, "qbfs://c1/ab/x").path == "hdfs://cluster-1/systemb/x"

    def test_strict_requires_segment_boundary(self, mount_table):
        with pytest.raises(MountNotFoundError):
            resolve_forward(mount_table, "qbfs://c1/ab/x", strict=True)

    def test_strict_still_matches_on_boundary(self, mount_table):
        resolved = resolve_forward(mount_table, "qbfs://c1/a/b/x", strict=True)
        assert resolved.path == "hdfs://cluster-1/log/x"

    def test_mount_path_whitespace_is_stripped(self):
        mounts = [MountInfo(path="  c1/a \t", target_fs_path="hdfs://cluster-1/system")]
        assert resolve_forward(mounts, "qbfs://c1/a/f").path == "hdfs://cluster-1/system/f"

    def test_query_and_fragment_are_dropped(self, mount_table):
        resolved = resolve_forward(mount_table, "qbfs://c1/a/f.txt?x=1#frag")
        assert resolved.path == "hdfs://cluster-1/system/f.txt"

    def test_percent_escapes_are_decoded(self, mount_table):
        resolved = resolve_forward(mount_table, "qbfs://c1/a/my%20file.txt")
        assert resolved.path == "hdfs://cluster-1/system/my file.txt"

    def test_scheme_is_case_insensitive(self, mount_table):
        assert resolve_forward(mount_table, "QBFS://c2/b/x").path == "hdfs://cluster-2/system/x"

    def test_userinfo_is_dropped(self, mount_table):
        assert resolve_forward(mount_table, "qbfs://user@c1/a/x").path == "hdfs://cluster-1/system/x"

    def test_not_found(self, mount_table):
        with pytest.raises(MountNotFoundError) as exc_info:
            resolve_forward(mount_table, "qbfs://c4/a.txt")
        assert exc_info.value.code == "RES_NOT_FOUND"
        assert exc_info.value.query == "qbfs://c4/a.txt"

    @pytest.mark.parametrize("uri", ["hdfs://c1/a/x", "c1/a/x", "file:///c1/a"])
    def test_wrong_scheme(self, mount_table, uri):
        with pytest.raises(WrongSchemeError) as exc_info:
            resolve_forward(mount_table, uri)
        assert exc_info.value.code == "RES_WRONG_SCHEME"
        assert exc_info.value.expected == "qbfs"

    @pytest.mark.parametrize(
        "uri",
        [
            "qbfs://[c1/a/x",
            "qbfs://c1/a/\nx",
            "qbfs://c1/a/%zz",
        ],
    )
    def test_malformed_input(self, mount_table, uri):
        with pytest.raises(MalformedInputError) as exc_info:
            resolve_forward(mount_table, uri)
        assert exc_info.value.code == "RES_MALFORMED_INPUT"

    def test_empty_table_is_not_found(self):
        with pytest.raises(MountNotFoundError):
            resolve_forward([], "qbfs://c1/a/example.txt")


# =============================================================================
# Reverse resolution
# =============================================================================


class TestResolveReverse:
    """Physical path -> qbfs:// URI."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("hdfs://cluster-1/system/a.txt", "qbfs://c1/a/a.txt"),
            ("hdfs://cluster-1/log/a.txt", "qbfs://c1/a/b/a.txt"),
            ("hdfs://cluster-2/system/a.txt", "qbfs://c2/b/a.txt"),
        ],
    )
    def test_resolves_reference_paths(self, mount_table, path, expected):
        assert resolve_reverse(mount_table, path).path == expected

    def test_not_found(self, mount_table):
        with pytest.raises(MountNotFoundError):
            resolve_reverse(mount_table, "hdfs://cluster-1/xlog/a.txt")

    def test_no_scheme_validation(self):
        mounts = [MountInfo(path="c9", target_fs_path="/local/data")]
        assert resolve_reverse(mounts, "/local/data/f").path == "qbfs://c9/f"

    def test_longest_target_wins(self):
        mounts = [
            MountInfo(path="short", target_fs_path="hdfs://c/data"),
            MountInfo(path="long", target_fs_path="hdfs://c/data/hot"),
        ]
        assert resolve_reverse(mounts, "hdfs://c/data/hot/f").path == "qbfs://long/f"

    def test_reserved_characters_are_encoded(self, mount_table):
        resolved = resolve_reverse(mount_table, "hdfs://cluster-1/system/x?y#z%2")
        assert resolved.path == "qbfs://c1/a/x%3Fy%23z%252"

    def test_empty_table_is_not_found(self):
        with pytest.raises(MountNotFoundError):
            resolve_reverse([], "hdfs://cluster-1/system/a.txt")


# =============================================================================
# Properties
# =============================================================================


class TestResolutionProperties:
    """Order invariance, ties, and round-trips."""

    @pytest.mark.parametrize(
        "uri",
        ["qbfs://c1/a/example.txt", "qbfs://c1/a/b/example.txt", "qbfs://c2/b/example.txt"],
    )
    def test_forward_invariant_to_table_order(self, mount_table, uri):
        outcomes = {resolve_forward(perm, uri).path for perm in itertools.permutations(mount_table)}
        assert len(outcomes) == 1

    @pytest.mark.parametrize(
        "path",
        ["hdfs://cluster-1/system/a.txt", "hdfs://cluster-1/log/a.txt"],
    )
    def test_reverse_invariant_to_table_order(self, mount_table, path):
        outcomes = {resolve_reverse(perm, path).path for perm in itertools.permutations(mount_table)}
        assert len(outcomes) == 1

    @pytest.mark.parametrize(
        "uri",
        ["qbfs://c1/a/example.txt", "qbfs://c1/a/b/deep/x.txt", "qbfs://c2/b/example.txt"],
    )
    def test_round_trip(self, mount_table, uri):
        physical = resolve_forward(mount_table, uri).path
        assert resolve_reverse(mount_table, physical).path == uri

    @pytest.mark.parametrize("name", ["x%3Fy", "x%23y", "x%25y", "my%20file"])
    def test_round_trip_with_escapes(self, mount_table, name):
        physical = resolve_forward(mount_table, f"qbfs://c1/a/{name}").path
        virtual = resolve_reverse(mount_table, physical).path
        assert resolve_forward(mount_table, virtual).path == physical

    def test_equal_length_tie_keeps_first_entry(self):
        mounts = [
            MountInfo(path="c1/a", target_fs_path="hdfs://first"),
            MountInfo(path="c1/a", target_fs_path="hdfs://second"),
        ]
        assert resolve_forward(mounts, "qbfs://c1/a/x").path == "hdfs://first/x"

    def test_find_longest_prefix_returns_none_without_match(self, mount_table):
        assert find_longest_prefix(mount_table, "zzz", lambda m: m.path) is None


# =============================================================================
# Tagged results
# =============================================================================


class TestResolvePath:
    """resolve_path never raises; failures become typed results."""

    def test_success_result(self, mount_table):
        result = resolve_path(mount_table, "qbfs://c1/a/example.txt")
        assert result.ok
        assert result.direction is Direction.FORWARD
        assert result.path == "hdfs://cluster-1/system/example.txt"
        assert result.mount.target_cluster_id == "cluster-1"
        assert result.error is None

    def test_reverse_direction(self, mount_table):
        result = resolve_path(mount_table, "hdfs://cluster-1/log/a.txt", Direction.REVERSE)
        assert result.path == "qbfs://c1/a/b/a.txt"

    @pytest.mark.parametrize(
        ("query", "kind"),
        [
            ("qbfs://c4/a.txt", ResolutionErrorKind.NOT_FOUND),
            ("hdfs://c1/a", ResolutionErrorKind.WRONG_SCHEME),
            ("qbfs://[broken", ResolutionErrorKind.MALFORMED_INPUT),
        ],
    )
    def test_failures_are_distinguishable(self, mount_table, query, kind):
        result = resolve_path(mount_table, query)
        assert not result.ok
        assert result.error is kind
        assert result.path is None
        assert result.message

    def test_batch_continues_after_failure(self, mount_table):
        results = resolve_batch(
            mount_table,
            ["qbfs://c4/a.txt", "qbfs://c1/a/example.txt", "hdfs://x"],
        )
        assert [r.ok for r in results] == [False, True, False]
        assert results[1].path == "hdfs://cluster-1/system/example.txt"
        assert results[2].error is ResolutionErrorKind.WRONG_SCHEME

    def test_batch_accepts_generators(self, mount_table):
        mounts = (m for m in mount_table)
        results = resolve_batch(mounts, ["qbfs://c1/a/x", "qbfs://c2/b/y"])
        assert [r.path for r in results] == ["hdfs://cluster-1/system/x", "hdfs://cluster-2/system/y"]
