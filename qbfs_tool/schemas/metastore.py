"""
Metastore Schemas.

Models for the router metastore responses. Field aliases are the JSON names
the router uses on the wire; the router's JSON is case-insensitive on a few
untagged fields, so those accept both spellings.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    """Immutable model that reads wire aliases and tolerates unknown keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def _wire(alias: str, *alternatives: str, default: Any = "") -> Any:
    return Field(
        default,
        alias=alias,
        validation_alias=AliasChoices(alias, *alternatives),
    )


class MountInfo(_WireModel):
    """
    One mount table entry.

    ``path`` is the mount point in the qbfs:// namespace without the scheme
    (e.g. ``c1/a``); ``target_fs_path`` is the physical location it maps to
    (e.g. ``hdfs://cluster-1/system``). The replica and switch fields are
    carried for display and dumps only.
    """

    path: str = _wire("path", "Path")
    attributes: int = _wire("attributes", "Attributes", default=0)

    target_cluster_id: str = _wire("targetClusterID", "TargetClusterID", "targetClusterId")
    target_fs_path: str = _wire("targetFsPath", "TargetFsPath")
    target_fs_config: str = _wire("TargetFsConfig", "targetFsConfig")

    replica_fs_path: str = _wire("replicaFsPath", "ReplicaFsPath")
    replica_cluster_id: str = _wire("replicaClusterID", "ReplicaClusterID", "replicaClusterId")
    replica_fs_config: str = _wire("ReplicaFsConfig", "replicaFsConfig")

    switch_mode: int = Field(
        0,
        alias="switchMode",
        validation_alias=AliasChoices("switchMode", "SwitchMode"),
        ge=0,
        le=255,
    )

    @field_validator(
        "path",
        "target_cluster_id",
        "target_fs_path",
        "target_fs_config",
        "replica_fs_path",
        "replica_cluster_id",
        "replica_fs_config",
        mode="before",
    )
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("attributes", "switch_mode", mode="before")
    @classmethod
    def _null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class MountListResponse(_WireModel):
    """Body of ``POST /mount/list``."""

    fs_configs: dict[str, str] = Field(
        default_factory=dict,
        alias="fsConfigs",
        validation_alias=AliasChoices("fsConfigs", "FsConfigs"),
    )
    mounts: tuple[MountInfo, ...] = _wire("mounts", "Mounts", default=())

    @field_validator("fs_configs", mode="before")
    @classmethod
    def _null_configs(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("mounts", mode="before")
    @classmethod
    def _null_mounts(cls, value: Any) -> Any:
        return () if value is None else value


class ClusterIdentifier(_WireModel):
    fs_authority: str = _wire("fsAuthority", "FsAuthority")
    fs_scheme: str = _wire("fsScheme", "FsScheme")


class ClusterInfo(_WireModel):
    """One entry of ``GET /cluster/meta/list``."""

    cluster_identifier: ClusterIdentifier = Field(
        default_factory=ClusterIdentifier,
        alias="clusterIdentifier",
        validation_alias=AliasChoices("clusterIdentifier", "ClusterIdentifier"),
    )
    trash_prefix: str = _wire("trashPrefix", "TrashPrefix")
    state: str = _wire("state", "State")

    @property
    def trash_path(self) -> str:
        """Fully qualified trash location, e.g. ``hdfs://cluster-1/.Trash``."""
        ident = self.cluster_identifier
        return f"{ident.fs_scheme}://{ident.fs_authority}{self.trash_prefix}"
