"""
Configuration Schemas.

Pydantic models defining the expected structure of the tool's YAML conf
file (default ``~/.qbfs_tool/conf.yaml``). Unknown keys or wrong types raise
a clear ValidationError when the file is loaded instead of a cryptic
failure deep inside a command.

Example conf.yaml:

    ServerUrl: http://router.example.com:8080/api
    ServerToken: s3cr3t
    Logging:
      Level: INFO
      Format: console
      File:
        Enabled: true
        Path: ~/.qbfs_tool/logs/qbfs_tool.jsonl
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# =============================================================================
# Logging section
# =============================================================================


class FileHandlerSchema(_StrictBase):
    enabled: bool = Field(False, alias="Enabled")
    path: str = Field("~/.qbfs_tool/logs/qbfs_tool.jsonl", alias="Path")
    max_bytes: int = Field(10 * 1024 * 1024, alias="MaxBytes")
    backup_count: int = Field(3, alias="BackupCount")


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("WARNING", alias="Level")
    format: Literal["console", "json"] = Field("console", alias="Format")
    file: FileHandlerSchema = Field(default_factory=FileHandlerSchema, alias="File")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value):
        return value.lower() if isinstance(value, str) else value


# =============================================================================
# conf.yaml
# =============================================================================


class ToolConfSchema(_StrictBase):
    server_url: str | None = Field(None, alias="ServerUrl")
    server_token: str | None = Field(None, alias="ServerToken")
    timeout: float = Field(30.0, alias="Timeout", gt=0)
    logging: LoggingSchema = Field(default_factory=LoggingSchema, alias="Logging")
