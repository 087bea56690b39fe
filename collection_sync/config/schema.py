"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: Collection Sync Project
License: MIT
"""

from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(use_enum_values=True)

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: str = Field(
        default="collection_sync.log",
        description="Log file location"
    )
    rotation_size: int = Field(
        default=10485760,  # 10MB
        gt=0,
        description="Log file size before rotation (bytes)"
    )
    retention_count: int = Field(
        default=5,
        ge=0,
        description="Number of rotated log files to keep"
    )
    json_format: bool = Field(
        default=False,
        description="Emit log records as JSON"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class SyncOptions(BaseModel):
    """Reconciliation behaviour."""

    dry_run: bool = Field(
        default=False,
        description="Compute and print the plan without applying it"
    )
    verify_copies: bool = Field(
        default=False,
        description="Compare SHA-256 of each copied file with its source"
    )
    check_disk_space: bool = Field(
        default=True,
        description="Check free space in the target before each copy"
    )
    report_target_duplicates: bool = Field(
        default=True,
        description="Report files duplicated within the target tree"
    )


class Config(BaseModel):
    """
    Root configuration model.

    Source and target may come from the configuration file but are
    normally supplied on the command line.
    """

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    source_directory: Optional[str] = Field(
        default=None,
        description="Collection whose layout is authoritative (never modified)"
    )
    target_directory: Optional[str] = Field(
        default=None,
        description="Collection to reorganize"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncOptions = Field(default_factory=SyncOptions)

    @model_validator(mode="after")
    def validate_roots(self):
        """Ensure source and target are distinct, non-nested trees."""
        if self.source_directory and self.target_directory:
            source = Path(self.source_directory).expanduser().resolve()
            target = Path(self.target_directory).expanduser().resolve()
            if source == target:
                raise ValueError(f"Source and target are the same directory: {source}")
            if source in target.parents or target in source.parents:
                raise ValueError(
                    f"Source and target must not contain each other: {source}, {target}"
                )
        return self
