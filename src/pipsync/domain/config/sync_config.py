"""
Sync configuration domain model.

This module defines the SyncConfig domain entity containing the settings
that locate a package's PIP files, its database and its identity.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pipsync.domain.models import Package


class PackageConfig(BaseModel):
    """Identity of the package whose PIP files are synchronized."""

    model_config = ConfigDict(extra="forbid")

    identifier: str = Field(..., description="Package identifier, e.g. com.example.forum")
    name: str = Field("", description="Human readable package name")
    package_id: Optional[int] = Field(None, description="Known packageID, registered on demand if unset")

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Identifiers are dotted, lowercase-led names."""
        v = v.strip()
        if not v or " " in v:
            raise ValueError("Package identifier must be a non-empty name without spaces")
        return v

    def to_package(self) -> Package:
        return Package(id=self.package_id, package=self.identifier, package_name=self.name or self.identifier)


class SyncConfig(BaseModel):
    """
    Domain model for sync configuration.

    Paths are taken as given; relative paths resolve against the working directory.
    """

    model_config = ConfigDict(extra="allow")

    database_path: str = Field("output/installation.db", description="SQLite database of installed state")
    project_dir: str = Field(".", description="Directory holding the package's PIP files")
    pip_files: List[str] = Field(
        default_factory=lambda: ["packageInstallationPlugin.xml"],
        description="PIP files managed together, relative to project_dir",
    )
    package: PackageConfig = Field(..., description="Package owning the installation")
    log_level: str = Field("INFO", description="Console log level")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    indent: str = Field("\t", description="Indentation used when writing XML")

    @field_validator("pip_files")
    @classmethod
    def validate_pip_files(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one PIP file must be configured")
        if len(set(v)) != len(v):
            raise ValueError("PIP files must be unique")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level
