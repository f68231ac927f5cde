"""Configuration models describing lakecatalog settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LakeCatalogBaseModel(BaseModel):
    """Shared configuration for lakecatalog Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class FabricSettings(LakeCatalogBaseModel):
    """Connection settings for the Fabric REST and OneLake endpoints.

    Attributes:
        api_base_url: Base URL of the Fabric REST API.
        onelake_base_url: Base URL of the OneLake DFS endpoint.
        access_token: Optional bearer token obtained outside of lakecatalog.
        timeout_seconds: Per-request timeout applied to HTTP calls.
    """

    api_base_url: str = "https://api.fabric.microsoft.com/v1"
    onelake_base_url: str = "https://onelake.dfs.fabric.microsoft.com"
    access_token: Optional[str] = None
    timeout_seconds: float = 30.0


class CatalogSettings(LakeCatalogBaseModel):
    """Settings that govern catalog discovery.

    Attributes:
        container_type: Item type treated as a storage container.
        files_root: Folder beneath each container that holds its files.
        max_concurrency: Number of containers listed at the same time.
    """

    container_type: str = "Lakehouse"
    files_root: str = "Files"
    max_concurrency: int = Field(default=1, ge=1)


class PreviewSettings(LakeCatalogBaseModel):
    """Preview and download behavior.

    Attributes:
        downloads_dir: Directory used when saving a previewed file.
        spool_threshold_bytes: Blobs at or above this size are spooled to disk.
    """

    downloads_dir: str = "~/Downloads"
    spool_threshold_bytes: int = Field(default=8 * 1024 * 1024, ge=0)


class LoggingSettings(LakeCatalogBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level name.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(LakeCatalogBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        json_default: Whether commands emit JSON by default.
    """

    quiet_default: bool = False
    json_default: bool = False


class LakeCatalogConfig(LakeCatalogBaseModel):
    """Top-level configuration struct for lakecatalog.

    Attributes:
        fabric: Endpoint and credential settings.
        catalog: Discovery settings.
        preview: Preview and download settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    fabric: FabricSettings = Field(default_factory=FabricSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "LakeCatalogBaseModel",
    "FabricSettings",
    "CatalogSettings",
    "PreviewSettings",
    "LoggingSettings",
    "CLIOptions",
    "LakeCatalogConfig",
]
