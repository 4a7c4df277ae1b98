"""Configuration and environment for the cluster backup."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ALL_NAMESPACES = "*"


class Settings(BaseSettings):
    """Backup settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="CLUSTER_BACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses in-cluster config or KUBECONFIG/default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    namespaces: str = Field(
        default=ALL_NAMESPACES,
        validation_alias=AliasChoices("CLUSTER_BACKUP_NAMESPACES", "NAMESPACES"),
        description="'*' for every namespace, or a comma-separated list",
    )

    # Snapshot output
    output_dir: Path = Field(default=Path("resources"), description="Root of the snapshot tree")
    archive_dir: Path = Field(default=Path("."), description="Directory the ZIP archive is written to")

    # Upload
    upload_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CLUSTER_BACKUP_UPLOAD_URL", "OCI_PAR_URL"),
        description="Pre-authenticated object storage URL (bucket prefix or full object URL)",
    )
    upload_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the upload; no timeout when unset",
    )
    skip_upload: bool = Field(default=False, description="Build the archive but do not upload it")


def parse_namespace_selector(selector: str) -> list[str] | None:
    """Return None for the wildcard, otherwise the trimmed, non-empty entries.

    Duplicates are kept in order.
    """
    if selector.strip() == ALL_NAMESPACES:
        return None
    return [ns.strip() for ns in selector.split(",") if ns.strip()]


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
