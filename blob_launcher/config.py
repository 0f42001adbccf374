"""blob-indexer launcher configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LauncherSettings(BaseSettings):
    """Where the artifacts and logs live, and how strict a launch is."""

    model_config = SettingsConfigDict(
        env_prefix="BLOB_LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Paths ---
    root_dir: Path = Field(default_factory=Path.cwd)
    log_dir: Optional[Path] = None
    log_file_name: str = "indexer.log"
    target_dir: Optional[Path] = None

    # --- Artifact ---
    artifact_name: str = "blob-indexer"
    cargo_bin: str = "cargo"

    # Refuse to spawn when the artifact is missing instead of warning.
    require_artifact: bool = False

    @model_validator(mode="after")
    def _resolve_paths(self):
        self.root_dir = self.root_dir.expanduser().resolve()
        if self.log_dir is None:
            self.log_dir = self.root_dir / "logs"
        elif not self.log_dir.is_absolute():
            self.log_dir = self.root_dir / self.log_dir
        if self.target_dir is None:
            self.target_dir = self.root_dir / "target"
        elif not self.target_dir.is_absolute():
            self.target_dir = self.root_dir / self.target_dir
        return self

    @property
    def log_file(self) -> Path:
        return self.log_dir / self.log_file_name

    def artifact_path(self, profile: str) -> Path:
        """Installed artifact for a build profile, e.g. ``<root>/blob-indexer-debug``."""
        return self.root_dir / f"{self.artifact_name}-{profile}"

    def build_output_path(self, profile: str) -> Path:
        """Where cargo leaves the binary for a build profile."""
        return self.target_dir / profile / self.artifact_name

