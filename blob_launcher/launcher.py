"""Launcher: turn a (profile, mode) pair into a running blob-indexer.

Order of operations:

1. validate profile and mode (no side effects on bad input)
2. create the log directory
3. warn about a missing artifact (or refuse, when ``require_artifact`` is set)
4. spawn, attached and waited on, or detached and forgotten
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from blob_launcher import process
from blob_launcher.builder import Builder, CargoBuilder
from blob_launcher.config import LauncherSettings
from blob_launcher.models import (
    ArtifactMissing,
    BuildProfile,
    DirectoryCreationError,
    LaunchMode,
    LaunchResult,
    SpawnFailure,
)

logger = logging.getLogger(__name__)


class Launcher:
    """Starts the artifact for a build profile with its output logged."""

    def __init__(self, settings: Optional[LauncherSettings] = None) -> None:
        self.settings = settings or LauncherSettings()

    # ── Paths ──────────────────────────────────────────────────────────

    def artifact_path(self, profile: BuildProfile) -> Path:
        return self.settings.artifact_path(profile.value)

    @property
    def log_path(self) -> Path:
        return self.settings.log_file

    def ensure_log_dir(self) -> Path:
        """Create the log directory if absent. Idempotent."""
        log_dir = self.settings.log_dir
        try:
            if not log_dir.is_dir():
                log_dir.mkdir(parents=True, exist_ok=True)
                logger.info("Created log directory %s", log_dir)
        except OSError as e:
            raise DirectoryCreationError(f"cannot create log directory {log_dir}: {e}") from e
        return log_dir

    def check_artifact(self, profile: BuildProfile) -> bool:
        """Report whether the artifact exists; raise only in strict mode."""
        artifact = self.artifact_path(profile)
        if artifact.is_file():
            if not process.is_executable(artifact):
                logger.warning("binary %s is not executable", artifact.name)
            return True
        if self.settings.require_artifact:
            raise ArtifactMissing(f"binary {artifact.name} not found")
        logger.warning("binary %s not found", artifact.name)
        return False

    # ── Operations ─────────────────────────────────────────────────────

    def launch(self, profile: Optional[str], mode: Optional[str] = None) -> LaunchResult:
        """Start the artifact for ``profile`` in ``mode`` (default background).

        Foreground launches block until the child exits and carry its exit
        code; background launches return as soon as the child is spawned.

        Raises:
            UsageError: invalid profile or mode, before any side effect.
            DirectoryCreationError: the log directory cannot be created.
            ArtifactMissing: artifact absent and ``require_artifact`` set.
            SpawnFailure: the artifact could not be started.
        """
        build_profile = BuildProfile.parse(profile)
        launch_mode = LaunchMode.parse(mode)
        return self._launch(build_profile, launch_mode)

    def build_and_run(
        self,
        profile: Optional[str],
        mode: Optional[str] = None,
        builder: Optional[Builder] = None,
    ) -> LaunchResult:
        """Rebuild the artifact, then launch it.

        Raises:
            BuildFailure: the builder failed; nothing is launched.
        """
        build_profile = BuildProfile.parse(profile)
        launch_mode = LaunchMode.parse(mode)
        builder = builder or CargoBuilder(self.settings)
        builder.build(build_profile)
        return self._launch(build_profile, launch_mode)

    def _launch(self, profile: BuildProfile, mode: LaunchMode) -> LaunchResult:
        self.ensure_log_dir()
        found = self.check_artifact(profile)
        artifact = self.artifact_path(profile)
        cmd = [str(artifact)]

        try:
            with process.open_log(self.log_path) as log_file:
                if mode == LaunchMode.FOREGROUND:
                    proc = process.spawn_attached(cmd, log_file, cwd=self.settings.root_dir)
                else:
                    proc = process.spawn_detached(cmd, log_file, cwd=self.settings.root_dir)
        except OSError as e:
            raise SpawnFailure(f"cannot start {artifact}: {e}") from e

        exit_code = None
        if mode == LaunchMode.FOREGROUND:
            exit_code = process.wait_for_exit(proc)

        return LaunchResult(
            profile=profile,
            mode=mode,
            artifact_path=artifact,
            log_path=self.log_path,
            pid=proc.pid,
            artifact_found=found,
            exit_code=exit_code,
        )
