"""Builders that produce the artifact for a build profile."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from blob_launcher.models import BuildFailure, BuildProfile

if TYPE_CHECKING:
    from blob_launcher.config import LauncherSettings

logger = logging.getLogger(__name__)


class Builder(ABC):
    """Produces an up-to-date executable at the profile's artifact path."""

    @abstractmethod
    def build(self, profile: BuildProfile) -> Path:
        """Build ``profile`` and return the installed artifact path.

        Raises:
            BuildFailure: the artifact could not be produced.
        """
        ...


class CargoBuilder(Builder):
    """Runs ``cargo build`` and installs the binary next to the launcher.

    ``<target>/<profile>/<name>`` is copied over ``<root>/<name>-<profile>``
    on every build, so a stale binary is never reused.
    """

    def __init__(self, settings: LauncherSettings) -> None:
        self.settings = settings

    def command(self, profile: BuildProfile) -> list[str]:
        cmd = [self.settings.cargo_bin, "build", "--target-dir", str(self.settings.target_dir)]
        if profile == BuildProfile.RELEASE:
            cmd.append("--release")
        return cmd

    def build(self, profile: BuildProfile) -> Path:
        cmd = self.command(profile)
        logger.info("Building %s: %s", profile.value, " ".join(cmd))
        try:
            result = subprocess.run(cmd, cwd=str(self.settings.root_dir))
        except OSError as e:
            raise BuildFailure(f"could not run {cmd[0]}: {e}") from e
        if result.returncode != 0:
            raise BuildFailure(f"{' '.join(cmd)} exited with code {result.returncode}")

        source = self.settings.build_output_path(profile.value)
        dest = self.settings.artifact_path(profile.value)
        if not source.is_file():
            raise BuildFailure(f"build output not found: {source}")
        install_artifact(source, dest)
        logger.info("Installed %s", dest)
        return dest


def install_artifact(source: Path, dest: Path) -> None:
    """Replace ``dest`` with a copy of ``source`` atomically.

    The copy lands in a temporary sibling first, so ``dest`` is either the
    old binary or the complete new one, never a partial file.
    """
    tmp = dest.with_name(f".{dest.name}.tmp")
    try:
        shutil.copy2(source, tmp)
        os.replace(tmp, dest)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise BuildFailure(f"could not install {source} to {dest}: {e}") from e
