"""Launcher Pydantic v2 data models and error taxonomy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel


# ── Custom Exceptions ──────────────────────────────────────────────

class LauncherError(Exception):
    """Base class for every failure the launcher reports."""
    pass


class UsageError(LauncherError):
    """Raised for a missing or unrecognised profile or mode argument."""
    pass


class BuildFailure(LauncherError):
    """Raised when the Builder cannot produce the artifact."""
    pass


class ArtifactMissing(LauncherError):
    """Raised when the artifact is absent and settings require it."""
    pass


class DirectoryCreationError(LauncherError):
    """Raised when the log directory cannot be created."""
    pass


class SpawnFailure(LauncherError):
    """Raised when the artifact cannot be started."""
    pass


# ── Enums ──────────────────────────────────────────────────────────────

class BuildProfile(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BuildProfile":
        """Case-sensitive lookup; anything else is a usage error."""
        for member in cls:
            if member.value == value:
                return member
        raise UsageError("mode not match, must be debug or release")


class LaunchMode(str, Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LaunchMode":
        if value is None:
            return cls.BACKGROUND
        for member in cls:
            if member.value == value:
                return member
        raise UsageError(f"run mode {value!r} not match, must be foreground or background")


# ── Launch Models ──────────────────────────────────────────────────────

class LaunchResult(BaseModel):
    """Outcome of a single launch."""
    profile: BuildProfile
    mode: LaunchMode
    artifact_path: Path
    log_path: Path
    pid: int
    artifact_found: bool = True
    exit_code: Optional[int] = None  # None for background launches

    @property
    def detached(self) -> bool:
        return self.mode == LaunchMode.BACKGROUND
