"""Launcher test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from blob_launcher.config import LauncherSettings  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a fresh temporary directory."""
    return LauncherSettings(root_dir=tmp_path)


@pytest.fixture
def make_artifact(settings):
    """Write an executable shell script where the launcher expects the artifact."""

    def _make(profile: str = "debug", body: str = "echo hello") -> Path:
        path = settings.artifact_path(profile)
        path.write_text(f"#!/bin/sh\n{body}\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def read_log(settings):
    def _read() -> str:
        if not settings.log_file.exists():
            return ""
        return settings.log_file.read_text()

    return _read
