"""Tests for CargoBuilder and artifact installation."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from blob_launcher.builder import CargoBuilder, install_artifact
from blob_launcher.config import LauncherSettings
from blob_launcher.models import BuildFailure, BuildProfile


@pytest.fixture
def builder(settings) -> CargoBuilder:
    return CargoBuilder(settings)


@pytest.fixture
def cargo_output(settings):
    """Simulate cargo leaving a binary under target/<profile>/."""

    def _write(profile: str, content: bytes = b"new-binary") -> None:
        out = settings.build_output_path(profile)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(content)
        out.chmod(0o755)

    return _write


class TestCommand:
    def test_debug(self, builder, settings):
        assert builder.command(BuildProfile.DEBUG) == [
            "cargo", "build", "--target-dir", str(settings.root_dir / "target"),
        ]

    def test_release(self, builder, settings):
        assert builder.command(BuildProfile.RELEASE) == [
            "cargo", "build", "--target-dir", str(settings.root_dir / "target"), "--release",
        ]

    def test_custom_target_dir_reaches_cargo(self, tmp_path):
        s = LauncherSettings(root_dir=tmp_path, target_dir=Path("out"))
        cmd = CargoBuilder(s).command(BuildProfile.RELEASE)

        target = Path(cmd[cmd.index("--target-dir") + 1])
        assert target == tmp_path.resolve() / "out"
        assert s.build_output_path("release") == target / "release" / "blob-indexer"

    def test_custom_cargo(self, tmp_path):
        b = CargoBuilder(LauncherSettings(root_dir=tmp_path, cargo_bin="/opt/rust/bin/cargo"))
        assert b.command(BuildProfile.DEBUG)[0] == "/opt/rust/bin/cargo"


class TestBuild:
    @patch("blob_launcher.builder.subprocess.run")
    def test_installs_artifact(self, mock_run, builder, settings, cargo_output):
        mock_run.return_value = MagicMock(returncode=0)
        cargo_output("debug")

        dest = builder.build(BuildProfile.DEBUG)

        assert dest == settings.root_dir / "blob-indexer-debug"
        assert dest.read_bytes() == b"new-binary"
        mock_run.assert_called_once_with(
            builder.command(BuildProfile.DEBUG), cwd=str(settings.root_dir)
        )

    @patch("blob_launcher.builder.subprocess.run")
    def test_stale_artifact_replaced(self, mock_run, builder, settings, cargo_output):
        mock_run.return_value = MagicMock(returncode=0)
        stale = settings.artifact_path("release")
        stale.write_bytes(b"stale-binary")
        cargo_output("release", b"fresh-binary")

        builder.build(BuildProfile.RELEASE)

        assert stale.read_bytes() == b"fresh-binary"
        assert [p.name for p in settings.root_dir.iterdir() if p.name.endswith(".tmp")] == []

    @patch("blob_launcher.builder.subprocess.run")
    def test_cargo_failure(self, mock_run, builder, settings, cargo_output):
        mock_run.return_value = MagicMock(returncode=101)
        cargo_output("debug")

        with pytest.raises(BuildFailure, match="exited with code 101"):
            builder.build(BuildProfile.DEBUG)

        assert not settings.artifact_path("debug").exists()

    @patch("blob_launcher.builder.subprocess.run")
    def test_cargo_not_installed(self, mock_run, builder):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "cargo")

        with pytest.raises(BuildFailure, match="could not run cargo"):
            builder.build(BuildProfile.RELEASE)

    @patch("blob_launcher.builder.subprocess.run")
    def test_missing_build_output(self, mock_run, builder):
        mock_run.return_value = MagicMock(returncode=0)

        with pytest.raises(BuildFailure, match="build output not found"):
            builder.build(BuildProfile.DEBUG)


class TestInstallArtifact:
    def test_preserves_mode(self, tmp_path):
        source = tmp_path / "src-bin"
        source.write_bytes(b"x")
        source.chmod(0o755)
        dest = tmp_path / "blob-indexer-debug"

        install_artifact(source, dest)

        assert dest.stat().st_mode & 0o111

    def test_copy_error_leaves_no_temp_file(self, tmp_path):
        dest = tmp_path / "blob-indexer-debug"
        dest.write_bytes(b"old")

        with pytest.raises(BuildFailure, match="could not install"):
            install_artifact(tmp_path / "does-not-exist", dest)

        assert dest.read_bytes() == b"old"
        assert not (tmp_path / ".blob-indexer-debug.tmp").exists()
