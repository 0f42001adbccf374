"""Command-line entry point for building and launching blob-indexer.

Usage:
    blob-launcher start debug              # background (default)
    blob-launcher start release foreground
    blob-launcher run debug foreground     # cargo build, then launch
    blob-launcher build release            # cargo build and install only
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from blob_launcher.builder import CargoBuilder
from blob_launcher.config import LauncherSettings
from blob_launcher.launcher import Launcher
from blob_launcher.models import BuildProfile, LauncherError, UsageError

logger = logging.getLogger(__name__)

USAGE = "Usage: blob-launcher {start,run} [debug/release] [foreground/background]"
BUILD_USAGE = "Usage: blob-launcher build [debug/release]"
COMMANDS = ("start", "run", "build")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def setup_logging(log_level: str = "INFO") -> None:
    """Console logging for the launcher itself; the child logs to indexer.log."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blob-launcher",
        description="Build and launch the blob-indexer binary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--root", help="Directory holding the artifacts, logs/ and .env (default: cwd)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Launcher log level (default: INFO)",
    )
    # Plain positionals so an unknown command falls through to the usage message
    parser.add_argument("command", nargs="?", help="start, run or build")
    parser.add_argument("profile", nargs="?", help="debug or release")
    parser.add_argument("mode", nargs="?", help="foreground or background (default: background)")
    return parser


def load_settings(root: Optional[str]) -> LauncherSettings:
    """Settings from the environment, with ``.env`` read from the root."""
    if root:
        return LauncherSettings(root_dir=root, _env_file=Path(root) / ".env")
    return LauncherSettings()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # --help exits 0; malformed options exit 2
        return e.code if isinstance(e.code, int) else EXIT_USAGE
    setup_logging(args.log_level)

    if args.command not in COMMANDS or args.profile is None:
        # Nothing to do: print usage and exit cleanly.
        print(BUILD_USAGE if args.command == "build" else USAGE)
        return EXIT_OK

    try:
        settings = load_settings(args.root)
    except ValidationError as e:
        logger.error("invalid launcher settings: %s", e)
        return EXIT_FAILURE

    try:
        launcher = Launcher(settings)
        if args.command == "build":
            CargoBuilder(settings).build(BuildProfile.parse(args.profile))
            return EXIT_OK
        if args.command == "run":
            result = launcher.build_and_run(args.profile, args.mode)
        else:
            result = launcher.launch(args.profile, args.mode)
    except UsageError as e:
        print(e)
        return EXIT_USAGE
    except LauncherError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    if not result.detached:
        return result.exit_code
    logger.info("%s running in background (PID %d), logging to %s",
                result.artifact_path.name, result.pid, result.log_path)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
