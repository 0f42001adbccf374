"""Child process spawning with output appended to a log file.

Two ways to start the artifact:

- ``spawn_attached`` keeps the child in the caller's session so the caller
  can wait on it.
- ``spawn_detached`` starts the child as a session leader on POSIX (or a
  detached process group on Windows) so that closing the terminal does not
  hang it up.

Both point stdout and stderr at the same append-mode log stream.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import IO, Optional, Sequence

logger = logging.getLogger(__name__)

# Detached children still running; kept so they can be reaped with poll().
_DETACHED: list[subprocess.Popen] = []


def _detach_kwargs() -> dict:
    """Platform-specific Popen arguments for a hangup-immune child."""
    if sys.platform == "win32":
        return {
            "creationflags": subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP,
        }
    return {"start_new_session": True}


def open_log(log_path: Path) -> IO[bytes]:
    """Open the shared log file for appending, creating it if needed."""
    return open(log_path, "ab")


def spawn_attached(
    cmd: Sequence[str],
    log_file: IO[bytes],
    cwd: Optional[Path] = None,
) -> subprocess.Popen:
    """Start ``cmd`` in the caller's session with combined output to ``log_file``."""
    proc = subprocess.Popen(
        list(cmd),
        stdout=log_file,
        stderr=subprocess.STDOUT,
        cwd=str(cwd) if cwd else None,
    )
    logger.info("Started %s (PID %d, foreground)", cmd[0], proc.pid)
    return proc


def spawn_detached(
    cmd: Sequence[str],
    log_file: IO[bytes],
    cwd: Optional[Path] = None,
) -> subprocess.Popen:
    """Start ``cmd`` detached from the controlling terminal.

    The child gets the null device as stdin and the log stream as stdout and
    stderr, so it no longer depends on anything the caller's terminal owns.
    Spawn errors (``OSError``) propagate to the caller.
    """
    reap_detached()
    proc = subprocess.Popen(
        list(cmd),
        stdin=subprocess.DEVNULL,
        stdout=log_file,
        stderr=subprocess.STDOUT,
        cwd=str(cwd) if cwd else None,
        close_fds=True,
        **_detach_kwargs(),
    )
    logger.info("Started %s (PID %d, background)", cmd[0], proc.pid)
    _DETACHED.append(proc)
    return proc


def reap_detached() -> int:
    """Collect detached children that have exited. Returns how many are still running."""
    for proc in list(_DETACHED):
        if proc.poll() is not None:
            logger.debug("Background PID %d exited with code %d", proc.pid, proc.returncode)
            _DETACHED.remove(proc)
    return len(_DETACHED)


def wait_for_exit(proc: subprocess.Popen) -> int:
    """Block until ``proc`` exits and return a shell-style exit status.

    A child terminated by signal N reports ``128 + N``. Ctrl+C reaches the
    attached child as well, so an interrupt keeps waiting for it to exit.
    """
    try:
        returncode = proc.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, waiting for PID %d to exit", proc.pid)
        returncode = proc.wait()
    if returncode < 0:
        returncode = 128 - returncode
    logger.info("PID %d exited with code %d", proc.pid, returncode)
    return returncode


def is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)
