"""Subprocess helpers shared by the buildpack commands."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from . import output
from .errors import BuildError, BuildpackError

# Exit statuses shells use for "command not found" and "not executable".
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


def exit_status(returncode: int) -> int:
    """Map a child's return code to a shell-style exit status.

    A child killed by signal N reports -N; shells report 128 + N.
    """
    return 128 - returncode if returncode < 0 else returncode


def run_command(
    command: Sequence[str | Path],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    quiet: bool = False,
    error: type[BuildpackError] = BuildError,
) -> subprocess.CompletedProcess:
    """Run a command to completion, raising ``error`` on failure.

    ``error`` is constructed with a message and the command's exit status,
    so the status propagates as the buildpack's own exit code. With
    ``quiet`` the command's stdout and stderr are discarded.
    """
    args = [str(c) for c in command]
    output.echo_command(args)
    stream = subprocess.DEVNULL if quiet else None
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            stdout=stream,
            stderr=stream,
            check=False,
        )
    except FileNotFoundError as e:
        raise error(f"Command not found: {e.filename}", COMMAND_NOT_FOUND) from e
    except PermissionError as e:
        raise error(f"Command not executable: {e.filename}", COMMAND_NOT_EXECUTABLE) from e

    if result.returncode != 0:
        raise error(f"Command failed: {' '.join(args)}", exit_status(result.returncode))
    return result


def capture_output(
    command: Sequence[str | Path],
    *,
    env: Mapping[str, str] | None = None,
) -> str | None:
    """Run a command and return its stdout, or None if it could not run or failed."""
    try:
        result = subprocess.run(
            [str(c) for c in command],
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()
