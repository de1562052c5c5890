"""Console output helpers using the usual buildpack markers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence


def topic(message: str) -> None:
    """Print a phase header, e.g. ``-----> Installing Rustup.``"""
    print(f"-----> {message}", flush=True)


def info(message: str) -> None:
    for line in message.splitlines() or [""]:
        print(f"       {line}", flush=True)


def warning(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr, flush=True)


def failure(message: str) -> None:
    print(f"\n[FAIL] {message}", file=sys.stderr, flush=True)


def echo_command(command: Sequence[str | Path]) -> None:
    print(f"\n$ {' '.join(str(c) for c in command)}", flush=True)
