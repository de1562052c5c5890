#!/usr/bin/env python3
"""
Rust buildpack CLI.

Usage:
    python -m rust_buildpack <command> [options]

Commands:
    detect      Check whether a build directory is a Rust application
    compile     Provision the Rust toolchain and build the application
    provision   Alias for compile
    release     Print the default process types as YAML

Examples:
    python -m rust_buildpack detect /tmp/build
    python -m rust_buildpack compile /tmp/build /tmp/cache /tmp/env
    python -m rust_buildpack release /tmp/build
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure rust_buildpack is importable when run from a buildpack checkout
PACKAGE_DIR = Path(__file__).parent
if str(PACKAGE_DIR.parent) not in sys.path:
    sys.path.insert(0, str(PACKAGE_DIR.parent))


def _exit_code(e: SystemExit) -> int:
    if e.code is None:
        return 0
    return e.code if isinstance(e.code, int) else 1


def cmd_detect(args: list[str]) -> int:
    """Detect a Rust application."""
    from rust_buildpack import detect
    try:
        detect.main(args)
        return 0
    except SystemExit as e:
        return _exit_code(e)


def cmd_compile(args: list[str]) -> int:
    """Provision the toolchain and build."""
    from rust_buildpack import compile
    try:
        compile.main(args)
        return 0
    except SystemExit as e:
        return _exit_code(e)


def cmd_release(args: list[str]) -> int:
    """Print release metadata."""
    from rust_buildpack import release
    try:
        release.main(args)
        return 0
    except SystemExit as e:
        return _exit_code(e)


COMMANDS = {
    "detect": (cmd_detect, "Check whether a build directory is a Rust application"),
    "compile": (cmd_compile, "Provision the Rust toolchain and build the application"),
    "provision": (cmd_compile, "Alias for compile"),
    "release": (cmd_release, "Print the default process types as YAML"),
}


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = sys.argv[1]
    args = sys.argv[2:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
