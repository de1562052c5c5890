#!/usr/bin/env python3
"""
Detect whether a build directory holds a Rust application.

Prints the buildpack name and exits 0 when Cargo.toml is present,
otherwise exits 1.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

BUILDPACK_NAME = "Rust"
MANIFEST = "Cargo.toml"


def is_rust_app(build_dir: Path) -> bool:
    return (build_dir / MANIFEST).is_file()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("build_dir", type=Path, help="Application source directory")
    args = parser.parse_args(argv)

    if not is_rust_app(args.build_dir):
        print(f"No {MANIFEST} found in {args.build_dir}", file=sys.stderr)
        sys.exit(1)
    print(BUILDPACK_NAME)


if __name__ == "__main__":
    main()
