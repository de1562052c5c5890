#!/usr/bin/env python3
"""
Describe the compiled application to the platform.

Prints a YAML document with the default process types. The web process
runs the release binary named by Cargo.toml: the first [[bin]] target if
one is declared, otherwise the package name.
"""

from __future__ import annotations

import argparse
import sys
import tomllib
from pathlib import Path
from typing import Any

import yaml

from rust_buildpack.detect import MANIFEST


def binary_name(build_dir: Path) -> str | None:
    """Name of the binary ``cargo build --release`` produces, if known."""
    manifest = build_dir / MANIFEST
    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return None

    bins = data.get("bin")
    if isinstance(bins, list):
        for target in bins:
            if isinstance(target, dict) and target.get("name"):
                return str(target["name"])

    package = data.get("package")
    if isinstance(package, dict) and package.get("name"):
        return str(package["name"])
    return None


def release_info(build_dir: Path) -> dict[str, Any]:
    processes: dict[str, str] = {}
    name = binary_name(build_dir)
    if name:
        processes["web"] = f"./target/release/{name}"
    return {"addons": [], "default_process_types": processes}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("build_dir", type=Path, help="Application source directory")
    args = parser.parse_args(argv)

    yaml.safe_dump(
        release_info(args.build_dir),
        sys.stdout,
        default_flow_style=False,
        sort_keys=False,
    )


if __name__ == "__main__":
    main()
