#!/usr/bin/env python3
"""
Compile a Rust application.

Provisions a Rust toolchain into the cache directory, replacing it when it
no longer matches the configured channel or pin, then runs
``cargo build --release`` in the build directory:

1. Import config vars from the env directory
2. Resolve RUSTC_CHANNEL / RUSTC_REVISION / RUSTC_DATE
3. Remove stale build output (target/)
4. Fetch the installer if it is not cached
5. Install, keep, or evict and reinstall the toolchain
6. Report the toolchain version
7. Build the application
"""

from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path
from typing import Mapping

from rust_buildpack.shared import output
from rust_buildpack.shared.channels import resolve_config
from rust_buildpack.shared.env_dir import EnvImportConfig, build_environment, import_env_dir
from rust_buildpack.shared.errors import BuildError, BuildpackError
from rust_buildpack.shared.fetch import Fetcher, HttpFetcher
from rust_buildpack.shared.process import capture_output, run_command
from rust_buildpack.shared.toolchain import (
    CACHED_FRESH,
    CACHED_STALE,
    CacheLayout,
    ensure_installer,
    evict,
    install,
    toolchain_state,
)

BUILD_COMMAND = ["cargo", "build", "--release"]


def purge_build_output(build_dir: Path) -> None:
    """Delete output left behind by a previous build."""
    target = build_dir / "target"
    if target.exists():
        output.info(f"Removing stale build output: {target}")
        shutil.rmtree(target)


def report_version(layout: CacheLayout, env: Mapping[str, str]) -> None:
    banner = capture_output(["rustc", "--version"], env=env)
    if banner:
        output.info(banner)
    else:
        output.warning(f"Could not run rustc from {layout.bin_dir}; the install may have failed.")


def build_application(build_dir: Path, env: Mapping[str, str]) -> None:
    output.topic("Compiling Application.")
    run_command(BUILD_COMMAND, cwd=build_dir, env=env, error=BuildError)


def _provision(
    build_dir: Path,
    cache_dir: Path,
    env_dir: Path,
    environ: Mapping[str, str],
    fetcher: Fetcher,
) -> None:
    imported = import_env_dir(env_dir, EnvImportConfig.from_env(environ))
    env = build_environment(environ, imported)

    # Everything configurable is validated before the cache is touched.
    config = resolve_config(env)
    output.topic(f"Using Rust channel {config.describe()}.")

    purge_build_output(build_dir)

    layout = CacheLayout(cache_dir)
    layout.root.mkdir(parents=True, exist_ok=True)
    ensure_installer(layout, fetcher)

    state = toolchain_state(layout, config, env, fetcher)
    if state == CACHED_FRESH:
        output.topic("Using cached Rust toolchain.")
    else:
        if state == CACHED_STALE:
            evict(layout)
        install(layout, config, env)

    toolchain_env = layout.toolchain_env(env)
    report_version(layout, toolchain_env)
    build_application(build_dir, toolchain_env)


def provision(
    build_dir: Path | str,
    cache_dir: Path | str,
    env_dir: Path | str,
    *,
    environ: Mapping[str, str] | None = None,
    fetcher: Fetcher | None = None,
) -> int:
    """Provision the toolchain and build ``build_dir``.

    Args:
        build_dir: Application source tree.
        cache_dir: Persistent cache holding the installer, toolchain and
            cargo home.
        env_dir: Directory of config var files.
        environ: Base environment; defaults to a copy of ``os.environ``.
        fetcher: Network access; defaults to ``HttpFetcher``.

    Returns:
        0 on success, otherwise the exit code of the failure.
    """
    environ = dict(os.environ) if environ is None else environ
    fetcher = fetcher or HttpFetcher()
    try:
        _provision(Path(build_dir), Path(cache_dir), Path(env_dir), environ, fetcher)
    except BuildpackError as e:
        output.failure(str(e))
        return e.exit_code
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("build_dir", type=Path, help="Application source directory")
    parser.add_argument("cache_dir", type=Path, help="Persistent cache directory")
    parser.add_argument("env_dir", type=Path, help="Directory of config var files")
    args = parser.parse_args(argv)

    try:
        code = provision(args.build_dir, args.cache_dir, args.env_dir)
    except KeyboardInterrupt:
        print("\n\nBuild interrupted.")
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
