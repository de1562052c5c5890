"""Cached Rust toolchain: layout, identity and staleness.

The cached toolchain's identity is never stored as such. Each run derives
it from ``rustc --version`` and compares it against the configured pin, or
against upstream when nothing is pinned:

    NoCache       no rustc in the cache             -> install
    CachedFresh   identity matches                  -> reuse
    CachedStale   identity differs or is unknown    -> evict, then install
"""

from __future__ import annotations

import json
import os
import re
import shutil
import stat
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from . import output
from .channels import STABLE, ToolchainConfig
from .errors import InstallError, NetworkError
from .fetch import Fetcher
from .process import capture_output, run_command

INSTALLER_URL = "https://static.rust-lang.org/rustup.sh"
STABLE_MANIFEST_URL = "https://static.rust-lang.org/dist/channel-rust-stable.toml"
CHANNEL_DOCS_URL = "https://doc.rust-lang.org/{channel}/"

NO_CACHE = "NoCache"
CACHED_FRESH = "CachedFresh"
CACHED_STALE = "CachedStale"

# "rustc 1.2.3 (abcdef012 2015-06-01)", "rustc 1.3.0-nightly (...)",
# "rustc 1.4.0-beta.2 (...)"
RUSTC_VERSION_RE = re.compile(
    r"rustc (?P<version>\d+\.\d+\.\d+)(?:-(?P<channel>[A-Za-z]+)(?:\.\d+)?)?"
    r"(?: \((?P<hash>[0-9a-f]+) (?P<date>\d{4}-\d{2}-\d{2})\))?"
)
# Version banner as it appears in the channel documentation and the
# release manifest, without the leading "rustc".
RELEASE_TOKEN_RE = re.compile(
    r"(?P<version>\d+\.\d+\.\d+)(?:-[A-Za-z]+(?:\.\d+)?)? "
    r"\((?P<hash>[0-9a-f]{7,40}) (?P<date>\d{4}-\d{2}-\d{2})\)"
)


@dataclass(frozen=True)
class CacheLayout:
    """Paths inside the cache directory."""

    root: Path

    @property
    def installer(self) -> Path:
        return self.root / "rustup"

    @property
    def prefix(self) -> Path:
        return self.root / "rust"

    @property
    def bin_dir(self) -> Path:
        return self.prefix / "bin"

    @property
    def lib_dir(self) -> Path:
        return self.prefix / "lib"

    @property
    def rustc(self) -> Path:
        return self.bin_dir / "rustc"

    @property
    def cargo_home(self) -> Path:
        return self.root / "cargo"

    @property
    def stamp(self) -> Path:
        return self.prefix / ".buildpack-toolchain"

    def toolchain_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """Return ``base`` with the cached toolchain on the search paths."""
        env = dict(base)
        env["PATH"] = _append_path(env.get("PATH"), self.bin_dir)
        env["LD_LIBRARY_PATH"] = _append_path(env.get("LD_LIBRARY_PATH"), self.lib_dir)
        env["CARGO_HOME"] = str(self.cargo_home)
        return env


def _append_path(current: str | None, entry: Path) -> str:
    return f"{current}{os.pathsep}{entry}" if current else str(entry)


@dataclass(frozen=True)
class RustcVersion:
    """Identity tokens parsed from a ``rustc --version`` banner."""

    version: str
    channel: str | None = None
    commit_hash: str | None = None
    commit_date: str | None = None

    @classmethod
    def parse(cls, text: str) -> "RustcVersion | None":
        match = RUSTC_VERSION_RE.search(text)
        if not match:
            return None
        return cls(
            version=match.group("version"),
            channel=match.group("channel"),
            commit_hash=match.group("hash"),
            commit_date=match.group("date"),
        )


def hashes_match(installed: str | None, upstream: str | None) -> bool:
    """Compare commit hashes that may be abbreviated to different lengths."""
    if not installed or not upstream:
        return False
    return installed.startswith(upstream) or upstream.startswith(installed)


# -----------------------------------------------------------------------------
# Upstream lookups
# -----------------------------------------------------------------------------


def latest_stable_version(fetcher: Fetcher) -> str:
    """Return the version of the newest stable release."""
    text = fetcher.get_text(STABLE_MANIFEST_URL)
    try:
        banner = tomllib.loads(text)["pkg"]["rustc"]["version"]
    except (tomllib.TOMLDecodeError, KeyError, TypeError) as e:
        raise NetworkError(f"Unreadable release manifest: {e}", STABLE_MANIFEST_URL) from e
    match = re.match(r"\s*(\d+\.\d+\.\d+)", str(banner))
    if not match:
        raise NetworkError(f"No version in '{banner}'", STABLE_MANIFEST_URL)
    return match.group(1)


def latest_channel_hash(fetcher: Fetcher, channel: str) -> str:
    """Scrape the commit hash of the current ``channel`` build from its docs page."""
    url = CHANNEL_DOCS_URL.format(channel=channel)
    match = RELEASE_TOKEN_RE.search(fetcher.get_text(url))
    if not match:
        raise NetworkError("No version banner found on documentation page", url)
    return match.group("hash")


# -----------------------------------------------------------------------------
# Cache inspection
# -----------------------------------------------------------------------------


def installed_version(layout: CacheLayout, env: Mapping[str, str]) -> RustcVersion | None:
    """Ask the cached rustc who it is. None if it cannot answer."""
    banner = capture_output([layout.rustc, "--version"], env=layout.toolchain_env(env))
    return RustcVersion.parse(banner) if banner else None


def read_stamp(layout: CacheLayout) -> dict[str, str | None] | None:
    try:
        data = json.loads(layout.stamp.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def write_stamp(layout: CacheLayout, config: ToolchainConfig) -> None:
    layout.prefix.mkdir(parents=True, exist_ok=True)
    layout.stamp.write_text(
        json.dumps(
            {"channel": config.channel, "revision": config.revision, "date": config.date},
            indent=2,
        ),
        encoding="utf-8",
    )


def toolchain_state(
    layout: CacheLayout,
    config: ToolchainConfig,
    env: Mapping[str, str],
    fetcher: Fetcher,
) -> str:
    """Classify the cache as NO_CACHE, CACHED_FRESH or CACHED_STALE."""
    if not layout.rustc.exists():
        return NO_CACHE

    current = installed_version(layout, env)
    if current is None:
        output.warning("Cached rustc did not report a usable version.")
        return CACHED_STALE

    # Stable builds carry no channel suffix in their banner.
    installed_channel = current.channel or STABLE
    if installed_channel != config.channel:
        output.info(f"Cached rustc is {installed_channel}, wanted {config.channel}")
        return CACHED_STALE

    if config.is_rolling:
        return _rolling_state(layout, config, current, fetcher)
    return _fixed_state(config, current, fetcher)


def _fixed_state(config: ToolchainConfig, current: RustcVersion, fetcher: Fetcher) -> str:
    wanted = config.revision or latest_stable_version(fetcher)
    output.info(f"Cached rustc {current.version}, wanted {wanted}")
    return CACHED_FRESH if current.version == wanted else CACHED_STALE


def _rolling_state(
    layout: CacheLayout,
    config: ToolchainConfig,
    current: RustcVersion,
    fetcher: Fetcher,
) -> str:
    if config.date:
        stamp = read_stamp(layout)
        # Toolchains installed without a stamp are trusted for a pinned date.
        if stamp is None:
            return CACHED_FRESH
        installed_date = stamp.get("date")
        output.info(f"Cached {config.channel} {installed_date}, wanted {config.date}")
        return CACHED_FRESH if installed_date == config.date else CACHED_STALE

    upstream = latest_channel_hash(fetcher, config.channel)
    output.info(f"Cached {config.channel} {current.commit_hash}, upstream {upstream}")
    return CACHED_FRESH if hashes_match(current.commit_hash, upstream) else CACHED_STALE


# -----------------------------------------------------------------------------
# Mutations
# -----------------------------------------------------------------------------


def ensure_installer(layout: CacheLayout, fetcher: Fetcher) -> bool:
    """Download the installer unless cached. Returns True if it was fetched.

    The installer only appears under its final name once it is executable,
    so a cached installer without the execute bit is fetched again.
    """
    if layout.installer.exists() and os.access(layout.installer, os.X_OK):
        return False
    output.topic("Installing Rustup.")
    layout.root.mkdir(parents=True, exist_ok=True)
    pending = layout.installer.with_name(layout.installer.name + ".download")
    try:
        fetcher.download(INSTALLER_URL, pending)
        mode = pending.stat().st_mode
        pending.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        pending.replace(layout.installer)
    finally:
        pending.unlink(missing_ok=True)
    return True


def evict(layout: CacheLayout) -> None:
    """Remove the cached toolchain and cargo home."""
    output.topic("Evicting stale Rust toolchain.")
    for path in (layout.prefix, layout.cargo_home):
        if path.exists():
            output.info(f"Removing {path}")
            shutil.rmtree(path)


def install(layout: CacheLayout, config: ToolchainConfig, env: Mapping[str, str]) -> None:
    """Run the installer non-interactively with its output suppressed."""
    output.topic(f"Installing Rust ({config.describe()}).")
    run_command(
        [
            layout.installer,
            f"--prefix={layout.prefix}",
            *config.installer_args(),
            "--disable-sudo",
            "--yes",
        ],
        env=env,
        quiet=True,
        error=InstallError,
    )
    write_stamp(layout, config)
