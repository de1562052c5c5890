"""Import configuration variables from a buildpack env directory.

The platform writes each config var as a file named after the variable,
holding its value. Variables are returned as a dict and merged into an
explicit environment for the build; the process environment is left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import ConfigurationError

# Names that would corrupt the host's own search paths and linkage.
DEFAULT_BLACKLIST = r"PATH|GIT_DIR|CPATH|CPPATH|LD_PRELOAD|LIBRARY_PATH|LD_LIBRARY_PATH"

WHITELIST_VAR = "BUILDPACK_ENV_WHITELIST"
BLACKLIST_VAR = "BUILDPACK_ENV_BLACKLIST"

# Anything else cannot be passed to a child process as a variable name.
VALID_NAME = r"[A-Za-z_][A-Za-z0-9_]*"


def _pattern(environ: Mapping[str, str], name: str) -> str | None:
    pattern = environ.get(name) or None
    if pattern is not None:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"invalid regular expression '{pattern}': {e}", name) from e
    return pattern


@dataclass(frozen=True)
class EnvImportConfig:
    """Which env-dir entries may be imported."""

    whitelist: str | None = None
    blacklist: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "EnvImportConfig":
        return cls(
            whitelist=_pattern(environ, WHITELIST_VAR),
            blacklist=_pattern(environ, BLACKLIST_VAR),
        )

    def allows(self, name: str) -> bool:
        """Return True if ``name`` may be imported.

        The fixed blacklist always applies. A configured blacklist adds to
        it, and a configured whitelist narrows what remains.
        """
        if not re.fullmatch(VALID_NAME, name):
            return False
        if re.fullmatch(DEFAULT_BLACKLIST, name):
            return False
        if self.blacklist and re.fullmatch(self.blacklist, name):
            return False
        if self.whitelist and not re.fullmatch(self.whitelist, name):
            return False
        return True


def read_env_file(path: Path) -> str | None:
    """Read one variable file, or None if it cannot be read or holds a NUL byte."""
    try:
        value = path.read_text(encoding="utf-8").rstrip("\n")
    except (OSError, UnicodeDecodeError):
        return None
    return None if "\0" in value else value


def import_env_dir(
    env_dir: Path,
    config: EnvImportConfig | None = None,
) -> dict[str, str]:
    """Collect importable variables from ``env_dir``.

    A missing directory imports nothing. Entries that are not regular files
    or cannot be read are skipped.
    """
    config = config or EnvImportConfig()
    if not env_dir.is_dir():
        return {}

    imported: dict[str, str] = {}
    for entry in sorted(env_dir.iterdir()):
        if not entry.is_file() or not config.allows(entry.name):
            continue
        value = read_env_file(entry)
        if value is not None:
            imported[entry.name] = value
    return imported


def build_environment(
    base: Mapping[str, str],
    imported: Mapping[str, str],
) -> dict[str, str]:
    """Merge imported variables over a copy of ``base``."""
    env = dict(base)
    env.update(imported)
    return env
