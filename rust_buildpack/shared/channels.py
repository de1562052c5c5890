"""Rust release channels and the toolchain configuration read from the environment."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from . import output
from .errors import ConfigurationError

CHANNEL_VAR = "RUSTC_CHANNEL"
REVISION_VAR = "RUSTC_REVISION"
DATE_VAR = "RUSTC_DATE"

STABLE = "stable"
BETA = "beta"
NIGHTLY = "nightly"

# stable is the only fixed-release track; the others roll.
FIXED_CHANNELS = frozenset({STABLE})
ROLLING_CHANNELS = frozenset({BETA, NIGHTLY})
CHANNELS = FIXED_CHANNELS | ROLLING_CHANNELS

DEFAULT_CHANNEL = NIGHTLY

REVISION_RE = re.compile(r"\d+\.\d+\.\d+")
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class ToolchainConfig:
    """A channel plus an optional pin.

    ``revision`` is only ever set for the fixed-release channel and ``date``
    only for rolling channels.
    """

    channel: str
    revision: str | None = None
    date: str | None = None

    @property
    def is_rolling(self) -> bool:
        return self.channel in ROLLING_CHANNELS

    @property
    def pin(self) -> str | None:
        return self.date if self.is_rolling else self.revision

    def describe(self) -> str:
        if self.revision:
            return f"{self.channel} {self.revision}"
        if self.date:
            return f"{self.channel} {self.date}"
        return self.channel

    def installer_args(self) -> list[str]:
        """Channel selection arguments for the installer.

        Always exactly one of channel-only, channel+revision or channel+date.
        """
        args = [f"--channel={self.channel}"]
        if self.revision:
            args.append(f"--revision={self.revision}")
        elif self.date:
            args.append(f"--date={self.date}")
        return args


def _pin_value(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name, "").strip()
    return value or None


def resolve_config(environ: Mapping[str, str]) -> ToolchainConfig:
    """Build a ToolchainConfig from ``environ``.

    Raises:
        ConfigurationError: For an unknown channel, or a pin that does not
            match the format of its channel's track.
    """
    channel = environ.get(CHANNEL_VAR, "").strip()
    if not channel:
        channel = DEFAULT_CHANNEL
        output.warning(f"{CHANNEL_VAR} not set, defaulting to '{channel}'.")
    elif channel not in CHANNELS:
        raise ConfigurationError(
            f"unsupported channel '{channel}' "
            f"(expected one of: {', '.join(sorted(CHANNELS))})",
            CHANNEL_VAR,
        )

    revision = _pin_value(environ, REVISION_VAR)
    date = _pin_value(environ, DATE_VAR)

    if channel in FIXED_CHANNELS:
        if date:
            output.warning(f"{DATE_VAR} is ignored on the {channel} channel.")
            date = None
        if revision and not REVISION_RE.fullmatch(revision):
            raise ConfigurationError(
                f"'{revision}' is not a MAJOR.MINOR.PATCH version", REVISION_VAR
            )
    else:
        if revision:
            output.warning(f"{REVISION_VAR} is ignored on the {channel} channel.")
            revision = None
        if date and not DATE_RE.fullmatch(date):
            raise ConfigurationError(f"'{date}' is not a YYYY-MM-DD date", DATE_VAR)

    return ToolchainConfig(channel=channel, revision=revision, date=date)
