"""Shared utilities for the buildpack commands."""

from .channels import (
    CHANNELS,
    DEFAULT_CHANNEL,
    ToolchainConfig,
    resolve_config,
)
from .env_dir import (
    DEFAULT_BLACKLIST,
    EnvImportConfig,
    build_environment,
    import_env_dir,
)
from .errors import (
    BuildError,
    BuildpackError,
    ConfigurationError,
    InstallError,
    NetworkError,
)
from .fetch import Fetcher, HttpFetcher
from .toolchain import (
    CacheLayout,
    RustcVersion,
    toolchain_state,
)

__all__ = [
    # Configuration
    "CHANNELS",
    "DEFAULT_CHANNEL",
    "ToolchainConfig",
    "resolve_config",
    # Env directory import
    "DEFAULT_BLACKLIST",
    "EnvImportConfig",
    "build_environment",
    "import_env_dir",
    # Errors
    "BuildError",
    "BuildpackError",
    "ConfigurationError",
    "InstallError",
    "NetworkError",
    # Network
    "Fetcher",
    "HttpFetcher",
    # Toolchain cache
    "CacheLayout",
    "RustcVersion",
    "toolchain_state",
]
