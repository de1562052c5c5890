"""Custom exceptions for the buildpack."""

from __future__ import annotations


class BuildpackError(Exception):
    """Base exception for fatal buildpack errors."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.exit_code = exit_code
        super().__init__(message)


class ConfigurationError(BuildpackError):
    """Raised for an unknown channel or a malformed pin."""

    def __init__(self, message: str, variable: str | None = None) -> None:
        self.variable = variable
        if variable:
            message = f"{variable}: {message}"
        super().__init__(message)


class NetworkError(BuildpackError):
    """Raised when a download or upstream lookup fails."""

    def __init__(self, message: str, url: str) -> None:
        self.url = url
        super().__init__(f"{message} ({url})")


class InstallError(BuildpackError):
    """Raised when the toolchain installer exits non-zero."""

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(f"{message} (exit status {exit_code})", exit_code)


class BuildError(BuildpackError):
    """Raised when the application build command exits non-zero."""

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(f"{message} (exit status {exit_code})", exit_code)
