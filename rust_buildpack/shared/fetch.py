"""Network access for the installer download and upstream lookups.

Everything that touches the network goes through a ``Fetcher`` so tests can
substitute fixtures. Failures are fatal; there are no retries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import requests

from .errors import NetworkError

DEFAULT_TIMEOUT = 30


class Fetcher(Protocol):
    def get_text(self, url: str) -> str: ...

    def download(self, url: str, dest: Path) -> Path: ...


class HttpFetcher:
    """Fetcher backed by a requests session."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, url: str, *, stream: bool = False) -> requests.Response:
        try:
            resp = self.session.get(url, timeout=self.timeout, stream=stream)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise NetworkError(f"Request failed: {e}", url) from e
        return resp

    def get_text(self, url: str) -> str:
        return self._get(url).text

    def download(self, url: str, dest: Path) -> Path:
        """Stream ``url`` into ``dest``, leaving nothing behind on failure."""
        resp = self._get(url, stream=True)
        partial = dest.with_name(dest.name + ".part")
        try:
            with open(partial, "wb") as f:
                for chunk in resp.iter_content(chunk_size=65536):
                    f.write(chunk)
        except (requests.RequestException, OSError) as e:
            partial.unlink(missing_ok=True)
            raise NetworkError(f"Download failed: {e}", url) from e
        finally:
            resp.close()
        partial.replace(dest)
        return dest
