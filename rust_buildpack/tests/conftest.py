from pathlib import Path

import pytest

from rust_buildpack.shared.errors import NetworkError
from rust_buildpack.shared.toolchain import (
    CHANNEL_DOCS_URL,
    INSTALLER_URL,
    STABLE_MANIFEST_URL,
)

INSTALLER_SCRIPT = "#!/bin/sh\nexit 0\n"


class FixtureFetcher:
    """Serves canned responses instead of touching the network."""

    def __init__(self) -> None:
        self.pages: dict[str, str] = {INSTALLER_URL: INSTALLER_SCRIPT}
        self.requested: list[str] = []

    def serve_stable(self, version: str) -> None:
        self.pages[STABLE_MANIFEST_URL] = (
            'manifest-version = "2"\n'
            'date = "2015-06-25"\n'
            "[pkg.rustc]\n"
            f'version = "{version} (abcdef012 2015-06-24)"\n'
        )

    def serve_docs(self, channel: str, banner: str) -> None:
        self.pages[CHANNEL_DOCS_URL.format(channel=channel)] = (
            "<html><body><p class=\"version-info\">"
            f"Version {banner}</p></body></html>"
        )

    def get_text(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.pages:
            raise NetworkError("Not found", url)
        return self.pages[url]

    def download(self, url: str, dest: Path) -> Path:
        dest.write_text(self.get_text(url))
        return dest


@pytest.fixture
def fetcher():
    return FixtureFetcher()
