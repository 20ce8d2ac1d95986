# paper_latest/core/api.py
from __future__ import annotations
import logging
import urllib.parse
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import requests

from .config import DEFAULT_API_BASE, DEFAULT_CHUNK_SIZE, DEFAULT_TIMEOUT
from .errors import DecodeError, HttpStatusError, TransportError
from .models import BuildMetadata, ProjectMetadata, VersionGroupMetadata, VersionMetadata
from .utils import content_length

logger = logging.getLogger(__name__)


@dataclass
class DownloadStream:
    total: Optional[int]       # Content-Length, when the server sent a usable one
    chunks: Iterator[bytes]


def _seg(value: Any) -> str:
    return urllib.parse.quote(str(value), safe="")

def _check_status(r: requests.Response, url: str) -> None:
    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise HttpStatusError(r.status_code, url, r.reason or "") from e


class ApiClient:
    """Thin typed wrapper over the release API; one GET per call, no retries."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.chunk_size = chunk_size

    # ---- urls ----------------------------------------------------------------
    def url(self, *segments: Any) -> str:
        return "/".join([self.base_url, *(_seg(s) for s in segments)])

    def download_url(self, project: str, version: str, build: int, file_name: str) -> str:
        return self.url("projects", project, "versions", version,
                        "builds", build, "downloads", file_name)

    # ---- json ----------------------------------------------------------------
    def get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to reach {url}: {e}") from e
        with r:
            _check_status(r, url)
            try:
                return r.json()
            except ValueError as e:
                raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e

    def fetch_project(self, project: str) -> ProjectMetadata:
        return ProjectMetadata.from_json(self.get_json(self.url("projects", project)))

    def fetch_version_group(self, project: str, group: str) -> VersionGroupMetadata:
        url = self.url("projects", project, "version_group", group)
        return VersionGroupMetadata.from_json(self.get_json(url))

    def fetch_version(self, project: str, version: str) -> VersionMetadata:
        url = self.url("projects", project, "versions", version)
        return VersionMetadata.from_json(self.get_json(url))

    def fetch_build(self, project: str, version: str, build: int) -> BuildMetadata:
        url = self.url("projects", project, "versions", version, "builds", build)
        return BuildMetadata.from_json(self.get_json(url))

    # ---- artifact body -------------------------------------------------------
    @contextmanager
    def stream_download(
        self, project: str, version: str, build: int, file_name: str
    ) -> Iterator[DownloadStream]:
        url = self.download_url(project, version, build, file_name)
        logger.debug("GET %s (stream)", url)
        try:
            r = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to reach {url}: {e}") from e
        with r:
            _check_status(r, url)
            yield DownloadStream(total=content_length(r.headers), chunks=self._chunks(r, url))

    def _chunks(self, r: requests.Response, url: str) -> Iterator[bytes]:
        try:
            for chunk in r.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            raise TransportError(f"Download from {url} broke off: {e}") from e
