from __future__ import annotations

import hashlib
import io
from contextlib import contextmanager
from typing import Dict, List, Optional

import pytest
from rich.console import Console

from paper_latest.core import (
    ArtifactDescriptor, BuildMetadata, DownloadPipeline, DownloadStream, HttpStatusError, TransportError,
    ProjectMetadata, Settings, VersionGroupMetadata, VersionMetadata,
)

JAR = b"PK\x03\x04 pretend this is a server jar" * 64
JAR_SHA = hashlib.sha256(JAR).hexdigest()


class FakeClient:
    """In-memory stand-in for ApiClient that records every call."""

    def __init__(
        self,
        project: ProjectMetadata,
        versions: Dict[str, List[int]],
        downloads: Dict[str, ArtifactDescriptor],
        body: bytes = JAR,
        groups: Optional[Dict[str, List[str]]] = None,
        send_length: bool = True,
    ) -> None:
        self.project = project
        self.versions = versions
        self.downloads = downloads
        self.body = body
        self.groups = groups or {}
        self.send_length = send_length
        self.break_after: Optional[int] = None  # chunks delivered before the connection drops
        self.calls: List[tuple] = []

    def fetch_project(self, project):
        self.calls.append(("project", project))
        return self.project

    def fetch_version_group(self, project, group):
        self.calls.append(("group", project, group))
        if group not in self.groups:
            raise HttpStatusError(404, f"https://api.test/projects/{project}/version_group/{group}")
        return VersionGroupMetadata(versions=tuple(self.groups[group]))

    def fetch_version(self, project, version):
        self.calls.append(("version", project, version))
        return VersionMetadata(builds=tuple(self.versions[version]))

    def fetch_build(self, project, version, build):
        self.calls.append(("build", project, version, build))
        return BuildMetadata(downloads=dict(self.downloads))

    @contextmanager
    def stream_download(self, project, version, build, file_name):
        self.calls.append(("download", project, version, build, file_name))
        size = len(self.body) if self.send_length else None
        yield DownloadStream(total=size, chunks=self._chunks(file_name))

    def _chunks(self, file_name):
        for n, start in enumerate(range(0, len(self.body), 100)):
            if self.break_after is not None and n >= self.break_after:
                raise TransportError(f"Download of {file_name} broke off: connection reset by peer")
            yield self.body[start:start + 100]

    def called(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False, width=120)

@pytest.fixture
def paper_project():
    return ProjectMetadata(
        project_id="paper",
        version_groups=("1.19", "1.20"),
        versions=("1.19.4", "1.20", "1.20.1", "1.20.2"),
    )

@pytest.fixture
def client(paper_project):
    return FakeClient(
        project=paper_project,
        versions={"1.20": [10, 12, 11], "1.20.1": [7, 9, 8], "1.20.2": [3, 1, 2], "1.19.4": []},
        downloads={
            "application": ArtifactDescriptor("paper-1.20-12.jar", JAR_SHA),
            "mojang-mappings": ArtifactDescriptor("paper-mojmap-1.20-12.jar", "ab" * 32),
        },
        groups={"1.20": ["1.20", "1.20.1", "1.20.2"], "1.19": []},
    )

@pytest.fixture
def stdout():
    return io.BytesIO()

@pytest.fixture
def make_pipeline(console, stdout):
    def _make(client, out=None):
        return DownloadPipeline(client, console, Settings(chunk_size=64), stdout=out or stdout)
    return _make
