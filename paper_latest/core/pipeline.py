# paper_latest/core/pipeline.py
from __future__ import annotations
import logging
import sys
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from rich.console import Console

from .config import Settings
from .errors import (
    ArtifactNotFoundError, IntegrityError, PreconditionError, ResolutionError, StorageError
)
from .hashing import digest_chunks, digest_of, verify
from .models import ArtifactDescriptor, DownloadResult, DownloadTarget
from .progress import ProgressTracker
from .resolve import resolve_version

logger = logging.getLogger(__name__)


class DownloadPipeline:
    """
    resolve version -> latest build -> artifact descriptor -> (skip if current)
    -> download to memory -> verify -> persist.
    """

    def __init__(
        self,
        client,
        console: Console,
        settings: Optional[Settings] = None,
        stdout: Optional[BinaryIO] = None,
    ) -> None:
        self.client = client
        self.console = console
        self.settings = settings or Settings()
        self._stdout = stdout

    @property
    def stdout(self) -> BinaryIO:
        return self._stdout if self._stdout is not None else sys.stdout.buffer

    def stdout_is_terminal(self) -> bool:
        isatty = getattr(self.stdout, "isatty", None)
        return bool(isatty and isatty())

    # ---- main flow -----------------------------------------------------------
    def run(self, project: str, download_type: str, version_token: str, target: DownloadTarget) -> DownloadResult:
        if target.is_stdout and self.stdout_is_terminal():
            raise PreconditionError(
                "Refusing to write binary output to a terminal. "
                "Please redirect to another program or file."
            )

        project_data = self.client.fetch_project(project)
        version = resolve_version(self.client, project_data, version_token)

        version_data = self.client.fetch_version(project, version)
        build = version_data.latest_build
        if build is None:
            raise ResolutionError(f"Version {version} has no builds")
        logger.debug("Resolved %s %s -> version %s build %d", project, version_token, version, build)

        build_data = self.client.fetch_build(project, version, build)
        download = build_data.downloads.get(download_type)
        if download is None:
            known = ", ".join(sorted(build_data.downloads)) or "none"
            raise ArtifactNotFoundError(
                f"No download of type '{download_type}' for {project} {version} build {build} "
                f"(available: {known})"
            )
        expected = download.expected_digest()

        result = DownloadResult(
            project_id=project_data.project_id, version=version, build=build,
            file_name=download.file_name, target=target,
        )

        if target.path is not None:
            size = self.current_size(target.path, expected)
            if size is not None:
                return replace(result, size=size, skipped=True)

        data = self.download(project, version, build, download)
        self.check(expected, data, download.file_name)
        self.save(data, target)
        return replace(result, size=len(data))

    # ---- steps ---------------------------------------------------------------
    def current_size(self, path: Path, expected: bytes) -> Optional[int]:
        """Size of `path` when it already holds the expected bytes, else None.

        A missing file, or any OS error while probing or reading it, counts as 'not current'.
        """
        try:
            if not path.exists():
                return None
            size = path.stat().st_size
            with ProgressTracker(self.console, "Checking if file is the latest build", size) as bar:
                with path.open("rb") as f:
                    on_disk = digest_of(bar.wrap(f), self.settings.chunk_size)
                good = verify(expected, on_disk)
                bar.finish("File is latest" if good else "Need to download")
        except OSError as e:
            logger.warning("Failed to check file hash, re-downloading: %s", e)
            return None
        return size if good else None

    def download(self, project: str, version: str, build: int, download: ArtifactDescriptor) -> bytearray:
        # the only copy of the artifact; later steps read it through memoryview slices
        buf = bytearray()
        with self.client.stream_download(project, version, build, download.file_name) as stream:
            with ProgressTracker(self.console, "Downloading to memory", stream.total) as bar:
                for chunk in bar.track(stream.chunks):
                    buf += chunk
                bar.finish("Finished download.")
        logger.debug("Downloaded %d bytes of %s", len(buf), download.file_name)
        return buf

    def _slices(self, data: bytearray) -> Iterator[memoryview]:
        view = memoryview(data)
        step = self.settings.chunk_size
        for start in range(0, len(view), step):
            yield view[start:start + step]

    def check(self, expected: bytes, data: bytearray, what: str) -> None:
        with ProgressTracker(self.console, "Validating", len(data)) as bar:
            actual = digest_chunks(bar.track(self._slices(data)))
            good = verify(expected, actual)
            bar.finish("Valid!" if good else "Invalid! :(")
        if not good:
            raise IntegrityError(expected, actual, what)

    def save(self, data: bytearray, target: DownloadTarget) -> None:
        try:
            with self.open_writer(target) as out:
                with ProgressTracker(self.console, "Saving to output", len(data)) as bar:
                    for piece in bar.track(self._slices(data)):
                        out.write(piece)
                    out.flush()
                    bar.finish("Saved.")
        except OSError as e:
            raise StorageError(f"Failed to save bytes to {target}: {e}") from e

    @contextmanager
    def open_writer(self, target: DownloadTarget) -> Iterator[BinaryIO]:
        if target.path is None:
            # flushed, never closed: the process still owns stdout
            yield self.stdout
            return
        with target.path.open("wb") as f:
            yield f
