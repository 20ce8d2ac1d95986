# paper_latest/core/__init__.py
from .api import ApiClient, DownloadStream
from .config import Settings, load_settings
from .errors import (
    PaperLatestError, ApiError, TransportError, HttpStatusError, DecodeError,
    ResolutionError, ArtifactNotFoundError, EncodingError, IntegrityError,
    PreconditionError, StorageError,
)
from .hashing import digest_chunks, digest_of, digest_bytes, decode_digest, sha256_file, verify
from .http import make_session
from .models import (
    ProjectMetadata, VersionGroupMetadata, VersionMetadata, BuildMetadata,
    ArtifactDescriptor, DownloadTarget, DownloadResult,
)
from .pipeline import DownloadPipeline
from .resolve import resolve_version
from .utils import human_size

__all__ = [
    "ApiClient", "DownloadStream", "DownloadPipeline", "resolve_version",
    "Settings", "load_settings", "make_session",
    "digest_chunks", "digest_of", "digest_bytes", "decode_digest", "sha256_file", "verify",
    "ProjectMetadata", "VersionGroupMetadata", "VersionMetadata", "BuildMetadata",
    "ArtifactDescriptor", "DownloadTarget", "DownloadResult",
    "PaperLatestError", "ApiError", "TransportError", "HttpStatusError", "DecodeError",
    "ResolutionError", "ArtifactNotFoundError", "EncodingError", "IntegrityError",
    "PreconditionError", "StorageError",
    "human_size",
    "setup_logging",
]

# ---- simple logging toggle for the package ----
import logging

def setup_logging(verbose: bool = False) -> None:
    # stdout may carry the artifact, so logs stay on stderr and stay quiet by default
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s"
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
