# paper_latest/core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import DecodeError
from .hashing import decode_digest

STDOUT_TOKEN = "-"

# ---- payload helpers ---------------------------------------------------------
def _require(payload: Any, key: str, what: str) -> Any:
    if not isinstance(payload, dict):
        raise DecodeError(f"{what}: expected a JSON object, got {type(payload).__name__}")
    if key not in payload:
        raise DecodeError(f"{what}: missing field '{key}'")
    return payload[key]

def _str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"{what}: expected a string, got {value!r}")
    return value

def _str_list(value: Any, what: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise DecodeError(f"{what}: expected a list, got {type(value).__name__}")
    return tuple(_str(v, what) for v in value)

def _int_list(value: Any, what: str) -> Tuple[int, ...]:
    if not isinstance(value, list):
        raise DecodeError(f"{what}: expected a list, got {type(value).__name__}")
    out: List[int] = []
    for v in value:
        # bool is an int subclass; a build number never is
        if isinstance(v, bool) or not isinstance(v, int):
            raise DecodeError(f"{what}: expected an integer build number, got {v!r}")
        out.append(v)
    return tuple(out)


# ---- API records -------------------------------------------------------------
@dataclass(frozen=True)
class ProjectMetadata:
    project_id: str
    version_groups: Tuple[str, ...] = ()
    versions: Tuple[str, ...] = ()

    @classmethod
    def from_json(cls, payload: Any) -> "ProjectMetadata":
        what = "project"
        return cls(
            project_id=_str(_require(payload, "project_id", what), what),
            version_groups=_str_list(_require(payload, "version_groups", what), what),
            versions=_str_list(_require(payload, "versions", what), what),
        )

@dataclass(frozen=True)
class VersionGroupMetadata:
    versions: Tuple[str, ...] = ()  # oldest first

    @classmethod
    def from_json(cls, payload: Any) -> "VersionGroupMetadata":
        what = "version group"
        return cls(versions=_str_list(_require(payload, "versions", what), what))

    @property
    def newest(self) -> Optional[str]:
        return self.versions[-1] if self.versions else None

@dataclass(frozen=True)
class VersionMetadata:
    builds: Tuple[int, ...] = ()

    @classmethod
    def from_json(cls, payload: Any) -> "VersionMetadata":
        what = "version"
        return cls(builds=_int_list(_require(payload, "builds", what), what))

    @property
    def latest_build(self) -> Optional[int]:
        return max(self.builds) if self.builds else None

@dataclass(frozen=True)
class ArtifactDescriptor:
    file_name: str
    sha256_hex: str

    @classmethod
    def from_json(cls, payload: Any) -> "ArtifactDescriptor":
        what = "download"
        return cls(
            file_name=_str(_require(payload, "name", what), what),
            sha256_hex=_str(_require(payload, "sha256", what), what),
        )

    def expected_digest(self) -> bytes:
        return decode_digest(self.sha256_hex)

@dataclass(frozen=True)
class BuildMetadata:
    downloads: Mapping[str, ArtifactDescriptor] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Any) -> "BuildMetadata":
        what = "build"
        raw = _require(payload, "downloads", what)
        if not isinstance(raw, dict):
            raise DecodeError(f"{what}: 'downloads' is not an object")
        downloads: Dict[str, ArtifactDescriptor] = {
            str(k): ArtifactDescriptor.from_json(v) for k, v in raw.items()
        }
        return cls(downloads=MappingProxyType(downloads))


# ---- destination -------------------------------------------------------------
@dataclass(frozen=True)
class DownloadTarget:
    """Where the artifact goes: a file path, or standard output when path is None."""
    path: Optional[Path] = None

    @classmethod
    def parse(cls, text: str) -> "DownloadTarget":
        if text == STDOUT_TOKEN:
            return cls.stdout()
        return cls.file(Path(text))

    @classmethod
    def stdout(cls) -> "DownloadTarget":
        return cls(None)

    @classmethod
    def file(cls, path: Path) -> "DownloadTarget":
        return cls(Path(path))

    @property
    def is_stdout(self) -> bool:
        return self.path is None

    def __str__(self) -> str:
        return "Standard Out" if self.path is None else str(self.path)


@dataclass(frozen=True)
class DownloadResult:
    project_id: str
    version: str
    build: int
    file_name: str
    target: DownloadTarget
    size: Optional[int] = None
    skipped: bool = False
