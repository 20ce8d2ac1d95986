# paper_latest/core/errors.py
from __future__ import annotations
from typing import Optional


class PaperLatestError(RuntimeError):
    """Base for every fatal error the pipeline reports to the user."""


# ---- API fetches -------------------------------------------------------------
class ApiError(PaperLatestError):
    pass

class TransportError(ApiError):
    """The request could not complete (DNS, refused, timeout, broken stream)."""

class HttpStatusError(ApiError):
    def __init__(self, status: int, url: str, reason: str = "") -> None:
        self.status = status
        self.url = url
        msg = f"HTTP {status} for {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)

class DecodeError(ApiError):
    """Response body was not JSON, or not the JSON we expected."""


# ---- pipeline ----------------------------------------------------------------
class ResolutionError(PaperLatestError):
    pass

class ArtifactNotFoundError(PaperLatestError):
    pass

class EncodingError(PaperLatestError):
    pass

class IntegrityError(PaperLatestError):
    def __init__(self, expected: bytes, actual: bytes, what: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        subject = f" for {what}" if what else ""
        super().__init__(
            f"Failed digest check{subject}, given {expected.hex()}, got {actual.hex()}"
        )

class PreconditionError(PaperLatestError):
    pass

class StorageError(PaperLatestError):
    """Reading or writing the destination failed."""
