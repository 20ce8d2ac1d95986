# paper_latest/core/hashing.py
from __future__ import annotations
import binascii, hashlib, hmac
from pathlib import Path
from typing import BinaryIO, Iterable

from .errors import EncodingError

DIGEST_SIZE = hashlib.sha256().digest_size  # 32
CHUNK_SIZE = 1024 * 1024

def digest_chunks(chunks: Iterable[bytes]) -> bytes:
    h = hashlib.sha256()
    for chunk in chunks:
        h.update(chunk)
    return h.digest()

def digest_of(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> bytes:
    """SHA-256 of everything left in `stream`, read in bounded chunks."""
    return digest_chunks(iter(lambda: stream.read(chunk_size), b""))

def digest_bytes(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def sha256_file(path: Path) -> bytes:
    with path.open("rb") as f:
        return digest_of(f)

def verify(expected: bytes, actual: bytes) -> bool:
    # raw digests, never their hex spelling
    return hmac.compare_digest(bytes(expected), bytes(actual))

def decode_digest(hex_text: str) -> bytes:
    try:
        raw = binascii.unhexlify((hex_text or "").strip())
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Got a sha256 value that wasn't hex: {hex_text!r}") from e
    if len(raw) != DIGEST_SIZE:
        raise EncodingError(
            f"Got a sha256 value of {len(raw)} bytes, expected {DIGEST_SIZE}: {hex_text!r}"
        )
    return raw
