# paper_latest/core/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

# ---- defaults ----------------------------------------------------------------
DEFAULT_API_BASE = "https://papermc.io/api/v2"
DEFAULT_TIMEOUT = 30.0           # seconds, handed to requests as-is
DEFAULT_CHUNK_SIZE = 128 * 1024
COLOR_MODES = ("auto", "always", "never")

# ---- environment overrides ---------------------------------------------------
# No config file on purpose; the only state on disk is the downloaded artifact.
#   PAPER_LATEST_API_BASE=<base url of the v2 api>
#   PAPER_LATEST_TIMEOUT=<seconds>
#   PAPER_LATEST_CHUNK_SIZE=<bytes>
ENV_API_BASE = "PAPER_LATEST_API_BASE"
ENV_TIMEOUT = "PAPER_LATEST_TIMEOUT"
ENV_CHUNK_SIZE = "PAPER_LATEST_CHUNK_SIZE"


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    color: str = "auto"
    verbose: bool = False

    def with_overrides(self, color: Optional[str] = None, verbose: Optional[bool] = None) -> "Settings":
        out = self
        if color is not None:
            if color not in COLOR_MODES:
                raise ValueError(f"unknown color mode {color!r}")
            out = replace(out, color=color)
        if verbose is not None:
            out = replace(out, verbose=verbose)
        return out


def _positive(raw: str, cast, name: str):
    try:
        val = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if val <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return val

def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    base = (env.get(ENV_API_BASE) or DEFAULT_API_BASE).strip().rstrip("/")
    timeout = DEFAULT_TIMEOUT
    if env.get(ENV_TIMEOUT):
        timeout = _positive(env[ENV_TIMEOUT], float, ENV_TIMEOUT)
    chunk = DEFAULT_CHUNK_SIZE
    if env.get(ENV_CHUNK_SIZE):
        chunk = _positive(env[ENV_CHUNK_SIZE], int, ENV_CHUNK_SIZE)
    return Settings(api_base=base, timeout=timeout, chunk_size=chunk)
