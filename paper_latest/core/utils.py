from __future__ import annotations
import math
from typing import Mapping, Optional

def human_size(n: Optional[int]) -> str:
    if n is None or n < 0: return "?"
    if n == 0: return "0 B"
    units = ["B","KB","MB","GB","TB"]
    i = min(int(math.floor(math.log(n, 1024))), len(units) - 1)
    return f"{n/(1024**i):.2f} {units[i]}"

def content_length(headers: Mapping[str, str]) -> Optional[int]:
    """Declared body size, or None when absent or unparseable (progress hint only)."""
    raw = headers.get("Content-Length")
    if raw is None:
        return None
    raw = raw.strip()
    return int(raw) if raw.isdigit() else None
