"""engine/hashing.py — Chain-of-custody digests of the raw document bytes."""
import hashlib
from typing import Dict

_CHUNK = 65536


def compute_digests(buffer: bytes) -> Dict[str, str]:
    """Return ``{"md5": ..., "sha256": ...}`` hex digests of the full buffer."""
    md5 = hashlib.md5()
    sha256 = hashlib.sha256()
    view = memoryview(buffer)
    for start in range(0, len(view), _CHUNK):
        chunk = view[start:start + _CHUNK]
        md5.update(chunk)
        sha256.update(chunk)
    return {"md5": md5.hexdigest(), "sha256": sha256.hexdigest()}
