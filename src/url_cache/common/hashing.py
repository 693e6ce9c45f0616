from __future__ import annotations

import hashlib


def sha256_hex(*parts: bytes) -> str:
    """Hex SHA-256 of the concatenated parts (64 chars, safe as a file name)."""
    return hashlib.sha256(b"".join(parts)).hexdigest()
