"""
Hashing

All digests are SHA-256. Signatures are made over the raw 32-byte digest of
the canonical payload; the prefixed hex form is used for logs and the CLI.
"""

import hashlib
from typing import Union


def sha256_digest(data: Union[bytes, str]) -> bytes:
    """Raw SHA-256 digest (32 bytes)."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).digest()


def sha256_hash(data: Union[bytes, str]) -> str:
    """
    SHA-256 in display form.

    Returns:
        Hash string in format "sha256:abcdef..."
    """
    return f"sha256:{sha256_digest(data).hex()}"


def verify_hash(declared_hash: str, data: Union[bytes, str]) -> bool:
    """Recompute the hash of `data` and compare it with a declared one."""
    if not declared_hash.startswith("sha256:"):
        return False
    return sha256_hash(data) == declared_hash
