"""
Deterministic identifier (email) hashing.

The digest is the lookup and uniqueness key for a user, so the same
normalised email under the same salt must always produce the same hash.
"""

from __future__ import annotations

import hashlib


def normalize_identifier(raw: str) -> str:
    return raw.lower().strip()


def hash_identifier(raw: str, secret_salt: str) -> str:
    """SHA-256 over ``salt + normalised + salt``, as 64 lowercase hex chars."""
    salted = secret_salt + normalize_identifier(raw) + secret_salt
    return hashlib.sha256(salted.encode("utf-8")).hexdigest()
