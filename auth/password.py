"""
Password hashing and verification.

Uses Argon2id (argon2-cffi) with a fresh random salt per hash.  The
encoded output embeds algorithm, cost parameters and salt, so verification
needs nothing but the stored string.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from config.settings import config

PASSWORD_HASHER = PasswordHasher(
    time_cost=config.argon2_time_cost,
    memory_cost=config.argon2_memory_cost,
    parallelism=config.argon2_parallelism,
)


def hash_secret(raw: str) -> str:
    """Hash a password with Argon2id (random 16-byte salt)."""
    return PASSWORD_HASHER.hash(raw)


def verify_secret(raw: str, encoded_hash: str) -> bool:
    """Constant-time check of *raw* against an encoded Argon2 hash.

    Returns False for a wrong password, for malformed or foreign hashes and
    for input that cannot be encoded (non-ASCII hash, lone surrogates).
    """
    try:
        return PASSWORD_HASHER.verify(encoded_hash, raw)
    except (VerificationError, ValueError, TypeError):
        return False


def secret_needs_rehash(encoded_hash: str) -> bool:
    """True when *encoded_hash* was made with other cost parameters than the current ones."""
    try:
        return PASSWORD_HASHER.check_needs_rehash(encoded_hash)
    except (InvalidHashError, ValueError):
        return False
