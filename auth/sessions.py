"""
In-memory session registry.

A token is valid exactly while it is a member of the registry.  Tokens
carry no user reference and never expire; they are dropped on logout or
when the process stops.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Optional, Protocol, Set

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_session_token() -> str:
    """256 random bits (URL-safe) plus a base-36 millisecond timestamp."""
    return secrets.token_urlsafe(32) + _base36(int(time.time() * 1000))


class SessionRegistry(Protocol):
    def issue(self) -> str: ...

    def validate(self, token: Optional[str]) -> bool: ...

    def revoke(self, token: Optional[str]) -> bool: ...


class InMemorySessionRegistry:
    """Process-wide set of active bearer tokens, guarded by a lock."""

    def __init__(self) -> None:
        self._tokens: Set[str] = set()
        self._lock = threading.Lock()

    def issue(self) -> str:
        token = new_session_token()
        with self._lock:
            self._tokens.add(token)
        return token

    def validate(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._tokens

    def revoke(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            if token not in self._tokens:
                return False
            self._tokens.remove(token)
            return True

    def clear(self) -> None:
        with self._lock:
            count = len(self._tokens)
            self._tokens.clear()
        if count:
            logger.info("Dropped %d active session(s)", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
