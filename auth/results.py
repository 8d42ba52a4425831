"""
Tagged operation results returned by ``AuthService``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from auth.errors import AuthError, ErrorKind


class AuthResult(BaseModel):
    success: bool
    message: str
    kind: Optional[ErrorKind] = None
    token: Optional[str] = None
    users: Optional[List[Dict[str, Any]]] = None
    total_users: Optional[int] = None

    @classmethod
    def ok(cls, message: str, **fields: Any) -> "AuthResult":
        return cls(success=True, message=message, **fields)

    @classmethod
    def failure(cls, error: AuthError) -> "AuthResult":
        return cls(success=False, kind=error.kind, message=error.message)


class HashCheck(BaseModel):
    """Outcome of hashing one identifier several ways (diagnostics only)."""

    email: str
    hash1: str
    hash2: str
    hash3: str
    same_email_same_hash: bool
    case_insensitive: bool
    deterministic: bool
