"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """The ``AuthService`` wired into the app by ``create_app``."""
    return request.app.state.auth_service


async def get_bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Return the token from an ``Authorization: Bearer <token>`` header.

    Validity is not checked here; the operations decide what a missing or
    unknown token means.
    """
    if not authorization:
        return None
    token = authorization.replace("Bearer ", "", 1).strip()
    return token or None
