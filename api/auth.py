"""
Auth API routes — register, login, users, reset-password, logout.

Bodies are pydantic models validated by FastAPI, so ``AuthService`` only ever
sees typed values.  A body that is not valid JSON, or lacks a required
field, is rendered as a 400 with the route's message from
``VALIDATION_MESSAGES``.  ``/reset-password`` reads its body by hand, after
the bearer token has been checked.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import get_auth_service, get_bearer_token
from auth.errors import ErrorKind, InputValidationError, UnauthorizedError
from auth.results import AuthResult
from auth.service import SECURITY_NOTE, AuthService
from config.settings import config

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

AVAILABLE_ROUTES = ["/", "/register", "/login", "/users", "/reset-password", "/logout"]

VALIDATION_MESSAGES = {
    "/register": InputValidationError.default_message,
    "/login": InputValidationError.default_message,
    "/reset-password": "Email, current password, and new password required",
    "/debug/test-hash": "Email required",
}

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NO_ACTIVE_SESSION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# ── Request schemas ────────────────────────────────────────────────────


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=1)
    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(..., min_length=1, alias="newPassword")


class HashDebugRequest(BaseModel):
    email: str = Field(..., min_length=1)


_M = TypeVar("_M", bound=BaseModel)


async def _parse_body(request: Request, model: Type[_M], message: str) -> _M:
    try:
        payload = json.loads(await request.body() or b"null")
        return model.model_validate(payload)
    except (ValueError, PydanticValidationError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


def _render(result: AuthResult, body: Dict[str, Any]) -> JSONResponse:
    if not result.success:
        return JSONResponse(
            status_code=_STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            content={"error": result.message},
        )
    return JSONResponse(content={"success": True, "message": result.message, **body})


# ── Endpoints ──────────────────────────────────────────────────────────


@router.get("/")
async def api_info() -> Dict[str, Any]:
    """Describe the API and its hashing scheme."""
    endpoints = {
        "POST /register": "Register new user (email, password)",
        "POST /login": "Login user (email, password)",
        "GET /users": "Get all users - protected (Authorization: Bearer <sessionId>)",
        "POST /reset-password": "Reset password - protected (email, currentPassword, newPassword)",
        "POST /logout": "Logout user - protected",
    }
    if config.enable_hash_debug:
        endpoints["POST /debug/test-hash"] = "Test email hashing - development only"
    return {
        "message": "Secure Authentication API",
        "version": "1.0.0",
        "security": {
            "email_hashing": "SHA-256 with deterministic salt",
            "password_hashing": "Argon2id with random salt",
            "duplicate_prevention": "Enabled via deterministic email hashing",
        },
        "endpoints": endpoints,
        "example_usage": {
            "register": 'POST /register with {"email": "user@example.com", "password": "securepass123"}',
            "login": 'POST /login with {"email": "user@example.com", "password": "securepass123"}',
            "protected_request": "Add header: Authorization: Bearer <sessionId_from_login>",
        },
    }


@router.post("/register")
async def register(
    req: CredentialsRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Register a new user and open a session."""
    result = await service.register(req.email, req.password)
    return _render(result, {"sessionId": result.token})


@router.post("/login")
async def login(
    req: CredentialsRequest,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Login with email + password."""
    result = await service.login(req.email, req.password)
    return _render(result, {"sessionId": result.token})


@router.get("/users")
async def list_users(
    token: Optional[str] = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Every stored row, hashes included (protected)."""
    result = await service.list_users(token)
    return _render(
        result,
        {
            "users": result.users,
            "total_users": result.total_users,
            "security_note": SECURITY_NOTE,
        },
    )


@router.post("/reset-password")
async def reset_password(
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Replace a password after checking the current one (protected)."""
    # The session is checked before the body is read.
    if not service.sessions.validate(token):
        return _render(AuthResult.failure(UnauthorizedError()), {})
    req = await _parse_body(request, ResetPasswordRequest, VALIDATION_MESSAGES["/reset-password"])
    result = await service.reset_password(token, req.email, req.current_password, req.new_password)
    return _render(result, {})


@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Revoke the caller's session token."""
    result = await service.logout(token)
    return _render(result, {})


@router.post("/debug/test-hash", include_in_schema=False)
async def test_hash(
    req: HashDebugRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Show that identifier hashing is deterministic and case-insensitive."""
    if not config.enable_hash_debug:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    check = service.check_identifier_hashing(req.email)
    return {
        **check.model_dump(),
        "message": (
            "Email hashing is working correctly"
            if check.deterministic
            else "Email hashing has issues"
        ),
    }
