"""
Authentication operations — register, login, password reset, logout and
the protected user listing.

``AuthService`` is the boundary of the core: every public coroutine
returns an ``AuthResult``.  ``AuthError`` raised inside an operation
becomes a failed result of the same kind; any other exception is logged
and reported as ``Internal``.

Argon2 work runs in a worker thread and never while the session registry
lock is held.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Awaitable, Callable, Optional

from auth.errors import (
    AlreadyExistsError,
    AuthError,
    ConflictError,
    InputValidationError,
    InternalError,
    InvalidCredentialsError,
    NoActiveSessionError,
    NotFoundError,
    UnauthorizedError,
)
from auth.identifier import hash_identifier
from auth.password import hash_secret, secret_needs_rehash, verify_secret
from auth.results import AuthResult, HashCheck
from auth.sessions import SessionRegistry
from database.user_store import UserStore

logger = logging.getLogger(__name__)

SECURITY_NOTE = "Emails: SHA-256 + deterministic salt, Passwords: Argon2id + random salt"


def operation(name: str) -> Callable[..., Callable[..., Awaitable[AuthResult]]]:
    """Catch everything an operation raises and turn it into an ``AuthResult``."""

    def decorator(fn: Callable[..., Awaitable[AuthResult]]) -> Callable[..., Awaitable[AuthResult]]:
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs) -> AuthResult:
            try:
                return await fn(*args, **kwargs)
            except ConflictError:
                return AuthResult.failure(AlreadyExistsError())
            except AuthError as exc:
                return AuthResult.failure(exc)
            except Exception:
                logger.exception("%s failed unexpectedly", name)
                return AuthResult.failure(InternalError())

        return wrapper

    return decorator


def _require(*values: Optional[str], message: Optional[str] = None) -> None:
    if not all(values):
        raise InputValidationError(message)


class AuthService:
    def __init__(
        self,
        store: UserStore,
        sessions: SessionRegistry,
        identifier_salt: str,
    ) -> None:
        self.store = store
        self.sessions = sessions
        self._salt = identifier_salt

    def _identifier_hash(self, identifier: str) -> str:
        return hash_identifier(identifier, self._salt)

    @operation("register")
    async def register(self, identifier: Optional[str], secret: Optional[str]) -> AuthResult:
        _require(identifier, secret)
        identifier_hash = self._identifier_hash(identifier)

        if await self.store.find_by_identifier_hash(identifier_hash) is not None:
            logger.info("Registration denied — identifier hash %s… already registered", identifier_hash[:8])
            raise AlreadyExistsError()

        secret_hash = await asyncio.to_thread(hash_secret, secret)
        user = await self.store.insert(identifier_hash, secret_hash)
        token = self.sessions.issue()
        logger.info("Registered user id=%s", user.id)
        return AuthResult.ok("User registered successfully", token=token)

    @operation("login")
    async def login(self, identifier: Optional[str], secret: Optional[str]) -> AuthResult:
        _require(identifier, secret)
        identifier_hash = self._identifier_hash(identifier)

        user = await self.store.find_by_identifier_hash(identifier_hash)
        if user is None:
            logger.info("Login failed — unknown identifier hash %s…", identifier_hash[:8])
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(verify_secret, secret, user.secret_hash):
            logger.info("Login failed — wrong password for user id=%s", user.id)
            raise InvalidCredentialsError()

        if secret_needs_rehash(user.secret_hash):
            await self.store.update_secret_hash(
                identifier_hash, await asyncio.to_thread(hash_secret, secret)
            )
            logger.info("Upgraded password hash parameters for user id=%s", user.id)

        token = self.sessions.issue()
        logger.info("Login successful for user id=%s", user.id)
        return AuthResult.ok("Login successful", token=token)

    @operation("reset_password")
    async def reset_password(
        self,
        token: Optional[str],
        identifier: Optional[str],
        current_secret: Optional[str],
        new_secret: Optional[str],
    ) -> AuthResult:
        # Any active session may reset any account; tokens are not bound to users.
        if not self.sessions.validate(token):
            raise UnauthorizedError()
        _require(
            identifier,
            current_secret,
            new_secret,
            message="Email, current password, and new password required",
        )
        identifier_hash = self._identifier_hash(identifier)

        user = await self.store.find_by_identifier_hash(identifier_hash)
        if user is None:
            logger.info("Password reset failed — unknown identifier hash %s…", identifier_hash[:8])
            raise NotFoundError()

        if not await asyncio.to_thread(verify_secret, current_secret, user.secret_hash):
            logger.info("Password reset failed — wrong current password for user id=%s", user.id)
            raise InvalidCredentialsError("Current password is incorrect")

        new_hash = await asyncio.to_thread(hash_secret, new_secret)
        await self.store.update_secret_hash(identifier_hash, new_hash)
        logger.info("Password reset completed for user id=%s", user.id)
        return AuthResult.ok("Password updated successfully")

    @operation("logout")
    async def logout(self, token: Optional[str]) -> AuthResult:
        if not self.sessions.revoke(token):
            raise NoActiveSessionError()
        logger.info("User logout completed")
        return AuthResult.ok("Logged out successfully")

    @operation("list_users")
    async def list_users(self, token: Optional[str]) -> AuthResult:
        if not self.sessions.validate(token):
            raise UnauthorizedError()
        users = [user.to_dict() for user in await self.store.list_all()]
        logger.info("User list requested — total users: %d", len(users))
        return AuthResult.ok(
            "All users retrieved (showing hashed data for security proof)",
            users=users,
            total_users=len(users),
        )

    def check_identifier_hashing(self, identifier: str) -> HashCheck:
        """Hash *identifier* twice and upper-cased, reporting whether all three agree."""
        first = self._identifier_hash(identifier)
        second = self._identifier_hash(identifier)
        upper = self._identifier_hash(identifier.upper())
        return HashCheck(
            email=identifier,
            hash1=first,
            hash2=second,
            hash3=upper,
            same_email_same_hash=first == second,
            case_insensitive=first == upper,
            deterministic=first == second == upper,
        )
