"""
User store — insert / lookup / update over the ``users`` table.

Every public method opens its own session and commits before returning,
so each mutation is a single transaction.  Uniqueness of
``identifier_hash`` is enforced by the table constraint and reported as
``ConflictError``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from auth.errors import ConflictError
from database.models import Base, User

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @property
    def engine(self) -> AsyncEngine:
        return self._session_factory.kw["bind"]

    async def dispose(self) -> None:
        """Close every pooled connection of the engine behind this store."""
        await self.engine.dispose()

    async def create_schema(self) -> None:
        """Create the ``users`` table if it does not exist yet."""
        async with self._session_factory() as session:
            conn = await session.connection()
            await conn.run_sync(Base.metadata.create_all)
            await session.commit()

    async def insert(self, identifier_hash: str, secret_hash: str) -> User:
        """Insert a new row; the database assigns ``id`` and ``created_at``."""
        async with self._session_factory() as session:
            user = User(identifier_hash=identifier_hash, secret_hash=secret_hash)
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning("Insert rejected — identifier hash %s… already present", identifier_hash[:8])
                raise ConflictError()
            await session.refresh(user)
            return user

    async def find_by_identifier_hash(self, identifier_hash: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.identifier_hash == identifier_hash)
            )
            return result.scalar_one_or_none()

    async def list_all(self) -> List[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())

    async def update_secret_hash(self, identifier_hash: str, new_secret_hash: str) -> None:
        """Replace the stored secret hash; a no-op when nothing matches."""
        async with self._session_factory() as session:
            await session.execute(
                update(User)
                .where(User.identifier_hash == identifier_hash)
                .values(secret_hash=new_secret_hash)
            )
            await session.commit()
