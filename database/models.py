"""
SQLAlchemy ORM model for the single ``users`` table.

Only digests are stored: ``identifier_hash`` is the salted SHA-256 of the
normalised email, ``secret_hash`` is a self-describing Argon2id string.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    identifier_hash = Column(String(64), unique=True, nullable=False)
    secret_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "identifier_hash": self.identifier_hash,
            "secret_hash": self.secret_hash,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
