"""
Shared fixtures: an in-memory SQLite store, a fresh session registry and
an ``AuthService`` / HTTP client built on top of them.
"""

import httpx
import pytest
import pytest_asyncio

from auth.service import AuthService
from auth.sessions import InMemorySessionRegistry
from database.session import build_engine, build_session_factory
from database.user_store import UserStore

TEST_SALT = "test-identifier-salt"


@pytest_asyncio.fixture
async def store():
    engine = build_engine("sqlite+aiosqlite://")
    user_store = UserStore(build_session_factory(engine))
    await user_store.create_schema()
    yield user_store
    await engine.dispose()


@pytest.fixture
def sessions():
    return InMemorySessionRegistry()


@pytest.fixture
def service(store, sessions):
    return AuthService(store=store, sessions=sessions, identifier_salt=TEST_SALT)


@pytest_asyncio.fixture
async def client(service):
    from main import create_app

    app = create_app(service)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
