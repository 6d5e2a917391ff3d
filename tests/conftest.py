"""Pytest configuration and shared fixtures."""

import json
from typing import Callable

import httpx
import pytest

from collab.auth.authority import AuthorityClient
from collab.auth.resolver import CredentialResolver
from collab.config import AuthConfig
from collab.database import User, create_engine_and_sessionmaker, init_db, session_scope
from collab.repositories import UserRepository


AUTHORITY_URL = "http://authority.test"
API_TOKEN = "test-api-token-12345"


# ============================================================================
# Configuration
# ============================================================================

@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database, so several connections can share it."""
    return f"sqlite+aiosqlite:///{tmp_path / 'collab.db'}"


@pytest.fixture
def config(database_url):
    """Service configuration pointing at the fake authority."""
    return AuthConfig(
        cloud_url=AUTHORITY_URL,
        api_token=API_TOKEN,
        database_url=database_url,
    )


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
async def session_maker(database_url):
    """Initialized database; yields the session factory."""
    engine, maker = create_engine_and_sessionmaker(database_url)
    await init_db(engine)
    yield maker
    await engine.dispose()


@pytest.fixture
async def seed_user(session_maker):
    """Factory inserting a user and returning it."""
    async def _seed(github_login: str, github_user_id: int, admin: bool = False) -> User:
        async with session_scope(session_maker) as session:
            return await UserRepository(User, session).create_user(
                github_login, f"{github_login}@example.com", admin, github_user_id
            )
    return _seed


@pytest.fixture
def count_users(session_maker):
    """Count stored users, optionally only those with a given login."""
    async def _count(github_login: str | None = None) -> int:
        async with session_scope(session_maker) as session:
            users = await UserRepository(User, session).list_users(limit=10_000)
        if github_login is None:
            return len(users)
        return sum(1 for u in users if u.github_login == github_login)
    return _count


# ============================================================================
# Fake authority
# ============================================================================

class FakeAuthority:
    """Records requests and answers them with a configurable handler."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.tokens: dict[str, int] = {}
        self.error: Exception | None = None
        self.raw_body: bytes | None = None

    def accept(self, access_token: str, user_id: int) -> None:
        """Make ``access_token`` valid for ``user_id``."""
        self.tokens[access_token] = user_id

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        _, _, token = request.headers.get("authorization", "").partition(" ")
        if token not in self.tokens:
            return httpx.Response(401, json={"error": "unauthorized"})

        if self.raw_body is not None:
            return httpx.Response(200, content=self.raw_body)

        user_id = self.tokens[token]
        body = {
            "user": {"id": user_id, "github_login": f"user{user_id}", "avatar_url": None},
            "feature_flags": [],
        }
        return httpx.Response(200, content=json.dumps(body).encode())


@pytest.fixture
def fake_authority():
    return FakeAuthority()


@pytest.fixture
async def http_client(fake_authority):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_authority)) as client:
        yield client


@pytest.fixture
def authority(http_client):
    return AuthorityClient(AUTHORITY_URL, http_client)


@pytest.fixture
def resolver(config, authority):
    return CredentialResolver(config, authority)


@pytest.fixture
def resolve(resolver, session_maker) -> Callable:
    """Resolve a header in its own session, like one request would."""
    async def _resolve(authorization):
        async with session_scope(session_maker) as session:
            return await resolver.resolve(authorization, UserRepository(User, session))
    return _resolve
