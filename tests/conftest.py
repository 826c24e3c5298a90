"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Test database (SQLite in-memory for speed)
- Fake Google/Notion HTTP backend (httpx.MockTransport)
- Test client (FastAPI TestClient) wired to both
- User and session cookie helpers
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from meetdesk.core.security import USER_ID_COOKIE, create_session_token
from meetdesk.db.base import Base
from meetdesk.db.session import get_db, get_session_factory
from meetdesk.deps import get_auth_client, get_http_transport
from meetdesk.environments.google.auth import GoogleAuthClient
from meetdesk.main import app
from meetdesk.models.user import User


# ---------------------------------------------------------------------------
# TEST DATABASE SETUP
# ---------------------------------------------------------------------------
# Use SQLite in-memory for fast tests (no PostgreSQL dependency)
# StaticPool keeps the same connection across all operations

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},  # Required for SQLite
    poolclass=StaticPool,  # Keep connection alive across operations
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


GOOGLE_ID = "110169484474386276334"


# ---------------------------------------------------------------------------
# FAKE UPSTREAM
# ---------------------------------------------------------------------------

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """
    Canned answers for outgoing HTTP calls, keyed by method and URL
    (without query string).

    A list of replies is consumed in order; the last one repeats.
    An Exception reply is raised, which lets tests simulate network errors.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, *replies: Reply) -> None:
        self.routes[(method.upper(), url)] = list(replies)

    def json(self, method: str, url: str, body: Any, status_code: int = 200) -> None:
        self.add(method, url, httpx.Response(status_code, json=body))

    def calls(self, method: str, url: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and str(r.url.copy_with(query=None)) == url
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        replies = self.routes.get(key)
        if not replies:
            return httpx.Response(404, json={"error": f"no fake route for {key}"})

        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        # A fresh copy, since the same canned reply may be served many times
        return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)

    @staticmethod
    def form_data(request: httpx.Request) -> Dict[str, str]:
        """Decode an application/x-www-form-urlencoded request body."""
        return dict(httpx.QueryParams(request.content.decode()))

    @staticmethod
    def json_body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


# ---------------------------------------------------------------------------
# DATABASE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.

    - Creates all tables
    - Yields a session for the test
    - Drops all tables after test (clean slate)
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def auth_client(upstream: FakeUpstream) -> GoogleAuthClient:
    """OAuth client with test credentials, talking to the fake upstream."""
    return GoogleAuthClient(
        client_id="test-client-id",
        client_secret="test-client-secret",
        transport=upstream.transport,
    )


@pytest.fixture(scope="function")
def client(
    db: Session, upstream: FakeUpstream, auth_client: GoogleAuthClient
) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and fake upstream.

    Overrides:
    - get_db: the test session
    - get_session_factory: sessions on the same in-memory database
    - get_http_transport / get_auth_client: the fake upstream
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_http_transport] = lambda: upstream.transport
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# USER FIXTURES
# ---------------------------------------------------------------------------

def _make_user(
    db: Session,
    google_id: str = GOOGLE_ID,
    access_token: Optional[str] = "ya29.stored-access",
    refresh_token: Optional[str] = "1//stored-refresh",
    expires_in: timedelta = timedelta(hours=1),
) -> User:
    now = datetime.now(timezone.utc)
    user = User(
        google_id=google_id,
        email="jane@example.com",
        name="Jane Doe",
        picture="https://lh3.googleusercontent.com/a/jane",
        access_token=access_token,
        refresh_token=refresh_token,
        expires_at=now + expires_in,
        scopes=["openid"],
        created_at=now,
        last_login=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user_factory(db: Session) -> Callable[..., User]:
    """
    Insert a credential record. Keyword arguments override the defaults
    (google_id, access_token, refresh_token, expires_in).
    """
    return lambda **kwargs: _make_user(db, **kwargs)


@pytest.fixture
def test_user(db: Session) -> User:
    """A connected user whose access token is still valid for an hour."""
    return _make_user(db)


@pytest.fixture
def expired_user(db: Session) -> User:
    """A connected user whose access token expired ten minutes ago."""
    return _make_user(db, expires_in=timedelta(minutes=-10))


@pytest.fixture
def logged_in(client: TestClient, test_user: User) -> TestClient:
    """Test client carrying a valid session cookie for test_user."""
    client.cookies.set(USER_ID_COOKIE, create_session_token(test_user.google_id))
    return client


@pytest.fixture
def login_as(client: TestClient) -> Callable[[str], TestClient]:
    """Set a valid session cookie for an arbitrary Google id."""
    def _login(google_id: str) -> TestClient:
        client.cookies.set(USER_ID_COOKIE, create_session_token(google_id))
        return client
    return _login
