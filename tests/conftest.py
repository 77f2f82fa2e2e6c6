"""
Shared fixtures.

Every test gets its own in-memory SQLite database (StaticPool keeps the
single connection alive for the lifetime of the engine).
"""
import os
from collections.abc import Callable, Iterator

# Required settings must exist before storefront.main is imported.
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.core.tokens import TokenService
from storefront.database import Database
from storefront.main import create_app
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.contact_repo import ContactRepository
from storefront.repositories.user_repo import UserRepository

TEST_ROUNDS = 4


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ACCESS_TOKEN_SECRET="test-access-secret",
        REFRESH_TOKEN_SECRET="test-refresh-secret",
        DATABASE_URL="sqlite:///:memory:",
        BCRYPT_ROUNDS=TEST_ROUNDS,
        _env_file=None,
    )


@pytest.fixture
def db() -> Iterator[Database]:
    database = Database("sqlite:///:memory:")
    database.open()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def session(db: Database) -> Iterator[Session]:
    """Create a fresh database session for testing."""
    with db.session() as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def user_repo() -> UserRepository:
    return UserRepository()


@pytest.fixture
def cart_repo() -> CartRepository:
    return CartRepository()


@pytest.fixture
def contact_repo() -> ContactRepository:
    return ContactRepository()


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Test client; the app lifespan opens and closes its own database."""
    app = create_app(settings, Database(settings.DATABASE_URL))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client: TestClient) -> Callable[..., tuple[int, str]]:
    """Register a user, log in and return (user_id, access_token)."""

    def _register_and_login(
        name: str = "Ann",
        email: str = "ann@x.com",
        password: str = "pw123",
    ) -> tuple[int, str]:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["userId"]

        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return user_id, response.json()["token"]

    return _register_and_login
