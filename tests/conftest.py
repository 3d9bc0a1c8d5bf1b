from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from subtracker.application.services.account_service import AccountService
from subtracker.application.services.auth_guard import AuthGuard
from subtracker.application.services.password_hasher import PasswordHasher
from subtracker.application.services.subscription_service import SubscriptionService
from subtracker.application.services.token_service import TokenService
from subtracker.core.app_factory import create_application
from subtracker.core.config import Settings
from subtracker.infrastructure.persistence.sqlite import SQLitePersistence

SECRET = "test-signing-secret-0123456789abcdef0123456789"


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "unit.db")
    yield store
    store.close()


@pytest.fixture
def password_hasher():
    # Minimum cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(SECRET, expires_minutes=60)


@pytest.fixture
def account_service(persistence, password_hasher, token_service):
    return AccountService(persistence, password_hasher, token_service)


@pytest.fixture
def auth_guard(token_service, persistence):
    return AuthGuard(token_service, persistence)


@pytest.fixture
def subscription_service(persistence):
    return SubscriptionService(persistence)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret=SECRET,
        jwt_expires_minutes=60,
        bcrypt_rounds=4,
        database_path=tmp_path / "api.db",
    )


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


def sign_up(client, name="Alice Doe", email="alice@example.com", password="s3cret-pass"):
    return client.post(
        "/api/v1/auth/sign-up",
        json={"name": name, "email": email, "password": password},
    )


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def days_ago(days):
    return datetime.now(timezone.utc) - timedelta(days=days)
