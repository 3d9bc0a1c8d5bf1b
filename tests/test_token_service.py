from datetime import datetime, timedelta, timezone

import pytest

from subtracker.application.services.token_service import TokenService
from subtracker.core.errors import InvalidTokenError, TokenExpiredError, UnauthorizedError

from conftest import SECRET


def test_verify_returns_issued_user_id(token_service):
    token = token_service.issue("5f2b9c1d")

    assert token_service.verify(token) == "5f2b9c1d"


def test_any_signature_mutation_is_rejected(token_service):
    token = token_service.issue("5f2b9c1d")
    header, payload, signature = token.split(".")

    # The final base64url character carries padding bits, so it is skipped.
    for index in range(len(signature) - 1):
        replacement = "A" if signature[index] != "A" else "B"
        mutated = signature[:index] + replacement + signature[index + 1:]
        with pytest.raises(InvalidTokenError) as excinfo:
            token_service.verify(f"{header}.{payload}.{mutated}")
        assert not isinstance(excinfo.value, TokenExpiredError)


def test_expired_token_is_reported_as_expired():
    issued_two_hours_ago = TokenService(
        SECRET,
        expires_minutes=60,
        clock=lambda: datetime.now(timezone.utc) - timedelta(hours=2),
    )
    token = issued_two_hours_ago.issue("5f2b9c1d")

    with pytest.raises(TokenExpiredError):
        TokenService(SECRET).verify(token)


def test_token_signed_with_other_secret_is_invalid(token_service):
    forged = TokenService("another-secret-0123456789abcdef0123456789").issue("5f2b9c1d")

    with pytest.raises(InvalidTokenError):
        token_service.verify(forged)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_invalid(token_service, token):
    with pytest.raises(InvalidTokenError) as excinfo:
        token_service.verify(token)
    assert isinstance(excinfo.value, UnauthorizedError)
    assert excinfo.value.status_code == 401


def test_empty_secret_is_refused():
    with pytest.raises(RuntimeError):
        TokenService("")
