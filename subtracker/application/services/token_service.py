from __future__ import annotations

import logging
from datetime import timedelta

import jwt

from ...core.clock import Clock, utc_now
from ...core.errors import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        expires_minutes: int = 60 * 24,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning("JWT_SECRET is using the default value. Configure a secure secret in production.")
        self._secret_key = secret_key
        self._expires_minutes = expires_minutes
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: str) -> str:
        issued_at = self._clock()
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self._expires_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the user id bound to ``token``.

        Raises:
            TokenExpiredError: the signature is valid but the token is past its expiry
            InvalidTokenError: the token is malformed or its signature does not match
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc
        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return user_id
