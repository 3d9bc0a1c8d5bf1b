from __future__ import annotations

import logging
from typing import Optional

from ...core.errors import InvalidTokenError, UnauthorizedError
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from .token_service import TokenService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


class AuthGuard:
    """Resolves the account behind a bearer token or rejects the request.

    Every rejection uses the same message so callers cannot tell a bad
    token from one whose account has been removed.
    """

    def __init__(self, token_service: TokenService, users: UserRepository) -> None:
        self._tokens = token_service
        self._users = users

    def authenticate(self, scheme: Optional[str], token: Optional[str]) -> User:
        token = self.check_credentials(scheme, token)
        try:
            user_id = self._tokens.verify(token)
        except InvalidTokenError as exc:
            logger.debug("Rejected bearer token: %s", exc.message)
            raise UnauthorizedError() from exc
        user = self._users.get_user_by_id(user_id)
        if user is None:
            logger.debug("Rejected bearer token for missing user %s", user_id)
            raise UnauthorizedError()
        return user

    @staticmethod
    def check_credentials(scheme: Optional[str], token: Optional[str]) -> str:
        # The scheme is matched literally and the token must carry no whitespace.
        if scheme != BEARER_SCHEME or not token or token != "".join(token.split()):
            raise UnauthorizedError()
        return token
