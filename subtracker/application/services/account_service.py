"""Sign-up, sign-in and sign-out flows for user accounts."""

from __future__ import annotations

import logging
from typing import Optional, Tuple
from uuid import uuid4

from ...core.clock import Clock, utc_now
from ...core.errors import (
    AppError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.validation import normalize_email, validate_user
from .password_hasher import PasswordHasher
from .token_service import TokenService

logger = logging.getLogger(__name__)


class AccountService:
    """Coordinates account creation and credential checks."""

    def __init__(
        self,
        users: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        clock: Clock = utc_now,
    ) -> None:
        self._users = users
        self._hasher = password_hasher
        self._tokens = token_service
        self._clock = clock

    def sign_up(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """
        Create an account and issue a token for it.

        The account is written inside a store transaction; a token is only
        minted once that transaction has committed.

        Returns:
            Tuple of (token, User)

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If the email is already registered
            InternalError: If the store fails mid-transaction
        """
        violations = validate_user(name, email, password)
        if violations:
            raise ValidationError(violations)

        email_clean = normalize_email(email)
        password_hash = self._hasher.hash(password)
        now = self._clock()
        user = User(
            id=uuid4().hex,
            name=name.strip(),
            email=email_clean,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

        session = self._users.start_session()
        session.start_transaction()
        try:
            # The UNIQUE(email) constraint stays authoritative; this check only
            # avoids a doomed insert.
            if self._users.get_user_by_email(email_clean, session=session):
                raise ConflictError("User already exists.")
            self._users.create_user(user, session=session)
            session.commit_transaction()
        except AppError:
            session.abort_transaction()
            raise
        except Exception as exc:
            session.abort_transaction()
            logger.exception("Sign-up transaction aborted")
            raise InternalError() from exc
        finally:
            session.end_session()

        logger.info("Created user %s", user.id)
        return self._tokens.issue(user.id), user

    def sign_in(self, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """
        Check credentials and issue a token.

        Raises:
            NotFoundError: If no account uses this email
            UnauthorizedError: If the password does not match
        """
        user = self._users.get_user_by_email(normalize_email(email or ""))
        if not user:
            raise NotFoundError("User does not exist.")
        if not password or not self._hasher.verify(password, user.password_hash):
            logger.info("Rejected sign-in for user %s", user.id)
            raise UnauthorizedError("Incorrect password.")

        logger.info("User %s signed in", user.id)
        return self._tokens.issue(user.id), user

    def sign_out(self) -> None:
        # Tokens are stateless; there is no server-side session to drop.
        return None
