from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import Subscription, User


class StoreSession(Protocol):
    """Unit of work grouping several writes into one transaction."""

    def start_transaction(self) -> None:
        ...

    def commit_transaction(self) -> None:
        ...

    def abort_transaction(self) -> None:
        ...

    def end_session(self) -> None:
        ...


class UserRepository(Protocol):
    """Persistence functions related to user accounts."""

    def start_session(self) -> StoreSession:
        ...

    def get_user_by_email(self, email: str, session: Optional[StoreSession] = None) -> Optional[User]:
        ...

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    def create_user(self, user: User, session: Optional[StoreSession] = None) -> User:
        ...

    def count_users(self) -> int:
        ...

    def delete_user(self, user_id: str) -> None:
        ...


class SubscriptionRepository(Protocol):
    """Persistence functions related to subscriptions."""

    def save_subscription(self, subscription: Subscription) -> Subscription:
        ...

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        ...

    def list_subscriptions_for_user(self, user_id: str) -> List[Subscription]:
        ...


class PersistenceGateway(
    UserRepository,
    SubscriptionRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    def close(self) -> None:
        ...
