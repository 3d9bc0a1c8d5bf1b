from dataclasses import dataclass

from ..application.services.account_service import AccountService
from ..application.services.auth_guard import AuthGuard
from ..application.services.subscription_service import SubscriptionService
from ..domain.ports.persistence import PersistenceGateway


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    persistence: PersistenceGateway
    account_service: AccountService
    auth_guard: AuthGuard
    subscription_service: SubscriptionService
