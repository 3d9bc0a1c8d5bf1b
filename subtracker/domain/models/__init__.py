"""Domain models for the subscription tracker."""

from .subscription import Category, Currency, Frequency, Subscription, SubscriptionStatus
from .user import User

__all__ = [
    "Category",
    "Currency",
    "Frequency",
    "Subscription",
    "SubscriptionStatus",
    "User",
]
