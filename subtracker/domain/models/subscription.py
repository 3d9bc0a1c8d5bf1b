"""Subscription domain model tracking a recurring payment owned by a user."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"
    EUR = "EUR"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Category(str, Enum):
    SPORTS = "sports"
    NEWS = "news"
    ENTERTAINMENT = "entertainment"
    LIFESTYLE = "lifestyle"
    TECHNOLOGY = "technology"
    FINANCE = "finance"
    POLITICS = "politics"
    OTHER = "other"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class Subscription:
    """
    Subscription entity.

    Attributes:
        id: Opaque unique identifier
        user_id: Owning account, fixed at creation
        name: Subscription name (3-100 characters)
        price: Non-negative price per billing period
        currency: Billing currency
        frequency: Billing frequency, drives the renewal date
        category: Fixed category
        payment_method: Free-text payment method
        status: active, cancelled or expired
        start_date: When the subscription started (UTC)
        renewal_date: Next renewal (UTC), derived from start_date when absent
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: str,
        user_id: str,
        name: str,
        price: float,
        frequency: Frequency,
        category: Category,
        payment_method: str,
        start_date: datetime,
        renewal_date: Optional[datetime] = None,
        currency: Currency = Currency.INR,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.name = name
        self.price = price
        self.currency = currency
        self.frequency = frequency
        self.category = category
        self.payment_method = payment_method
        self.status = status
        self.start_date = start_date
        self.renewal_date = renewal_date
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def is_active(self) -> bool:
        """Check if subscription is currently active."""
        return self.status == SubscriptionStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} user_id={self.user_id} status={self.status.value}>"
