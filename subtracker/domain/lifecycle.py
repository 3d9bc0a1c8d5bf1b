"""Renewal-date derivation and status rules for subscriptions.

Nothing here touches storage: the subscription service calls
:func:`validate_subscription` and :func:`prepare_for_save` explicitly before
handing an entity to the persistence gateway.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, List, Mapping, Optional, Type, TypeVar

from ..core.errors import FieldViolation
from .models import Category, Currency, Frequency, Subscription, SubscriptionStatus

# Calendar-approximate, not calendar-exact.
RENEWAL_PERIODS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.MONTHLY: 30,
    Frequency.YEARLY: 365,
}

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 100

E = TypeVar("E", bound=Enum)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def renewal_offset(frequency: Frequency) -> timedelta:
    return timedelta(days=RENEWAL_PERIODS[Frequency(frequency)])


def compute_renewal_date(start_date: datetime, frequency: Frequency) -> datetime:
    return as_utc(start_date) + renewal_offset(frequency)


def coerce_enum(enum_cls: Type[E], value: Any) -> Optional[E]:
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _choices(enum_cls: Type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


def _utc_field(payload: Mapping[str, Any], field: str, violations: List[FieldViolation]) -> Optional[datetime]:
    value = payload.get(field)
    if value is None:
        return None
    try:
        return as_utc(value)
    except OverflowError:
        violations.append(FieldViolation(field, "Date is out of range."))
        return None


def validate_subscription(payload: Mapping[str, Any], now: datetime) -> List[FieldViolation]:
    """Check a subscription payload against every field rule.

    ``payload`` uses the entity's attribute names. Returns the list of
    violations; an empty list means the payload may be persisted.
    """
    violations: List[FieldViolation] = []
    now = as_utc(now)

    name = (payload.get("name") or "").strip()
    if not name:
        violations.append(FieldViolation("name", "Subscription name is required."))
    elif not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        violations.append(
            FieldViolation(
                "name",
                f"Subscription name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters.",
            )
        )

    price = payload.get("price")
    if price is None:
        violations.append(FieldViolation("price", "Subscription price is required."))
    elif not math.isfinite(price):
        violations.append(FieldViolation("price", "Subscription price must be a finite number."))
    elif price < 0:
        violations.append(FieldViolation("price", "Subscription price must be greater than or equal to 0."))

    currency = payload.get("currency")
    if currency is not None and coerce_enum(Currency, currency) is None:
        violations.append(FieldViolation("currency", f"Currency must be one of {_choices(Currency)}."))

    frequency = payload.get("frequency")
    if frequency is None:
        violations.append(FieldViolation("frequency", "Subscription frequency is required."))
    elif coerce_enum(Frequency, frequency) is None:
        violations.append(FieldViolation("frequency", f"Frequency must be one of {_choices(Frequency)}."))

    category = payload.get("category")
    if category is None:
        violations.append(FieldViolation("category", "Subscription category is required."))
    elif coerce_enum(Category, category) is None:
        violations.append(FieldViolation("category", f"Category must be one of {_choices(Category)}."))

    if not (payload.get("payment_method") or "").strip():
        violations.append(FieldViolation("payment_method", "Subscription payment method is required."))

    status = payload.get("status")
    if status is not None and coerce_enum(SubscriptionStatus, status) is None:
        violations.append(FieldViolation("status", f"Status must be one of {_choices(SubscriptionStatus)}."))

    start_date = _utc_field(payload, "start_date", violations)
    if payload.get("start_date") is None:
        violations.append(FieldViolation("start_date", "Subscription start date is required."))
    elif start_date is not None and start_date >= now:
        violations.append(FieldViolation("start_date", "Start date must be before the current date."))

    renewal_date = _utc_field(payload, "renewal_date", violations)
    if renewal_date is not None and start_date is not None:
        if renewal_date <= start_date:
            violations.append(FieldViolation("renewal_date", "Renewal date must be after the start date."))

    if not payload.get("user_id"):
        violations.append(FieldViolation("user_id", "User related to subscription is required."))

    return violations


def prepare_for_save(subscription: Subscription, now: datetime, renewal_supplied: bool) -> Subscription:
    """Derive the renewal date and status right before a write.

    Without an explicit renewal date the date is recomputed from the start
    date and frequency. A renewal date at or before ``now`` forces the
    status to expired whatever the caller asked for.
    """
    now = as_utc(now)
    subscription.start_date = as_utc(subscription.start_date)
    if not renewal_supplied or subscription.renewal_date is None:
        subscription.renewal_date = compute_renewal_date(subscription.start_date, subscription.frequency)
    else:
        subscription.renewal_date = as_utc(subscription.renewal_date)

    if subscription.renewal_date <= now:
        subscription.status = SubscriptionStatus.EXPIRED

    subscription.updated_at = now
    return subscription
