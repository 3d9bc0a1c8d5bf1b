"""Service for subscription tracking."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping
from uuid import uuid4

from ...core.clock import Clock, utc_now
from ...core.errors import NotFoundError, UnauthorizedError, ValidationError
from ...domain.lifecycle import prepare_for_save, validate_subscription
from ...domain.models import Category, Currency, Frequency, Subscription, SubscriptionStatus, User
from ...domain.ports.persistence import SubscriptionRepository

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for managing the subscriptions owned by a user."""

    def __init__(self, subscriptions: SubscriptionRepository, clock: Clock = utc_now) -> None:
        self._subscriptions = subscriptions
        self._clock = clock

    def create_subscription(self, owner: User, payload: Mapping[str, Any]) -> Subscription:
        """
        Validate and persist a new subscription for ``owner``.

        Any ``user_id`` in the payload is ignored; ownership always goes to
        the authenticated user.

        Raises:
            ValidationError: If any field rule is violated
        """
        now = self._clock()
        data = dict(payload)
        data["user_id"] = owner.id

        violations = validate_subscription(data, now)
        if violations:
            raise ValidationError(violations)

        subscription = Subscription(
            id=uuid4().hex,
            user_id=owner.id,
            name=data["name"].strip(),
            price=data["price"],
            currency=Currency(data.get("currency") or Currency.INR),
            frequency=Frequency(data["frequency"]),
            category=Category(data["category"]),
            payment_method=data["payment_method"].strip(),
            status=SubscriptionStatus(data.get("status") or SubscriptionStatus.ACTIVE),
            start_date=data["start_date"],
            renewal_date=data.get("renewal_date"),
            created_at=now,
            updated_at=now,
        )
        saved = self._save(subscription, now, renewal_supplied=data.get("renewal_date") is not None)
        logger.info("Created subscription %s for user %s (%s)", saved.id, owner.id, saved.status.value)
        return saved

    def get_subscription(self, owner: User, subscription_id: str) -> Subscription:
        subscription = self._subscriptions.get_subscription(subscription_id)
        # Other users' subscriptions are reported as missing.
        if subscription is None or subscription.user_id != owner.id:
            raise NotFoundError("Subscription not found.")
        return subscription

    def list_subscriptions(self, owner: User) -> List[Subscription]:
        return self._subscriptions.list_subscriptions_for_user(owner.id)

    def list_user_subscriptions(self, requester: User, user_id: str) -> List[Subscription]:
        if requester.id != user_id:
            raise UnauthorizedError("You are not the owner of this account.")
        return self._subscriptions.list_subscriptions_for_user(user_id)

    def _save(self, subscription: Subscription, now: datetime, renewal_supplied: bool) -> Subscription:
        prepare_for_save(subscription, now, renewal_supplied)
        return self._subscriptions.save_subscription(subscription)
