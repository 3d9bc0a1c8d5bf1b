"""Pydantic schemas for subscription API endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ....domain.models import Subscription


class SubscriptionCreateRequest(BaseModel):
    """Request schema for creating a subscription.

    Every field is optional here so that missing values are reported by the
    subscription field rules with their own messages.
    """

    name: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    currency: Optional[str] = None
    frequency: Optional[str] = None
    category: Optional[str] = None
    payment_method: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    renewal_date: Optional[datetime] = None


class SubscriptionResponse(BaseModel):
    """Response schema for subscription data."""

    id: str
    user_id: str
    name: str
    price: float
    currency: str
    frequency: str
    category: str
    payment_method: str
    status: str
    start_date: datetime
    renewal_date: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, subscription: Subscription) -> "SubscriptionResponse":
        return cls(
            id=subscription.id,
            user_id=subscription.user_id,
            name=subscription.name,
            price=subscription.price,
            currency=subscription.currency.value,
            frequency=subscription.frequency.value,
            category=subscription.category.value,
            payment_method=subscription.payment_method,
            status=subscription.status.value,
            start_date=subscription.start_date,
            renewal_date=subscription.renewal_date,
            is_active=subscription.is_active(),
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class SubscriptionEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: SubscriptionResponse


class SubscriptionListEnvelope(BaseModel):
    success: bool = True
    data: List[SubscriptionResponse]
    count: int
