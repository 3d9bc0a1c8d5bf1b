"""API router for the authenticated user's subscriptions."""

from fastapi import APIRouter, Depends, status

from ....application.services.subscription_service import SubscriptionService
from ....core.dependencies import get_subscription_service
from ....domain.models import User
from ...api.dependencies import require_user
from ...api.schemas.subscription_schemas import (
    SubscriptionCreateRequest,
    SubscriptionEnvelope,
    SubscriptionListEnvelope,
    SubscriptionResponse,
)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("", response_model=SubscriptionEnvelope, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreateRequest,
    user: User = Depends(require_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionEnvelope:
    subscription = subscription_service.create_subscription(user, payload.model_dump())
    return SubscriptionEnvelope(
        message="Subscription created successfully.",
        data=SubscriptionResponse.from_domain(subscription),
    )


@router.get("", response_model=SubscriptionListEnvelope)
async def list_subscriptions(
    user: User = Depends(require_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListEnvelope:
    subscriptions = subscription_service.list_subscriptions(user)
    return SubscriptionListEnvelope(
        data=[SubscriptionResponse.from_domain(item) for item in subscriptions],
        count=len(subscriptions),
    )


@router.get("/user/{user_id}", response_model=SubscriptionListEnvelope)
async def list_user_subscriptions(
    user_id: str,
    user: User = Depends(require_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionListEnvelope:
    subscriptions = subscription_service.list_user_subscriptions(user, user_id)
    return SubscriptionListEnvelope(
        data=[SubscriptionResponse.from_domain(item) for item in subscriptions],
        count=len(subscriptions),
    )


@router.get("/{subscription_id}", response_model=SubscriptionEnvelope)
async def get_subscription(
    subscription_id: str,
    user: User = Depends(require_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionEnvelope:
    subscription = subscription_service.get_subscription(user, subscription_id)
    return SubscriptionEnvelope(data=SubscriptionResponse.from_domain(subscription))
