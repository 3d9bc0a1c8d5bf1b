"""API router for sign-up, sign-in and sign-out."""

from fastapi import APIRouter, Depends, status

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ...api.schemas.auth import AuthData, AuthResponse, MessageResponse, SignInRequest, SignUpRequest
from ...api.schemas.user_schemas import UserResponse

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/sign-up", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest,
    account_service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    token, user = account_service.sign_up(payload.name, payload.email, payload.password)
    return AuthResponse(
        message="User created successfully.",
        data=AuthData(token=token, user=UserResponse.from_domain(user)),
    )


@router.post("/sign-in", response_model=AuthResponse)
async def sign_in(
    payload: SignInRequest,
    account_service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    token, user = account_service.sign_in(payload.email, payload.password)
    return AuthResponse(
        message="User signed in successfully.",
        data=AuthData(token=token, user=UserResponse.from_domain(user)),
    )


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    account_service.sign_out()
    return MessageResponse(message="User signed out successfully.")
