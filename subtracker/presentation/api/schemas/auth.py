"""Pydantic schemas for authentication endpoints."""

from typing import Optional

from pydantic import BaseModel

from .user_schemas import UserResponse


class SignUpRequest(BaseModel):
    """Request schema for sign-up; field rules are checked by the account service."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthData(BaseModel):
    token: str
    user: UserResponse


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AuthData


class MessageResponse(BaseModel):
    success: bool = True
    message: str
