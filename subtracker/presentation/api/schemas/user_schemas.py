"""Pydantic schemas for user data. The password hash is never part of them."""

from datetime import datetime

from pydantic import BaseModel

from ....domain.models import User


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(**user.to_public_dict())


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserResponse
