from fastapi import APIRouter, Depends

from ....domain.models import User
from ...api.dependencies import require_user
from ...api.schemas.user_schemas import UserEnvelope, UserResponse

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=UserEnvelope)
async def get_current_user(user: User = Depends(require_user)) -> UserEnvelope:
    return UserEnvelope(data=UserResponse.from_domain(user))
