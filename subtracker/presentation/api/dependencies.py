from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.auth_guard import AuthGuard
from ...core.dependencies import get_auth_guard
from ...domain.models import User

_bearer_scheme = HTTPBearer(auto_error=False)


def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    guard: AuthGuard = Depends(get_auth_guard),
) -> User:
    header = request.headers.get("Authorization", "")
    if credentials is None or header != f"{credentials.scheme} {credentials.credentials}":
        user = guard.authenticate(None, None)
    else:
        user = guard.authenticate(credentials.scheme, credentials.credentials)
    request.state.user = user
    return user
