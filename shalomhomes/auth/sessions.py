from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from ..models.models import User
from ..services.auth import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_user(request: Request, auth: AuthService = Depends(get_auth_service)) -> User:
    user = auth.resolve_principal(request.session)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def get_optional_user(request: Request, auth: AuthService = Depends(get_auth_service)) -> Optional[User]:
    return auth.resolve_principal(request.session)


def require_roles(*allowed_roles: str):
    allowed = set(allowed_roles)

    def role_checker(user: User = Depends(get_current_user)) -> User:
        if not allowed:
            return user
        if user.role in allowed:
            return user
        raise HTTPException(status_code=403, detail="Operation not permitted for your role")

    return role_checker
