from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_storage
from ..auth.sessions import get_optional_user, require_roles
from ..constants import DEFAULT_USER_ROLE, STAFF_ROLES
from ..models.models import User
from ..schemas.schemas import UserCreate, UserRead
from ..storage import DuplicateUserError, Storage

router = APIRouter()


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    payload: UserCreate,
    storage: Storage = Depends(get_storage),
    actor: Optional[User] = Depends(get_optional_user),
) -> User:
    # Self-registration only yields client accounts
    if payload.role != DEFAULT_USER_ROLE and (actor is None or actor.role not in STAFF_ROLES):
        raise HTTPException(status_code=403, detail="Only owners and caretakers may assign this role")

    if storage.get_user_by_email(payload.email):
        raise HTTPException(status_code=400, detail="Email already in use")
    if storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Username already in use")

    try:
        return storage.create_user(payload.model_dump())
    except DuplicateUserError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("", response_model=List[UserRead])
def list_users(
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_roles(*STAFF_ROLES)),
) -> List[User]:
    return storage.get_users()
