from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies import get_storage
from ..auth.sessions import get_current_user
from ..models.models import Activity, User
from ..schemas.schemas import ActivityRead
from ..storage import Storage

router = APIRouter()


@router.get("", response_model=List[ActivityRead])
def list_activities(
    limit: Optional[int] = Query(None, ge=1, le=500),
    storage: Storage = Depends(get_storage),
    _: User = Depends(get_current_user),
) -> List[Activity]:
    return storage.get_activities(limit)
