from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_storage
from ..auth.sessions import require_roles
from ..constants import ACTIVITY_CREATED, STAFF_ROLES
from ..models.models import Apartment, User
from ..schemas.schemas import ApartmentCreate, ApartmentRead
from ..services.activity import record_activity
from ..storage import Storage

router = APIRouter()


@router.get("", response_model=List[ApartmentRead])
def list_apartments(storage: Storage = Depends(get_storage)) -> List[Apartment]:
    return storage.get_apartments()


@router.post("", response_model=ApartmentRead, status_code=201)
def create_apartment(
    payload: ApartmentCreate,
    storage: Storage = Depends(get_storage),
    actor: User = Depends(require_roles(*STAFF_ROLES)),
) -> Apartment:
    prop = storage.get_property(payload.property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")

    apartment = storage.create_apartment(payload.model_dump())
    record_activity(
        storage,
        actor_user_id=actor.id,
        action=ACTIVITY_CREATED,
        entity_type="apartment",
        entity_id=apartment.id,
        details=f"Created apartment {apartment.number} in {prop.name}",
    )
    return apartment


@router.get("/{apartment_id}", response_model=ApartmentRead)
def get_apartment(apartment_id: int, storage: Storage = Depends(get_storage)) -> Apartment:
    apartment = storage.get_apartment(apartment_id)
    if not apartment:
        raise HTTPException(status_code=404, detail="Apartment not found")
    return apartment
