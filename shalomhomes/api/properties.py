from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_storage
from ..auth.sessions import require_roles
from ..constants import ACTIVITY_CREATED, STAFF_ROLES
from ..models.models import Apartment, Property, User
from ..schemas.schemas import ApartmentRead, MapLocation, PropertyCreate, PropertyRead
from ..services.activity import record_activity
from ..storage import Storage

router = APIRouter()


@router.get("", response_model=List[PropertyRead])
def list_properties(storage: Storage = Depends(get_storage)) -> List[Property]:
    return storage.get_properties()


@router.post("", response_model=PropertyRead, status_code=201)
def create_property(
    payload: PropertyCreate,
    storage: Storage = Depends(get_storage),
    actor: User = Depends(require_roles(*STAFF_ROLES)),
) -> Property:
    prop = storage.create_property(payload.model_dump())
    record_activity(
        storage,
        actor_user_id=actor.id,
        action=ACTIVITY_CREATED,
        entity_type="property",
        entity_id=prop.id,
        details=f"Created property: {prop.name}",
    )
    return prop


@router.get("/locations", response_model=List[MapLocation])
def list_property_locations(storage: Storage = Depends(get_storage)) -> List[MapLocation]:
    return [
        MapLocation(
            latitude=prop.latitude,
            longitude=prop.longitude,
            name=prop.name,
            property_id=prop.id,
            status=prop.status,
            details=f"{prop.address}, {prop.city}",
        )
        for prop in storage.get_properties()
        if prop.latitude is not None and prop.longitude is not None
    ]


@router.get("/{property_id}", response_model=PropertyRead)
def get_property(property_id: int, storage: Storage = Depends(get_storage)) -> Property:
    prop = storage.get_property(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.get("/{property_id}/apartments", response_model=List[ApartmentRead])
def list_property_apartments(property_id: int, storage: Storage = Depends(get_storage)) -> List[Apartment]:
    return storage.get_apartments_by_property(property_id)
