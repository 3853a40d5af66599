from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..api.dependencies import get_storage
from ..auth.sessions import require_roles
from ..constants import ACTIVITY_CREATED, STAFF_ROLES
from ..models.models import Transaction, User
from ..schemas.schemas import TransactionCreate, TransactionRead
from ..services.activity import format_amount, record_activity
from ..storage import Storage

router = APIRouter()


@router.get("", response_model=List[TransactionRead])
def list_transactions(
    tenant_id: Optional[int] = Query(None, alias="tenantId"),
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_roles(*STAFF_ROLES)),
) -> List[Transaction]:
    if tenant_id is not None:
        return storage.get_transactions_by_tenant(tenant_id)
    return storage.get_transactions()


@router.post("", response_model=TransactionRead, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    storage: Storage = Depends(get_storage),
    actor: User = Depends(require_roles(*STAFF_ROLES)),
) -> Transaction:
    data = payload.model_dump()
    if data["processed_by_id"] is None:
        data["processed_by_id"] = actor.id

    transaction = storage.create_transaction(data)
    record_activity(
        storage,
        actor_user_id=actor.id,
        action=ACTIVITY_CREATED,
        entity_type="transaction",
        entity_id=transaction.id,
        details=f"Created transaction: {transaction.type} for {format_amount(transaction.amount)}",
    )
    return transaction


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(require_roles(*STAFF_ROLES)),
) -> Transaction:
    transaction = storage.get_transaction(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction
