from __future__ import annotations

import logging
from typing import List, Optional

from ..models.models import Activity, Apartment, Property, Task, Transaction, User
from .base import EntityData, Storage

logger = logging.getLogger(__name__)


class StorageProxy(Storage):
    """Facade over the active backend.

    The application builds one proxy and hands it to every handler, so the
    backend can be swapped at startup without callers noticing.
    """

    def __init__(self, implementation: Storage) -> None:
        self._implementation = implementation

    @property
    def implementation(self) -> Storage:
        return self._implementation

    @property
    def name(self) -> str:  # type: ignore[override]
        return self._implementation.name

    def use(self, implementation: Storage) -> None:
        logger.info("Switching storage backend from %s to %s.", self._implementation.name, implementation.name)
        self._implementation = implementation

    # --- Users ---
    def get_user(self, user_id: int) -> Optional[User]:
        return self._implementation.get_user(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._implementation.get_user_by_username(username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._implementation.get_user_by_email(email)

    def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        return self._implementation.get_user_by_google_id(google_id)

    def create_user(self, data: EntityData) -> User:
        return self._implementation.create_user(data)

    def get_users(self) -> List[User]:
        return self._implementation.get_users()

    def count_users(self) -> int:
        return self._implementation.count_users()

    # --- Properties ---
    def get_property(self, property_id: int) -> Optional[Property]:
        return self._implementation.get_property(property_id)

    def get_properties(self) -> List[Property]:
        return self._implementation.get_properties()

    def create_property(self, data: EntityData) -> Property:
        return self._implementation.create_property(data)

    # --- Apartments ---
    def get_apartment(self, apartment_id: int) -> Optional[Apartment]:
        return self._implementation.get_apartment(apartment_id)

    def get_apartments(self) -> List[Apartment]:
        return self._implementation.get_apartments()

    def get_apartments_by_property(self, property_id: int) -> List[Apartment]:
        return self._implementation.get_apartments_by_property(property_id)

    def create_apartment(self, data: EntityData) -> Apartment:
        return self._implementation.create_apartment(data)

    # --- Tasks ---
    def get_task(self, task_id: int) -> Optional[Task]:
        return self._implementation.get_task(task_id)

    def get_tasks(self) -> List[Task]:
        return self._implementation.get_tasks()

    def get_tasks_by_property(self, property_id: int) -> List[Task]:
        return self._implementation.get_tasks_by_property(property_id)

    def get_tasks_by_assignee(self, user_id: int) -> List[Task]:
        return self._implementation.get_tasks_by_assignee(user_id)

    def create_task(self, data: EntityData) -> Task:
        return self._implementation.create_task(data)

    def update_task_status(self, task_id: int, status: str) -> Optional[Task]:
        return self._implementation.update_task_status(task_id, status)

    # --- Transactions ---
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._implementation.get_transaction(transaction_id)

    def get_transactions(self) -> List[Transaction]:
        return self._implementation.get_transactions()

    def get_transactions_by_tenant(self, tenant_id: int) -> List[Transaction]:
        return self._implementation.get_transactions_by_tenant(tenant_id)

    def create_transaction(self, data: EntityData) -> Transaction:
        return self._implementation.create_transaction(data)

    # --- Activities ---
    def get_activities(self, limit: Optional[int] = None) -> List[Activity]:
        return self._implementation.get_activities(limit)

    def create_activity(self, data: EntityData) -> Activity:
        return self._implementation.create_activity(data)
