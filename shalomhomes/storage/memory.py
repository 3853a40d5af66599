from __future__ import annotations

import threading
from itertools import count
from typing import Dict, Iterator, List, Optional, Type, TypeVar

from ..models.models import Activity, Apartment, Property, Task, Transaction, User, utcnow
from .base import DuplicateUserError, EntityData, Storage, normalize_email, prepare_user_fields

T = TypeVar("T")


class _Table(Dict[int, T]):
    """Id-keyed rows plus the monotonic counter that hands out their ids."""

    def __init__(self, model: Type[T]) -> None:
        super().__init__()
        self.model = model
        self._ids: Iterator[int] = count(1)

    def insert(self, fields: EntityData) -> T:
        row = self.model(id=next(self._ids), **fields)
        self[row.id] = row
        return row


class MemStorage(Storage):
    """Process-local storage backed by dictionaries.

    Writes take a lock because FastAPI runs sync handlers on a thread pool.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: _Table[User] = _Table(User)
        self._properties: _Table[Property] = _Table(Property)
        self._apartments: _Table[Apartment] = _Table(Apartment)
        self._tasks: _Table[Task] = _Table(Task)
        self._transactions: _Table[Transaction] = _Table(Transaction)
        self._activities: _Table[Activity] = _Table(Activity)

    # --- Users ---
    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        return next((user for user in self._users.values() if user.email == email), None)

    def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.google_id == google_id), None)

    def create_user(self, data: EntityData) -> User:
        fields = prepare_user_fields(data)
        fields.setdefault("role", "client")
        fields.setdefault("google_id", None)
        with self._lock:
            if self.get_user_by_username(fields["username"]):
                raise DuplicateUserError("username", fields["username"])
            if self.get_user_by_email(fields["email"]):
                raise DuplicateUserError("email", fields["email"])
            if fields["google_id"] and self.get_user_by_google_id(fields["google_id"]):
                raise DuplicateUserError("google id", fields["google_id"])
            return self._users.insert({**fields, "created_at": utcnow()})

    def get_users(self) -> List[User]:
        return list(self._users.values())

    def count_users(self) -> int:
        return len(self._users)

    # --- Properties ---
    def get_property(self, property_id: int) -> Optional[Property]:
        return self._properties.get(property_id)

    def get_properties(self) -> List[Property]:
        return list(self._properties.values())

    def create_property(self, data: EntityData) -> Property:
        with self._lock:
            return self._properties.insert({**data, "created_at": utcnow()})

    # --- Apartments ---
    def get_apartment(self, apartment_id: int) -> Optional[Apartment]:
        return self._apartments.get(apartment_id)

    def get_apartments(self) -> List[Apartment]:
        return list(self._apartments.values())

    def get_apartments_by_property(self, property_id: int) -> List[Apartment]:
        return [apartment for apartment in self._apartments.values() if apartment.property_id == property_id]

    def create_apartment(self, data: EntityData) -> Apartment:
        with self._lock:
            return self._apartments.insert(dict(data))

    # --- Tasks ---
    def get_task(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def get_tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def get_tasks_by_property(self, property_id: int) -> List[Task]:
        return [task for task in self._tasks.values() if task.property_id == property_id]

    def get_tasks_by_assignee(self, user_id: int) -> List[Task]:
        return [task for task in self._tasks.values() if task.assigned_to_id == user_id]

    def create_task(self, data: EntityData) -> Task:
        with self._lock:
            return self._tasks.insert({**data, "created_at": utcnow(), "completed_at": None})

    def update_task_status(self, task_id: int, status: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            task.status = status
            if status == "completed":
                task.completed_at = utcnow()
            return task

    # --- Transactions ---
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def get_transactions(self) -> List[Transaction]:
        return list(self._transactions.values())

    def get_transactions_by_tenant(self, tenant_id: int) -> List[Transaction]:
        return [transaction for transaction in self._transactions.values() if transaction.tenant_id == tenant_id]

    def create_transaction(self, data: EntityData) -> Transaction:
        with self._lock:
            return self._transactions.insert({**data, "created_at": utcnow()})

    # --- Activities ---
    def get_activities(self, limit: Optional[int] = None) -> List[Activity]:
        activities = sorted(
            self._activities.values(),
            key=lambda activity: (activity.created_at, activity.id),
            reverse=True,
        )
        return activities[:limit] if limit else activities

    def create_activity(self, data: EntityData) -> Activity:
        with self._lock:
            return self._activities.insert({**data, "created_at": utcnow()})
