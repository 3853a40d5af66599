from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..auth.passwords import get_password_hash
from ..models.models import Activity, Apartment, Property, Task, Transaction, User

EntityData = Dict[str, Any]


class StorageError(RuntimeError):
    pass


class DuplicateUserError(StorageError):
    """Raised when a username, email or Google id is already taken."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field.capitalize()} already in use")
        self.field = field
        self.value = value


class Storage(ABC):
    """Capability interface shared by the in-memory and database backends.

    Read operations return ``None`` (or an empty list) for unknown ids and never
    raise. ``create_user`` receives the plaintext ``password`` (or ``None``) and
    persists only its hash.
    """

    name = "abstract"

    # --- Users ---
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_google_id(self, google_id: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: EntityData) -> User: ...

    @abstractmethod
    def get_users(self) -> List[User]: ...

    @abstractmethod
    def count_users(self) -> int: ...

    # --- Properties ---
    @abstractmethod
    def get_property(self, property_id: int) -> Optional[Property]: ...

    @abstractmethod
    def get_properties(self) -> List[Property]: ...

    @abstractmethod
    def create_property(self, data: EntityData) -> Property: ...

    # --- Apartments ---
    @abstractmethod
    def get_apartment(self, apartment_id: int) -> Optional[Apartment]: ...

    @abstractmethod
    def get_apartments(self) -> List[Apartment]: ...

    @abstractmethod
    def get_apartments_by_property(self, property_id: int) -> List[Apartment]: ...

    @abstractmethod
    def create_apartment(self, data: EntityData) -> Apartment: ...

    # --- Tasks ---
    @abstractmethod
    def get_task(self, task_id: int) -> Optional[Task]: ...

    @abstractmethod
    def get_tasks(self) -> List[Task]: ...

    @abstractmethod
    def get_tasks_by_property(self, property_id: int) -> List[Task]: ...

    @abstractmethod
    def get_tasks_by_assignee(self, user_id: int) -> List[Task]: ...

    @abstractmethod
    def create_task(self, data: EntityData) -> Task: ...

    @abstractmethod
    def update_task_status(self, task_id: int, status: str) -> Optional[Task]:
        """Set the status; entering ``completed`` stamps ``completed_at``.

        Moving a completed task back to another status keeps the stamp.
        """

    # --- Transactions ---
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]: ...

    @abstractmethod
    def get_transactions(self) -> List[Transaction]: ...

    @abstractmethod
    def get_transactions_by_tenant(self, tenant_id: int) -> List[Transaction]: ...

    @abstractmethod
    def create_transaction(self, data: EntityData) -> Transaction: ...

    # --- Activities ---
    @abstractmethod
    def get_activities(self, limit: Optional[int] = None) -> List[Activity]:
        """Newest first; ``limit`` keeps the N most recent entries."""

    @abstractmethod
    def create_activity(self, data: EntityData) -> Activity: ...


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def prepare_user_fields(data: EntityData) -> EntityData:
    """Map create-user input onto model columns, hashing the password.

    Emails are stored lower-cased so lookups ignore case.
    """
    fields = dict(data)
    fields["email"] = normalize_email(fields.get("email"))
    password = fields.pop("password", None)
    fields["hashed_password"] = get_password_hash(password) if password else None
    return fields
