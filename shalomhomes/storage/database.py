from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ..config import Base, create_db_engine, create_session_factory
from ..models.models import Activity, Apartment, Property, Task, Transaction, User, utcnow
from .base import DuplicateUserError, EntityData, Storage, normalize_email, prepare_user_fields

logger = logging.getLogger(__name__)


class DbStorage(Storage):
    """SQLAlchemy-backed storage; every call runs in its own short session.

    Rows are returned detached with their attributes loaded
    (``expire_on_commit=False``).
    """

    name = "database"

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None) -> None:
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "DbStorage":
        engine = create_db_engine(database_url)
        return cls(create_session_factory(engine), engine=engine)

    def init(self) -> None:
        """Create missing tables; Alembic migrations own schema changes after that."""
        engine = self._engine or self._session_factory.kw["bind"]
        Base.metadata.create_all(bind=engine)
        logger.info("Database storage ready (%s users).", self.count_users())

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _get(self, model, entity_id: int):
        with self.session_scope() as session:
            return session.get(model, entity_id)

    def _add(self, row):
        with self.session_scope() as session:
            session.add(row)
            session.flush()
            return row

    # --- Users ---
    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self.session_scope() as session:
            return session.query(User).filter(User.username == username).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self.session_scope() as session:
            return session.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        with self.session_scope() as session:
            return session.query(User).filter(User.google_id == google_id).first()

    def create_user(self, data: EntityData) -> User:
        fields = prepare_user_fields(data)
        with self.session_scope() as session:
            if session.query(User.id).filter(User.username == fields["username"]).first():
                raise DuplicateUserError("username", fields["username"])
            if session.query(User.id).filter(func.lower(User.email) == fields["email"]).first():
                raise DuplicateUserError("email", fields["email"])
            google_id = fields.get("google_id")
            if google_id and session.query(User.id).filter(User.google_id == google_id).first():
                raise DuplicateUserError("google id", google_id)
            user = User(**fields)
            session.add(user)
            try:
                session.flush()
            except IntegrityError as exc:
                # Lost a race with a concurrent insert of the same identity
                raise DuplicateUserError("username or email", fields["username"]) from exc
            return user

    def get_users(self) -> List[User]:
        with self.session_scope() as session:
            return session.query(User).order_by(User.id).all()

    def count_users(self) -> int:
        with self.session_scope() as session:
            return session.query(User).count()

    # --- Properties ---
    def get_property(self, property_id: int) -> Optional[Property]:
        return self._get(Property, property_id)

    def get_properties(self) -> List[Property]:
        with self.session_scope() as session:
            return session.query(Property).order_by(Property.id).all()

    def create_property(self, data: EntityData) -> Property:
        return self._add(Property(**data))

    # --- Apartments ---
    def get_apartment(self, apartment_id: int) -> Optional[Apartment]:
        return self._get(Apartment, apartment_id)

    def get_apartments(self) -> List[Apartment]:
        with self.session_scope() as session:
            return session.query(Apartment).order_by(Apartment.id).all()

    def get_apartments_by_property(self, property_id: int) -> List[Apartment]:
        with self.session_scope() as session:
            return (
                session.query(Apartment)
                .filter(Apartment.property_id == property_id)
                .order_by(Apartment.id)
                .all()
            )

    def create_apartment(self, data: EntityData) -> Apartment:
        return self._add(Apartment(**data))

    # --- Tasks ---
    def get_task(self, task_id: int) -> Optional[Task]:
        return self._get(Task, task_id)

    def get_tasks(self) -> List[Task]:
        with self.session_scope() as session:
            return session.query(Task).order_by(Task.id).all()

    def get_tasks_by_property(self, property_id: int) -> List[Task]:
        with self.session_scope() as session:
            return session.query(Task).filter(Task.property_id == property_id).order_by(Task.id).all()

    def get_tasks_by_assignee(self, user_id: int) -> List[Task]:
        with self.session_scope() as session:
            return session.query(Task).filter(Task.assigned_to_id == user_id).order_by(Task.id).all()

    def create_task(self, data: EntityData) -> Task:
        return self._add(Task(**data))

    def update_task_status(self, task_id: int, status: str) -> Optional[Task]:
        with self.session_scope() as session:
            task = session.get(Task, task_id, with_for_update=True)
            if task is None:
                return None
            task.status = status
            if status == "completed":
                task.completed_at = utcnow()
            session.flush()
            return task

    # --- Transactions ---
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._get(Transaction, transaction_id)

    def get_transactions(self) -> List[Transaction]:
        with self.session_scope() as session:
            return session.query(Transaction).order_by(Transaction.id).all()

    def get_transactions_by_tenant(self, tenant_id: int) -> List[Transaction]:
        with self.session_scope() as session:
            return (
                session.query(Transaction)
                .filter(Transaction.tenant_id == tenant_id)
                .order_by(Transaction.id)
                .all()
            )

    def create_transaction(self, data: EntityData) -> Transaction:
        return self._add(Transaction(**data))

    # --- Activities ---
    def get_activities(self, limit: Optional[int] = None) -> List[Activity]:
        with self.session_scope() as session:
            query = session.query(Activity).order_by(Activity.created_at.desc(), Activity.id.desc())
            if limit:
                query = query.limit(limit)
            return query.all()

    def create_activity(self, data: EntityData) -> Activity:
        return self._add(Activity(**data))
