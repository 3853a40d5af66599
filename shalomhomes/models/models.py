from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from ..config import Base
from ..constants import DEFAULT_USER_ROLE


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    # None for accounts created through Google sign-in
    hashed_password = Column(String, nullable=True)
    role = Column(String, nullable=False, default=DEFAULT_USER_ROLE)
    google_id = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role!r}>"


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    district = Column(String, nullable=True)
    status = Column(String, nullable=False, default="vacant")
    type = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    size = Column(Integer, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Apartment(Base):
    __tablename__ = "apartments"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, index=True, nullable=False)
    number = Column(String, nullable=False)
    tenant_id = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default="vacant")
    price = Column(Integer, nullable=False)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="open")
    priority = Column(String, nullable=False, default="medium")
    type = Column(String, nullable=False)
    property_id = Column(Integer, index=True, nullable=False)
    apartment_id = Column(Integer, nullable=True)
    assigned_to_id = Column(Integer, index=True, nullable=True)
    reported_by_id = Column(Integer, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, index=True, nullable=False)
    apartment_id = Column(Integer, nullable=True)
    property_id = Column(Integer, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)  # cents
    payment_method = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    processed_by_id = Column(Integer, nullable=False)


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, index=True, nullable=False)
    action = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
