from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

UserRole = Literal["client", "owner", "caretaker", "contractor", "handyman"]
TaskStatus = Literal["open", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    password: str = Field(min_length=6)
    role: UserRole = "client"


class UserRead(CamelModel):
    id: int
    username: str
    email: str
    name: str
    phone: Optional[str] = None
    role: UserRole
    google_id: Optional[str] = None
    created_at: datetime


class EmailLoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UsernameLoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AuthResponse(CamelModel):
    user: UserRead


class MessageResponse(CamelModel):
    message: str


class PropertyCreate(CamelModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    district: Optional[str] = None
    status: str = "vacant"
    type: str = Field(min_length=1)
    price: int = Field(ge=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    size: Optional[int] = Field(default=None, ge=0)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class PropertyRead(PropertyCreate):
    id: int
    created_at: datetime


class MapLocation(CamelModel):
    latitude: float
    longitude: float
    name: str
    property_id: int
    status: str
    details: Optional[str] = None


class ApartmentCreate(CamelModel):
    property_id: int
    number: str = Field(min_length=1)
    tenant_id: Optional[int] = None
    status: str = "vacant"
    price: int = Field(ge=0)


class ApartmentRead(ApartmentCreate):
    id: int


class TaskCreate(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = "open"
    # Suggested from the description when omitted
    priority: Optional[TaskPriority] = None
    type: str = Field(min_length=1)
    property_id: int
    apartment_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    reported_by_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    type: str
    property_id: int
    apartment_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    reported_by_id: Optional[int] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    completed_at: Optional[datetime] = None


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class PrioritySuggestionRequest(CamelModel):
    description: str = ""


class PrioritySuggestion(CamelModel):
    priority: TaskPriority
    confidence: float
    message: str


class TransactionCreate(CamelModel):
    tenant_id: int
    apartment_id: Optional[int] = None
    property_id: int
    type: str = Field(min_length=1)
    amount: int = Field(gt=0, description="Amount in cents")
    payment_method: str = Field(min_length=1)
    description: Optional[str] = None
    notes: Optional[str] = None
    # Defaults to the acting user
    processed_by_id: Optional[int] = None


class TransactionRead(CamelModel):
    id: int
    tenant_id: int
    apartment_id: Optional[int] = None
    property_id: int
    type: str
    amount: int
    payment_method: str
    description: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    processed_by_id: int


class ActivityRead(CamelModel):
    id: int
    user_id: int
    action: str
    entity_type: str
    entity_id: int
    details: Optional[str] = None
    created_at: datetime


class HealthStatus(CamelModel):
    status: str
    storage: str

