"""
CareEase record schemas.

Each Pydantic model below describes one entity collection. Attributes are
snake_case in Python and camelCase on the wire (`doctor_id` <-> `doctorId`),
so payloads keep the shape the dashboards already use.
"""

import re
import uuid
from datetime import datetime, timezone
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["admin", "doctor", "patient"]
AppointmentStatus = Literal["pending", "confirmed", "cancelled"]
PaymentStatus = Literal["pending", "paid"]
NotificationType = Literal["info", "success", "warning", "error"]
# Admins are created by `flask seed` or `flask create-admin`, never over HTTP
SignupRole = Literal["doctor", "patient"]


def utcnow() -> datetime:
    return datetime.utcnow()


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _naive_utc(cls, v):
        # Stored timestamps are naive UTC; ISO strings with "Z" arrive aware.
        if isinstance(v, datetime) and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    hidden_fields: ClassVar[set] = set()

    def to_dict(self, exclude: Optional[set] = None) -> dict:
        return self.model_dump(
            mode="json", by_alias=True, exclude=self.hidden_fields | (exclude or set())
        )


class VersionedRecord(Record):
    id: str
    version: int = 1


# Core identities
class User(VersionedRecord):
    email: str
    name: str
    role: Role
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    password_hash: Optional[str] = None

    hidden_fields: ClassVar[set] = {"password_hash"}


class Doctor(User):
    role: Literal["doctor"] = "doctor"
    is_subscribed: bool = False
    appointments_enabled: bool = False
    specialization: Optional[str] = None


def parse_identity(data: dict) -> User:
    """Pick the identity class from the stored role."""
    if data.get("role") == "doctor":
        return Doctor.model_validate(data)
    return User.model_validate(data)


# Clinical records
class Patient(VersionedRecord):
    name: str
    cnic: str
    phone: str
    email: str = ""
    disease: str = ""
    medicine: str = ""
    date_added: datetime = Field(default_factory=utcnow)
    next_visit: Optional[datetime] = None
    doctor_id: str


class Visit(VersionedRecord):
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    date: datetime = Field(default_factory=utcnow)
    disease: str = ""
    medicine: str = ""
    next_visit: Optional[datetime] = None


class Appointment(VersionedRecord):
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    date: datetime
    status: AppointmentStatus = "pending"
    notes: Optional[str] = None


# Billing / messaging
class Payment(VersionedRecord):
    doctor_id: str
    doctor_name: str
    amount: float = Field(..., ge=0)
    date: datetime = Field(default_factory=utcnow)
    status: PaymentStatus = "pending"
    type: Literal["subscription"] = "subscription"


class Notification(VersionedRecord):
    user_id: str
    title: str
    message: str
    type: NotificationType = "info"
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class DashboardMetrics(Record):
    total_doctors: int = 0
    total_patients: int = 0
    total_visits: int = 0
    total_appointments: int = 0


# Request bodies
class SignupRequest(Record):
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: SignupRole


class LoginRequest(Record):
    email: str
    password: str = ""


class PatientCreate(Record):
    name: str
    cnic: str
    phone: str
    email: str = ""
    disease: str = ""
    medicine: str = ""
    next_visit: Optional[datetime] = None
    doctor_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Patient name is required.")
        return v.strip().title()

    @field_validator("cnic")
    @classmethod
    def validate_cnic(cls, v):
        if not v.strip():
            raise ValueError("CNIC is required.")
        return v.strip()

    # --- phone validation ---
    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        # Drop spaces and dashes, keep a leading +
        clean = re.sub(r"[\s\-()]", "", v)
        if not re.match(r"^\+?\d+$", clean):
            raise ValueError("Invalid phone number format.")
        return clean


class VisitCreate(Record):
    patient_id: str
    patient_name: Optional[str] = None
    date: Optional[datetime] = None
    disease: str = ""
    medicine: str = ""
    next_visit: Optional[datetime] = None


class AppointmentRequest(Record):
    doctor_id: str
    date: datetime
    notes: Optional[str] = None


class StatusUpdate(Record):
    status: str
    version: Optional[int] = None


class ToggleUpdate(Record):
    enabled: bool
    version: Optional[int] = None


class ProfileUpdate(Record):
    name: Optional[str] = None
    phone: Optional[str] = None
    specialization: Optional[str] = None


class PaymentCreate(Record):
    doctor_id: str
    amount: float = Field(..., gt=0)
    date: Optional[datetime] = None
    status: PaymentStatus = "pending"
