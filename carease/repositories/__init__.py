from dataclasses import dataclass

from carease import schemas
from carease.repositories.base import Repository
from carease.repositories.memory_repository import MemoryRepository


@dataclass
class Repositories:
    """One repository per entity collection, handed to every service call."""
    users: Repository
    patients: Repository
    visits: Repository
    appointments: Repository
    payments: Repository
    notifications: Repository


def build_memory_repositories() -> Repositories:
    return Repositories(
        users=MemoryRepository("users", schemas.parse_identity),
        patients=MemoryRepository("patients", schemas.Patient.model_validate),
        visits=MemoryRepository("visits", schemas.Visit.model_validate),
        appointments=MemoryRepository("appointments", schemas.Appointment.model_validate),
        payments=MemoryRepository("payments", schemas.Payment.model_validate),
        notifications=MemoryRepository("notifications", schemas.Notification.model_validate),
    )


def build_sql_repositories() -> Repositories:
    # Local import keeps the memory backend usable without Flask-SQLAlchemy set up.
    from carease import models
    from carease.repositories.sql_repository import SqlRepository

    return Repositories(
        users=SqlRepository("users", models.User, schemas.parse_identity),
        patients=SqlRepository("patients", models.Patient, schemas.Patient.model_validate),
        visits=SqlRepository("visits", models.Visit, schemas.Visit.model_validate),
        appointments=SqlRepository("appointments", models.Appointment, schemas.Appointment.model_validate),
        payments=SqlRepository("payments", models.Payment, schemas.Payment.model_validate),
        notifications=SqlRepository("notifications", models.Notification, schemas.Notification.model_validate),
    )


__all__ = ["Repositories", "Repository", "build_memory_repositories", "build_sql_repositories"]
