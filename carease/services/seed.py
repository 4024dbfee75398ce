import logging
from datetime import timedelta

from carease.repositories import Repositories
from carease.schemas import Doctor, Patient, User, Visit, utcnow


logger = logging.getLogger("seed")


def seed_sample_data(repos: Repositories) -> bool:
    """
    Load the demo accounts and records into an empty store.
    Returns False (and touches nothing) when users already exist.
    """
    if repos.users.count() > 0:
        return False

    now = utcnow()

    repos.users.add(User(id="admin-1", email="admin@carease.com", name="Admin User", role="admin"))
    repos.users.add(
        Doctor(
            id="doctor-1",
            email="doctor@carease.com",
            name="Dr. Sarah Johnson",
            phone="+92 300 1234567",
            is_subscribed=False,
            appointments_enabled=True,
            specialization="General Physician",
        )
    )
    repos.users.add(
        User(
            id="patient-1",
            email="patient@carease.com",
            name="John Smith",
            role="patient",
            phone="+92 300 9876543",
        )
    )

    repos.patients.add(
        Patient(
            id="pat-1",
            name="Alice Brown",
            cnic="12345-6789012-3",
            phone="+923011111111",
            email="alice@example.com",
            disease="Common Cold",
            medicine="Paracetamol 500mg",
            date_added=now - timedelta(days=7),
            next_visit=now + timedelta(days=7),
            doctor_id="doctor-1",
        )
    )

    repos.visits.add(
        Visit(
            id="visit-1",
            patient_id="patient-1",
            patient_name="John Smith",
            doctor_id="doctor-1",
            doctor_name="Dr. Sarah Johnson",
            date=now - timedelta(days=3),
            disease="Fever",
            medicine="Panadol",
            next_visit=now + timedelta(days=7),
        )
    )

    logger.info("[seed] Sample data loaded")
    return True
