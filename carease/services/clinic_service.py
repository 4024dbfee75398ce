import logging
from typing import List, Optional

from carease.errors import (
    DuplicateRecordError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from carease.repositories import Repositories
from carease.schemas import (
    Appointment,
    AppointmentRequest,
    Patient,
    PatientCreate,
    User,
    Visit,
    VisitCreate,
    new_id,
    utcnow,
)
from carease.services import policy
from carease.services.notification_service import notify
from carease.services.scoping import (
    newest_first,
    patients_for_doctor,
    scope_appointments,
    scope_patients,
    scope_visits,
    search,
)


logger = logging.getLogger("clinic_service")

# Unsubscribed doctors keep at most this many patients
FREE_PLAN_PATIENT_LIMIT = 3

PATIENT_SEARCH_FIELDS = ("name", "cnic", "phone", "email", "disease")
VISIT_SEARCH_FIELDS = ("patient_name", "doctor_name", "disease", "medicine")

# Confirmed and cancelled are terminal.
APPOINTMENT_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": set(),
    "cancelled": set(),
}


# -------------------------------
# 👤 PATIENT HELPERS
# -------------------------------

def get_patients(repos: Repositories, doctor_id: str) -> List[Patient]:
    """Exactly the patients owned by `doctor_id`."""
    return patients_for_doctor(repos.patients.find(doctor_id=doctor_id), doctor_id)


def get_all_patients(repos: Repositories) -> List[Patient]:
    return repos.patients.all()


def list_patients(repos: Repositories, actor: User, q: Optional[str] = None) -> List[Patient]:
    policy.authorize(actor, policy.PATIENT_LIST)
    if actor.role == "admin":
        patients = get_all_patients(repos)
    else:
        patients = get_patients(repos, actor.id)
    return search(scope_patients(actor, patients), q, PATIENT_SEARCH_FIELDS)


def add_patient(repos: Repositories, data: PatientCreate, doctor_id: Optional[str] = None) -> Patient:
    """
    Register a patient under a doctor.
    - CNIC is unique across all patients.
    - A phone number is unique per doctor.
    - A doctor without a subscription holds at most FREE_PLAN_PATIENT_LIMIT patients.
    """
    doctor_id = doctor_id or data.doctor_id
    doctor = repos.users.get(doctor_id) if doctor_id else None
    if not doctor or doctor.role != "doctor":
        logger.warning(f"[add_patient] unknown doctor_id={doctor_id}")
        raise NotFoundError(f"Doctor {doctor_id} not found")

    if not doctor.is_subscribed and len(repos.patients.find(doctor_id=doctor_id)) >= FREE_PLAN_PATIENT_LIMIT:
        logger.warning(f"[add_patient] free plan limit reached doctor={doctor_id}")
        raise PermissionDeniedError(f"Subscribe to add more than {FREE_PLAN_PATIENT_LIMIT} patients")

    if repos.patients.find_one(cnic=data.cnic):
        logger.warning(f"[add_patient] duplicate cnic={data.cnic}")
        raise DuplicateRecordError("Patient with this CNIC already exists")

    if repos.patients.find_one(phone=data.phone, doctor_id=doctor_id):
        logger.warning(f"[add_patient] duplicate phone={data.phone} doctor={doctor_id}")
        raise DuplicateRecordError("Patient with this phone number already exists")

    patient = Patient(
        id=new_id("pat"),
        **data.model_dump(exclude={"doctor_id"}),
        date_added=utcnow(),
        doctor_id=doctor_id,
    )
    patient = repos.patients.add(patient)
    logger.info(f"[add_patient] Created {patient.id} for doctor={doctor_id}")
    return patient


def register_patient(repos: Repositories, actor: User, data: PatientCreate) -> Patient:
    """Doctor adds a patient to their own list."""
    policy.authorize(actor, policy.PATIENT_CREATE)
    return add_patient(repos, data, doctor_id=actor.id)


def get_patient_by_id(repos: Repositories, actor: User, patient_id: str) -> Optional[Patient]:
    patient = repos.patients.get(patient_id)
    if patient is None:
        return None
    policy.authorize(actor, policy.PATIENT_VIEW, patient)
    return patient


# -------------------------------
# 🩺 VISIT HELPERS
# -------------------------------

def get_visits(repos: Repositories, patient_id: str) -> List[Visit]:
    return newest_first(repos.visits.find(patient_id=patient_id))


def get_all_visits(repos: Repositories) -> List[Visit]:
    return newest_first(repos.visits.all())


def list_visits(repos: Repositories, actor: User, q: Optional[str] = None) -> List[Visit]:
    policy.authorize(actor, policy.VISIT_LIST)
    if actor.role == "patient":
        visits = get_visits(repos, actor.id)
    else:
        visits = get_all_visits(repos)
    return search(scope_visits(actor, visits), q, VISIT_SEARCH_FIELDS)


def get_visit_by_id(repos: Repositories, actor: User, visit_id: str) -> Optional[Visit]:
    visit = repos.visits.get(visit_id)
    if visit is None:
        return None
    policy.authorize(actor, policy.VISIT_VIEW, visit)
    return visit


def create_visit(repos: Repositories, actor: User, data: VisitCreate) -> Visit:
    """Record a visit by the calling doctor. Names are copied, not linked."""
    policy.authorize(actor, policy.VISIT_CREATE)

    patient_name = data.patient_name
    if not patient_name:
        subject = repos.patients.get(data.patient_id) or repos.users.get(data.patient_id)
        if not subject:
            raise NotFoundError(f"Patient {data.patient_id} not found")
        patient_name = subject.name

    visit = Visit(
        id=new_id("visit"),
        patient_id=data.patient_id,
        patient_name=patient_name,
        doctor_id=actor.id,
        doctor_name=actor.name,
        date=data.date or utcnow(),
        disease=data.disease,
        medicine=data.medicine,
        next_visit=data.next_visit,
    )
    visit = repos.visits.add(visit)
    logger.info(f"[create_visit] {visit.id} patient={visit.patient_id} doctor={actor.id}")
    return visit


# -------------------------------
# 📅 APPOINTMENT HELPERS
# -------------------------------

def get_appointments(repos: Repositories, user_id: str, role: str) -> List[Appointment]:
    if role == "patient":
        candidates = repos.appointments.find(patient_id=user_id)
    elif role == "doctor":
        candidates = repos.appointments.find(doctor_id=user_id)
    else:
        candidates = repos.appointments.all()
    return scope_appointments(user_id, role, candidates)


def get_all_appointments(repos: Repositories) -> List[Appointment]:
    return repos.appointments.all()


def list_appointments(repos: Repositories, actor: User) -> List[Appointment]:
    policy.authorize(actor, policy.APPOINTMENT_LIST)
    return sorted(get_appointments(repos, actor.id, actor.role), key=lambda a: a.date)


def create_appointment(repos: Repositories, appointment: Appointment) -> Appointment:
    """Store an appointment as given; there is no uniqueness rule."""
    appointment = repos.appointments.add(appointment)
    logger.info(
        f"[create_appointment] {appointment.id} patient={appointment.patient_id} "
        f"doctor={appointment.doctor_id} status={appointment.status}"
    )
    return appointment


def get_bookable_doctors(repos: Repositories) -> List:
    return [d for d in repos.users.find(role="doctor") if d.appointments_enabled]


def request_appointment(repos: Repositories, actor: User, data: AppointmentRequest) -> Appointment:
    """Patient asks a doctor for an appointment; it starts as pending."""
    policy.authorize(actor, policy.APPOINTMENT_REQUEST)

    doctor = repos.users.get(data.doctor_id)
    if not doctor or doctor.role != "doctor":
        raise NotFoundError("Doctor not found")
    if not doctor.appointments_enabled:
        logger.warning(f"[request_appointment] doctor={doctor.id} not accepting appointments")
        raise PermissionDeniedError("This doctor is not accepting appointments")

    appointment = create_appointment(
        repos,
        Appointment(
            id=new_id("apt"),
            patient_id=actor.id,
            patient_name=actor.name,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            date=data.date,
            status="pending",
            notes=data.notes or None,
        ),
    )
    notify(
        repos,
        doctor.id,
        "New appointment request",
        f"{actor.name} requested an appointment on {appointment.date:%b %d, %Y %I:%M %p}.",
    )
    return appointment


def update_appointment_status(
    repos: Repositories,
    actor: User,
    appointment_id: str,
    status: str,
    expected_version: Optional[int] = None,
) -> Appointment:
    appointment = repos.appointments.get(appointment_id)
    if not appointment:
        raise NotFoundError(f"Appointment {appointment_id} not found")

    if status == "confirmed":
        policy.authorize(actor, policy.APPOINTMENT_CONFIRM, appointment)
    elif status == "cancelled":
        policy.authorize(actor, policy.APPOINTMENT_CANCEL, appointment)
    else:
        raise InvalidTransitionError(f"Cannot set appointment status to {status!r}")

    if status not in APPOINTMENT_TRANSITIONS.get(appointment.status, set()):
        logger.warning(
            f"[update_appointment_status] {appointment_id} {appointment.status} -> {status} rejected"
        )
        raise InvalidTransitionError(f"Appointment is already {appointment.status}")

    updated = repos.appointments.update(appointment_id, expected_version=expected_version, status=status)
    logger.info(f"[update_appointment_status] {appointment_id} {appointment.status} -> {status} by {actor.id}")

    # Tell the other party
    recipient = updated.patient_id if actor.id != updated.patient_id else updated.doctor_id
    notify(
        repos,
        recipient,
        f"Appointment {status}",
        f"Your appointment on {updated.date:%b %d, %Y} with "
        f"{updated.doctor_name if recipient == updated.patient_id else updated.patient_name} was {status}.",
        type="success" if status == "confirmed" else "warning",
    )
    return updated
