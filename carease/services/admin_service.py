import copy
import logging
from typing import List, Optional

from carease.errors import InvalidTransitionError, NotFoundError
from carease.repositories import Repositories
from carease.schemas import Doctor, Payment, PaymentCreate, User, new_id, utcnow
from carease.services import policy
from carease.services.clinic_service import FREE_PLAN_PATIENT_LIMIT
from carease.services.notification_service import notify
from carease.services.scoping import newest_first, patients_for_doctor


logger = logging.getLogger("admin_service")

PAYMENT_STATUSES = ("pending", "paid")

# Plan catalogue shown on the pricing and subscription pages.
# `patientLimit` None means unlimited.
SUBSCRIPTION_PLANS = [
    {
        "name": "Free",
        "price": 0,
        "period": None,
        "description": "Perfect for getting started",
        "patientLimit": FREE_PLAN_PATIENT_LIMIT,
        "features": ["Up to 3 patients", "Basic patient records", "Visit tracking", "Email support"],
    },
    {
        "name": "Standard",
        "price": 29,
        "period": "month",
        "description": "For growing practices",
        "patientLimit": None,
        "recommended": True,
        "features": [
            "Unlimited patients",
            "Advanced patient records",
            "Visit tracking & analytics",
            "Appointment management",
            "Priority support",
            "Data export (CSV)",
            "Custom reports",
            "Mobile app access",
        ],
    },
    {
        "name": "Business",
        "price": 99,
        "period": "month",
        "description": "For established healthcare networks",
        "patientLimit": None,
        "features": [
            "Unlimited patients",
            "Advanced patient records",
            "Visit tracking & analytics",
            "Appointment management",
            "24/7 priority support",
            "Data export (CSV)",
            "Custom reports",
            "Mobile app access",
            "Video consultations",
            "Advanced analytics",
        ],
    },
]


def get_plans() -> List[dict]:
    return copy.deepcopy(SUBSCRIPTION_PLANS)



# -------------------------------
# 🩺 DOCTOR HELPERS
# -------------------------------

def get_doctors(repos: Repositories) -> List[Doctor]:
    return repos.users.find(role="doctor")


def _get_doctor(repos: Repositories, doctor_id: str) -> Doctor:
    doctor = repos.users.get(doctor_id)
    if not doctor or doctor.role != "doctor":
        raise NotFoundError(f"Doctor {doctor_id} not found")
    return doctor


def get_doctor_by_id(repos: Repositories, doctor_id: str) -> Optional[Doctor]:
    doctor = repos.users.get(doctor_id)
    return doctor if doctor and doctor.role == "doctor" else None


def get_doctor_details(repos: Repositories, actor: User, doctor_id: str) -> Optional[dict]:
    """Doctor profile with their patients and subscription payments."""
    policy.authorize(actor, policy.DOCTOR_VIEW)
    doctor = get_doctor_by_id(repos, doctor_id)
    if doctor is None:
        return None
    payments = newest_first(repos.payments.find(doctor_id=doctor_id))
    return {
        "doctor": doctor,
        "patients": patients_for_doctor(repos.patients.find(doctor_id=doctor_id), doctor_id),
        "payments": payments,
    }


def update_doctor_subscription(
    repos: Repositories,
    actor: User,
    doctor_id: str,
    is_subscribed: bool,
    expected_version: Optional[int] = None,
) -> Doctor:
    policy.authorize(actor, policy.DOCTOR_SUBSCRIPTION)
    _get_doctor(repos, doctor_id)
    doctor = repos.users.update(doctor_id, expected_version=expected_version, is_subscribed=is_subscribed)
    logger.info(f"[update_doctor_subscription] doctor={doctor_id} is_subscribed={is_subscribed}")
    notify(
        repos,
        doctor_id,
        "Subscription updated",
        "Your subscription is now active." if is_subscribed else "Your subscription has been deactivated.",
        type="success" if is_subscribed else "warning",
    )
    return doctor


def update_appointments_enabled(
    repos: Repositories,
    actor: User,
    doctor_id: str,
    enabled: bool,
    expected_version: Optional[int] = None,
) -> Doctor:
    doctor = _get_doctor(repos, doctor_id)
    policy.authorize(actor, policy.DOCTOR_APPOINTMENTS_TOGGLE, doctor)
    doctor = repos.users.update(doctor_id, expected_version=expected_version, appointments_enabled=enabled)
    logger.info(f"[update_appointments_enabled] doctor={doctor_id} enabled={enabled}")
    return doctor


# -------------------------------
# 💳 PAYMENT HELPERS
# -------------------------------

def get_payments(repos: Repositories, doctor_id: Optional[str] = None) -> List[Payment]:
    payments = repos.payments.find(doctor_id=doctor_id) if doctor_id else repos.payments.all()
    return newest_first(payments)


def list_payments(repos: Repositories, actor: User) -> List[Payment]:
    policy.authorize(actor, policy.PAYMENT_LIST)
    return get_payments(repos)


def record_payment(repos: Repositories, actor: User, data: PaymentCreate) -> Payment:
    """Admin records a subscription payment owed by (or received from) a doctor."""
    policy.authorize(actor, policy.PAYMENT_CREATE)
    doctor = _get_doctor(repos, data.doctor_id)
    payment = repos.payments.add(
        Payment(
            id=new_id("pay"),
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            amount=data.amount,
            date=data.date or utcnow(),
            status=data.status,
        )
    )
    logger.info(f"[record_payment] {payment.id} doctor={doctor.id} amount={payment.amount}")
    return payment


def update_payment_status(
    repos: Repositories,
    actor: User,
    payment_id: str,
    status: str,
    expected_version: Optional[int] = None,
) -> Payment:
    """pending <-> paid, in either direction."""
    policy.authorize(actor, policy.PAYMENT_UPDATE)
    if status not in PAYMENT_STATUSES:
        raise InvalidTransitionError(f"Unknown payment status {status!r}")

    payment = repos.payments.get(payment_id)
    if not payment:
        raise NotFoundError(f"Payment {payment_id} not found")
    if payment.status == status:
        return payment

    payment = repos.payments.update(payment_id, expected_version=expected_version, status=status)
    logger.info(f"[update_payment_status] {payment_id} -> {status}")
    if status == "paid":
        notify(
            repos,
            payment.doctor_id,
            "Payment received",
            f"Your subscription payment of {payment.amount:,.2f} was marked as paid.",
            type="success",
        )
    return payment
