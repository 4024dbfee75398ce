"""
Authorization policy.

`can(actor, action, resource)` answers one question for every service call:
is this identity allowed to perform this action, on this record if one is
given? Role grants come from ROLE_ACTIONS; actions bound to a record also
need the matching ownership rule in OWNERSHIP to pass.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from carease.errors import PermissionDeniedError


logger = logging.getLogger("policy")


PATIENT_LIST = "patient:list"
PATIENT_CREATE = "patient:create"
PATIENT_VIEW = "patient:view"
VISIT_LIST = "visit:list"
VISIT_CREATE = "visit:create"
VISIT_VIEW = "visit:view"
APPOINTMENT_LIST = "appointment:list"
APPOINTMENT_REQUEST = "appointment:request"
APPOINTMENT_CONFIRM = "appointment:confirm"
APPOINTMENT_CANCEL = "appointment:cancel"
DOCTOR_LIST = "doctor:list"
DOCTOR_VIEW = "doctor:view"
DOCTOR_SUBSCRIPTION = "doctor:subscription"
DOCTOR_APPOINTMENTS_TOGGLE = "doctor:appointments_toggle"
DOCTOR_SUBSCRIPTION_PAGE = "doctor:subscription_page"
PROFILE_UPDATE = "profile:update"
PAYMENT_LIST = "payment:list"
PAYMENT_CREATE = "payment:create"
PAYMENT_UPDATE = "payment:update"
NOTIFICATION_LIST = "notification:list"
NOTIFICATION_READ = "notification:read"
METRICS_ADMIN = "metrics:admin"


_EVERYONE = {
    APPOINTMENT_LIST,
    VISIT_LIST,
    VISIT_VIEW,
    NOTIFICATION_LIST,
    NOTIFICATION_READ,
    PROFILE_UPDATE,
    DOCTOR_LIST,
}

ROLE_ACTIONS = {
    "admin": _EVERYONE | {
        PATIENT_LIST,
        PATIENT_VIEW,
        APPOINTMENT_CONFIRM,
        APPOINTMENT_CANCEL,
        DOCTOR_VIEW,
        DOCTOR_SUBSCRIPTION,
        DOCTOR_APPOINTMENTS_TOGGLE,
        PAYMENT_LIST,
        PAYMENT_CREATE,
        PAYMENT_UPDATE,
        METRICS_ADMIN,
    },
    "doctor": _EVERYONE | {
        PATIENT_LIST,
        PATIENT_CREATE,
        PATIENT_VIEW,
        VISIT_CREATE,
        APPOINTMENT_CONFIRM,
        APPOINTMENT_CANCEL,
        DOCTOR_APPOINTMENTS_TOGGLE,
        DOCTOR_SUBSCRIPTION_PAGE,
    },
    "patient": _EVERYONE | {
        APPOINTMENT_REQUEST,
        APPOINTMENT_CANCEL,
    },
}


def _owns_as_doctor(actor, resource) -> bool:
    return getattr(resource, "doctor_id", None) == actor.id


def _owns_as_patient(actor, resource) -> bool:
    return getattr(resource, "patient_id", None) == actor.id


def _is_self(actor, resource) -> bool:
    return getattr(resource, "id", None) == actor.id


def _is_recipient(actor, resource) -> bool:
    return getattr(resource, "user_id", None) == actor.id


# (role, action) -> ownership rule; pairs not listed need no ownership.
OWNERSHIP: Dict[Tuple[str, str], Callable[[Any, Any], bool]] = {
    ("doctor", PATIENT_VIEW): _owns_as_doctor,
    ("patient", VISIT_VIEW): _owns_as_patient,
    ("doctor", APPOINTMENT_CONFIRM): _owns_as_doctor,
    ("doctor", APPOINTMENT_CANCEL): _owns_as_doctor,
    ("patient", APPOINTMENT_CANCEL): _owns_as_patient,
    ("doctor", DOCTOR_APPOINTMENTS_TOGGLE): _is_self,
    ("doctor", PROFILE_UPDATE): _is_self,
    ("patient", PROFILE_UPDATE): _is_self,
    ("admin", NOTIFICATION_READ): _is_recipient,
    ("doctor", NOTIFICATION_READ): _is_recipient,
    ("patient", NOTIFICATION_READ): _is_recipient,
}


def can(actor, action: str, resource: Optional[Any] = None) -> bool:
    if actor is None:
        return False
    if action not in ROLE_ACTIONS.get(actor.role, set()):
        return False
    if resource is None:
        return True
    rule = OWNERSHIP.get((actor.role, action))
    return rule(actor, resource) if rule else True


def authorize(actor, action: str, resource: Optional[Any] = None) -> None:
    """Raise PermissionDeniedError unless `can()` allows the call."""
    if not can(actor, action, resource):
        logger.warning(
            f"[authorize] denied actor={getattr(actor, 'id', None)} "
            f"role={getattr(actor, 'role', None)} action={action} "
            f"resource={getattr(resource, 'id', None)}"
        )
        raise PermissionDeniedError(f"Not allowed to {action}")
