import pytest

from carease.errors import PermissionDeniedError
from carease.schemas import Appointment, Notification, Patient, User
from carease.services import policy


ADMIN = User(id="admin-1", email="a@carease.com", name="Admin", role="admin")
DOCTOR = User(id="d1", email="d1@carease.com", name="Dr. One", role="doctor")
PATIENT = User(id="p1", email="p1@carease.com", name="Pat", role="patient")

OWN_PATIENT = Patient(id="pat-1", name="X", cnic="1", phone="1", doctor_id="d1")
OTHER_PATIENT = Patient(id="pat-2", name="Y", cnic="2", phone="2", doctor_id="d2")
APPOINTMENT = Appointment(
    id="apt-1", patient_id="p1", patient_name="Pat", doctor_id="d1", doctor_name="Dr. One",
    date="2030-01-01T09:00:00",
)


@pytest.mark.parametrize(
    "actor, action, allowed",
    [
        (ADMIN, policy.PAYMENT_UPDATE, True),
        (DOCTOR, policy.PAYMENT_UPDATE, False),
        (PATIENT, policy.PAYMENT_LIST, False),
        (ADMIN, policy.DOCTOR_SUBSCRIPTION, True),
        (DOCTOR, policy.DOCTOR_SUBSCRIPTION, False),
        (DOCTOR, policy.PATIENT_CREATE, True),
        (ADMIN, policy.PATIENT_CREATE, False),
        (PATIENT, policy.PATIENT_LIST, False),
        (PATIENT, policy.APPOINTMENT_REQUEST, True),
        (DOCTOR, policy.APPOINTMENT_REQUEST, False),
        (DOCTOR, policy.DOCTOR_SUBSCRIPTION_PAGE, True),
        (ADMIN, policy.DOCTOR_SUBSCRIPTION_PAGE, False),
        (PATIENT, policy.VISIT_CREATE, False),
        (PATIENT, policy.NOTIFICATION_LIST, True),
    ],
)
def test_role_grants(actor, action, allowed):
    assert policy.can(actor, action) is allowed


def test_resource_ownership():
    assert policy.can(DOCTOR, policy.PATIENT_VIEW, OWN_PATIENT)
    assert not policy.can(DOCTOR, policy.PATIENT_VIEW, OTHER_PATIENT)
    assert policy.can(ADMIN, policy.PATIENT_VIEW, OTHER_PATIENT)

    assert policy.can(DOCTOR, policy.APPOINTMENT_CONFIRM, APPOINTMENT)
    assert policy.can(PATIENT, policy.APPOINTMENT_CANCEL, APPOINTMENT)
    assert not policy.can(PATIENT, policy.APPOINTMENT_CONFIRM, APPOINTMENT)

    mine = Notification(id="n1", user_id="p1", title="t", message="m")
    assert policy.can(PATIENT, policy.NOTIFICATION_READ, mine)
    assert not policy.can(DOCTOR, policy.NOTIFICATION_READ, mine)


def test_no_actor_can_nothing():
    assert policy.can(None, policy.VISIT_LIST) is False


def test_authorize_raises():
    policy.authorize(ADMIN, policy.METRICS_ADMIN)
    with pytest.raises(PermissionDeniedError):
        policy.authorize(DOCTOR, policy.METRICS_ADMIN)
