import pytest

from carease.errors import ConcurrentUpdateError, InvalidTransitionError, NotFoundError, PermissionDeniedError
from carease.schemas import PaymentCreate
from carease.services import admin_service, notification_service

from conftest import add_doctor, add_user


@pytest.fixture
def admin(repos):
    return add_user(repos, "admin-1", "admin")


def test_subscription_toggle_keeps_last_value(repos, admin):
    add_doctor(repos, "d1")

    for value in (True, False, True):
        admin_service.update_doctor_subscription(repos, admin, "d1", value)

    doctor = repos.users.get("d1")
    assert doctor.is_subscribed is True
    assert doctor.version == 4


def test_subscription_toggle_admin_only(repos, admin):
    doctor = add_doctor(repos, "d1")

    with pytest.raises(PermissionDeniedError):
        admin_service.update_doctor_subscription(repos, doctor, "d1", True)
    with pytest.raises(NotFoundError):
        admin_service.update_doctor_subscription(repos, admin, "admin-1", True)


def test_subscription_notifies_doctor(repos, admin):
    add_doctor(repos, "d1")
    admin_service.update_doctor_subscription(repos, admin, "d1", True)

    inbox = notification_service.get_notifications(repos, "d1")
    assert inbox[0].title == "Subscription updated"
    assert inbox[0].type == "success"


def test_concurrent_toggle_detected(repos, admin):
    doctor = add_doctor(repos, "d1")
    admin_service.update_doctor_subscription(repos, admin, "d1", True, expected_version=doctor.version)

    with pytest.raises(ConcurrentUpdateError):
        admin_service.update_doctor_subscription(repos, admin, "d1", False, expected_version=doctor.version)
    assert repos.users.get("d1").is_subscribed is True


def test_doctor_can_toggle_own_appointments_only(repos, admin):
    d1 = add_doctor(repos, "d1", appointments_enabled=False)
    add_doctor(repos, "d2")

    assert admin_service.update_appointments_enabled(repos, d1, "d1", True).appointments_enabled is True
    with pytest.raises(PermissionDeniedError):
        admin_service.update_appointments_enabled(repos, d1, "d2", False)
    assert admin_service.update_appointments_enabled(repos, admin, "d2", False).appointments_enabled is False


def test_payment_status_toggles_both_ways(repos, admin):
    add_doctor(repos, "d1", name="Dr. One")
    payment = admin_service.record_payment(repos, admin, PaymentCreate(doctor_id="d1", amount=49.0))
    assert payment.status == "pending"
    assert payment.doctor_name == "Dr. One"

    assert admin_service.update_payment_status(repos, admin, payment.id, "paid").status == "paid"
    assert admin_service.update_payment_status(repos, admin, payment.id, "pending").status == "pending"
    assert admin_service.update_payment_status(repos, admin, payment.id, "paid").status == "paid"

    titles = [n.title for n in notification_service.get_notifications(repos, "d1")]
    assert titles.count("Payment received") == 2


def test_payment_rules(repos, admin):
    doctor = add_doctor(repos, "d1")
    payment = admin_service.record_payment(repos, admin, PaymentCreate(doctor_id="d1", amount=10))

    with pytest.raises(InvalidTransitionError):
        admin_service.update_payment_status(repos, admin, payment.id, "refunded")
    with pytest.raises(NotFoundError):
        admin_service.update_payment_status(repos, admin, "pay-missing", "paid")
    with pytest.raises(PermissionDeniedError):
        admin_service.update_payment_status(repos, doctor, payment.id, "paid")
    with pytest.raises(NotFoundError):
        admin_service.record_payment(repos, admin, PaymentCreate(doctor_id="ghost", amount=10))


def test_doctor_details(repos, admin):
    add_doctor(repos, "d1")
    admin_service.record_payment(repos, admin, PaymentCreate(doctor_id="d1", amount=10))

    details = admin_service.get_doctor_details(repos, admin, "d1")

    assert details["doctor"].id == "d1"
    assert len(details["payments"]) == 1
    assert details["patients"] == []
    assert admin_service.get_doctor_details(repos, admin, "admin-1") is None
