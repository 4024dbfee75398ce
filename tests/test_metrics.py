from datetime import date, datetime

import pytz

from carease.schemas import Appointment, Payment, User, Visit
from carease.services import metrics


NOW = datetime(2030, 6, 15, 12, 0)
KARACHI = pytz.timezone("Asia/Karachi")


def _visit(visit_id, when, next_visit=None):
    return Visit(
        id=visit_id, patient_id="p1", patient_name="P", doctor_id="d1", doctor_name="D",
        date=when, next_visit=next_visit,
    )


def _appointment(apt_id, when, status="pending"):
    return Appointment(
        id=apt_id, patient_id="p1", patient_name="P", doctor_id="d1", doctor_name="D",
        date=when, status=status,
    )


def test_to_metrics_counts():
    users = [
        User(id="a", email="a@carease.com", name="A", role="admin"),
        User(id="d1", email="d1@carease.com", name="D1", role="doctor"),
        User(id="d2", email="d2@carease.com", name="D2", role="doctor"),
    ]
    result = metrics.to_metrics(users, [object()] * 4, [object()] * 2, [])

    assert result.to_dict() == {
        "totalDoctors": 2,
        "totalPatients": 4,
        "totalVisits": 2,
        "totalAppointments": 0,
    }


def test_payment_summary():
    payments = [
        Payment(id="1", doctor_id="d", doctor_name="D", amount=10, status="paid"),
        Payment(id="2", doctor_id="d", doctor_name="D", amount=15.5, status="pending"),
        Payment(id="3", doctor_id="d", doctor_name="D", amount=4.5, status="paid"),
    ]

    summary = metrics.payment_summary(payments)

    assert summary["totalAmount"] == 30
    assert summary["paidAmount"] == 14.5
    assert summary["pendingAmount"] == 15.5
    assert summary["paidCount"] == 2
    assert metrics.payment_summary([])["totalAmount"] == 0


def test_visits_this_month_uses_clinic_timezone():
    # 2030-05-31 20:00 UTC is already June 1st in Karachi (UTC+5)
    late_may_utc = _visit("v1", datetime(2030, 5, 31, 20, 0))
    mid_may = _visit("v2", datetime(2030, 5, 10, 12, 0))
    june = _visit("v3", datetime(2030, 6, 2, 12, 0))

    in_utc = metrics.visits_this_month([late_may_utc, mid_may, june], pytz.UTC, NOW)
    in_karachi = metrics.visits_this_month([late_may_utc, mid_may, june], KARACHI, NOW)

    assert [v.id for v in in_utc] == ["v3"]
    assert [v.id for v in in_karachi] == ["v1", "v3"]


def test_upcoming_visits_and_appointments():
    visits = [
        _visit("v1", datetime(2030, 6, 1), next_visit=datetime(2030, 6, 20)),
        _visit("v2", datetime(2030, 6, 1), next_visit=datetime(2030, 6, 10)),
        _visit("v3", datetime(2030, 6, 1)),
    ]
    appointments = [
        _appointment("a1", datetime(2030, 6, 20)),
        _appointment("a2", datetime(2030, 6, 16), status="confirmed"),
        _appointment("a3", datetime(2030, 6, 18), status="cancelled"),
        _appointment("a4", datetime(2030, 6, 1)),
    ]

    assert [v.id for v in metrics.upcoming_visits(visits, NOW)] == ["v1"]
    assert [a.id for a in metrics.upcoming_appointments(appointments, NOW)] == ["a2", "a1"]
    assert [a.id for a in metrics.pending_appointments(appointments)] == ["a1", "a4"]


def test_appointments_on_day():
    appointments = [
        _appointment("a1", datetime(2030, 6, 15, 21, 0)),  # June 16th 02:00 in Karachi
        _appointment("a2", datetime(2030, 6, 15, 9, 0)),
        _appointment("a3", datetime(2030, 6, 14, 9, 0)),
    ]

    assert [a.id for a in metrics.appointments_on(appointments, date(2030, 6, 15))] == ["a2", "a1"]
    assert [a.id for a in metrics.appointments_on(appointments, date(2030, 6, 15), KARACHI)] == ["a2"]


def test_unknown_timezone_falls_back_to_utc():
    assert metrics.clinic_tz("Mars/Olympus") is pytz.UTC
    assert metrics.clinic_tz("Asia/Karachi").zone == "Asia/Karachi"


def test_doctor_summary():
    summary = metrics.doctor_summary(
        [object(), object()],
        [_visit("v1", datetime(2030, 6, 3), next_visit=datetime(2030, 7, 1))],
        [_appointment("a1", datetime(2030, 7, 1))],
        now=NOW,
    )

    assert summary == {
        "totalPatients": 2,
        "totalVisits": 1,
        "visitsThisMonth": 1,
        "upcomingVisits": 1,
        "pendingAppointments": 1,
        "upcomingAppointments": 1,
    }
