"""
Dashboard aggregation.

Every function here is a pure reduction over records that have already been
scoped for the caller. Calendar questions ("this month", "on this day") are
answered in the clinic timezone; stored timestamps are naive UTC.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional

import pytz

from carease.schemas import DashboardMetrics, utcnow


def clinic_tz(name: str = "Asia/Karachi"):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def to_local(ts: datetime, tz) -> datetime:
    return pytz.utc.localize(ts).astimezone(tz)


def to_metrics(users: Iterable, patients: Iterable, visits: Iterable, appointments: Iterable) -> DashboardMetrics:
    return DashboardMetrics(
        total_doctors=sum(1 for u in users if u.role == "doctor"),
        total_patients=sum(1 for _ in patients),
        total_visits=sum(1 for _ in visits),
        total_appointments=sum(1 for _ in appointments),
    )


def payment_summary(payments: Iterable) -> dict:
    payments = list(payments)
    paid = [p for p in payments if p.status == "paid"]
    pending = [p for p in payments if p.status == "pending"]
    return {
        "totalAmount": sum(p.amount for p in payments),
        "paidAmount": sum(p.amount for p in paid),
        "pendingAmount": sum(p.amount for p in pending),
        "paidCount": len(paid),
        "pendingCount": len(pending),
    }


def visits_this_month(visits: Iterable, tz=pytz.UTC, now: Optional[datetime] = None) -> List:
    today = to_local(now or utcnow(), tz)
    result = []
    for v in visits:
        local = to_local(v.date, tz)
        if local.year == today.year and local.month == today.month:
            result.append(v)
    return result


def upcoming_visits(visits: Iterable, now: Optional[datetime] = None) -> List:
    now = now or utcnow()
    return [v for v in visits if v.next_visit and v.next_visit > now]


def upcoming_appointments(appointments: Iterable, now: Optional[datetime] = None) -> List:
    now = now or utcnow()
    return sorted(
        (a for a in appointments if a.date >= now and a.status != "cancelled"),
        key=lambda a: a.date,
    )


def pending_appointments(appointments: Iterable) -> List:
    return [a for a in appointments if a.status == "pending"]


def appointments_on(appointments: Iterable, day: date, tz=pytz.UTC) -> List:
    return sorted(
        (a for a in appointments if to_local(a.date, tz).date() == day),
        key=lambda a: a.date,
    )


def doctor_summary(patients: Iterable, visits: Iterable, appointments: Iterable, tz=pytz.UTC,
                   now: Optional[datetime] = None) -> dict:
    visits = list(visits)
    appointments = list(appointments)
    return {
        "totalPatients": sum(1 for _ in patients),
        "totalVisits": len(visits),
        "visitsThisMonth": len(visits_this_month(visits, tz, now)),
        "upcomingVisits": len(upcoming_visits(visits, now)),
        "pendingAppointments": len(pending_appointments(appointments)),
        "upcomingAppointments": len(upcoming_appointments(appointments, now)),
    }


def patient_summary(visits: Iterable, appointments: Iterable, now: Optional[datetime] = None) -> dict:
    visits = list(visits)
    return {
        "totalVisits": len(visits),
        "upcomingVisits": len(upcoming_visits(visits, now)),
        "upcomingAppointments": len(upcoming_appointments(appointments, now)),
    }
