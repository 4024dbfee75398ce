"""
Scope rules: which records of a collection a caller may see.

Pure functions over already-loaded records, so the result is the same
whichever repository backend produced them.
"""

from typing import Iterable, List, Optional, Sequence, Tuple


def patients_for_doctor(patients: Iterable, doctor_id: str) -> List:
    return [p for p in patients if p.doctor_id == doctor_id]


def scope_patients(actor, patients: Iterable) -> List:
    if actor.role == "admin":
        return list(patients)
    if actor.role == "doctor":
        return patients_for_doctor(patients, actor.id)
    return []


def newest_first(records: Iterable, attr: str = "date") -> List:
    return sorted(records, key=lambda r: getattr(r, attr), reverse=True)


def scope_visits(actor, visits: Iterable) -> List:
    if actor.role == "patient":
        visits = [v for v in visits if v.patient_id == actor.id]
    return newest_first(visits)


def scope_appointments(user_id: str, role: str, appointments: Iterable) -> List:
    if role == "patient":
        return [a for a in appointments if a.patient_id == user_id]
    if role == "doctor":
        return [a for a in appointments if a.doctor_id == user_id]
    return list(appointments)


def scope_notifications(user_id: str, notifications: Iterable) -> List:
    return newest_first((n for n in notifications if n.user_id == user_id), attr="created_at")


def partition_notifications(notifications: Sequence) -> Tuple[List, List]:
    """Split into (unread, read), keeping order."""
    unread = [n for n in notifications if not n.read]
    read = [n for n in notifications if n.read]
    return unread, read


def search(records: Iterable, q: Optional[str], fields: Sequence[str]) -> List:
    """Case-insensitive substring match across the given attributes."""
    records = list(records)
    q = (q or "").strip().lower()
    if not q:
        return records
    return [
        r for r in records
        if any(q in str(getattr(r, f, "") or "").lower() for f in fields)
    ]
