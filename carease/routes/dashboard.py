from flask import Blueprint, current_app, g, jsonify

from carease.services import admin_service, clinic_service, metrics, notification_service, policy
from carease.routes.guards import dump, get_repositories, login_required


dashboard_bp = Blueprint("dashboard", __name__)


NAVIGATION = {
    "admin": [
        {"label": "Dashboard", "path": "/dashboard"},
        {"label": "Doctors", "path": "/doctors"},
        {"label": "Patients", "path": "/patients"},
        {"label": "Payments", "path": "/payments"},
        {"label": "Appointments", "path": "/appointments"},
        {"label": "Notifications", "path": "/notifications"},
    ],
    "doctor": [
        {"label": "Dashboard", "path": "/dashboard"},
        {"label": "Patients", "path": "/patients"},
        {"label": "Appointments", "path": "/appointments"},
        {"label": "Visits", "path": "/visits"},
        {"label": "Notifications", "path": "/notifications"},
    ],
    "patient": [
        {"label": "Dashboard", "path": "/dashboard"},
        {"label": "My Visits", "path": "/visits"},
        {"label": "Appointments", "path": "/appointments"},
        {"label": "Notifications", "path": "/notifications"},
    ],
}


def _admin_dashboard(repos, actor, tz):
    policy.authorize(actor, policy.METRICS_ADMIN)
    payments = admin_service.get_payments(repos)
    summary = metrics.to_metrics(
        repos.users.all(), repos.patients.all(), repos.visits.all(), repos.appointments.all()
    )
    return {
        "metrics": summary.to_dict(),
        "payments": dump(payments),
        "paymentSummary": metrics.payment_summary(payments),
        "doctors": dump(admin_service.get_doctors(repos)),
    }


def _doctor_dashboard(repos, actor, tz):
    patients = clinic_service.list_patients(repos, actor)
    visits = [v for v in clinic_service.get_all_visits(repos) if v.doctor_id == actor.id]
    appointments = clinic_service.get_appointments(repos, actor.id, "doctor")
    return {
        "metrics": metrics.doctor_summary(patients, visits, appointments, tz),
        "patients": dump(patients),
        "pendingAppointments": dump(metrics.pending_appointments(appointments)),
        "subscription": {
            "isSubscribed": actor.is_subscribed,
            "appointmentsEnabled": actor.appointments_enabled,
            "patientLimit": None if actor.is_subscribed else clinic_service.FREE_PLAN_PATIENT_LIMIT,
        },
    }


def _patient_dashboard(repos, actor, tz):
    visits = clinic_service.list_visits(repos, actor)
    appointments = clinic_service.get_appointments(repos, actor.id, "patient")
    return {
        "metrics": metrics.patient_summary(visits, appointments),
        "visits": dump(visits),
        "upcomingVisits": dump(metrics.upcoming_visits(visits)),
        "upcomingAppointments": dump(metrics.upcoming_appointments(appointments)),
    }


DASHBOARDS = {
    "admin": _admin_dashboard,
    "doctor": _doctor_dashboard,
    "patient": _patient_dashboard,
}


@dashboard_bp.route("/dashboard", methods=["GET"])
@login_required
def dashboard_home():
    """
    Role router: the caller's role picks which dashboard is built.
    """
    repos = get_repositories()
    actor = g.actor
    tz = metrics.clinic_tz(current_app.config["CLINIC_TIMEZONE"])

    context = DASHBOARDS[actor.role](repos, actor, tz)
    context["role"] = actor.role
    context["navigation"] = NAVIGATION[actor.role]
    context["unreadNotifications"] = sum(
        1 for n in notification_service.get_notifications(repos, actor.id) if not n.read
    )
    return jsonify(context)


@dashboard_bp.route("/subscription", methods=["GET"])
@login_required
def subscription_page():
    """Doctor-only view of their own subscription state and payments."""
    policy.authorize(g.actor, policy.DOCTOR_SUBSCRIPTION_PAGE)
    payments = admin_service.get_payments(get_repositories(), doctor_id=g.actor.id)
    return jsonify({
        "isSubscribed": g.actor.is_subscribed,
        "appointmentsEnabled": g.actor.appointments_enabled,
        "payments": dump(payments),
        "paymentSummary": metrics.payment_summary(payments),
        "patientLimit": None if g.actor.is_subscribed else clinic_service.FREE_PLAN_PATIENT_LIMIT,
        "plans": admin_service.get_plans(),
    })


@dashboard_bp.route("/plans", methods=["GET"])
def list_plans():
    """Public pricing page: the plan catalogue."""
    return jsonify(admin_service.get_plans())
