from datetime import datetime

from flask import Blueprint, current_app, g, jsonify, request

from carease.schemas import AppointmentRequest, StatusUpdate
from carease.services import clinic_service, metrics
from carease.routes.guards import dump, get_repositories, json_body, login_required


appointments_bp = Blueprint("appointments", __name__, url_prefix="/appointments")


@appointments_bp.route("", methods=["GET"])
@login_required
def list_appointments():
    """
    Appointments visible to the caller, earliest first.
    `?date=YYYY-MM-DD` narrows to one calendar day in the clinic timezone.
    """
    appointments = clinic_service.list_appointments(get_repositories(), g.actor)

    day = (request.args.get("date") or "").strip()
    if day:
        try:
            selected = datetime.strptime(day, "%Y-%m-%d").date()
        except ValueError:
            return jsonify({"msg": "date must be YYYY-MM-DD"}), 400
        tz = metrics.clinic_tz(current_app.config["CLINIC_TIMEZONE"])
        appointments = metrics.appointments_on(appointments, selected, tz)

    return jsonify(dump(appointments))


@appointments_bp.route("", methods=["POST"])
@login_required
def request_appointment():
    data = AppointmentRequest.model_validate(json_body())
    appointment = clinic_service.request_appointment(get_repositories(), g.actor, data)
    return jsonify(appointment.to_dict()), 201


@appointments_bp.route("/doctors", methods=["GET"])
@login_required
def bookable_doctors():
    """Doctors currently accepting appointment requests."""
    return jsonify(dump(clinic_service.get_bookable_doctors(get_repositories())))


@appointments_bp.route("/<appointment_id>/status", methods=["POST"])
@login_required
def update_status(appointment_id):
    body = StatusUpdate.model_validate(json_body())
    appointment = clinic_service.update_appointment_status(
        get_repositories(), g.actor, appointment_id, body.status, expected_version=body.version
    )
    return jsonify(appointment.to_dict())
