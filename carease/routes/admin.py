from flask import Blueprint, g, jsonify

from carease.schemas import PaymentCreate, StatusUpdate, ToggleUpdate
from carease.services import admin_service, policy
from carease.routes.guards import csv_response, dump, get_repositories, json_body, login_required, not_found


admin_bp = Blueprint("admin", __name__)


# -----------------------------------------------------------------------
# ------------------- Doctor Management Routes --------------------------
# -----------------------------------------------------------------------

@admin_bp.route("/doctors", methods=["GET"])
@login_required
def list_doctors():
    policy.authorize(g.actor, policy.DOCTOR_LIST)
    return jsonify(dump(admin_service.get_doctors(get_repositories())))


@admin_bp.route("/doctors/<doctor_id>", methods=["GET"])
@login_required
def doctor_details(doctor_id):
    details = admin_service.get_doctor_details(get_repositories(), g.actor, doctor_id)
    if details is None:
        return not_found("Doctor")
    return jsonify({
        "doctor": details["doctor"].to_dict(),
        "patients": dump(details["patients"]),
        "payments": dump(details["payments"]),
    })


@admin_bp.route("/doctors/<doctor_id>/subscription", methods=["PATCH"])
@login_required
def toggle_subscription(doctor_id):
    body = ToggleUpdate.model_validate(json_body())
    doctor = admin_service.update_doctor_subscription(
        get_repositories(), g.actor, doctor_id, body.enabled, expected_version=body.version
    )
    return jsonify(doctor.to_dict())


@admin_bp.route("/doctors/<doctor_id>/appointments", methods=["PATCH"])
@login_required
def toggle_appointments(doctor_id):
    body = ToggleUpdate.model_validate(json_body())
    doctor = admin_service.update_appointments_enabled(
        get_repositories(), g.actor, doctor_id, body.enabled, expected_version=body.version
    )
    return jsonify(doctor.to_dict())


# -----------------------------------------------------------------------
# ------------------- Payment Routes ------------------------------------
# -----------------------------------------------------------------------

@admin_bp.route("/payments", methods=["GET"])
@login_required
def list_payments():
    return jsonify(dump(admin_service.list_payments(get_repositories(), g.actor)))


@admin_bp.route("/payments", methods=["POST"])
@login_required
def record_payment():
    data = PaymentCreate.model_validate(json_body())
    payment = admin_service.record_payment(get_repositories(), g.actor, data)
    return jsonify(payment.to_dict()), 201


@admin_bp.route("/payments/export", methods=["GET"])
@login_required
def export_payments():
    return csv_response(admin_service.list_payments(get_repositories(), g.actor), "payments")


@admin_bp.route("/payments/<payment_id>", methods=["PATCH"])
@login_required
def update_payment(payment_id):
    body = StatusUpdate.model_validate(json_body())
    payment = admin_service.update_payment_status(
        get_repositories(), g.actor, payment_id, body.status, expected_version=body.version
    )
    return jsonify(payment.to_dict())
