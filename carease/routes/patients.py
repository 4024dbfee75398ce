from flask import Blueprint, g, jsonify, request

from carease.schemas import PatientCreate
from carease.services import clinic_service
from carease.routes.guards import csv_response, dump, get_repositories, json_body, login_required, not_found


patients_bp = Blueprint("patients", __name__, url_prefix="/patients")


@patients_bp.route("", methods=["GET"])
@login_required
def list_patients():
    """
    Doctors see their own patients, admins see everyone.
    Optional `q` filters by name, CNIC, phone, email or disease.
    """
    patients = clinic_service.list_patients(get_repositories(), g.actor, request.args.get("q"))
    return jsonify(dump(patients))


@patients_bp.route("", methods=["POST"])
@login_required
def add_patient():
    data = PatientCreate.model_validate(json_body())
    patient = clinic_service.register_patient(get_repositories(), g.actor, data)
    return jsonify(patient.to_dict()), 201


@patients_bp.route("/export", methods=["GET"])
@login_required
def export_patients():
    patients = clinic_service.list_patients(get_repositories(), g.actor, request.args.get("q"))
    return csv_response(patients, "patients")


@patients_bp.route("/<patient_id>", methods=["GET"])
@login_required
def patient_details(patient_id):
    """
    Patient record plus the visit history recorded against it.
    """
    repos = get_repositories()
    patient = clinic_service.get_patient_by_id(repos, g.actor, patient_id)
    if patient is None:
        return not_found("Patient")
    visits = clinic_service.get_visits(repos, patient_id)
    return jsonify({"patient": patient.to_dict(), "visits": dump(visits)})
