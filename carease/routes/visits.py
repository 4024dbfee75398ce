from flask import Blueprint, g, jsonify, request

from carease.schemas import VisitCreate
from carease.services import clinic_service
from carease.routes.guards import csv_response, dump, get_repositories, json_body, login_required, not_found


visits_bp = Blueprint("visits", __name__, url_prefix="/visits")


@visits_bp.route("", methods=["GET"])
@login_required
def list_visits():
    visits = clinic_service.list_visits(get_repositories(), g.actor, request.args.get("q"))
    return jsonify(dump(visits))


@visits_bp.route("", methods=["POST"])
@login_required
def create_visit():
    data = VisitCreate.model_validate(json_body())
    visit = clinic_service.create_visit(get_repositories(), g.actor, data)
    return jsonify(visit.to_dict()), 201


@visits_bp.route("/export", methods=["GET"])
@login_required
def export_visits():
    visits = clinic_service.list_visits(get_repositories(), g.actor, request.args.get("q"))
    return csv_response(visits, "visits")


@visits_bp.route("/<visit_id>", methods=["GET"])
@login_required
def visit_details(visit_id):
    visit = clinic_service.get_visit_by_id(get_repositories(), g.actor, visit_id)
    if visit is None:
        return not_found("Visit")
    return jsonify(visit.to_dict())
