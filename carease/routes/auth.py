from flask import Blueprint, current_app, g, jsonify

from carease.schemas import LoginRequest, ProfileUpdate, SignupRequest
from carease.services import auth_service
from carease.routes.guards import get_repositories, get_sessions, json_body, login_required


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/signup", methods=["POST"])
def signup():
    body = SignupRequest.model_validate(json_body())
    user, token = auth_service.signup(
        get_repositories(), get_sessions(), body.email, body.password, body.name, body.role
    )
    return jsonify({"user": user.to_dict(), "token": token}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    body = LoginRequest.model_validate(json_body())
    user, token = auth_service.login(
        get_repositories(),
        get_sessions(),
        body.email,
        body.password,
        verify_password=current_app.config.get("AUTH_VERIFY_PASSWORDS", False),
    )
    return jsonify({"msg": "Login successful", "user": user.to_dict(), "token": token})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    auth_service.logout(get_sessions(), g.token)
    return jsonify({"msg": "Logged out successfully"})


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": g.actor.to_dict()})


@auth_bp.route("/users/<user_id>", methods=["PATCH"])
@login_required
def update_profile(user_id):
    """
    Settings page: update name / phone (and specialization for doctors).
    """
    changes = ProfileUpdate.model_validate(json_body())
    user = auth_service.update_profile(get_repositories(), g.actor, user_id, changes)
    return jsonify({"user": user.to_dict()})
