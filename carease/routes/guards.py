from functools import wraps
from typing import Iterable

from flask import Response, current_app, g, jsonify, request

from carease.errors import AuthError
from carease.services.export_service import export_to_csv


def get_repositories():
    return current_app.extensions["carease"]["repos"]


def get_sessions():
    return current_app.extensions["carease"]["sessions"]


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.headers.get("X-Session-Token", "").strip()


def login_required(view_func):
    """Resolve the session token to a fresh identity in `g.actor`."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        session_identity = get_sessions().load(token)
        if session_identity is None:
            raise AuthError("Please log in first.")
        # Re-read so admin changes (subscription, flags) apply immediately
        actor = get_repositories().users.get(session_identity.id)
        if actor is None:
            get_sessions().clear(token)
            raise AuthError("Account no longer exists.")
        g.actor = actor
        g.token = token
        return view_func(*args, **kwargs)
    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def dump(records: Iterable) -> list:
    return [r.to_dict() for r in records]


def csv_response(records: Iterable, name: str):
    exported = export_to_csv(records, name)
    if exported is None:
        # Nothing to export: no file
        return "", 204
    filename, content = exported
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def not_found(what: str):
    return jsonify({"msg": f"{what} not found"}), 404
