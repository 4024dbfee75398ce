from flask import Blueprint, g, jsonify

from carease.services import notification_service
from carease.routes.guards import dump, get_repositories, login_required


notifications_bp = Blueprint("notifications", __name__, url_prefix="/notifications")


@notifications_bp.route("", methods=["GET"])
@login_required
def list_notifications():
    grouped = notification_service.list_notifications(get_repositories(), g.actor)
    return jsonify({
        "unread": dump(grouped["unread"]),
        "read": dump(grouped["read"]),
        "unreadCount": len(grouped["unread"]),
    })


@notifications_bp.route("/<notification_id>/read", methods=["POST"])
@login_required
def mark_as_read(notification_id):
    notification = notification_service.mark_as_read(get_repositories(), g.actor, notification_id)
    return jsonify(notification.to_dict())
