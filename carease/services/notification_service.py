import logging
from typing import List

from carease.errors import NotFoundError
from carease.repositories import Repositories
from carease.schemas import Notification, User, new_id
from carease.services import policy
from carease.services.scoping import partition_notifications, scope_notifications


logger = logging.getLogger("notification_service")


def notify(repos: Repositories, user_id: str, title: str, message: str, type: str = "info") -> Notification:
    """System-generated notification for one user."""
    notification = repos.notifications.add(
        Notification(id=new_id("notif"), user_id=user_id, title=title, message=message, type=type)
    )
    logger.info(f"[notify] user={user_id} title={title!r}")
    return notification


def get_notifications(repos: Repositories, user_id: str) -> List[Notification]:
    """The user's notifications, newest first."""
    return scope_notifications(user_id, repos.notifications.find(user_id=user_id))


def list_notifications(repos: Repositories, actor: User) -> dict:
    policy.authorize(actor, policy.NOTIFICATION_LIST)
    notifications = get_notifications(repos, actor.id)
    unread, read = partition_notifications(notifications)
    return {"unread": unread, "read": read}


def mark_as_read(repos: Repositories, actor: User, notification_id: str) -> Notification:
    notification = repos.notifications.get(notification_id)
    if not notification:
        raise NotFoundError(f"Notification {notification_id} not found")
    policy.authorize(actor, policy.NOTIFICATION_READ, notification)
    if notification.read:
        return notification
    return repos.notifications.update(notification_id, read=True)
