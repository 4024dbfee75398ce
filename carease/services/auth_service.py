import logging
from typing import Optional, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from carease.errors import AuthError, NotFoundError
from carease.repositories import Repositories
from carease.schemas import Doctor, ProfileUpdate, User, new_id
from carease.services import policy
from carease.services.session_store import SessionStore


logger = logging.getLogger("auth_service")


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively, so they are stored lowercased."""
    return email.strip().lower()


def login(
    repos: Repositories,
    sessions: SessionStore,
    email: str,
    password: str,
    verify_password: bool = False,
) -> Tuple[User, str]:
    """
    Open a session for the user with this email.
    The password is only checked when `verify_password` is on and the account
    has a stored hash (sample accounts have none).
    """
    user = repos.users.find_one(email=normalize_email(email))
    if not user:
        logger.warning(f"[login] unknown email={email!r}")
        raise AuthError("Invalid email or password")

    if verify_password and user.password_hash and not check_password_hash(user.password_hash, password):
        logger.warning(f"[login] bad password for user={user.id}")
        raise AuthError("Invalid email or password")

    token = sessions.open(user)
    logger.info(f"[login] user={user.id} role={user.role}")
    return user, token


def create_account(repos: Repositories, email: str, password: str, name: str, role: str) -> User:
    """Store a new identity. Also used by `flask create-admin`."""
    email = normalize_email(email)
    if repos.users.find_one(email=email):
        logger.warning(f"[create_account] duplicate email={email!r}")
        raise AuthError("Email already exists")

    fields = dict(
        id=new_id(role),
        email=email,
        name=name.strip(),
        role=role,
        password_hash=generate_password_hash(password),
    )
    if role == "doctor":
        # New doctors wait for an admin to enable subscription and bookings.
        user = Doctor(**fields, is_subscribed=False, appointments_enabled=False)
    else:
        user = User(**fields)

    user = repos.users.add(user)
    logger.info(f"[create_account] Created {role} {user.id}")
    return user


def signup(
    repos: Repositories,
    sessions: SessionStore,
    email: str,
    password: str,
    name: str,
    role: str,
) -> Tuple[User, str]:
    """Create the account and open its first session."""
    user = create_account(repos, email, password, name, role)
    return user, sessions.open(user)


def logout(sessions: SessionStore, token: str) -> None:
    sessions.clear(token)


def get_current_session(sessions: SessionStore, token: Optional[str]) -> Optional[User]:
    return sessions.load(token) if token else None


def update_profile(repos: Repositories, actor: User, user_id: str, changes: ProfileUpdate) -> User:
    """Settings page: name / phone, plus specialization for doctors."""
    target = repos.users.get(user_id)
    if not target:
        raise NotFoundError(f"User {user_id} not found")
    policy.authorize(actor, policy.PROFILE_UPDATE, target)

    fields = changes.model_dump(exclude_none=True)
    if target.role != "doctor":
        fields.pop("specialization", None)
    if not fields:
        return target

    updated = repos.users.update(user_id, **fields)
    logger.info(f"[update_profile] user={user_id} fields={sorted(fields)}")
    return updated
