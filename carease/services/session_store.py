import json
import logging
import secrets
from typing import Optional

import redis

from carease.schemas import User, parse_identity


logger = logging.getLogger("session_store")


def connect(host: str = "localhost", port: int = 6379, db: int = 0) -> redis.Redis:
    """Redis connection for the session store."""
    return redis.Redis(host=host, port=port, db=db, decode_responses=True)


# ✅ Helper for redis key formatting
def _key(token: str) -> str:
    return f"session:{token}"


class SessionStore:
    """
    Login sessions kept in Redis as JSON with a TTL.

    The client only needs `get`, `setex` and `delete`, so tests can hand in a
    small dict-backed double instead of a live server.
    """

    def __init__(self, client, ttl_sec: int = 86400):
        self.client = client
        self.ttl_sec = ttl_sec

    def open(self, identity: User) -> str:
        token = secrets.token_urlsafe(32)
        self.save(token, identity)
        return token

    def save(self, token: str, identity: User) -> None:
        serialized = json.dumps(identity.model_dump(mode="json", exclude={"password_hash"}))
        self.client.setex(_key(token), self.ttl_sec, serialized)
        logger.info(f"[session] Saved session for {identity.id}")

    def load(self, token: str) -> Optional[User]:
        if not token:
            return None
        raw = self.client.get(_key(token))
        if not raw:
            return None
        try:
            return parse_identity(json.loads(raw))
        except ValueError as e:
            # Covers bad JSON and pydantic ValidationError alike
            logger.warning(f"[session] ⚠️ Corrupted session {token[:8]}…: {e}")
            self.clear(token)
            return None

    def clear(self, token: str) -> None:
        self.client.delete(_key(token))
        logger.info(f"[session] Cleared session {token[:8]}…")
