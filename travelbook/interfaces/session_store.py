# interfaces/session_store.py
"""
Session State Management for authenticated users
Keeps login sessions and password-recovery secrets with a TTL.
"""

import json
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from loguru import logger

try:
    import redis
    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False


class SessionStore:
    """
    Manages login sessions and recovery secrets.
    Supports Redis for persistence, falls back to in-memory.
    """

    def __init__(self, redis_url: Optional[str] = "redis://localhost:6379/0",
                 ttl_hours: int = 336, recovery_ttl_minutes: int = 60):
        self.ttl_seconds = ttl_hours * 3600
        self.recovery_ttl_seconds = recovery_ttl_minutes * 60
        self.redis_client = None
        self._memory_store: Dict[str, Dict[str, Any]] = {}

        if not redis_url:
            logger.info("SessionStore using in-memory store")
            return

        # Try to connect to Redis
        if REDIS_AVAILABLE:
            try:
                self.redis_client = redis.Redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5
                )
                self.redis_client.ping()
                logger.info(f"SessionStore connected to Redis at {redis_url}")
            except Exception as e:
                logger.warning(f"Redis connection failed, using in-memory store: {e}")
                self.redis_client = None
        else:
            logger.warning("Redis not available, using in-memory store")

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client else "memory"

    def _get_key(self, session_id: str) -> str:
        return f"session:{session_id}"

    def _get_recovery_key(self, user_id: str, secret: str) -> str:
        return f"recovery:{user_id}:{secret}"

    # ---------- raw storage with expiry ----------

    def _put(self, key: str, data: Dict[str, Any], ttl_seconds: int):
        if self.redis_client:
            try:
                self.redis_client.setex(key, ttl_seconds, json.dumps(data))
                return
            except Exception as e:
                logger.error(f"Redis save error: {e}")
        expires = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        self._memory_store[key] = {"data": data, "expires": expires}

    def _get(self, key: str) -> Optional[Dict[str, Any]]:
        if self.redis_client:
            try:
                raw = self.redis_client.get(key)
                if raw:
                    return json.loads(raw)
            except Exception as e:
                logger.error(f"Redis get error: {e}")

        entry = self._memory_store.get(key)
        if not entry:
            return None
        if entry["expires"] <= datetime.now(timezone.utc):
            del self._memory_store[key]
            return None
        return entry["data"]

    def _delete(self, key: str) -> bool:
        deleted = False
        if self.redis_client:
            try:
                deleted = bool(self.redis_client.delete(key))
            except Exception as e:
                logger.error(f"Redis delete error: {e}")
        if key in self._memory_store:
            del self._memory_store[key]
            deleted = True
        return deleted

    # ---------- sessions ----------

    def create_session(self, user_id: str) -> Dict[str, Any]:
        """Create a new login session for an account"""
        session_id = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        session = {
            "session_id": session_id,
            "user_id": user_id,
            "created_at": now.isoformat(),
            "expires_at": (now + timedelta(seconds=self.ttl_seconds)).isoformat()
        }
        self._put(self._get_key(session_id), session, self.ttl_seconds)
        logger.info(f"Created session for user {user_id}")
        return session

    def get_session(self, session_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Get a live session by id"""
        if not session_id:
            return None
        return self._get(self._get_key(session_id))

    def delete_session(self, session_id: str) -> bool:
        deleted = self._delete(self._get_key(session_id))
        if deleted:
            logger.info("Deleted session")
        return deleted

    # ---------- password recovery ----------

    def create_recovery(self, user_id: str) -> str:
        """Issue a single-use recovery secret for an account"""
        secret = secrets.token_urlsafe(24)
        self._put(
            self._get_recovery_key(user_id, secret),
            {"user_id": user_id, "created_at": datetime.now(timezone.utc).isoformat()},
            self.recovery_ttl_seconds
        )
        return secret

    def consume_recovery(self, user_id: str, secret: str) -> bool:
        """Check and invalidate a recovery secret"""
        key = self._get_recovery_key(user_id, secret)
        if not self._get(key):
            return False
        self._delete(key)
        return True

    def ping(self) -> bool:
        if not self.redis_client:
            return True
        try:
            return bool(self.redis_client.ping())
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False

    def close(self):
        if self.redis_client:
            self.redis_client.close()
