import logging
import time
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.models.user import User, UserSession
from volunteer_hub.utils.dates import now_ts, ts_in
from volunteer_hub.utils.security import generate_token, verify_password

logger = logging.getLogger(__name__)

# (failed attempts reached, seconds to wait), checked in order
LOGIN_BACKOFF = ((10, 300.0), (5, 30.0), (3, 5.0))


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "email": self.email, "role": self.role}


class SessionService:
    def resolve(self, db: Session, token: str | None) -> CurrentUser | None:
        """Return the session's user, or None for any missing, expired or inactive session."""
        if not token:
            return None
        row = (
            db.query(User)
            .join(UserSession, UserSession.user_id == User.id)
            .filter(UserSession.id == token)
            .filter(UserSession.expires_at > now_ts())
            .filter(User.is_active.is_(True))
            .first()
        )
        if row is None:
            return None
        return CurrentUser(id=row.id, username=row.username, email=row.email, role=row.role)

    def login(
        self,
        db: Session,
        username: str,
        password: str,
        user_agent: str = "",
        ip_address: str = "",
        throttle_key: str = "login",
    ) -> dict | None:
        delay = self._retry_after(db, throttle_key)
        if delay > 0:
            return {"error": "too_many_attempts", "retry_after_seconds": delay}

        user = db.query(User).filter(User.username == username, User.is_active.is_(True)).first()
        if user is None or not verify_password(user.password_hash, password):
            self._note_failure(db, throttle_key)
            return None

        self._clear_failures(db, throttle_key)
        token = generate_token()
        db.add(UserSession(
            id=token,
            user_id=user.id,
            expires_at=ts_in(days=settings.session_ttl_days),
            created_at=now_ts(),
            user_agent=user_agent,
            ip_address=ip_address,
        ))
        user.last_login = now_ts()
        db.commit()
        logger.info("User %s logged in", user.username)

        return {
            "token": token,
            "user": CurrentUser(id=user.id, username=user.username, email=user.email, role=user.role),
        }

    def logout(self, db: Session, token: str | None) -> None:
        if not token:
            return
        db.query(UserSession).filter(UserSession.id == token).delete()
        db.commit()

    def purge_expired(self, db: Session) -> int:
        count = db.query(UserSession).filter(UserSession.expires_at <= now_ts()).delete()
        db.commit()
        return count

    def _retry_after(self, db: Session, key: str) -> float:
        """Seconds the caller must wait before another login attempt for ``key``."""
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).first()
        if row is None:
            return 0
        backoff = next((seconds for limit, seconds in LOGIN_BACKOFF if row.failed_attempts >= limit), 0)
        return max(0.0, backoff - (time.time() - row.last_failed_at))

    def _note_failure(self, db: Session, key: str) -> None:
        db.execute(
            text(
                "INSERT INTO auth_throttle (key, failed_attempts, last_failed_at) VALUES (:key, 1, :at) "
                "ON CONFLICT(key) DO UPDATE SET failed_attempts = failed_attempts + 1, last_failed_at = :at"
            ),
            {"key": key, "at": time.time()},
        )
        db.commit()
        logger.info("Failed login attempt for %s", key)

    def _clear_failures(self, db: Session, key: str) -> None:
        db.execute(text("DELETE FROM auth_throttle WHERE key = :key"), {"key": key})


session_service = SessionService()
