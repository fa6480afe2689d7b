import logging
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.database import init_db
from volunteer_hub.models.user import User
from volunteer_hub.services.session_service import session_service
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.security import hash_password

logger = logging.getLogger(__name__)

TABLES = (
    "users", "sessions", "zipcode_coordinates", "jobs", "job_applications",
    "job_categories", "partnership_logs", "activity_logs", "volunteer_registrations",
)


def ensure_bootstrap_admin(db: Session) -> bool:
    """Create the configured admin account when no admin exists yet."""
    if not settings.bootstrap_admin_password:
        return False
    if db.query(User).filter(User.role == "admin").first():
        return False
    now = now_ts()
    db.add(User(
        username=settings.bootstrap_admin_username,
        email=settings.bootstrap_admin_email.lower(),
        password_hash=hash_password(settings.bootstrap_admin_password),
        role="admin",
        is_active=True,
        created_at=now,
        updated_at=now,
    ))
    db.commit()
    logger.info("Created bootstrap admin %s", settings.bootstrap_admin_username)
    return True


def integrity_check(db: Session) -> str:
    result = db.execute(text("PRAGMA integrity_check")).scalar()
    if result == "ok":
        logger.info("Database integrity check passed.")
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    return result


def table_counts(db: Session) -> dict[str, int]:
    return {name: db.execute(text(f"SELECT COUNT(*) FROM {name}")).scalar() for name in TABLES}


def run_migrations(db: Session, db_path: Path | None = None) -> dict:
    path = db_path or Path(db.get_bind().url.database)
    init_db(path)
    admin_created = ensure_bootstrap_admin(db)
    purged = session_service.purge_expired(db)
    integrity = integrity_check(db)
    return {
        "success": integrity == "ok",
        "integrity": integrity,
        "admin_created": admin_created,
        "expired_sessions_removed": purged,
        "tables": table_counts(db),
    }
