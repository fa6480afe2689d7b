import logging
from datetime import datetime
from typing import Any, Callable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from volunteer_hub.errors import AuthorizationError, NotFoundError, ValidationError
from volunteer_hub.models.application import JobApplication
from volunteer_hub.models.job import JOB_STATUSES, URGENCY_RANK, Job
from volunteer_hub.models.user import User
from volunteer_hub.services.categories import normalize_category
from volunteer_hub.services.listing_query import (
    JobZip,
    accepted_count,
    computed_latitude,
    computed_longitude,
    job_columns,
)
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.dates import format_ts
from volunteer_hub.utils.validation import clean_email, clean_str, is_blank, parse_int, parse_number

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category", "contact_email", "zipcode", "volunteers_needed")

UPDATABLE_FIELDS = (
    "title", "description", "contact_name", "contact_email", "contact_phone",
    "address", "city", "state", "zipcode", "latitude", "longitude", "category",
    "skills_needed", "time_commitment", "duration_hours", "volunteers_needed",
    "age_requirement", "background_check_required", "training_provided",
    "start_date", "end_date", "flexible_schedule", "preferred_times", "status",
    "urgency", "remote_possible", "transportation_provided", "meal_provided",
    "stipend_amount", "expires_at",
)

_datetime_adapter = TypeAdapter(datetime)


def _required_text(key: str, value: Any) -> str:
    text = clean_str(value)
    if text is None:
        raise ValidationError(f"{key} cannot be empty")
    return text


def _optional_text(key: str, value: Any) -> str:
    return clean_str(value, default="")


def _nullable_text(key: str, value: Any) -> str | None:
    return clean_str(value)


def _email(key: str, value: Any) -> str:
    email = clean_email(value)
    if not email or "@" not in email:
        raise ValidationError(f"{key} must be a valid email address")
    return email


def _category(key: str, value: Any) -> str:
    raw = _required_text(key, value)
    category = normalize_category(raw)
    if category is None:
        raise ValidationError(f"Unknown category: {raw}")
    return category


def _skills(key: str, value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(s.strip() for s in value if isinstance(s, str) and s.strip())
    return clean_str(value, default="")


def _capacity(key: str, value: Any) -> int:
    return parse_int(value, key, minimum=1)


def _optional_number(key: str, value: Any) -> float | None:
    if is_blank(value):
        return None
    return parse_number(value, key, minimum=0)


def _coordinate(key: str, value: Any) -> float | None:
    if is_blank(value):
        return None
    return parse_number(value, key)


def _flag(key: str, value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be true or false")
    return value


def _status(key: str, value: Any) -> str:
    if value not in JOB_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(JOB_STATUSES)}")
    return value


def _urgency(key: str, value: Any) -> str:
    if is_blank(value):
        return "medium"
    if value not in URGENCY_RANK:
        raise ValidationError(f"Invalid urgency. Must be one of: {', '.join(URGENCY_RANK)}")
    return value


def _timestamp(key: str, value: Any) -> str:
    if isinstance(value, datetime):
        return format_ts(value)
    try:
        return format_ts(_datetime_adapter.validate_python(value))
    except PydanticValidationError:
        raise ValidationError(f"{key} must be an ISO 8601 date-time") from None


FIELD_CLEANERS: dict[str, Callable[[str, Any], Any]] = {
    "title": _required_text,
    "description": _required_text,
    "category": _category,
    "contact_name": _optional_text,
    "contact_email": _email,
    "contact_phone": _optional_text,
    "address": _optional_text,
    "city": _optional_text,
    "state": _optional_text,
    "zipcode": _required_text,
    "latitude": _coordinate,
    "longitude": _coordinate,
    "skills_needed": _skills,
    "time_commitment": _optional_text,
    "duration_hours": _optional_number,
    "volunteers_needed": _capacity,
    "age_requirement": _optional_text,
    "background_check_required": _flag,
    "training_provided": _flag,
    "start_date": _nullable_text,
    "end_date": _nullable_text,
    "flexible_schedule": _flag,
    "preferred_times": _optional_text,
    "status": _status,
    "urgency": _urgency,
    "remote_possible": _flag,
    "transportation_provided": _flag,
    "meal_provided": _flag,
    "stipend_amount": _optional_number,
    "expires_at": _timestamp,
}


def clean_job_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Clean every allow-listed key present in ``data``; other keys are dropped."""
    cleaned = {}
    for key in UPDATABLE_FIELDS:
        if key in data:
            cleaned[key] = FIELD_CLEANERS[key](key, data[key])
    return cleaned


def parse_id(raw: str, label: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID") from None
    if value < 1:
        raise ValidationError(f"Invalid {label} ID")
    return value


def get_job_or_404(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def can_manage(job: Job, user: CurrentUser | None) -> bool:
    return user is not None and (user.is_admin or job.posted_by == user.id)


def ensure_can_manage(job: Job, user: CurrentUser, action: str) -> None:
    if not can_manage(job, user):
        logger.info("User %s refused %s on job %s", user.username, action, job.id)
        raise AuthorizationError(f"You can only {action} jobs you posted")


def count_applications(db: Session, job_id: int, status: str) -> int:
    return db.query(func.count(JobApplication.id)).filter(
        JobApplication.job_id == job_id, JobApplication.status == status
    ).scalar()


def fetch_job_detail(db: Session, job_id: int) -> dict | None:
    filled = accepted_count()
    stmt = (
        select(
            Job,
            JobZip.city.label("zip_city"),
            JobZip.state.label("zip_state"),
            computed_latitude().label("computed_latitude"),
            computed_longitude().label("computed_longitude"),
            User.username.label("posted_by_username"),
            filled.label("filled_positions"),
        )
        .select_from(Job)
        .outerjoin(JobZip, JobZip.zipcode == Job.zipcode)
        .outerjoin(User, User.id == Job.posted_by)
        .where(Job.id == job_id)
    )
    row = db.execute(stmt).first()
    if row is None:
        return None

    job: Job = row.Job
    filled_positions = int(row.filled_positions or 0)
    detail = job_columns(job)
    detail.update(
        zip_city=row.zip_city,
        zip_state=row.zip_state,
        computed_latitude=row.computed_latitude,
        computed_longitude=row.computed_longitude,
        posted_by_username=row.posted_by_username,
        filled_positions=filled_positions,
        pending_applications=count_applications(db, job.id, "pending"),
        positions_remaining=job.volunteers_needed - filled_positions,
    )
    return detail


def recent_applications(db: Session, job_id: int, limit: int) -> list[JobApplication]:
    return (
        db.query(JobApplication)
        .filter(JobApplication.job_id == job_id)
        .order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
        .limit(limit)
        .all()
    )
