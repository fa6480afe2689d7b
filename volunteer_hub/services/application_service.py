import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, aliased

from volunteer_hub.errors import ConflictError, NotFoundError, ValidationError
from volunteer_hub.models.application import APPLICATION_STATUSES, JobApplication
from volunteer_hub.models.job import Job
from volunteer_hub.services.job_service import count_applications
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.validation import clean_email, clean_str, parse_int, require_fields

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("job_id", "volunteer_name", "email")
OPTIONAL_FIELDS = ("phone", "message", "availability", "experience", "preferred_start_date")


def submit_application(db: Session, data: dict) -> JobApplication:
    """Re-read the job, check lifecycle, expiry and capacity, then duplicates, then insert."""
    require_fields(data, REQUIRED_FIELDS)
    job_id = parse_int(data["job_id"], "job_id", minimum=1)
    email = clean_email(data["email"])
    if "@" not in email:
        raise ValidationError("email must be a valid email address")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if job.status != "active":
        raise ValidationError("This job is no longer accepting applications")
    now = now_ts()
    if job.expires_at <= now:
        raise ValidationError("This job posting has expired")
    if count_applications(db, job.id, "accepted") >= job.volunteers_needed:
        raise ValidationError("This position is now full. No more volunteers needed.")

    existing = (
        db.query(JobApplication)
        .filter(JobApplication.job_id == job.id, JobApplication.email == email)
        .first()
    )
    if existing:
        raise ConflictError(
            "You have already applied for this position",
            existing_application_id=existing.id,
            status=existing.status,
        )

    application = JobApplication(
        job_id=job.id,
        volunteer_name=clean_str(data["volunteer_name"]),
        email=email,
        status="pending",
        applied_at=now,
        updated_at=now,
        **{key: clean_str(data.get(key)) for key in OPTIONAL_FIELDS},
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info("Application %s submitted for job %s", application.id, job.id)
    return application


def _accept_guard(application_id: int):
    """True while the job has room for one more accepted application besides this one."""
    others = aliased(JobApplication)
    target = aliased(JobApplication)
    accepted = (
        select(func.count(others.id))
        .where(
            others.job_id == select(target.job_id).where(target.id == application_id).scalar_subquery(),
            others.status == "accepted",
            others.id != application_id,
        )
        .scalar_subquery()
    )
    capacity = (
        select(Job.volunteers_needed)
        .join(target, target.job_id == Job.id)
        .where(target.id == application_id)
        .scalar_subquery()
    )
    return accepted < capacity


def update_application_status(
    db: Session, application_id: int, status: str, admin_notes: str | None = None
) -> JobApplication:
    if status not in APPLICATION_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")

    application = db.query(JobApplication).filter(JobApplication.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")

    now = now_ts()
    values = {"status": status, "responded_at": now, "updated_at": now}
    if admin_notes is not None:
        values["admin_notes"] = admin_notes

    stmt = update(JobApplication).where(JobApplication.id == application_id).values(**values)
    if status == "accepted":
        stmt = stmt.where(_accept_guard(application_id))
    result = db.execute(stmt.execution_options(synchronize_session=False))
    if result.rowcount == 0:
        db.rollback()
        raise ConflictError("Job is already at capacity")
    db.commit()
    db.refresh(application)
    logger.info("Application %s moved to %s", application_id, status)
    return application
