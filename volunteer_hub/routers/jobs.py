import logging

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.database import get_db
from volunteer_hub.dependencies import get_current_user, require_user
from volunteer_hub.errors import AuthorizationError, PersistenceError, ValidationError, persistence_errors
from volunteer_hub.models.job import Job
from volunteer_hub.schemas.job import (
    JobCreate,
    JobCreateResponse,
    JobCreated,
    JobDetailResponse,
    JobListResponse,
    JobUpdateResponse,
    MessageResponse,
)
from volunteer_hub.services.categories import get_category_display_label
from volunteer_hub.services.job_service import (
    REQUIRED_FIELDS,
    clean_job_fields,
    count_applications,
    ensure_can_manage,
    fetch_job_detail,
    get_job_or_404,
    parse_id,
    recent_applications,
)
from volunteer_hub.services.listing_query import JobListingFilters, fetch_job_listing
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.dates import now_ts, ts_in
from volunteer_hub.utils.validation import clean_str, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobListResponse)
async def list_jobs(
    category: str | None = None,
    zipcode: str | None = None,
    distance: float | None = Query(None, gt=0),
    skills: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    db: Session = Depends(get_db),
):
    filters = JobListingFilters(
        category=clean_str(category),
        zipcode=clean_str(zipcode),
        distance=distance or settings.default_distance_miles,
        skills=clean_str(skills),
        search=clean_str(search),
        page=page,
        limit=min(limit, settings.max_page_size),
    )
    try:
        items, pagination = fetch_job_listing(db, filters)
    except SQLAlchemyError as exc:
        logger.exception("Job listing query failed")
        raise PersistenceError("Failed to fetch jobs", details=str(getattr(exc, "orig", None) or exc)) from exc
    return {"jobs": items, "pagination": pagination.to_dict()}


@router.post("", response_model=JobCreateResponse, status_code=201)
async def create_job(
    req: JobCreate,
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    data = req.model_dump()
    require_fields(data, REQUIRED_FIELDS)
    if data["expires_at"] is None:
        del data["expires_at"]
    fields = clean_job_fields(data)
    if "expires_at" not in fields:
        fields["expires_at"] = ts_in(days=settings.job_ttl_days)

    now = now_ts()
    job = Job(**fields, status="active", posted_by=user.id, created_at=now, updated_at=now)
    with persistence_errors(db, "create job"):
        db.add(job)
        db.commit()
        db.refresh(job)
    logger.info("Job %s posted by %s", job.id, user.username)

    return JobCreateResponse(job=JobCreated(id=job.id, title=job.title, created_at=job.created_at))


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(
    job_id: str,
    user: CurrentUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job_pk = parse_id(job_id, "job")
    with persistence_errors(db, "fetch job"):
        detail = fetch_job_detail(db, job_pk)
        if detail is None:
            get_job_or_404(db, job_pk)

        owner_view = user is not None and (user.is_admin or detail["posted_by"] == user.id)
        if detail["status"] != "active" and not owner_view:
            raise AuthorizationError("Job not available")

        detail["category_label"] = get_category_display_label(detail["category"])
        detail["can_edit"] = owner_view
        if owner_view:
            detail["applications"] = [
                {
                    "id": a.id,
                    "volunteer_name": a.volunteer_name,
                    "email": a.email,
                    "phone": a.phone,
                    "status": a.status,
                    "message": a.message,
                    "applied_at": a.applied_at,
                }
                for a in recent_applications(db, job_pk, settings.recent_applications_limit)
            ]
    return detail


@router.put("/{job_id}", response_model=JobUpdateResponse)
async def update_job(
    job_id: str,
    body: dict = Body(...),
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, parse_id(job_id, "job"))
    ensure_can_manage(job, user, "edit")

    fields = clean_job_fields(body)
    if not fields:
        raise ValidationError("No valid fields to update")

    with persistence_errors(db, "update job"):
        for key, value in fields.items():
            setattr(job, key, value)
        job.updated_at = now_ts()
        db.commit()
        db.refresh(job)
    logger.info("Job %s updated by %s (%s)", job.id, user.username, ", ".join(sorted(fields)))

    return JobUpdateResponse(id=job.id, updated_at=job.updated_at)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, parse_id(job_id, "job"))
    ensure_can_manage(job, user, "delete")

    if count_applications(db, job.id, "accepted") > 0:
        raise ValidationError(
            'Cannot delete job with accepted applications. Change status to "filled" instead.'
        )

    title = job.title
    with persistence_errors(db, "delete job"):
        db.delete(job)
        db.commit()
    logger.info("Job %s deleted by %s", job_id, user.username)

    return MessageResponse(message=f'Job "{title}" deleted successfully')
