from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import get_current_user, require_admin
from volunteer_hub.errors import ValidationError, persistence_errors
from volunteer_hub.models.application import APPLICATION_STATUSES, JobApplication
from volunteer_hub.models.job import Job
from volunteer_hub.schemas.application import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationCreated,
    ApplicationListResponse,
    ApplicationStatusUpdate,
    ApplicationUpdateResponse,
)
from volunteer_hub.services.application_service import submit_application, update_application_status
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.validation import clean_email, parse_int, require_fields

router = APIRouter(prefix="/job-applications", tags=["job-applications"])


def _application_to_dict(application: JobApplication, job_title: str | None, admin: bool) -> dict:
    data = {column.key: getattr(application, column.key) for column in JobApplication.__table__.columns}
    data["job_title"] = job_title
    if not admin:
        data["phone"] = None
        data["admin_notes"] = None
    return data


@router.post("", response_model=ApplicationCreateResponse, status_code=201)
async def create_application(req: ApplicationCreate, db: Session = Depends(get_db)):
    with persistence_errors(db, "submit application"):
        application = submit_application(db, req.model_dump())
    return ApplicationCreateResponse(
        application=ApplicationCreated(
            id=application.id,
            job_id=application.job_id,
            volunteer_name=application.volunteer_name,
            email=application.email,
            status=application.status,
            applied_at=application.applied_at,
        ),
        message="Application submitted successfully! The organization will contact you soon.",
    )


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    job_id: int | None = None,
    email: str | None = None,
    status: str | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: CurrentUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    admin = user is not None and user.is_admin
    email = clean_email(email)
    if not admin and job_id is None and not email:
        return {
            "applications": [],
            "pagination": {"total": 0, "limit": limit, "offset": offset, "hasMore": False},
            "message": "Provide a job_id or email to look up applications",
        }
    if status is not None and status not in APPLICATION_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")

    with persistence_errors(db, "fetch applications"):
        query = db.query(JobApplication, Job.title).join(Job, Job.id == JobApplication.job_id)
        count_query = db.query(func.count(JobApplication.id))
        if job_id is not None:
            query = query.filter(JobApplication.job_id == job_id)
            count_query = count_query.filter(JobApplication.job_id == job_id)
        if email:
            query = query.filter(JobApplication.email == email)
            count_query = count_query.filter(JobApplication.email == email)
        if status:
            query = query.filter(JobApplication.status == status)
            count_query = count_query.filter(JobApplication.status == status)

        total = count_query.scalar()
        rows = (
            query.order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    return {
        "applications": [_application_to_dict(a, title, admin) for a, title in rows],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + len(rows) < total,
        },
    }


@router.put("", response_model=ApplicationUpdateResponse)
async def update_application(
    req: ApplicationStatusUpdate,
    user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    data = req.model_dump()
    require_fields(data, ("application_id", "status"))
    application_id = parse_int(data["application_id"], "application_id", minimum=1)

    with persistence_errors(db, "update application"):
        application = update_application_status(db, application_id, req.status, req.admin_notes)
        job_title = db.query(Job.title).filter(Job.id == application.job_id).scalar()

    return ApplicationUpdateResponse(
        application=_application_to_dict(application, job_title, admin=True),
        message=f"Application {application.status}",
    )
