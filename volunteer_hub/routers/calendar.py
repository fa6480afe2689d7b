from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import get_current_user
from volunteer_hub.errors import AuthorizationError, NotFoundError, persistence_errors
from volunteer_hub.models.job import Job
from volunteer_hub.services.calendar_service import generate_job_ics, generate_jobs_ics, parse_job_date
from volunteer_hub.services.job_service import can_manage, get_job_or_404, parse_id
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.dates import now_ts

router = APIRouter(tags=["calendar"])


@router.get("/jobs/{job_id}/calendar")
async def job_calendar(
    job_id: str,
    user: CurrentUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with persistence_errors(db, "fetch job"):
        job = get_job_or_404(db, parse_id(job_id, "job"))
    if job.status != "active" and not can_manage(job, user):
        raise AuthorizationError("Job not available")

    return Response(
        content=generate_job_ics(job),
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="volunteer_job_{job.id}.ics"'},
    )


@router.get("/calendar/jobs")
async def open_jobs_calendar(db: Session = Depends(get_db)):
    with persistence_errors(db, "fetch jobs"):
        jobs = (
            db.query(Job)
            .filter(Job.status == "active", Job.expires_at > now_ts(), Job.start_date.isnot(None))
            .order_by(Job.start_date, Job.id)
            .all()
        )
    jobs = [job for job in jobs if parse_job_date(job.start_date) is not None]
    if not jobs:
        raise NotFoundError("No upcoming volunteer jobs")

    return Response(
        content=generate_jobs_ics(jobs),
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="volunteer_jobs.ics"'},
    )
