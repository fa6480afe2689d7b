from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response
from sqlalchemy import func
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import require_user
from volunteer_hub.errors import NotFoundError, persistence_errors
from volunteer_hub.models.log import ActivityLog, PartnershipLog
from volunteer_hub.schemas.log import (
    ActivityLogCreate,
    ActivityLogList,
    LogCreateResponse,
    PartnershipLogCreate,
    PartnershipLogList,
)
from volunteer_hub.services.job_service import parse_id
from volunteer_hub.services.log_service import (
    activity_log_dict,
    create_activity_log,
    create_partnership_log,
    partnership_log_dict,
)
from volunteer_hub.services.pdf_service import generate_activity_log_pdf, generate_partnership_log_pdf
from volunteer_hub.services.print_service import render_activity_log_html, render_partnership_log_html
from volunteer_hub.services.session_service import CurrentUser

router = APIRouter(tags=["logs"])


def _page(db: Session, model, limit: int, offset: int) -> tuple[list, dict]:
    total = db.query(func.count(model.id)).scalar()
    rows = db.query(model).order_by(model.created_at.desc(), model.id.desc()).offset(offset).limit(limit).all()
    return rows, {"total": total, "limit": limit, "offset": offset, "hasMore": offset + len(rows) < total}


def _get_log(db: Session, model, raw_id: str):
    log = db.query(model).filter(model.id == parse_id(raw_id, "log")).first()
    if not log:
        raise NotFoundError("Log not found")
    return log


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("/partnership-logs", response_model=LogCreateResponse, status_code=201)
async def submit_partnership_log(req: PartnershipLogCreate, db: Session = Depends(get_db)):
    with persistence_errors(db, "save partnership log"):
        log = create_partnership_log(db, req.model_dump())
    data = partnership_log_dict(log)
    return LogCreateResponse(
        id=log.id, total_hours=data["total_hours"], message="Partnership log submitted successfully"
    )


@router.get("/partnership-logs", response_model=PartnershipLogList)
async def list_partnership_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    with persistence_errors(db, "fetch partnership logs"):
        rows, pagination = _page(db, PartnershipLog, limit, offset)
    return {"logs": [partnership_log_dict(r) for r in rows], "pagination": pagination}


@router.get("/partnership-logs/{log_id}/print", response_class=HTMLResponse)
async def print_partnership_log(
    log_id: str, user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)
):
    with persistence_errors(db, "fetch partnership log"):
        log = _get_log(db, PartnershipLog, log_id)
    return HTMLResponse(render_partnership_log_html(partnership_log_dict(log)))


@router.get("/partnership-logs/{log_id}/pdf")
async def partnership_log_pdf(
    log_id: str, user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)
):
    with persistence_errors(db, "fetch partnership log"):
        log = _get_log(db, PartnershipLog, log_id)
    return _pdf_response(generate_partnership_log_pdf(partnership_log_dict(log)), f"partnership-log-{log.id}.pdf")


@router.post("/activity-logs", response_model=LogCreateResponse, status_code=201)
async def submit_activity_log(req: ActivityLogCreate, db: Session = Depends(get_db)):
    with persistence_errors(db, "save activity log"):
        log = create_activity_log(db, req.model_dump())
    data = activity_log_dict(log)
    return LogCreateResponse(
        id=log.id, total_hours=data["total_hours"], message="Activity log submitted successfully"
    )


@router.get("/activity-logs", response_model=ActivityLogList)
async def list_activity_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    with persistence_errors(db, "fetch activity logs"):
        rows, pagination = _page(db, ActivityLog, limit, offset)
    return {"logs": [activity_log_dict(r) for r in rows], "pagination": pagination}


@router.get("/activity-logs/{log_id}/print", response_class=HTMLResponse)
async def print_activity_log(
    log_id: str, user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)
):
    with persistence_errors(db, "fetch activity log"):
        log = _get_log(db, ActivityLog, log_id)
    return HTMLResponse(render_activity_log_html(activity_log_dict(log)))


@router.get("/activity-logs/{log_id}/pdf")
async def activity_log_pdf(
    log_id: str, user: CurrentUser = Depends(require_user), db: Session = Depends(get_db)
):
    with persistence_errors(db, "fetch activity log"):
        log = _get_log(db, ActivityLog, log_id)
    return _pdf_response(generate_activity_log_pdf(activity_log_dict(log)), f"activity-log-{log.id}.pdf")
