from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_hub.database import get_db
from volunteer_hub.dependencies import require_user
from volunteer_hub.errors import persistence_errors
from volunteer_hub.services.log_service import volunteer_rows, volunteer_stats
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.utils.validation import clean_str

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


@router.get("")
async def list_volunteers(
    name: str | None = None,
    organization: str | None = None,
    from_date: str | None = None,
    to_date: str | None = None,
    stats: bool = False,
    user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    with persistence_errors(db, "fetch volunteers"):
        rows = volunteer_rows(
            db,
            name=clean_str(name),
            organization=clean_str(organization),
            from_date=clean_str(from_date),
            to_date=clean_str(to_date),
        )
    if stats:
        return volunteer_stats(rows)
    return {"volunteers": rows, "total": len(rows)}
