from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from volunteer_hub.config import settings
from volunteer_hub.database import get_db
from volunteer_hub.dependencies import require_admin
from volunteer_hub.errors import persistence_errors
from volunteer_hub.schemas.volunteer import (
    VolunteerRegistrationList,
    VolunteerSignup,
    VolunteerSignupResponse,
    VolunteerSummary,
)
from volunteer_hub.services.session_service import CurrentUser
from volunteer_hub.services.volunteer_service import list_registrations, nearby_opportunities, register_volunteer
from volunteer_hub.utils.validation import clean_str

router = APIRouter(prefix="/volunteer-signup", tags=["volunteer-signup"])


@router.post("", response_model=VolunteerSignupResponse, status_code=201)
async def sign_up(req: VolunteerSignup, db: Session = Depends(get_db)):
    with persistence_errors(db, "process registration"):
        volunteer = register_volunteer(db, req.model_dump())
    opportunities = nearby_opportunities(db, volunteer)
    return {
        "volunteer": {
            "id": volunteer.id,
            "username": volunteer.username,
            "name": f"{volunteer.first_name} {volunteer.last_name}",
            "email": volunteer.email,
        },
        "nearby_opportunities": opportunities,
        "message": (
            f"Registration successful! Your volunteer ID is: {volunteer.username}. Thank you for volunteering!"
        ),
    }


@router.get("", response_model=VolunteerRegistrationList)
async def list_signups(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with persistence_errors(db, "fetch volunteer registrations"):
        volunteers, pagination = list_registrations(
            db, clean_str(search), page, min(limit, settings.max_page_size)
        )
    return {
        "volunteers": [VolunteerSummary.model_validate(v) for v in volunteers],
        "pagination": pagination.to_dict(),
    }
