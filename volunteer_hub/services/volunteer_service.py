"""Volunteer self-registration and the opportunities suggested right after signup."""
import logging
import re
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_hub.errors import ConflictError, ValidationError
from volunteer_hub.models.job import Job
from volunteer_hub.models.volunteer import VolunteerRegistration
from volunteer_hub.models.zipcode import ZipcodeCoordinate
from volunteer_hub.services.listing_query import JobZip, Pagination, computed_latitude, computed_longitude
from volunteer_hub.services.match_service import compute_match
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.validation import clean_email, clean_str, parse_number, require_fields

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "first_name", "last_name", "email", "address", "city", "state", "zipcode",
    "emergency_contact_name", "emergency_contact_phone", "emergency_contact_relationship",
)
DEFAULT_MAX_DISTANCE = 25.0
NEARBY_LIMIT = 10

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")


def base_username(first_name: str, last_name: str, birth_date: str | None = None) -> str:
    year = date.today().year
    if birth_date:
        try:
            year = date.fromisoformat(birth_date[:10]).year
        except ValueError:
            pass
    last = re.sub(r"[^a-z]", "", last_name.lower())
    return f"{first_name[:2].lower()}{last}{year}"


def unique_username(db: Session, first_name: str, last_name: str, birth_date: str | None = None) -> str:
    base = base_username(first_name, last_name, birth_date)
    taken = set(
        db.scalars(
            select(VolunteerRegistration.username).where(VolunteerRegistration.username.startswith(base, autoescape=True))
        )
    )
    username, counter = base, 0
    while username in taken:
        counter += 1
        username = f"{base}{counter}"
    return username


def _coordinates(db: Session, data: dict, zipcode: str) -> tuple[float | None, float | None]:
    lat, lon = data.get("latitude"), data.get("longitude")
    if lat not in (None, "") and lon not in (None, ""):
        return parse_number(lat, "latitude"), parse_number(lon, "longitude")
    row = db.query(ZipcodeCoordinate).filter(ZipcodeCoordinate.zipcode == zipcode[:5]).first()
    if row is None:
        return None, None
    return row.latitude, row.longitude


def register_volunteer(db: Session, data: dict) -> VolunteerRegistration:
    require_fields(data, REQUIRED_FIELDS)

    email = clean_email(data["email"])
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    zipcode = clean_str(data["zipcode"])
    if not _ZIP_RE.match(zipcode):
        raise ValidationError("Invalid zipcode format")

    existing = db.scalars(select(VolunteerRegistration).where(VolunteerRegistration.email == email)).first()
    if existing:
        raise ConflictError(
            "Email address already registered",
            existing_volunteer={"id": existing.id, "username": existing.username},
        )

    max_distance = data.get("max_distance")
    max_distance = DEFAULT_MAX_DISTANCE if max_distance in (None, "") else parse_number(max_distance, "max_distance", 0)

    first_name = clean_str(data["first_name"])
    last_name = clean_str(data["last_name"])
    birth_date = clean_str(data.get("birth_date"))
    latitude, longitude = _coordinates(db, data, zipcode)
    now = now_ts()

    volunteer = VolunteerRegistration(
        username=unique_username(db, first_name, last_name, birth_date),
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=clean_str(data.get("phone")),
        birth_date=birth_date,
        address=clean_str(data["address"]),
        city=clean_str(data["city"]),
        state=clean_str(data["state"]),
        zipcode=zipcode,
        latitude=latitude,
        longitude=longitude,
        skills=data.get("skills") or [],
        interests=data.get("interests") or [],
        categories_interested=data.get("categories_interested") or [],
        experience_level=clean_str(data.get("experience_level"), "beginner"),
        availability=data.get("availability") or {},
        max_distance=max_distance,
        transportation=clean_str(data.get("transportation"), "own"),
        emergency_contact_name=clean_str(data["emergency_contact_name"]),
        emergency_contact_phone=clean_str(data["emergency_contact_phone"]),
        emergency_contact_relationship=clean_str(data["emergency_contact_relationship"]),
        background_check_consent=bool(data.get("background_check_consent")),
        email_notifications=data.get("email_notifications") is not False,
        sms_notifications=bool(data.get("sms_notifications")),
        notes=clean_str(data.get("notes"), ""),
        status="active",
        created_at=now,
        updated_at=now,
    )
    db.add(volunteer)
    db.commit()
    db.refresh(volunteer)
    logger.info("Registered volunteer %s as %s", volunteer.id, volunteer.username)
    return volunteer


def _profile_text(volunteer: VolunteerRegistration) -> str:
    return " ".join([*volunteer.skills, *volunteer.interests, *volunteer.categories_interested])


def nearby_opportunities(db: Session, volunteer: VolunteerRegistration) -> list[dict]:
    """Open jobs within the volunteer's travel distance, nearest first.

    Lookup failures are logged and yield no suggestions; the registration itself stands.
    """
    if volunteer.latitude is None or volunteer.longitude is None:
        return []

    distance = func.calculate_distance_miles(
        computed_latitude(), computed_longitude(), volunteer.latitude, volunteer.longitude
    ).label("distance_miles")
    stmt = (
        select(Job, distance)
        .outerjoin(JobZip, JobZip.zipcode == Job.zipcode)
        .where(Job.status == "active", Job.expires_at > now_ts(), distance <= volunteer.max_distance)
        .order_by(distance.asc())
        .limit(NEARBY_LIMIT)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not look up opportunities near volunteer %s: %s", volunteer.id, exc)
        return []

    profile = _profile_text(volunteer)
    opportunities = []
    for job, miles in rows:
        match = compute_match(" ".join(filter(None, [job.title, job.description, job.skills_needed])), profile)
        opportunities.append({
            "id": job.id,
            "title": job.title,
            "category": job.category,
            "location": ", ".join(filter(None, [job.city, job.state])),
            "distance": round(miles, 1) if miles is not None else None,
            "volunteers_needed": job.volunteers_needed,
            "start_date": job.start_date,
            "end_date": job.end_date,
            "match_score": match["score"],
            "matched_keywords": match["matched"],
        })
    return opportunities


def list_registrations(
    db: Session, search: str | None, page: int, limit: int
) -> tuple[list[VolunteerRegistration], Pagination]:
    stmt = select(VolunteerRegistration).where(VolunteerRegistration.status == "active")
    if search:
        stmt = stmt.where(or_(
            VolunteerRegistration.first_name.icontains(search, autoescape=True),
            VolunteerRegistration.last_name.icontains(search, autoescape=True),
            VolunteerRegistration.email.icontains(search, autoescape=True),
            VolunteerRegistration.username.icontains(search, autoescape=True),
        ))
    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    volunteers = db.scalars(
        stmt.order_by(VolunteerRegistration.created_at.desc(), VolunteerRegistration.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).all()
    return volunteers, Pagination(page=page, limit=limit, total=total)
