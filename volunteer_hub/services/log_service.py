"""Partnership and activity logs.

Total hours are never stored; they are recomputed from the embedded rows on every read.
"""
import logging
import math
from typing import Any

from sqlalchemy.orm import Session

from volunteer_hub.errors import ValidationError
from volunteer_hub.models.log import ActivityLog, PartnershipLog
from volunteer_hub.utils.dates import now_ts
from volunteer_hub.utils.validation import (
    clean_email,
    clean_str,
    parse_int,
    require_fields,
    validate_items,
)

logger = logging.getLogger(__name__)

PARTNERSHIP_REQUIRED = (
    "first_name", "last_name", "organization", "email", "phone",
    "prepared_by_first", "prepared_by_last", "position_title",
    "families_served", "events",
)
EVENT_REQUIRED = ("date", "site", "hours", "volunteers")

ACTIVITY_REQUIRED = (
    "volunteer_name", "email", "prepared_by_first", "prepared_by_last",
    "position_title", "activities",
)
ACTIVITY_ITEM_REQUIRED = ("date", "activity", "organization", "hours", "description")

INDIVIDUAL_ORGANIZATION = "Individual Volunteer"


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def partnership_total_hours(events: list[dict] | None) -> float:
    return round(sum(_as_number(e.get("hours")) * _as_number(e.get("volunteers")) for e in events or []), 2)


def activity_total_hours(activities: list[dict] | None) -> float:
    return round(sum(_as_number(a.get("hours")) for a in activities or []), 2)


def _email(value: Any) -> str:
    email = clean_email(value)
    if not email or "@" not in email:
        raise ValidationError("email must be a valid email address")
    return email


def create_partnership_log(db: Session, data: dict) -> PartnershipLog:
    require_fields(data, PARTNERSHIP_REQUIRED)
    families_served = parse_int(data["families_served"], "families_served", minimum=0)
    events = validate_items(
        data["events"], "events", EVENT_REQUIRED,
        numeric={"hours": 0}, integer={"volunteers": 1},
    )
    for event in events:
        event["hours"] = float(event["hours"])
        event["volunteers"] = int(float(event["volunteers"]))
        event["zip"] = clean_str(event.get("zip"), default="")

    now = now_ts()
    log = PartnershipLog(
        first_name=clean_str(data["first_name"]),
        last_name=clean_str(data["last_name"]),
        organization=clean_str(data["organization"]),
        email=_email(data["email"]),
        phone=clean_str(data["phone"]),
        families_served=families_served,
        events=events,
        prepared_by_first=clean_str(data["prepared_by_first"]),
        prepared_by_last=clean_str(data["prepared_by_last"]),
        position_title=clean_str(data["position_title"]),
        created_at=now,
        updated_at=now,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info("Partnership log %s recorded for %s", log.id, log.organization)
    return log


def create_activity_log(db: Session, data: dict) -> ActivityLog:
    require_fields(data, ACTIVITY_REQUIRED)
    activities = validate_items(
        data["activities"], "activities", ACTIVITY_ITEM_REQUIRED, numeric={"hours": 0},
    )
    for activity in activities:
        activity["hours"] = float(activity["hours"])
        activity["location"] = clean_str(activity.get("location"), default="")

    now = now_ts()
    log = ActivityLog(
        volunteer_name=clean_str(data["volunteer_name"]),
        email=_email(data["email"]),
        phone=clean_str(data.get("phone")),
        student_id=clean_str(data.get("student_id")),
        activities=activities,
        prepared_by_first=clean_str(data["prepared_by_first"]),
        prepared_by_last=clean_str(data["prepared_by_last"]),
        position_title=clean_str(data["position_title"]),
        created_at=now,
        updated_at=now,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info("Activity log %s recorded for %s", log.id, log.volunteer_name)
    return log


def _columns(log) -> dict:
    return {column.key: getattr(log, column.key) for column in type(log).__table__.columns}


def partnership_log_dict(log: PartnershipLog) -> dict:
    data = _columns(log)
    data["events"] = log.events or []
    data["total_hours"] = partnership_total_hours(log.events)
    return data


def activity_log_dict(log: ActivityLog) -> dict:
    data = _columns(log)
    data["activities"] = log.activities or []
    data["total_hours"] = activity_total_hours(log.activities)
    return data


def volunteer_rows(
    db: Session,
    name: str | None = None,
    organization: str | None = None,
    from_date: str | None = None,
    to_date: str | None = None,
) -> list[dict]:
    """One row per log, newest first, with recomputed hours and an impact metric."""
    partnership_q = db.query(PartnershipLog)
    activity_q = db.query(ActivityLog)
    if from_date:
        partnership_q = partnership_q.filter(PartnershipLog.created_at >= from_date)
        activity_q = activity_q.filter(ActivityLog.created_at >= from_date)
    if to_date:
        # Date-only bounds include the whole day
        bound = f"{to_date}T23:59:59Z" if len(to_date) == 10 else to_date
        partnership_q = partnership_q.filter(PartnershipLog.created_at <= bound)
        activity_q = activity_q.filter(ActivityLog.created_at <= bound)
    if name:
        partnership_q = partnership_q.filter(
            (PartnershipLog.first_name + " " + PartnershipLog.last_name).icontains(name, autoescape=True)
        )
        activity_q = activity_q.filter(ActivityLog.volunteer_name.icontains(name, autoescape=True))
    if organization:
        partnership_q = partnership_q.filter(
            PartnershipLog.organization.icontains(organization, autoescape=True)
        )
        if organization.lower() not in INDIVIDUAL_ORGANIZATION.lower():
            activity_q = None

    rows = [
        {
            "id": log.id,
            "name": f"{log.first_name} {log.last_name}",
            "email": log.email,
            "organization": log.organization,
            "total_hours": partnership_total_hours(log.events),
            "log_type": "partnership",
            "impact_metric": log.families_served,
            "created_at": log.created_at,
        }
        for log in partnership_q.all()
    ]
    if activity_q is not None:
        rows += [
            {
                "id": log.id,
                "name": log.volunteer_name,
                "email": log.email,
                "organization": INDIVIDUAL_ORGANIZATION,
                "total_hours": activity_total_hours(log.activities),
                "log_type": "activity",
                "impact_metric": len(log.activities or []),
                "created_at": log.created_at,
            }
            for log in activity_q.all()
        ]
    rows.sort(key=lambda r: (r["created_at"], r["id"]), reverse=True)
    return rows


def volunteer_stats(rows: list[dict]) -> dict:
    return {
        "total_volunteers": len({r["email"] for r in rows}),
        "total_organizations": len({r["organization"] for r in rows if r["log_type"] == "partnership"}),
        "total_hours": round(sum(r["total_hours"] for r in rows), 2),
    }
