from datetime import date, datetime, timedelta

from icalendar import Alarm, Calendar, Event

from volunteer_hub.errors import ValidationError
from volunteer_hub.models.job import Job
from volunteer_hub.services.categories import get_category_display_label

PRODID = "-//VolunteerHub//EN"


def parse_job_date(value: str | None) -> date | datetime | None:
    """Accept ``YYYY-MM-DD`` or an ISO date-time; anything else is treated as unset."""
    if not value:
        return None
    value = value.strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def new_calendar() -> Calendar:
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    return cal


def event_end(start: date | datetime, end: date | datetime | None) -> date | datetime:
    """DTEND for a shift; all-day events end exclusively on the day after their last day."""
    if isinstance(start, datetime):
        if isinstance(end, datetime) and (end.tzinfo is None) == (start.tzinfo is None) and end >= start:
            return end
        return start
    if end is None or isinstance(end, datetime) or end < start:
        end = start
    return end + timedelta(days=1)


def job_event(job: Job) -> Event:
    start = parse_job_date(job.start_date)
    if start is None:
        raise ValidationError("Job has no start date set")
    end = event_end(start, parse_job_date(job.end_date))

    event = Event()
    event.add("uid", f"job-{job.id}@volunteer-hub")
    event.add("summary", f"Volunteer: {job.title}")
    event.add("dtstart", start)
    event.add("dtend", end)

    location = ", ".join(p for p in (job.address, job.city, job.state, job.zipcode) if p)
    if location:
        event.add("location", location)

    description_parts = [job.description, f"Category: {get_category_display_label(job.category)}"]
    if job.time_commitment:
        description_parts.append(f"Time commitment: {job.time_commitment}")
    contact = " ".join(p for p in (job.contact_name, job.contact_email, job.contact_phone) if p)
    description_parts.append(f"Contact: {contact}")
    event.add("description", "\n".join(description_parts))

    # Reminders: 2 days before, morning of
    for delta in [timedelta(days=2), timedelta(hours=0)]:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", -delta)
        alarm.add("description", f"Volunteer shift reminder: {job.title}")
        event.add_component(alarm)
    return event


def generate_job_ics(job: Job) -> bytes:
    cal = new_calendar()
    cal.add_component(job_event(job))
    return cal.to_ical()


def generate_jobs_ics(jobs: list[Job]) -> bytes:
    """One calendar with an event per job; every job needs a usable start date."""
    cal = new_calendar()
    for job in jobs:
        cal.add_component(job_event(job))
    return cal.to_ical()
