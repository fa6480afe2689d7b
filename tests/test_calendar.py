from datetime import date, datetime, timezone

from volunteer_hub.services.calendar_service import event_end, parse_job_date


class TestJobCalendar:
    def test_job_calendar_returns_ics(self, client, make_job):
        job = make_job(title="Shelter Intake", start_date="2026-12-05", city="Norfolk")
        r = client.get(f"/api/jobs/{job.id}/calendar")
        assert r.status_code == 200
        assert "text/calendar" in r.headers["content-type"]
        content = r.content.decode()
        assert "BEGIN:VCALENDAR" in content
        assert "BEGIN:VEVENT" in content
        assert "Volunteer: Shelter Intake" in content
        assert "20261205" in content
        assert "Norfolk" in content

    def test_job_calendar_has_two_reminders(self, client, make_job):
        job = make_job(start_date="2026-12-05")
        content = client.get(f"/api/jobs/{job.id}/calendar").content.decode()
        assert content.count("BEGIN:VALARM") == 2

    def test_job_without_start_date_returns_400(self, client, make_job):
        job = make_job()
        r = client.get(f"/api/jobs/{job.id}/calendar")
        assert r.status_code == 400
        assert r.json()["error"] == "Job has no start date set"

    def test_not_found_and_hidden(self, client, user_client, make_job):
        assert client.get("/api/jobs/9999/calendar").status_code == 404
        job = make_job(start_date="2026-12-05", status="cancelled")
        assert client.get(f"/api/jobs/{job.id}/calendar").status_code == 403
        assert user_client.get(f"/api/jobs/{job.id}/calendar").status_code == 200

    def test_open_jobs_calendar(self, client, make_job):
        make_job(title="Soon", start_date="2026-11-01")
        make_job(title="Undated")
        make_job(title="Closed", start_date="2026-11-02", status="filled")
        content = client.get("/api/calendar/jobs").content.decode()
        assert content.count("BEGIN:VEVENT") == 1
        assert "Soon" in content

    def test_open_jobs_calendar_empty(self, client):
        assert client.get("/api/calendar/jobs").status_code == 404

    def test_open_jobs_calendar_without_parsable_dates(self, client, make_job):
        make_job(title="Someday", start_date="next tuesday")
        r = client.get("/api/calendar/jobs")
        assert r.status_code == 404
        assert r.json()["error"] == "No upcoming volunteer jobs"

    def test_all_day_event_ends_next_day(self, client, make_job):
        job = make_job(start_date="2026-12-05")
        content = client.get(f"/api/jobs/{job.id}/calendar").content.decode()
        assert "DTSTART;VALUE=DATE:20261205" in content
        assert "DTEND;VALUE=DATE:20261206" in content

    def test_multi_day_event_includes_last_day(self, client, make_job):
        job = make_job(start_date="2026-12-05", end_date="2026-12-07")
        content = client.get(f"/api/jobs/{job.id}/calendar").content.decode()
        assert "DTEND;VALUE=DATE:20261208" in content


class TestEventEnd:
    def test_date_start_ignores_datetime_end(self):
        start = date(2026, 12, 5)
        assert event_end(start, datetime(2026, 12, 5, 17, 0)) == date(2026, 12, 6)

    def test_end_before_start_is_ignored(self):
        assert event_end(date(2026, 12, 5), date(2026, 12, 1)) == date(2026, 12, 6)

    def test_timed_shift(self):
        start = datetime(2026, 12, 5, 9, 0, tzinfo=timezone.utc)
        end = datetime(2026, 12, 5, 13, 0, tzinfo=timezone.utc)
        assert event_end(start, end) == end
        assert event_end(start, date(2026, 12, 6)) == start
        assert event_end(start, datetime(2026, 12, 5, 13, 0)) == start



class TestParseJobDate:
    def test_formats(self):
        assert parse_job_date("2026-12-05").isoformat() == "2026-12-05"
        assert parse_job_date("2026-12-05T09:30:00Z").hour == 9
        assert parse_job_date("next tuesday") is None
        assert parse_job_date(None) is None
