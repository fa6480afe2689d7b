from volunteer_hub.services.pdf_service import generate_activity_log_pdf, generate_partnership_log_pdf
from volunteer_hub.services.print_service import render_activity_log_html, render_partnership_log_html

PARTNERSHIP_LOG = {
    "first_name": "Dana",
    "last_name": "O'Neil & Co",
    "organization": "Harbor <Food> Bank",
    "email": "dana@harborfood.org",
    "phone": "757-555-0110",
    "families_served": 12,
    "events": [
        {"date": "2026-03-01", "site": "Pantry \"A\"", "zip": "23510", "hours": 2, "volunteers": 3},
    ],
    "prepared_by_first": "Chris",
    "prepared_by_last": "Moss",
    "position_title": "Site Lead",
    "created_at": "2026-03-02T10:00:00Z",
}

ACTIVITY_LOG = {
    "volunteer_name": "Zoë Ångström",
    "email": "zoe@example.edu",
    "student_id": None,
    "activities": [
        {"date": "2026-03-02", "activity": "Tutoring", "organization": "Library", "location": "",
         "hours": 1.25, "description": "A very long description " * 10},
    ],
    "prepared_by_first": "Chris",
    "prepared_by_last": "Moss",
    "position_title": "Coordinator",
    "created_at": "2026-03-03T10:00:00Z",
}


class TestHtml:
    def test_partnership_html_is_escaped(self):
        html = render_partnership_log_html(PARTNERSHIP_LOG)
        assert html.startswith("<!DOCTYPE html>")
        assert "Harbor &lt;Food&gt; Bank" in html
        assert "O&#x27;Neil &amp; Co" in html
        assert "Pantry &quot;A&quot;" in html
        assert "Total hours: 6" in html

    def test_activity_html(self):
        html = render_activity_log_html(ACTIVITY_LOG)
        assert "Zoë Ångström" in html
        assert "Total hours: 1.25" in html
        assert "None" not in html


class TestPdf:
    def test_partnership_pdf(self):
        assert generate_partnership_log_pdf(PARTNERSHIP_LOG).startswith(b"%PDF")

    def test_activity_pdf_handles_non_latin_text(self):
        assert generate_activity_log_pdf({**ACTIVITY_LOG, "volunteer_name": "志愿者"}).startswith(b"%PDF")
