"""Printable HTML renditions of volunteer logs. Every user-supplied value is escaped."""
from html import escape

from volunteer_hub.services.log_service import activity_total_hours, partnership_total_hours

_STYLE = """
body { font-family: Helvetica, Arial, sans-serif; margin: 2rem; color: #111; }
h1 { font-size: 1.4rem; margin-bottom: 0.25rem; }
.meta { margin: 0.75rem 0 1.25rem; }
.meta div { margin: 0.15rem 0; }
table { width: 100%; border-collapse: collapse; font-size: 0.9rem; }
th, td { border: 1px solid #999; padding: 0.35rem 0.5rem; text-align: left; vertical-align: top; }
th { background: #eee; }
.total { margin-top: 1rem; font-weight: bold; }
.signature { margin-top: 2.5rem; }
@media print { body { margin: 0.5in; } .no-print { display: none; } }
"""


def _e(value) -> str:
    return escape("" if value is None else str(value))


def _hours(value) -> str:
    return f"{value:g}"


def _document(title: str, meta: list[tuple[str, object]], headers: list[str], rows: list[list], total: float,
              prepared_by: str, position: str) -> str:
    meta_html = "\n".join(f"<div><strong>{_e(label)}:</strong> {_e(value)}</div>" for label, value in meta)
    head_html = "".join(f"<th>{_e(h)}</th>" for h in headers)
    body_html = "\n".join("<tr>" + "".join(f"<td>{_e(cell)}</td>" for cell in row) + "</tr>" for row in rows)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{_e(title)}</title>
<style>{_STYLE}</style>
</head>
<body>
<button class="no-print" onclick="window.print()">Print</button>
<h1>{_e(title)}</h1>
<div class="meta">
{meta_html}
</div>
<table>
<thead><tr>{head_html}</tr></thead>
<tbody>
{body_html}
</tbody>
</table>
<div class="total">Total hours: {_e(_hours(total))}</div>
<div class="signature">
<div><strong>Prepared by:</strong> {_e(prepared_by)}</div>
<div><strong>Position:</strong> {_e(position)}</div>
</div>
</body>
</html>
"""


def partnership_print_rows(log: dict) -> list[list]:
    return [
        [e.get("date"), e.get("site"), e.get("zip", ""), e.get("hours"), e.get("volunteers")]
        for e in log.get("events") or []
    ]


def activity_print_rows(log: dict) -> list[list]:
    return [
        [a.get("date"), a.get("activity"), a.get("organization"), a.get("location", ""),
         a.get("hours"), a.get("description")]
        for a in log.get("activities") or []
    ]


PARTNERSHIP_HEADERS = ["Date", "Site", "Zip", "Hours", "Volunteers"]
ACTIVITY_HEADERS = ["Date", "Activity", "Organization", "Location", "Hours", "Description"]


def render_partnership_log_html(log: dict) -> str:
    return _document(
        title="Partnership Volunteer Log",
        meta=[
            ("Name", f"{log.get('first_name', '')} {log.get('last_name', '')}"),
            ("Organization", log.get("organization")),
            ("Email", log.get("email")),
            ("Phone", log.get("phone")),
            ("Families served", log.get("families_served")),
            ("Submitted", log.get("created_at")),
        ],
        headers=PARTNERSHIP_HEADERS,
        rows=partnership_print_rows(log),
        total=partnership_total_hours(log.get("events")),
        prepared_by=f"{log.get('prepared_by_first', '')} {log.get('prepared_by_last', '')}",
        position=log.get("position_title"),
    )


def render_activity_log_html(log: dict) -> str:
    return _document(
        title="Volunteer Activity Log",
        meta=[
            ("Volunteer", log.get("volunteer_name")),
            ("Email", log.get("email")),
            ("Phone", log.get("phone") or ""),
            ("Student ID", log.get("student_id") or ""),
            ("Submitted", log.get("created_at")),
        ],
        headers=ACTIVITY_HEADERS,
        rows=activity_print_rows(log),
        total=activity_total_hours(log.get("activities")),
        prepared_by=f"{log.get('prepared_by_first', '')} {log.get('prepared_by_last', '')}",
        position=log.get("position_title"),
    )
