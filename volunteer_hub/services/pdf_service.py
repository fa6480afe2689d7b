from fpdf import FPDF

from volunteer_hub.services.log_service import activity_total_hours, partnership_total_hours
from volunteer_hub.services.print_service import (
    ACTIVITY_HEADERS,
    PARTNERSHIP_HEADERS,
    activity_print_rows,
    partnership_print_rows,
)


def _latin1(text) -> str:
    """fpdf built-in fonts are latin-1 only; unsupported characters become '?'."""
    return str("" if text is None else text).encode("latin-1", errors="replace").decode("latin-1")


def _render(title: str, meta: list[tuple[str, object]], headers: list[str], rows: list[list],
            widths: list[int], total: float, prepared_by: str, position: str) -> bytes:
    pdf = FPDF()
    pdf.set_margins(15, 15, 15)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 16)
    pdf.multi_cell(0, 9, _latin1(title), align="L")
    pdf.ln(2)

    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(60, 60, 60)
    for label, value in meta:
        pdf.cell(0, 6, _latin1(f"{label}: {value}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)

    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "B", 9)
    pdf.set_fill_color(230, 230, 230)
    for header, width in zip(headers, widths):
        pdf.cell(width, 7, _latin1(header), border=1, fill=True)
    pdf.ln()

    pdf.set_font("Helvetica", "", 9)
    for row in rows:
        for cell, width in zip(row, widths):
            text = _latin1(cell)
            # Long cells are clipped to keep the grid on one line per row
            max_chars = max(4, width // 2)
            if len(text) > max_chars:
                text = text[: max_chars - 3] + "..."
            pdf.cell(width, 6, text, border=1)
        pdf.ln()

    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(0, 7, _latin1(f"Total hours: {total:g}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(8)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 6, _latin1(f"Prepared by: {prepared_by}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 6, _latin1(f"Position: {position}"), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())


def generate_partnership_log_pdf(log: dict) -> bytes:
    return _render(
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
        widths=[30, 70, 25, 25, 30],
        total=partnership_total_hours(log.get("events")),
        prepared_by=f"{log.get('prepared_by_first', '')} {log.get('prepared_by_last', '')}",
        position=log.get("position_title"),
    )


def generate_activity_log_pdf(log: dict) -> bytes:
    return _render(
        title="Volunteer Activity Log",
        meta=[
            ("Volunteer", log.get("volunteer_name")),
            ("Email", log.get("email")),
            ("Student ID", log.get("student_id") or ""),
            ("Submitted", log.get("created_at")),
        ],
        headers=ACTIVITY_HEADERS,
        rows=activity_print_rows(log),
        widths=[24, 34, 34, 28, 16, 44],
        total=activity_total_hours(log.get("activities")),
        prepared_by=f"{log.get('prepared_by_first', '')} {log.get('prepared_by_last', '')}",
        position=log.get("position_title"),
    )
