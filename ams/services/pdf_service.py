"""Renders attendance report rows into a PDF table.

Uses Platypus so long reports split across pages, with the header row
repeated on each page and the generation timestamp in every page footer.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ams.schemas.report import AttendanceReportRow

FONT_NORMAL = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TITLE_COLOR = colors.HexColor("#1E88E5")
HEADER_BACKGROUND = colors.HexColor("#E3F2FD")

REPORT_COLUMNS = [
    "Student Name",
    "Reg. No",
    "Course",
    "Total",
    "Present",
    "Absent",
    "Late",
    "Percentage",
]
# Relative widths: name and course get the most room.
COLUMN_WEIGHTS = [3, 2, 3, 1.5, 1.5, 1.5, 1.5, 2]


def report_row_cells(row: AttendanceReportRow) -> list[str]:
    return [
        row.student_name,
        row.registration_number,
        row.course_name,
        str(row.total_classes),
        str(row.present_count),
        str(row.absent_count),
        str(row.late_count),
        f"{row.attendance_percentage:.2f}%",
    ]


def render_attendance_report(
    rows: Sequence[AttendanceReportRow],
    title: str,
    generated_at: datetime | None = None,
) -> bytes:
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Title"],
        fontName=FONT_BOLD,
        fontSize=20,
        leading=24,
        textColor=TITLE_COLOR,
        alignment=0,
    )
    cell_style = ParagraphStyle("ReportCell", parent=styles["Normal"], fontName=FONT_NORMAL, fontSize=9, leading=11)

    table_data: list[list] = [REPORT_COLUMNS]
    for row in rows:
        cells = report_row_cells(row)
        # Wrap the free-text columns so long names do not overflow.
        table_data.append([
            Paragraph(escape(cells[0]), cell_style),
            cells[1],
            Paragraph(escape(cells[2]), cell_style),
            *cells[3:],
        ])

    total_weight = sum(COLUMN_WEIGHTS)
    column_widths = [doc.width * weight / total_weight for weight in COLUMN_WEIGHTS]

    table = Table(table_data, colWidths=column_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), FONT_BOLD),
        ("FONTNAME", (0, 1), (-1, -1), FONT_NORMAL),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ALIGN", (3, 0), (-1, -1), "CENTER"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))

    footer_text = f"Generated on: {generated_at:%B %d, %Y %H:%M}"

    def draw_footer(canvas, document):
        canvas.saveState()
        canvas.setFont(FONT_NORMAL, 9)
        canvas.drawCentredString(document.pagesize[0] / 2, 1.2 * cm, footer_text)
        canvas.restoreState()

    story = [Paragraph(escape(title), title_style), Spacer(1, 0.8 * cm), table]
    doc.build(story, onFirstPage=draw_footer, onLaterPages=draw_footer)

    return buffer.getvalue()


def export_filename(generated_at: datetime | None = None) -> str:
    generated_at = generated_at or datetime.now()
    return f"AttendanceReport_{generated_at:%Y%m%d_%H%M%S}.pdf"
