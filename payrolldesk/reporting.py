"""
reporting.py — shared building blocks for PDF and Excel exports.

PDF: reportlab PLATYPUS. Every builder returns a BytesIO at position 0.
Excel: openpyxl workbooks, saved into a BytesIO at position 0.

CRITICAL: buffer.seek(0) after doc.build() / wb.save(): both libraries leave
the buffer at end-of-write, and a StreamingResponse would then send 0 bytes.
"""
from __future__ import annotations

import datetime
from io import BytesIO
from typing import Any, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from reportlab.lib.colors import Color, HexColor, black
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

# ---------------------------------------------------------------------------
# Colour constants
# ---------------------------------------------------------------------------

GREEN_HEADER = HexColor("#228B22")   # Muster roll header (34, 139, 34)
BLUE_HEADER  = HexColor("#0066CC")   # Leave register header (0, 102, 204)
GREY_LIGHT   = HexColor("#F2F2F2")   # Plain table headers / total rows
GREEN_LIGHT  = HexColor("#D5F5E3")   # Net take-home highlight

PDF_MEDIA_TYPE  = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

XLSX_HEADER_FILL = PatternFill(start_color="B4C7E7", end_color="B4C7E7", fill_type="solid")
XLSX_TOTAL_FILL  = PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid")
XLSX_BOLD        = Font(bold=True)
XLSX_TITLE       = Font(bold=True, size=14)
XLSX_BORDER      = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


def format_inr(value: float) -> str:
    """INR 12,345: whole rupees, as printed in every exported table."""
    return f"INR {value:,.0f}"


def format_period(start: datetime.date, end: datetime.date) -> str:
    return f"Period: {start.strftime('%d/%m/%Y')} to {end.strftime('%d/%m/%Y')}"


def export_filename(prefix: str, ext: str, now: datetime.datetime | None = None) -> str:
    """Test_Muster_Roll_20250101_120000.pdf style download names."""
    stamp = (now or datetime.datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{stamp}.{ext}"


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def grid_table(
    header: Sequence[str],
    rows: Iterable[Sequence[Any]],
    header_color: Color = GREY_LIGHT,
    header_text_color: Color = black,
    font_size: float = 9,
    padding: float = 3,
    col_widths: Sequence[float] | None = None,
    bold_last_row: bool = False,
) -> Table:
    """Grid-themed table with a coloured, repeated header row."""
    data = [list(header)] + [[_cell(v) for v in row] for row in rows]
    style_cmds = [
        ("BACKGROUND", (0, 0), (-1, 0), header_color),
        ("TEXTCOLOR", (0, 0), (-1, 0), header_text_color),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.5, black),
        ("TOPPADDING", (0, 0), (-1, -1), padding),
        ("BOTTOMPADDING", (0, 0), (-1, -1), padding),
    ]
    if bold_last_row and len(data) > 1:
        style_cmds.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))

    t = Table(data, colWidths=col_widths, repeatRows=1)
    t.setStyle(TableStyle(style_cmds))
    return t


def build_pdf(
    title: str,
    subtitle_lines: Sequence[str],
    flowables: Sequence[Any],
    orientation: str = "portrait",
) -> BytesIO:
    """Title block + flowables on A4. Returns buffer at position 0."""
    buffer = BytesIO()
    pagesize = landscape(A4) if orientation == "landscape" else A4
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "report_title",
        parent=styles["Heading1"],
        fontSize=14,
        fontName="Helvetica-Bold",
        alignment=1,
    )
    subtitle_style = ParagraphStyle("report_subtitle", parent=styles["Normal"], alignment=1)

    story: list[Any] = [Paragraph(title, title_style)]
    for line in subtitle_lines:
        story.append(Paragraph(line, subtitle_style))
    story.append(Spacer(1, 4 * mm))
    story.extend(flowables)

    doc.build(story)
    buffer.seek(0)  # MANDATORY: reset position before StreamingResponse reads
    return buffer


def _cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:,.0f}" if value == int(value) else f"{value:,.2f}"
    return str(value)


# ---------------------------------------------------------------------------
# Excel
# ---------------------------------------------------------------------------

def new_sheet(title: str) -> tuple[Workbook, Worksheet]:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]   # Excel sheet-name limit
    return wb, ws


def write_rows(ws: Worksheet, rows: Iterable[Sequence[Any]], start_row: int = 1) -> int:
    """Append plain rows from start_row. Returns the next free row."""
    row = start_row
    for values in rows:
        for col_idx, value in enumerate(values, start=1):
            ws.cell(row=row, column=col_idx, value=value)
        row += 1
    return row


def write_header(ws: Worksheet, header: Sequence[str], row: int) -> int:
    """Bold, filled, bordered header row. Returns the next free row."""
    for col_idx, label in enumerate(header, start=1):
        cell = ws.cell(row=row, column=col_idx, value=label)
        cell.font = XLSX_BOLD
        cell.fill = XLSX_HEADER_FILL
        cell.border = XLSX_BORDER
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    return row + 1


def style_total_row(ws: Worksheet, row: int, width: int) -> None:
    for col_idx in range(1, width + 1):
        cell = ws.cell(row=row, column=col_idx)
        cell.font = XLSX_BOLD
        cell.fill = XLSX_TOTAL_FILL


def set_column_widths(ws: Worksheet, widths: Sequence[int]) -> None:
    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def workbook_bytes(wb: Workbook) -> BytesIO:
    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer
