"""Render already-fetched report rows into Excel workbooks or paginated PDFs.

Nothing here touches the database: a :class:`ReportDocument` carries the
title, columns and row dictionaries, and the two render functions turn it
into file bytes.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"

HEADER_FILL = PatternFill(fill_type="solid", start_color="FFE0E0E0", end_color="FFE0E0E0")
HEADER_FONT = Font(bold=True)

PAGE_MARGIN = 40
LINE_HEIGHT = 14
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class Column:
    header: str
    key: str
    width: int = 15


@dataclass
class ReportDocument:
    """One report ready for rendering.

    ``pdf_block`` turns a row into the lines printed for it in the PDF; the
    first line is printed in bold as the row heading.
    """

    title: str
    filename: str
    columns: list[Column]
    rows: list[dict[str, Any]]
    pdf_block: Callable[[dict[str, Any]], list[str]]
    filter_lines: list[str] = field(default_factory=list)
    generated_on: date = field(default_factory=date.today)

    @property
    def sheet_name(self) -> str:
        # Excel caps sheet titles at 31 characters
        return self.title[:31]


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return value


def render_excel(document: ReportDocument) -> bytes:
    """Render one worksheet with a bold grey header row."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = document.sheet_name

    worksheet.append([column.header for column in document.columns])
    for index, column in enumerate(document.columns, start=1):
        header_cell = worksheet.cell(row=1, column=index)
        header_cell.font = HEADER_FONT
        header_cell.fill = HEADER_FILL
        worksheet.column_dimensions[get_column_letter(index)].width = column.width

    for row in document.rows:
        worksheet.append([_cell_value(row.get(column.key)) for column in document.columns])

    buf = BytesIO()
    workbook.save(buf)
    return buf.getvalue()


class _PdfWriter:
    """Writes lines top to bottom, starting a new page when the current one fills."""

    def __init__(self, buf: BytesIO):
        self.canvas = canvas.Canvas(buf, pagesize=A4)
        self.width, self.height = A4
        self.y = self.height - PAGE_MARGIN

    def _ensure_room(self, lines: int = 1) -> None:
        if self.y - lines * LINE_HEIGHT < PAGE_MARGIN:
            self.canvas.showPage()
            self.y = self.height - PAGE_MARGIN

    def title(self, text: str) -> None:
        self.canvas.setFont(BOLD_FONT, 18)
        self.canvas.drawCentredString(self.width / 2, self.y, text)
        self.y -= 2 * LINE_HEIGHT

    def line(self, text: str, font: str = BODY_FONT, size: int = 10) -> None:
        max_width = self.width - 2 * PAGE_MARGIN
        for chunk in simpleSplit(text, font, size, max_width) or [""]:
            self._ensure_room()
            self.canvas.setFont(font, size)
            self.canvas.drawString(PAGE_MARGIN, self.y, chunk)
            self.y -= LINE_HEIGHT

    def gap(self) -> None:
        self.y -= LINE_HEIGHT / 2

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


def render_pdf(document: ReportDocument) -> bytes:
    """Render the title, report info and one text block per row."""
    buf = BytesIO()
    writer = _PdfWriter(buf)
    writer.title(document.title)
    writer.line(f"Generated: {document.generated_on.isoformat()}", size=12)
    for filter_line in document.filter_lines:
        writer.line(filter_line, size=12)
    writer.gap()

    if not document.rows:
        writer.line("No records match the selected filters.")

    for row in document.rows:
        heading, *details = document.pdf_block(row)
        writer.line(heading, font=BOLD_FONT, size=11)
        for detail in details:
            writer.line(detail)
        writer.gap()

    writer.finish()
    return buf.getvalue()


def render(document: ReportDocument, report_format: str) -> tuple[bytes, str, str]:
    """Render in the requested format.

    Returns:
        Tuple of (file bytes, media type, download filename).
    """
    if report_format == "Excel":
        return render_excel(document), EXCEL_MEDIA_TYPE, f"{document.filename}.xlsx"
    return render_pdf(document), PDF_MEDIA_TYPE, f"{document.filename}.pdf"
