from __future__ import annotations

import io
import logging
from datetime import date
from pathlib import Path
from xml.sax.saxutils import escape

import matplotlib
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    HRFlowable,
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..models.report import Report
from ..models.summary import GROUP_COLUMNS, SUMMARY_COLUMNS
from .charts import build_charts, figure_to_png
from .tables import format_records, report_stem

"""PDF export (reportlab).

Layout: a title page (title, rule, date, optional "Prepared by"), then the
Overall Summary and Group Summary tables, then the charts. Pages are A4
landscape so that all fifteen summary columns fit side by side. Table cells
are the formatted summary records, column order unchanged.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "export_pdf",
    "pdf_filename",
]

HEADER_BLUE = colors.Color(0 / 255, 102 / 255, 204 / 255)
TITLE_NAVY = colors.Color(0 / 255, 51 / 255, 102 / 255)
COVER_BACKGROUND = colors.Color(240 / 255, 248 / 255, 255 / 255)
ROW_SHADE = colors.Color(245 / 255, 245 / 255, 245 / 255)
PAGE_SIZE = landscape(A4)
MARGIN = 24

# Summary headers contain ≥ and –, which the base-14 fonts cannot draw;
# matplotlib ships DejaVu, which can.
_FONT = "Helvetica"
_FONT_BOLD = "Helvetica-Bold"


def _register_fonts() -> tuple[str, str]:
    global _FONT, _FONT_BOLD
    if _FONT == "DejaVuSans":
        return _FONT, _FONT_BOLD
    ttf_dir = Path(matplotlib.get_data_path()) / "fonts" / "ttf"
    regular = ttf_dir / "DejaVuSans.ttf"
    bold = ttf_dir / "DejaVuSans-Bold.ttf"
    if regular.exists() and bold.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans", str(regular)))
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(bold)))
        _FONT, _FONT_BOLD = "DejaVuSans", "DejaVuSans-Bold"
    else:  # pragma: no cover
        logger.warning("DejaVu fonts not found under %s; symbols may not render", ttf_dir)
    return _FONT, _FONT_BOLD


def _styles(font: str, bold: str) -> dict[str, ParagraphStyle]:
    ss = getSampleStyleSheet()
    return {
        "cover_title": ParagraphStyle(
            "CoverTitle", parent=ss["Title"], fontName=bold,
            fontSize=28, leading=34, textColor=TITLE_NAVY, alignment=TA_CENTER,
        ),
        "cover_line": ParagraphStyle(
            "CoverLine", parent=ss["Normal"], fontName=font,
            fontSize=14, leading=20, textColor=colors.Color(80 / 255, 80 / 255, 80 / 255),
            alignment=TA_CENTER,
        ),
        "heading": ParagraphStyle(
            "SectionHeading", parent=ss["Heading2"], fontName=bold,
            fontSize=18, leading=22, textColor=TITLE_NAVY, alignment=TA_CENTER,
            spaceAfter=10,
        ),
        "th": ParagraphStyle(
            "TableHeader", parent=ss["Normal"], fontName=bold,
            fontSize=7, leading=9, textColor=colors.white, alignment=TA_CENTER,
        ),
        "td": ParagraphStyle(
            "TableCell", parent=ss["Normal"], fontName=font,
            fontSize=8, leading=10, alignment=TA_CENTER,
        ),
    }


def _cover_background(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFillColor(COVER_BACKGROUND)
    canvas.rect(0, 0, PAGE_SIZE[0], PAGE_SIZE[1], stroke=0, fill=1)
    canvas.restoreState()


def _footer(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont(_FONT, 8)
    canvas.setFillColor(colors.grey)
    canvas.drawRightString(PAGE_SIZE[0] - MARGIN, MARGIN / 2, f"Page {doc.page}")
    canvas.restoreState()


def _summary_table(table: list[list[str]], styles: dict[str, ParagraphStyle]) -> Table:
    # Paragraph cells wrap inside the fixed column widths (long group labels)
    header = [Paragraph(escape(h), styles["th"]) for h in table[0]]
    body = [[Paragraph(escape(c), styles["td"]) for c in row] for row in table[1:]]
    data = [header, *body]
    avail = PAGE_SIZE[0] - 2 * MARGIN
    col_widths = [avail / len(header)] * len(header)
    t = Table(data, colWidths=col_widths, repeatRows=1)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cccccc")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ROW_SHADE]),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return t


def _chart_image(png: bytes, width: float) -> Image:
    iw, ih = ImageReader(io.BytesIO(png)).getSize()
    return Image(io.BytesIO(png), width=width, height=width * ih / iw)


def pdf_filename(title: str, on: date) -> str:
    return f"{report_stem(title, on)}.pdf"


def export_pdf(
    report: Report,
    output_dir: Path,
    *,
    prepared_by: str | None = None,
    charts: bool = True,
    on: date | None = None,
) -> Path:
    """Write the report PDF into output_dir and return its path."""
    on = on or date.today()
    font, bold = _register_fonts()
    st = _styles(font, bold)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / pdf_filename(report.title, on)

    story = [
        Spacer(1, PAGE_SIZE[1] / 2 - 110),
        Paragraph(escape(report.title), st["cover_title"]),
        HRFlowable(width=140, thickness=1, color=HEADER_BLUE, hAlign="CENTER", spaceBefore=4, spaceAfter=10),
        Paragraph(f"Date: {on.strftime('%d %B %Y')}", st["cover_line"]),
    ]
    if prepared_by:
        story.append(Paragraph(f"Prepared by: {escape(prepared_by)}", st["cover_line"]))
    story.append(PageBreak())

    story.append(Paragraph("Overall Summary", st["heading"]))
    story.append(_summary_table(format_records(report.overall_records(), SUMMARY_COLUMNS), st))
    story.append(Spacer(1, 24))
    story.append(Paragraph("Group Summary", st["heading"]))
    story.append(_summary_table(format_records(report.group_records(), GROUP_COLUMNS), st))

    if charts:
        for fig in build_charts(report).values():
            story.append(PageBreak())
            story.append(_chart_image(figure_to_png(fig), PAGE_SIZE[0] - 4 * MARGIN))

    doc = SimpleDocTemplate(
        str(path),
        pagesize=PAGE_SIZE,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=36,
        bottomMargin=36,
        title=report.title,
    )
    doc.build(story, onFirstPage=_cover_background, onLaterPages=_footer)
    logger.debug("pdf written %s", path)
    return path
