from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape

from pydantic import BaseModel, Field
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    ListFlowable,
    ListItem,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from models.project import Project
from services.status_machine import progress, status_label


class Slide(BaseModel):
    id: str
    title: str
    heading: str
    body: list[str] = Field(default_factory=list)
    bullets: bool = False
    progress: float | None = None


def build_slides(project: Project) -> list[Slide]:
    return [
        Slide(id="title", title=project.title, heading=project.title, body=[project.description]),
        Slide(
            id="hypothesis",
            title="Hypothesis",
            heading="Research Hypothesis",
            body=[project.hypothesis or "No hypothesis recorded"],
        ),
        Slide(
            id="materials",
            title="Materials",
            heading="Required Materials",
            body=list(project.materials),
            bullets=True,
        ),
        Slide(
            id="observations",
            title="Observations",
            heading="Lab Notes",
            body=list(project.observation_notes),
        ),
        Slide(
            id="progress",
            title="Project Progress",
            heading="Current Progress",
            body=[f"Project Status: {status_label(project.status)}"],
            progress=progress(project.status),
        ),
    ]


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "cover": ParagraphStyle(
            "SlideCover",
            parent=base["Title"],
            fontSize=36,
            leading=42,
            alignment=TA_CENTER,
            spaceAfter=24,
        ),
        "subtitle": ParagraphStyle(
            "SlideSubtitle",
            parent=base["Normal"],
            fontSize=18,
            leading=24,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#555555"),
        ),
        "heading": ParagraphStyle(
            "SlideHeading",
            parent=base["Heading1"],
            fontSize=26,
            leading=32,
            spaceAfter=18,
        ),
        "body": ParagraphStyle(
            "SlideBody",
            parent=base["Normal"],
            fontSize=16,
            leading=22,
            spaceAfter=10,
        ),
    }


def _progress_bar(percent: float, width: float) -> Table:
    filled = max(0.0, min(100.0, percent)) / 100 * width
    cells = [["", ""]] if filled < width else [[""]]
    col_widths = [filled, width - filled] if filled < width else [width]
    bar = Table(cells, colWidths=col_widths, rowHeights=[0.3 * inch])
    commands = [("BACKGROUND", (0, 0), (0, 0), colors.HexColor("#2563eb"))]
    if filled < width:
        commands.append(("BACKGROUND", (1, 0), (1, 0), colors.HexColor("#e5e7eb")))
    bar.setStyle(TableStyle(commands))
    return bar


def _slide_flowables(slide: Slide, styles: dict[str, ParagraphStyle], frame_width: float) -> list:
    if slide.id == "title":
        flowables: list = [Spacer(1, 1.2 * inch), Paragraph(escape(slide.heading), styles["cover"])]
        flowables.extend(Paragraph(escape(line), styles["subtitle"]) for line in slide.body if line)
        return flowables

    flowables = [Paragraph(escape(slide.heading), styles["heading"])]
    if slide.progress is not None:
        flowables.append(_progress_bar(slide.progress, frame_width))
        flowables.append(Spacer(1, 0.3 * inch))

    if slide.bullets and slide.body:
        flowables.append(
            ListFlowable(
                [ListItem(Paragraph(escape(line), styles["body"])) for line in slide.body],
                bulletType="bullet",
            )
        )
    else:
        flowables.extend(Paragraph(escape(line), styles["body"]) for line in slide.body)
    return flowables


def render_presentation_pdf(project: Project) -> bytes:
    """Render the project's slides to a landscape PDF, one page per slide."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(letter),
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=project.title,
    )
    styles = _styles()
    story: list = []
    slides = build_slides(project)
    for idx, slide in enumerate(slides):
        story.extend(_slide_flowables(slide, styles, doc.width))
        if idx < len(slides) - 1:
            story.append(PageBreak())
    doc.build(story)
    return buffer.getvalue()
