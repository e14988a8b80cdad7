"""Resume HTML rendering and HTML-to-PDF conversion."""

import io
import logging
import re
from pathlib import Path

from fastapi.templating import Jinja2Templates
from xhtml2pdf import pisa

from .schemas import ContentSelection

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

# Every template name renders with this layout for now
_LAYOUT = "resume_professional.html"

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

PREVIEW_CSS = """
        body { background: #f5f5f5; padding: 20px; }
        .resume-container {
          background: white;
          margin: 20px auto;
          border: 1px solid #ddd;
          box-shadow: 0 0 10px rgba(0, 0, 0, 0.1);
        }
"""


class PDFRenderError(Exception):
    """xhtml2pdf could not convert the resume HTML."""

    pass


def format_month(value: str | None) -> str:
    """'2023-04' -> 'Apr 2023'. Anything unparseable is returned unchanged."""
    if not value:
        return ""
    match = re.match(r"^(\d{4})-(\d{2})$", value)
    if not match or not 1 <= int(match.group(2)) <= 12:
        return value
    return f"{_MONTHS[int(match.group(2)) - 1]} {match.group(1)}"


def date_range(start: str | None, end: str | None, current: bool = False) -> str:
    start_text = format_month(start)
    end_text = "Present" if current else format_month(end)
    if start_text and end_text:
        return f"{start_text} - {end_text}"
    return start_text or end_text


def _split_lines(value: str | None) -> list[str]:
    """Description text as bullet lines, leading bullet characters removed."""
    if not value:
        return []
    lines = (re.sub(r"^\s*[-*•]\s*", "", line).strip() for line in value.splitlines())
    return [line for line in lines if line]


templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))
templates.env.filters["month"] = format_month
templates.env.filters["lines"] = _split_lines
templates.env.globals["date_range"] = date_range


def group_skills(skills: list[dict]) -> list[tuple[str, list[str]]]:
    """Skill names grouped by category, categories in first-seen order."""
    groups: dict[str, list[str]] = {}
    for skill in skills:
        groups.setdefault(skill["category"], []).append(skill["name"])
    return [(category.capitalize(), names) for category, names in groups.items()]


def render_resume_html(data: dict, selection: ContentSelection, title: str, template: str = "professional") -> str:
    """Render already-filtered profile data as a standalone HTML document."""
    profile = data.get("profile") or {}
    location = ", ".join(p for p in (profile.get("city"), profile.get("state")) if p)
    logger.debug("Rendering resume %r with %s layout", title, template)
    return templates.get_template(_LAYOUT).render(
        title=title,
        profile=profile,
        location=location,
        show_header=selection.include_personal_info and bool(profile),
        show_summary=selection.include_summary and bool(profile.get("professional_summary")),
        work_experiences=data.get("work_experiences", []),
        education=data.get("education", []),
        skill_groups=group_skills(data.get("skills", [])),
        projects=data.get("projects", []),
        certifications=data.get("certifications", []),
        achievements=data.get("achievements", []),
        references=data.get("references", []),
    )


def preview_html(html: str) -> str:
    """Add on-screen page styling to rendered resume HTML."""
    return html.replace("</style>", PREVIEW_CSS + "</style>", 1)


def html_to_pdf(html: str) -> bytes:
    buf = io.BytesIO()
    status = pisa.CreatePDF(src=html, dest=buf, encoding="utf-8")
    if status.err:
        logger.error("PDF conversion failed with %d error(s)", status.err)
        raise PDFRenderError("Failed to generate resume PDF")
    return buf.getvalue()


def pdf_filename(*parts: str) -> str:
    """Non-alphanumeric characters replaced by underscores, parts joined with '_'."""
    stem = "_".join(re.sub(r"[^a-zA-Z0-9]", "_", p) for p in parts if p)
    return f"{stem or 'resume'}.pdf"
