"""Cover letter service: owner-scoped CRUD, AI generation and DOCX export."""

import io
import json
import logging
import re
from datetime import UTC, datetime
from uuid import UUID

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..applications.service import ReferenceNotFound, require_application
from ..database.base import to_uuid
from ..integrations.anthropic_client import generate_cover_letter_text
from ..profile.models import UserProfile
from ..profile.service import describe_profile, get_profile
from ..resumes.service import get_default_resume, get_resume
from .models import CoverLetter
from .schemas import CoverLetterQuery, GenerateCoverLetterRequest

logger = logging.getLogger(__name__)


def list_cover_letters(db: Session, user_id: UUID, query: CoverLetterQuery | None = None) -> list[CoverLetter]:
    query = query or CoverLetterQuery()
    q = db.query(CoverLetter).filter(CoverLetter.user_id == user_id)
    if query.is_ai_generated is not None:
        q = q.filter(CoverLetter.is_ai_generated.is_(query.is_ai_generated))
    if query.job_application_id is not None:
        q = q.filter(CoverLetter.job_application_id == query.job_application_id)
    if query.resume_id is not None:
        q = q.filter(CoverLetter.resume_id == query.resume_id)
    return q.order_by(CoverLetter.created_at.desc()).offset(query.offset).limit(query.limit).all()


def get_cover_letter(db: Session, user_id: UUID, cover_letter_id: str | UUID) -> CoverLetter | None:
    uid = to_uuid(cover_letter_id)
    if uid is None:
        return None
    return db.query(CoverLetter).filter(CoverLetter.id == uid, CoverLetter.user_id == user_id).first()


def _check_links(db: Session, user_id: UUID, data: dict) -> None:
    """Linked application and resume must both belong to ``user_id``."""
    if data.get("job_application_id") is not None:
        require_application(db, user_id, data["job_application_id"])
    if data.get("resume_id") is not None and not get_resume(db, user_id, data["resume_id"]):
        raise ReferenceNotFound("Resume not found")


def create_cover_letter(db: Session, user_id: UUID, data: dict) -> CoverLetter:
    _check_links(db, user_id, data)
    cl = CoverLetter(user_id=user_id, **data)
    db.add(cl)
    db.flush()
    return cl


def update_cover_letter(db: Session, user_id: UUID, cover_letter_id: str | UUID, data: dict) -> CoverLetter | None:
    cl = get_cover_letter(db, user_id, cover_letter_id)
    if not cl:
        return None
    _check_links(db, user_id, data)
    for field, value in data.items():
        setattr(cl, field, value)
    db.flush()
    return cl


def delete_cover_letter(db: Session, user_id: UUID, cover_letter_id: str | UUID) -> bool:
    cl = get_cover_letter(db, user_id, cover_letter_id)
    if not cl:
        return False
    db.delete(cl)
    db.flush()
    return True


def count_cover_letters(db: Session, user_id: UUID) -> int:
    return db.query(func.count(CoverLetter.id)).filter(CoverLetter.user_id == user_id).scalar() or 0


def _resume_text(content) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content, indent=2, ensure_ascii=False)


def generate_cover_letter(db: Session, user_id: UUID, request: GenerateCoverLetterRequest) -> dict:
    """Draft a cover letter from the profile, an optional application and resume.

    Nothing is persisted; the caller saves the text with create_cover_letter.
    Returns {"content", "metadata"}. Raises ReferenceNotFound for a missing
    application or resume, and lets AI errors propagate.
    """
    company, position = request.company, request.position
    job_description = request.job_description or ""

    if request.job_application_id is not None:
        application = require_application(db, user_id, request.job_application_id)
        company = company or application.company
        position = position or application.position
        job_description = job_description or application.job_description or ""

    resume_text = _resume_text(request.resume_content)
    if request.resume_id is not None:
        resume = get_resume(db, user_id, request.resume_id)
        if not resume:
            raise ReferenceNotFound("Resume not found")
        resume_text = resume_text or resume.content
    elif not resume_text:
        default = get_default_resume(db, user_id)
        if default:
            resume_text = default.content

    profile = get_profile(db, user_id)
    applicant_name = request.applicant_name or (profile.full_name if profile else "")
    background = "\n".join(describe_profile(profile))
    if resume_text:
        background = f"{background}\n\nResume:\n{resume_text}".strip()

    result = generate_cover_letter_text(
        company=company,
        position=position,
        job_description=job_description,
        background=background,
        applicant_name=applicant_name,
    )
    logger.info(
        "Cover letter generated for user %s (%s @ %s, tokens=%s)",
        user_id,
        position,
        company,
        result["tokens"]["total"],
    )

    return {
        "content": result["cover_letter"],
        "metadata": {
            "company": company,
            "position": position,
            "applicant_name": applicant_name,
            "job_application_id": str(request.job_application_id) if request.job_application_id else None,
            "resume_id": str(request.resume_id) if request.resume_id else None,
            "model_used": result["model_used"],
            "tokens": result["tokens"],
            "cost_usd": result["cost_usd"],
        },
    }


def build_docx(cover_letter: CoverLetter, profile: UserProfile | None) -> tuple[io.BytesIO, str]:
    """Render a cover letter as a formatted DOCX.

    Returns an in-memory buffer ready to be sent as a response, and a filename.
    """
    doc = Document()

    for section in doc.sections:
        section.top_margin = Cm(2.5)
        section.bottom_margin = Cm(2.5)
        section.left_margin = Cm(2.5)
        section.right_margin = Cm(2.5)

    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)
    pf = style.paragraph_format
    pf.space_before = Pt(0)
    pf.space_after = Pt(6)
    pf.line_spacing = 1.15

    # -- Header: name and contact details (right-aligned) --
    if profile is not None:
        contact = " | ".join(p for p in (profile.email, profile.phone) if p)
        if profile.full_name or contact:
            header_para = doc.add_paragraph()
            header_para.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            if profile.full_name:
                name_run = header_para.add_run(profile.full_name + ("\n" if contact else ""))
                name_run.bold = True
                name_run.font.size = Pt(13)
            if contact:
                contact_run = header_para.add_run(contact)
                contact_run.font.size = Pt(9)

    date_para = doc.add_paragraph()
    date_run = date_para.add_run(datetime.now(UTC).strftime("%B %d, %Y"))
    date_run.font.size = Pt(10)

    doc.add_paragraph()

    # -- Body: blank lines separate paragraphs --
    content = (cover_letter.content or "").replace("\\n", "\n")
    for para_text in re.split(r"\n{2,}", content.strip()):
        cleaned = para_text.strip().replace("\n", " ")
        if not cleaned:
            continue
        p = doc.add_paragraph(cleaned)
        p.paragraph_format.space_after = Pt(8)

    company = ""
    if cover_letter.job_application is not None:
        company = (cover_letter.job_application.company or "").strip()
    label = company or (cover_letter.title or "").strip()
    if label:
        safe_label = re.sub(r'[<>:"/\\|?*]', "", label)
        safe_label = re.sub(r"\s+", "_", safe_label)
        filename = f"Cover_Letter_{safe_label}.docx"
    else:
        filename = "Cover_Letter.docx"

    buf = io.BytesIO()
    doc.save(buf)
    buf.seek(0)
    return buf, filename
