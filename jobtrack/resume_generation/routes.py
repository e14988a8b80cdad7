"""Resume generation routes: whole-profile resumes and per-application tailored resumes."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from sqlalchemy.orm import Session

from ..applications.service import get_application
from ..auth.models import User
from ..config import settings
from ..database.base import get_db
from ..dependencies import get_cache, get_current_user
from ..integrations.cache import CacheService
from ..profile.schemas import dump_resume_data
from ..profile.service import get_resume_data
from ..rate_limit import limiter
from ..resumes.schemas import ResumeResponse
from ..resumes.service import get_tailored_resume_by_application
from .rendering import PDFRenderError, html_to_pdf, pdf_filename, preview_html, render_resume_html
from .schemas import (
    GenerateResumeRequest,
    JobApplicationResumeRequest,
    ResumeFormat,
    SaveTailoredResumeRequest,
    ValidationResult,
)
from .service import (
    filter_resume_data,
    resume_content,
    save_tailored_resume,
    selection_from_data,
    tailor_resume_data,
    validate_generation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume-generation", tags=["resume_generation"])
application_router = APIRouter(prefix="/applications/{application_id}/resume", tags=["resume_generation"])

_APPLICATION_NOT_FOUND = "Application not found"


def _pdf_response(html: str, filename: str) -> Response:
    try:
        pdf = html_to_pdf(html)
    except PDFRenderError as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(pdf)),
        },
    )


def _render_checked(db: Session, user: User, body: GenerateResumeRequest) -> str | JSONResponse:
    """Validate the request against the profile and render it, or return the 400 response."""
    data = dump_resume_data(get_resume_data(db, user.id))
    errors = validate_generation(data, body.content_selection)
    if errors:
        return JSONResponse({"error": "Invalid request data", "details": errors}, status_code=400)
    filtered = filter_resume_data(data, body.content_selection)
    return render_resume_html(filtered, body.content_selection, body.title, body.template)


@router.get("")
def resume_data_route(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Everything a resume can be built from."""
    return dump_resume_data(get_resume_data(db, user.id))


@router.post("")
def validate_route(
    body: GenerateResumeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = dump_resume_data(get_resume_data(db, user.id))
    errors = validate_generation(data, body.content_selection)
    return ValidationResult(valid=not errors, errors=errors).model_dump()


@router.post("/preview")
def preview_route(
    body: GenerateResumeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    html = _render_checked(db, user, body)
    if isinstance(html, JSONResponse):
        return html
    return HTMLResponse(preview_html(html))


@router.post("/pdf")
def pdf_route(
    body: GenerateResumeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    html = _render_checked(db, user, body)
    if isinstance(html, JSONResponse):
        return html
    logger.info("Generating resume PDF for user %s", user.id)
    return _pdf_response(html, pdf_filename(body.title))


# --- Tailored resume for one job application ---


@application_router.get("")
def tailored_summary_route(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = get_application(db, user.id, application_id)
    if not application:
        return JSONResponse({"error": _APPLICATION_NOT_FOUND}, status_code=404)

    tailored = get_tailored_resume_by_application(db, user.id, application.id)
    return {
        "id": str(application.id),
        "company": application.company,
        "position": application.position,
        "job_description": application.job_description,
        "has_job_description": bool(application.job_description),
        "location": application.location,
        "status": application.status.value,
        "tailored_resume": (
            {
                "id": str(tailored.id),
                "title": tailored.title,
                "updated_at": tailored.updated_at.isoformat() if tailored.updated_at else None,
            }
            if tailored
            else None
        ),
    }


@application_router.post("")
@limiter.limit(settings.rate_limit_generate)
def tailored_generate_route(
    request: Request,
    application_id: str,
    body: JobApplicationResumeRequest,
    output_format: ResumeFormat = Query("html", alias="format"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    cache: CacheService = Depends(get_cache),
):
    """Select profile content for the application's job and render it."""
    application = get_application(db, user.id, application_id)
    if not application:
        return JSONResponse({"error": _APPLICATION_NOT_FOUND}, status_code=404)
    if body.use_ai_selection and not (application.job_description or "").strip():
        return JSONResponse(
            {"error": "AI selection needs a job description on the application"},
            status_code=400,
        )

    data = dump_resume_data(get_resume_data(db, user.id))
    selected, ai_selection = tailor_resume_data(data, application, body, cache)
    html = render_resume_html(selected, selection_from_data(selected), body.title, body.template)

    if output_format == "pdf":
        return _pdf_response(html, pdf_filename(body.title, application.company))

    return {
        "html": preview_html(html) if output_format == "preview" else html,
        "content": resume_content(body.title, body.template, selected),
        "ai_selection": ai_selection,
        "application": {
            "id": str(application.id),
            "company": application.company,
            "position": application.position,
        },
    }


@application_router.put("")
def tailored_save_route(
    application_id: str,
    body: SaveTailoredResumeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = get_application(db, user.id, application_id)
    if not application:
        return JSONResponse({"error": _APPLICATION_NOT_FOUND}, status_code=404)

    resume, is_new = save_tailored_resume(db, user.id, application, body.title, body.content)
    db.commit()
    db.refresh(resume)
    return {
        "ok": True,
        "resume": ResumeResponse.model_validate(resume).model_dump(mode="json"),
        "is_new": is_new,
    }
