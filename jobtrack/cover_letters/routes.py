"""Cover letter routes."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from ..auth.models import User
from ..config import settings
from ..database.base import get_db
from ..dependencies import get_current_user
from ..profile.service import get_profile
from ..rate_limit import limiter
from .schemas import (
    CoverLetterCreate,
    CoverLetterQuery,
    CoverLetterResponse,
    CoverLetterUpdate,
    GenerateCoverLetterRequest,
    GenerateCoverLetterResponse,
)
from .service import (
    ReferenceNotFound,
    build_docx,
    create_cover_letter,
    delete_cover_letter,
    generate_cover_letter,
    get_cover_letter,
    list_cover_letters,
    update_cover_letter,
)

router = APIRouter(prefix="/cover-letters", tags=["cover_letters"])

_NOT_FOUND = "Cover letter not found"


def _dump(cl) -> dict:
    return CoverLetterResponse.model_validate(cl).model_dump(mode="json")


@router.get("")
def list_route(
    query: Annotated[CoverLetterQuery, Query()],
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [_dump(cl) for cl in list_cover_letters(db, user.id, query)]


@router.post("", status_code=201)
def create_route(
    body: CoverLetterCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        cl = create_cover_letter(db, user.id, body.model_dump())
    except ReferenceNotFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    db.commit()
    db.refresh(cl)
    return _dump(cl)


@router.post("/generate")
@limiter.limit(settings.rate_limit_generate)
def generate_route(
    request: Request,
    body: GenerateCoverLetterRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        result = generate_cover_letter(db, user.id, body)
    except ReferenceNotFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    return GenerateCoverLetterResponse(
        cover_letter=result["content"],
        metadata=result["metadata"],
    ).model_dump(mode="json")


@router.get("/{cover_letter_id}")
def get_route(
    cover_letter_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    cl = get_cover_letter(db, user.id, cover_letter_id)
    if not cl:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    return _dump(cl)


@router.put("/{cover_letter_id}")
def update_route(
    cover_letter_id: str,
    body: CoverLetterUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        cl = update_cover_letter(db, user.id, cover_letter_id, body.model_dump(exclude_unset=True))
    except ReferenceNotFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    if not cl:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    db.refresh(cl)
    return _dump(cl)


@router.delete("/{cover_letter_id}")
def delete_route(
    cover_letter_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not delete_cover_letter(db, user.id, cover_letter_id):
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    return {"ok": True}


@router.get("/{cover_letter_id}/download")
def download_route(
    cover_letter_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Download a cover letter as a formatted DOCX file."""
    cl = get_cover_letter(db, user.id, cover_letter_id)
    if not cl:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)

    buf, filename = build_docx(cl, get_profile(db, user.id))

    # RFC 5987 encoding for non-ASCII filenames
    encoded_filename = quote(filename)
    ascii_filename = filename.encode("ascii", "ignore").decode() or "Cover_Letter.docx"

    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        headers={
            "Content-Disposition": f"attachment; filename=\"{ascii_filename}\"; filename*=UTF-8''{encoded_filename}",
        },
    )
