"""Resume routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..applications.service import ReferenceNotFound
from ..auth.models import User
from ..database.base import get_db
from ..dependencies import get_current_user
from .schemas import ResumeCreate, ResumeQuery, ResumeResponse, ResumeUpdate
from .service import create_resume, delete_resume, get_resume, list_resumes, update_resume

router = APIRouter(prefix="/resumes", tags=["resumes"])

_NOT_FOUND = "Resume not found"


def _dump(resume) -> dict:
    return ResumeResponse.model_validate(resume).model_dump(mode="json")


@router.get("")
def list_route(
    query: Annotated[ResumeQuery, Query()],
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [_dump(r) for r in list_resumes(db, user.id, query)]


@router.post("", status_code=201)
def create_route(
    body: ResumeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        resume = create_resume(db, user.id, body.model_dump())
    except ReferenceNotFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    db.commit()
    db.refresh(resume)
    return _dump(resume)


@router.get("/{resume_id}")
def get_route(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    resume = get_resume(db, user.id, resume_id)
    if not resume:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    return _dump(resume)


@router.put("/{resume_id}")
def update_route(
    resume_id: str,
    body: ResumeUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        resume = update_resume(db, user.id, resume_id, body.model_dump(exclude_unset=True))
    except ReferenceNotFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    if not resume:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    db.refresh(resume)
    return _dump(resume)


@router.delete("/{resume_id}")
def delete_route(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not delete_resume(db, user.id, resume_id):
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    return {"ok": True}
