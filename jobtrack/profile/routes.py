"""Profile routes: personal info plus one sub-router per section."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth.models import User
from ..config import settings
from ..database.base import get_db
from ..dependencies import get_current_user
from ..rate_limit import limiter
from . import schemas
from .resume_import import ResumeImportError, import_resume
from .schemas import BulkUpdateOrderRequest, ProfileQuery, ProfileResponse, ProfileUpdateRequest
from .service import (
    SECTION_MODELS,
    create_item,
    delete_item,
    get_item,
    get_profile,
    list_items,
    reorder_items,
    update_item,
    upsert_profile,
)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
def read_profile(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    profile = get_profile(db, user.id)
    if not profile:
        return JSONResponse({"error": "Profile not found"}, status_code=404)
    return ProfileResponse.model_validate(profile).model_dump(mode="json")


@router.put("")
def save_profile(
    body: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile, created = upsert_profile(db, user.id, body.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(profile)
    payload = ProfileResponse.model_validate(profile).model_dump(mode="json")
    return JSONResponse(payload, status_code=201 if created else 200)


@router.post("/resume-import")
@limiter.limit(settings.rate_limit_generate)
def import_resume_route(
    request: Request,
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
):
    """Read profile sections out of an uploaded resume. Nothing is saved."""
    max_bytes = settings.resume_import_max_bytes
    data = file.file.read(max_bytes + 1)
    if not data:
        return JSONResponse({"error": "Uploaded file is empty. Please choose a valid resume."}, status_code=400)
    if len(data) > max_bytes:
        return JSONResponse(
            {"error": f"Resume file is too large. Please upload a file under {max_bytes // (1024 * 1024)}MB."},
            status_code=413,
        )

    try:
        return import_resume(data, file.content_type, file.filename)
    except ResumeImportError as exc:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def _section_router(
    path: str,
    key: str,
    label: str,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
) -> APIRouter:
    """Build list/create/get/update/delete/reorder endpoints for one section."""
    model = SECTION_MODELS[key]
    section = APIRouter(prefix=f"/{path}")
    not_found = f"{label} not found"

    def _dump(item) -> dict:
        return response_schema.model_validate(item).model_dump(mode="json")

    @section.get("", name=f"list_{key}")
    def list_section(
        query: Annotated[ProfileQuery, Query()],
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        return [_dump(item) for item in list_items(db, model, user.id, query)]

    @section.post("", status_code=201, name=f"create_{key}")
    def create_section_item(
        body: create_schema,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        item = create_item(db, model, user.id, body.model_dump())
        db.commit()
        db.refresh(item)
        return _dump(item)

    # Declared before /{item_id} so "order" is not parsed as an id
    @section.put("/order", name=f"reorder_{key}")
    def reorder_section(
        body: BulkUpdateOrderRequest,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        updated = reorder_items(db, model, user.id, body.items)
        db.commit()
        return {"ok": True, "updated": updated}

    @section.get("/{item_id}", name=f"get_{key}")
    def read_section_item(
        item_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        item = get_item(db, model, user.id, item_id)
        if not item:
            return JSONResponse({"error": not_found}, status_code=404)
        return _dump(item)

    @section.put("/{item_id}", name=f"update_{key}")
    def update_section_item(
        item_id: int,
        body: update_schema,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        item = update_item(db, model, user.id, item_id, body.model_dump(exclude_unset=True))
        if not item:
            return JSONResponse({"error": not_found}, status_code=404)
        db.commit()
        db.refresh(item)
        return _dump(item)

    @section.delete("/{item_id}", name=f"delete_{key}")
    def delete_section_item(
        item_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        if not delete_item(db, model, user.id, item_id):
            return JSONResponse({"error": not_found}, status_code=404)
        db.commit()
        return {"ok": True}

    return section


_SECTIONS = [
    ("work-experiences", "work_experiences", "Work experience", "WorkExperience"),
    ("education", "education", "Education", "Education"),
    ("skills", "skills", "Skill", "Skill"),
    ("projects", "projects", "Project", "Project"),
    ("certifications", "certifications", "Certification", "Certification"),
    ("achievements", "achievements", "Achievement", "Achievement"),
    ("references", "references", "Reference", "Reference"),
]

for _path, _key, _label, _name in _SECTIONS:
    router.include_router(
        _section_router(
            _path,
            _key,
            _label,
            getattr(schemas, f"{_name}Create"),
            getattr(schemas, f"{_name}Update"),
            getattr(schemas, f"{_name}Response"),
        )
    )
