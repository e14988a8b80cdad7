"""Job application routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database.base import get_db
from ..dependencies import get_current_user
from .schemas import ApplicationCreate, ApplicationQuery, ApplicationResponse, ApplicationUpdate
from .service import (
    create_application,
    delete_application,
    get_application,
    list_applications,
    update_application,
)

router = APIRouter(prefix="/applications", tags=["applications"])

_NOT_FOUND = "Application not found"


def _dump(application) -> dict:
    return ApplicationResponse.model_validate(application).model_dump(mode="json")


@router.get("")
def list_route(
    query: Annotated[ApplicationQuery, Query()],
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [_dump(a) for a in list_applications(db, user.id, query)]


@router.post("", status_code=201)
def create_route(
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = create_application(db, user.id, body.model_dump())
    db.commit()
    db.refresh(application)
    return _dump(application)


@router.get("/{application_id}")
def get_route(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = get_application(db, user.id, application_id)
    if not application:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    return _dump(application)


@router.put("/{application_id}")
def update_route(
    application_id: str,
    body: ApplicationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    application = update_application(db, user.id, application_id, body.model_dump(exclude_unset=True))
    if not application:
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    db.refresh(application)
    return _dump(application)


@router.delete("/{application_id}")
def delete_route(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not delete_application(db, user.id, application_id):
        return JSONResponse({"error": _NOT_FOUND}, status_code=404)
    db.commit()
    return {"ok": True}
