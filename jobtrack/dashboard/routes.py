"""Dashboard routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database.base import get_db
from ..dependencies import get_current_user
from .schemas import ActivityQuery
from .service import get_activity, get_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
def stats_api(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_stats(db, user.id).model_dump()


@router.get("/activity")
def activity_api(
    query: Annotated[ActivityQuery, Query()],
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [item.model_dump(mode="json") for item in get_activity(db, user.id, query)]
