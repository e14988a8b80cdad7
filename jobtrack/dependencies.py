"""Request-scoped dependencies: the session guard and the shared cache."""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .auth.models import User
from .database.base import get_db
from .integrations.cache import CacheService


class AuthRequired(Exception):
    """No usable session on the request. Rendered as 401 by the app."""

    pass


def _session_user_id(request: Request) -> UUID | None:
    raw = request.session.get("user_id")
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """The signed-in, active user. Stale or tampered sessions are cleared."""
    user_id = _session_user_id(request)
    user = db.get(User, user_id) if user_id else None
    if user is None or not user.is_active:
        request.session.clear()
        raise AuthRequired()
    return user


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache
