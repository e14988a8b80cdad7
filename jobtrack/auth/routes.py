"""Authentication routes."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database.base import get_db
from ..dependencies import get_current_user
from .models import User
from .schemas import LoginRequest, RegisterRequest, UserResponse
from .service import authenticate_user, create_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_payload(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("/register", status_code=201)
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)):
    user = create_user(db, body.email, body.password, body.name)
    if not user:
        return JSONResponse({"error": "Email already registered"}, status_code=409)
    db.commit()
    request.session["user_id"] = str(user.id)
    logger.info("User registered: %s", user.email)
    return JSONResponse({"ok": True, "user": _user_payload(user)}, status_code=201)


@router.post("/login")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, body.email, body.password)
    if not user:
        logger.info("Failed login for %s", body.email)
        return JSONResponse({"error": "Invalid credentials"}, status_code=401)
    request.session["user_id"] = str(user.id)
    return {"ok": True, "user": _user_payload(user)}


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return _user_payload(user)
