"""Authentication service: user management and password hashing."""

import logging

import bcrypt
from sqlalchemy.orm import Session

from ..config import settings
from .models import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, email: str, password: str, name: str = "") -> User | None:
    """Register a new user. Returns None if the email is already taken."""
    if get_user_by_email(db, email):
        return None
    user = User(email=email.lower(), password_hash=hash_password(password), name=name)
    db.add(user)
    db.flush()
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Verify credentials and return user, or None if invalid."""
    user = get_user_by_email(db, email)
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        return None
    return user


def ensure_admin_user(db: Session) -> None:
    """Create the bootstrap user from env vars if it doesn't exist yet."""
    if not settings.admin_email or not settings.admin_password:
        return

    if get_user_by_email(db, settings.admin_email):
        return

    create_user(db, settings.admin_email, settings.admin_password, name="Admin")
    logger.info("Bootstrap user created: %s", settings.admin_email)
