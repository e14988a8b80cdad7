"""Resume service: owner-scoped CRUD with a single default resume per user.

Setting ``is_default`` clears the flag on the user's other resumes first,
then writes the target row, both inside the caller's transaction.
A linked job application must belong to the same user, otherwise
ReferenceNotFound is raised and nothing is written.
"""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..applications.service import require_application
from ..database.base import to_uuid
from .models import Resume
from .schemas import ResumeQuery

logger = logging.getLogger(__name__)


def _unset_default(db: Session, user_id: UUID, exclude_id: UUID | None = None) -> None:
    q = db.query(Resume).filter(Resume.user_id == user_id, Resume.is_default.is_(True))
    if exclude_id is not None:
        q = q.filter(Resume.id != exclude_id)
    q.update({Resume.is_default: False}, synchronize_session="fetch")


def list_resumes(db: Session, user_id: UUID, query: ResumeQuery | None = None) -> list[Resume]:
    query = query or ResumeQuery()
    q = db.query(Resume).filter(Resume.user_id == user_id)
    if query.is_default is not None:
        q = q.filter(Resume.is_default.is_(query.is_default))
    if query.is_tailored is not None:
        q = q.filter(Resume.is_tailored.is_(query.is_tailored))
    if query.job_application_id is not None:
        q = q.filter(Resume.job_application_id == query.job_application_id)
    return q.order_by(Resume.updated_at.desc()).offset(query.offset).limit(query.limit).all()


def get_resume(db: Session, user_id: UUID, resume_id: str | UUID) -> Resume | None:
    uid = to_uuid(resume_id)
    if uid is None:
        return None
    return db.query(Resume).filter(Resume.id == uid, Resume.user_id == user_id).first()


def _check_links(db: Session, user_id: UUID, data: dict) -> None:
    if data.get("job_application_id") is not None:
        require_application(db, user_id, data["job_application_id"])


def create_resume(db: Session, user_id: UUID, data: dict) -> Resume:
    _check_links(db, user_id, data)
    if data.get("is_default"):
        _unset_default(db, user_id)
    resume = Resume(user_id=user_id, **data)
    db.add(resume)
    db.flush()
    return resume


def update_resume(db: Session, user_id: UUID, resume_id: str | UUID, data: dict) -> Resume | None:
    resume = get_resume(db, user_id, resume_id)
    if not resume:
        return None
    _check_links(db, user_id, data)
    if data.get("is_default"):
        _unset_default(db, user_id, exclude_id=resume.id)
    for field, value in data.items():
        setattr(resume, field, value)
    db.flush()
    return resume


def delete_resume(db: Session, user_id: UUID, resume_id: str | UUID) -> bool:
    resume = get_resume(db, user_id, resume_id)
    if not resume:
        return False
    db.delete(resume)
    db.flush()
    return True


def count_resumes(db: Session, user_id: UUID) -> int:
    return db.query(func.count(Resume.id)).filter(Resume.user_id == user_id).scalar() or 0


def get_default_resume(db: Session, user_id: UUID) -> Resume | None:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user_id, Resume.is_default.is_(True))
        .order_by(Resume.updated_at.desc())
        .first()
    )


def get_tailored_resume_by_application(db: Session, user_id: UUID, application_id: UUID) -> Resume | None:
    return (
        db.query(Resume)
        .filter(
            Resume.user_id == user_id,
            Resume.job_application_id == application_id,
            Resume.is_tailored.is_(True),
        )
        .order_by(Resume.updated_at.desc())
        .first()
    )
