"""Job application service: owner-scoped CRUD and per-status counts."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database.base import to_uuid
from .models import ApplicationStatus, JobApplication
from .schemas import ApplicationQuery


class ReferenceNotFound(Exception):
    """A job application or resume linked from another record is not the user's."""

    pass


def list_applications(db: Session, user_id: UUID, query: ApplicationQuery | None = None) -> list[JobApplication]:
    query = query or ApplicationQuery()
    q = db.query(JobApplication).filter(JobApplication.user_id == user_id)
    if query.status:
        q = q.filter(JobApplication.status == query.status)
    if query.company:
        q = q.filter(JobApplication.company == query.company)
    return q.order_by(JobApplication.created_at.desc()).offset(query.offset).limit(query.limit).all()


def get_application(db: Session, user_id: UUID, application_id: str | UUID) -> JobApplication | None:
    uid = to_uuid(application_id)
    if uid is None:
        return None
    return (
        db.query(JobApplication)
        .filter(JobApplication.id == uid, JobApplication.user_id == user_id)
        .first()
    )


def require_application(db: Session, user_id: UUID, application_id: str | UUID) -> JobApplication:
    application = get_application(db, user_id, application_id)
    if not application:
        raise ReferenceNotFound("Job application not found")
    return application


def create_application(db: Session, user_id: UUID, data: dict) -> JobApplication:
    application = JobApplication(user_id=user_id, **data)
    db.add(application)
    db.flush()
    return application


def update_application(db: Session, user_id: UUID, application_id: str | UUID, data: dict) -> JobApplication | None:
    application = get_application(db, user_id, application_id)
    if not application:
        return None
    for field, value in data.items():
        setattr(application, field, value)
    db.flush()
    return application


def delete_application(db: Session, user_id: UUID, application_id: str | UUID) -> bool:
    application = get_application(db, user_id, application_id)
    if not application:
        return False
    db.delete(application)
    db.flush()
    return True


def count_applications(db: Session, user_id: UUID) -> int:
    return db.query(func.count(JobApplication.id)).filter(JobApplication.user_id == user_id).scalar() or 0


def count_applications_by_status(db: Session, user_id: UUID) -> dict[str, int]:
    """Counts for every status, zero-filled."""
    counts = {status.value: 0 for status in ApplicationStatus}
    rows = (
        db.query(JobApplication.status, func.count(JobApplication.id))
        .filter(JobApplication.user_id == user_id)
        .group_by(JobApplication.status)
        .all()
    )
    for status, count in rows:
        key = status.value if isinstance(status, ApplicationStatus) else str(status)
        if key in counts:
            counts[key] = count
    return counts
