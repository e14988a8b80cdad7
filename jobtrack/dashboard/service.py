"""Dashboard aggregation: counts and a merged recent-activity feed.

Activity is derived from creation timestamps only, so status changes and
edits never show up in the feed. Each source table contributes at most
``limit`` rows before the merge, so up to 3 * limit items are held in memory.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from ..applications.models import JobApplication
from ..applications.service import count_applications, count_applications_by_status
from ..cover_letters.models import CoverLetter
from ..cover_letters.service import count_cover_letters
from ..resumes.models import Resume
from ..resumes.service import count_resumes
from .schemas import ActivityItem, ActivityQuery, ApplicationsByStatus, DashboardStats


def get_stats(db: Session, user_id: UUID) -> DashboardStats:
    return DashboardStats(
        total_applications=count_applications(db, user_id),
        total_resumes=count_resumes(db, user_id),
        total_cover_letters=count_cover_letters(db, user_id),
        applications_by_status=ApplicationsByStatus(**count_applications_by_status(db, user_id)),
    )


def _aware(value: datetime | None) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC so they sort with aware ones
    if value is None:
        return datetime.min.replace(tzinfo=UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _recent(db: Session, model, user_id: UUID, limit: int) -> list:
    return (
        db.query(model)
        .filter(model.user_id == user_id)
        .order_by(model.created_at.desc())
        .limit(limit)
        .all()
    )


def _application_item(app: JobApplication) -> ActivityItem:
    return ActivityItem(
        id=str(app.id),
        type="application",
        title=f"{app.position} at {app.company}",
        description=f"Applied for {app.position} position",
        created_at=_aware(app.created_at),
    )


def _resume_item(resume: Resume) -> ActivityItem:
    return ActivityItem(
        id=str(resume.id),
        type="resume",
        title=resume.title,
        description=f"Created resume: {resume.title}",
        created_at=_aware(resume.created_at),
    )


def _cover_letter_item(cl: CoverLetter) -> ActivityItem:
    verb = "Generated AI cover letter" if cl.is_ai_generated else "Created cover letter"
    return ActivityItem(
        id=str(cl.id),
        type="cover_letter",
        title=cl.title,
        description=f"{verb}: {cl.title}",
        created_at=_aware(cl.created_at),
    )


_SOURCES = {
    "application": (JobApplication, _application_item),
    "resume": (Resume, _resume_item),
    "cover_letter": (CoverLetter, _cover_letter_item),
}


def get_activity(db: Session, user_id: UUID, query: ActivityQuery | None = None) -> list[ActivityItem]:
    """Newest-first creation events across the user's collections, truncated to ``limit``."""
    query = query or ActivityQuery()
    types = [query.type] if query.type else list(_SOURCES)

    items: list[ActivityItem] = []
    for activity_type in types:
        model, to_item = _SOURCES[activity_type]
        items.extend(to_item(row) for row in _recent(db, model, user_id, query.limit))

    items.sort(key=lambda item: item.created_at, reverse=True)
    return items[: query.limit]
