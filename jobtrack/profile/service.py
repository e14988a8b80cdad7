"""Profile service: personal info upsert and owner-scoped CRUD for every section.

Sections share one set of functions parameterised by the ORM model, since
they differ only in their columns. Every query filters on ``user_id``.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from .models import (
    Achievement,
    Certification,
    Education,
    Project,
    Reference,
    Skill,
    UserProfile,
    WorkExperience,
)
from .schemas import OrderItem, ProfileQuery

logger = logging.getLogger(__name__)

SECTION_MODELS = {
    "work_experiences": WorkExperience,
    "education": Education,
    "skills": Skill,
    "projects": Project,
    "certifications": Certification,
    "achievements": Achievement,
    "references": Reference,
}


# --- User profile ---


def get_profile(db: Session, user_id: UUID) -> UserProfile | None:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()


def upsert_profile(db: Session, user_id: UUID, data: dict) -> tuple[UserProfile, bool]:
    """Create the profile on first save, otherwise update the given fields.

    Returns (profile, created).
    """
    profile = get_profile(db, user_id)
    created = profile is None
    if created:
        profile = UserProfile(user_id=user_id)
        db.add(profile)
    for field, value in data.items():
        setattr(profile, field, value)
    db.flush()
    if created:
        logger.info("Profile created for user %s", user_id)
    return profile, created


# --- Sections ---


def list_items(db: Session, model, user_id: UUID, query: ProfileQuery | None = None) -> list:
    query = query or ProfileQuery()
    column = getattr(model, query.order_by)
    ordering = column.desc() if query.order == "desc" else column.asc()

    q = db.query(model).filter(model.user_id == user_id)
    if query.category and model is Skill:
        q = q.filter(Skill.category == query.category)
    return q.order_by(ordering, model.id.asc()).offset(query.offset).limit(query.limit).all()


def get_item(db: Session, model, user_id: UUID, item_id: int):
    return db.query(model).filter(model.id == item_id, model.user_id == user_id).first()


def create_item(db: Session, model, user_id: UUID, data: dict):
    item = model(user_id=user_id, **data)
    db.add(item)
    db.flush()
    return item


def update_item(db: Session, model, user_id: UUID, item_id: int, data: dict):
    item = get_item(db, model, user_id, item_id)
    if not item:
        return None
    for field, value in data.items():
        setattr(item, field, value)
    db.flush()
    return item


def delete_item(db: Session, model, user_id: UUID, item_id: int) -> bool:
    item = get_item(db, model, user_id, item_id)
    if not item:
        return False
    db.delete(item)
    db.flush()
    return True


def reorder_items(db: Session, model, user_id: UUID, items: list[OrderItem]) -> int:
    """Apply display_order values in bulk. Ids the user does not own are skipped.

    Returns the number of rows updated.
    """
    wanted = {item.id: item.display_order for item in items}
    rows = db.query(model).filter(model.user_id == user_id, model.id.in_(list(wanted))).all()
    for row in rows:
        row.display_order = wanted[row.id]
    db.flush()
    return len(rows)


def get_resume_data(db: Session, user_id: UUID) -> dict:
    """Everything a resume can be built from, each section in display order."""
    data = {"profile": get_profile(db, user_id)}
    for key, model in SECTION_MODELS.items():
        data[key] = (
            db.query(model)
            .filter(model.user_id == user_id)
            .order_by(model.display_order.asc(), model.id.asc())
            .all()
        )
    return data


def describe_profile(profile: UserProfile | None) -> list[str]:
    """Short "Label: value" lines about the user, for AI prompts."""
    if profile is None:
        return []
    lines = []
    if profile.full_name:
        lines.append(f"Name: {profile.full_name}")
    if profile.professional_summary:
        lines.append(f"Professional summary: {profile.professional_summary}")
    location = ", ".join(p.strip() for p in (profile.city, profile.country) if p and p.strip())
    if location:
        lines.append(f"Location: {location}")
    return lines
