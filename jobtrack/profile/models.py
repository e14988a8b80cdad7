"""User profile model and its ordered sub-collections."""

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declared_attr, relationship

from ..database.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProfileSectionMixin:
    """Columns shared by every ordered profile section."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @declared_attr
    def user_id(cls):
        return Column(
            UUID(as_uuid=True),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    professional_summary = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="profile")

    @property
    def full_name(self) -> str:
        return " ".join(p.strip() for p in (self.first_name, self.last_name) if p and p.strip())


class WorkExperience(ProfileSectionMixin, Base):
    __tablename__ = "work_experiences"

    job_title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    start_date = Column(String(7), nullable=False)  # YYYY-MM
    end_date = Column(String(7), nullable=True)
    is_current = Column(Boolean, default=False)
    description = Column(Text, nullable=True)
    technologies = Column(Text, nullable=True)


class Education(ProfileSectionMixin, Base):
    __tablename__ = "education"

    degree = Column(String(255), nullable=False)
    field_of_study = Column(String(255), nullable=True)
    institution = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    start_date = Column(String(7), nullable=True)
    end_date = Column(String(7), nullable=True)
    gpa = Column(String(20), nullable=True)
    honors = Column(String(255), nullable=True)
    relevant_coursework = Column(Text, nullable=True)


class Skill(ProfileSectionMixin, Base):
    __tablename__ = "skills"

    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False)
    proficiency_level = Column(String(20), nullable=True)
    years_of_experience = Column(Integer, nullable=True)


class Project(ProfileSectionMixin, Base):
    __tablename__ = "projects"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    technologies = Column(Text, nullable=True)
    project_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    start_date = Column(String(7), nullable=True)
    end_date = Column(String(7), nullable=True)
    is_ongoing = Column(Boolean, default=False)


class Certification(ProfileSectionMixin, Base):
    __tablename__ = "certifications"

    name = Column(String(255), nullable=False)
    issuing_organization = Column(String(255), nullable=False)
    issue_date = Column(String(7), nullable=True)
    expiration_date = Column(String(7), nullable=True)
    credential_id = Column(String(255), nullable=True)
    credential_url = Column(String(500), nullable=True)


class Achievement(ProfileSectionMixin, Base):
    __tablename__ = "achievements"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    organization = Column(String(255), nullable=True)
    date = Column(String(7), nullable=True)
    url = Column(String(500), nullable=True)


class Reference(ProfileSectionMixin, Base):
    __tablename__ = "profile_references"

    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    relationship = Column(String(20), nullable=True)
