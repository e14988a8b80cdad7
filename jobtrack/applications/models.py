"""Job application model and pipeline status enum."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database.base import Base


class ApplicationStatus(enum.StrEnum):
    """Pipeline status. Any status may follow any other."""

    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFER = "offer"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    company = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False)
    job_description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    job_url = Column(String(500), nullable=True)
    salary_range = Column(String(100), nullable=True)
    status = Column(
        SQLEnum(ApplicationStatus, values_callable=lambda e: [s.value for s in e]),
        default=ApplicationStatus.APPLIED,
        nullable=False,
    )
    applied_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_name = Column(String(255), nullable=True)
    recruiter_id = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    user = relationship("User", back_populates="applications")
    resumes = relationship("Resume", back_populates="job_application", cascade="all, delete-orphan")
    cover_letters = relationship("CoverLetter", back_populates="job_application", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_applications_user_created", "user_id", "created_at"),
        Index("idx_applications_user_status", "user_id", "status"),
    )
