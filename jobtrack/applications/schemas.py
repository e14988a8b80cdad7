"""Job application request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ..profile.schemas import OptionalEmail, OptionalUrl
from .models import ApplicationStatus


class ApplicationCreate(BaseModel):
    company: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    job_description: str | None = None
    location: str | None = Field(None, max_length=255)
    job_url: OptionalUrl = None
    salary_range: str | None = Field(None, max_length=100)
    status: ApplicationStatus = ApplicationStatus.APPLIED
    applied_at: datetime | None = None
    notes: str | None = None
    contact_email: OptionalEmail = None
    contact_name: str | None = Field(None, max_length=255)
    recruiter_id: str | None = Field(None, max_length=255)


class ApplicationUpdate(BaseModel):
    company: str = Field(None, min_length=1, max_length=255)
    position: str = Field(None, min_length=1, max_length=255)
    job_description: str | None = None
    location: str | None = Field(None, max_length=255)
    job_url: OptionalUrl = None
    salary_range: str | None = Field(None, max_length=100)
    status: ApplicationStatus = None
    applied_at: datetime | None = None
    notes: str | None = None
    contact_email: OptionalEmail = None
    contact_name: str | None = Field(None, max_length=255)
    recruiter_id: str | None = Field(None, max_length=255)


class ApplicationResponse(BaseModel):
    id: UUID
    user_id: UUID
    company: str
    position: str
    job_description: str | None = None
    location: str | None = None
    job_url: str | None = None
    salary_range: str | None = None
    status: ApplicationStatus
    applied_at: datetime | None = None
    notes: str | None = None
    contact_email: str | None = None
    contact_name: str | None = None
    recruiter_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ApplicationQuery(BaseModel):
    status: ApplicationStatus | None = None
    company: str | None = Field(None, max_length=255)
    limit: int = Field(100, ge=1, le=100)
    offset: int = Field(0, ge=0)
