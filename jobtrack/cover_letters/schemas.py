"""Cover letter request/response schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CoverLetterCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    is_ai_generated: bool = False
    job_application_id: UUID | None = None
    resume_id: UUID | None = None


class CoverLetterUpdate(BaseModel):
    title: str = Field(None, min_length=1, max_length=255)
    content: str = Field(None, min_length=1)
    is_ai_generated: bool = None
    job_application_id: UUID | None = None
    resume_id: UUID | None = None


class CoverLetterResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    content: str
    is_ai_generated: bool
    job_application_id: UUID | None = None
    resume_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CoverLetterQuery(BaseModel):
    is_ai_generated: bool | None = None
    job_application_id: UUID | None = None
    resume_id: UUID | None = None
    limit: int = Field(100, ge=1, le=100)
    offset: int = Field(0, ge=0)


class GenerateCoverLetterRequest(BaseModel):
    """Company and position may be omitted when a job application is referenced."""

    company: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=255)
    job_description: str | None = None
    resume_content: Any = None  # JSON string or already-parsed object
    applicant_name: str | None = Field(None, max_length=255)
    job_application_id: UUID | None = None
    resume_id: UUID | None = None

    @model_validator(mode="after")
    def require_target(self) -> "GenerateCoverLetterRequest":
        if self.job_application_id is None:
            if not (self.company or "").strip():
                raise ValueError("company is required unless job_application_id is given")
            if not (self.position or "").strip():
                raise ValueError("position is required unless job_application_id is given")
        return self


class GenerateCoverLetterResponse(BaseModel):
    cover_letter: str
    success: bool = True
    metadata: dict = Field(default_factory=dict)
