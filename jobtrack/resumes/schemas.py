"""Resume request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ResumeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)  # JSON document, stored verbatim
    is_default: bool = False
    is_tailored: bool = False
    job_application_id: UUID | None = None


class ResumeUpdate(BaseModel):
    title: str = Field(None, min_length=1, max_length=255)
    content: str = Field(None, min_length=1)
    is_default: bool = None
    is_tailored: bool = None
    job_application_id: UUID | None = None


class ResumeResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    content: str
    is_default: bool
    is_tailored: bool
    job_application_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ResumeQuery(BaseModel):
    is_default: bool | None = None
    is_tailored: bool | None = None
    job_application_id: UUID | None = None
    limit: int = Field(100, ge=1, le=100)
    offset: int = Field(0, ge=0)
