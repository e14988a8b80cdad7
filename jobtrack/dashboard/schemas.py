"""Dashboard schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ActivityType = Literal["application", "resume", "cover_letter"]


class ApplicationsByStatus(BaseModel):
    applied: int = 0
    interviewing: int = 0
    offer: int = 0
    rejected: int = 0
    withdrawn: int = 0


class DashboardStats(BaseModel):
    total_applications: int = 0
    total_resumes: int = 0
    total_cover_letters: int = 0
    applications_by_status: ApplicationsByStatus = Field(default_factory=ApplicationsByStatus)


class ActivityItem(BaseModel):
    id: str
    type: ActivityType
    action: Literal["created", "updated", "deleted"] = "created"
    title: str
    description: str | None = None
    created_at: datetime


class ActivityQuery(BaseModel):
    type: ActivityType | None = None
    limit: int = Field(10, ge=1, le=50)
