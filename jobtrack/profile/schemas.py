"""Profile request/response schemas."""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, Field

YEAR_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

SkillCategory = Literal["technical", "soft", "language", "tool", "framework", "other"]
ProficiencyLevel = Literal["beginner", "intermediate", "advanced", "expert"]
ReferenceRelationship = Literal["manager", "colleague", "client", "professor", "mentor", "other"]


def _http_url_or_empty(value: str | None) -> str | None:
    if value and not value.startswith(("http://", "https://")):
        raise ValueError("Invalid URL format")
    return value


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


YearMonth = Annotated[str, Field(pattern=YEAR_MONTH_PATTERN, description="YYYY-MM")]
OptionalUrl = Annotated[str | None, Field(max_length=500), AfterValidator(_http_url_or_empty)]
OptionalEmail = Annotated[EmailStr | None, BeforeValidator(_blank_to_none)]
DisplayOrder = Annotated[int, Field(ge=0)]


# --- User profile ---


class ProfileUpdateRequest(BaseModel):
    """Upsert body: every field is optional, only sent fields are written."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    linkedin_url: OptionalUrl = None
    github_url: OptionalUrl = None
    portfolio_url: OptionalUrl = None
    professional_summary: str | None = None


class ProfileResponse(BaseModel):
    id: int
    user_id: UUID
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    professional_summary: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class SectionResponse(BaseModel):
    """Columns every profile section row carries."""

    id: int
    user_id: UUID
    display_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


# --- Work experience ---


class WorkExperienceCreate(BaseModel):
    job_title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    start_date: YearMonth
    end_date: YearMonth | None = None
    is_current: bool = False
    description: str | None = None
    technologies: str | None = None
    display_order: DisplayOrder = 0


class WorkExperienceUpdate(BaseModel):
    job_title: str = Field(None, min_length=1, max_length=255)
    company: str = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    start_date: YearMonth = None
    end_date: YearMonth | None = None
    is_current: bool = None
    description: str | None = None
    technologies: str | None = None
    display_order: DisplayOrder = None


class WorkExperienceResponse(SectionResponse):
    job_title: str
    company: str
    location: str | None = None
    start_date: str
    end_date: str | None = None
    is_current: bool = False
    description: str | None = None
    technologies: str | None = None


# --- Education ---


class EducationCreate(BaseModel):
    degree: str = Field(..., min_length=1, max_length=255)
    field_of_study: str | None = Field(None, max_length=255)
    institution: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    gpa: str | None = Field(None, max_length=20)
    honors: str | None = Field(None, max_length=255)
    relevant_coursework: str | None = None
    display_order: DisplayOrder = 0


class EducationUpdate(BaseModel):
    degree: str = Field(None, min_length=1, max_length=255)
    field_of_study: str | None = Field(None, max_length=255)
    institution: str = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    gpa: str | None = Field(None, max_length=20)
    honors: str | None = Field(None, max_length=255)
    relevant_coursework: str | None = None
    display_order: DisplayOrder = None


class EducationResponse(SectionResponse):
    degree: str
    field_of_study: str | None = None
    institution: str
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    gpa: str | None = None
    honors: str | None = None
    relevant_coursework: str | None = None


# --- Skills ---


class SkillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: SkillCategory
    proficiency_level: ProficiencyLevel | None = None
    years_of_experience: int | None = Field(None, ge=0, le=80)
    display_order: DisplayOrder = 0


class SkillUpdate(BaseModel):
    name: str = Field(None, min_length=1, max_length=100)
    category: SkillCategory = None
    proficiency_level: ProficiencyLevel | None = None
    years_of_experience: int | None = Field(None, ge=0, le=80)
    display_order: DisplayOrder = None


class SkillResponse(SectionResponse):
    name: str
    category: str
    proficiency_level: str | None = None
    years_of_experience: int | None = None


# --- Projects ---


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    technologies: str | None = None
    project_url: OptionalUrl = None
    github_url: OptionalUrl = None
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    is_ongoing: bool = False
    display_order: DisplayOrder = 0


class ProjectUpdate(BaseModel):
    title: str = Field(None, min_length=1, max_length=255)
    description: str | None = None
    technologies: str | None = None
    project_url: OptionalUrl = None
    github_url: OptionalUrl = None
    start_date: YearMonth | None = None
    end_date: YearMonth | None = None
    is_ongoing: bool = None
    display_order: DisplayOrder = None


class ProjectResponse(SectionResponse):
    title: str
    description: str | None = None
    technologies: str | None = None
    project_url: str | None = None
    github_url: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_ongoing: bool = False


# --- Certifications ---


class CertificationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    issuing_organization: str = Field(..., min_length=1, max_length=255)
    issue_date: YearMonth | None = None
    expiration_date: YearMonth | None = None
    credential_id: str | None = Field(None, max_length=255)
    credential_url: OptionalUrl = None
    display_order: DisplayOrder = 0


class CertificationUpdate(BaseModel):
    name: str = Field(None, min_length=1, max_length=255)
    issuing_organization: str = Field(None, min_length=1, max_length=255)
    issue_date: YearMonth | None = None
    expiration_date: YearMonth | None = None
    credential_id: str | None = Field(None, max_length=255)
    credential_url: OptionalUrl = None
    display_order: DisplayOrder = None


class CertificationResponse(SectionResponse):
    name: str
    issuing_organization: str
    issue_date: str | None = None
    expiration_date: str | None = None
    credential_id: str | None = None
    credential_url: str | None = None


# --- Achievements ---


class AchievementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    organization: str | None = Field(None, max_length=255)
    date: YearMonth | None = None
    url: OptionalUrl = None
    display_order: DisplayOrder = 0


class AchievementUpdate(BaseModel):
    title: str = Field(None, min_length=1, max_length=255)
    description: str | None = None
    organization: str | None = Field(None, max_length=255)
    date: YearMonth | None = None
    url: OptionalUrl = None
    display_order: DisplayOrder = None


class AchievementResponse(SectionResponse):
    title: str
    description: str | None = None
    organization: str | None = None
    date: str | None = None
    url: str | None = None


# --- References ---


class ReferenceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    relationship: ReferenceRelationship | None = None
    display_order: DisplayOrder = 0


class ReferenceUpdate(BaseModel):
    name: str = Field(None, min_length=1, max_length=255)
    title: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    email: OptionalEmail = None
    phone: str | None = Field(None, max_length=50)
    relationship: ReferenceRelationship | None = None
    display_order: DisplayOrder = None


class ReferenceResponse(SectionResponse):
    name: str
    title: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    relationship: str | None = None


# --- Listing and ordering ---


class ProfileQuery(BaseModel):
    limit: int = Field(100, ge=1, le=100)
    offset: int = Field(0, ge=0)
    order_by: Literal["display_order", "created_at", "updated_at"] = "display_order"
    order: Literal["asc", "desc"] = "asc"
    category: str | None = Field(None, max_length=20)


class OrderItem(BaseModel):
    id: int
    display_order: int = Field(..., ge=0)


class BulkUpdateOrderRequest(BaseModel):
    items: list[OrderItem] = Field(..., min_length=1)


SECTION_RESPONSES = {
    "work_experiences": WorkExperienceResponse,
    "education": EducationResponse,
    "skills": SkillResponse,
    "projects": ProjectResponse,
    "certifications": CertificationResponse,
    "achievements": AchievementResponse,
    "references": ReferenceResponse,
}


def dump_resume_data(data: dict) -> dict:
    """Serialise the output of ``service.get_resume_data`` to plain JSON types."""
    profile = data.get("profile")
    payload = {"profile": ProfileResponse.model_validate(profile).model_dump(mode="json") if profile else None}
    for key, response_schema in SECTION_RESPONSES.items():
        payload[key] = [response_schema.model_validate(item).model_dump(mode="json") for item in data.get(key, [])]
    return payload
