from typing import Literal

from pydantic import BaseModel, Field

from ..profile.schemas import SkillCategory

ResumeTemplate = Literal["professional", "modern", "minimal", "creative"]
ResumeFormat = Literal["html", "preview", "pdf"]


class ContentSelection(BaseModel):
    """Which profile sections and items go into a generated resume.

    An omitted id list means "every item of that section".
    """

    include_personal_info: bool = True
    include_summary: bool = True
    include_work_experience: bool = True
    work_experience_ids: list[int] | None = None
    include_education: bool = True
    education_ids: list[int] | None = None
    include_skills: bool = True
    skill_categories: list[SkillCategory] | None = None
    include_projects: bool = False
    project_ids: list[int] | None = None
    include_certifications: bool = False
    certification_ids: list[int] | None = None
    include_achievements: bool = False
    achievement_ids: list[int] | None = None
    include_references: bool = False
    reference_ids: list[int] | None = None


class GenerateResumeRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    template: ResumeTemplate = "professional"
    content_selection: ContentSelection = Field(default_factory=ContentSelection)


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = []


class ManualOverrides(BaseModel):
    work_experience_ids: list[int] | None = None
    education_ids: list[int] | None = None
    skill_ids: list[int] | None = None
    project_ids: list[int] | None = None
    certification_ids: list[int] | None = None
    achievement_ids: list[int] | None = None


class JobApplicationResumeRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    template: ResumeTemplate = "professional"
    use_ai_selection: bool = True
    max_work_experiences: int = Field(4, ge=1, le=10)
    max_projects: int = Field(3, ge=0, le=8)
    max_skills: int = Field(12, ge=5, le=20)
    manual_overrides: ManualOverrides | None = None


class SaveTailoredResumeRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
