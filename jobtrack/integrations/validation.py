"""Coercion models for parsed model output.

Each AI operation gets a pydantic model that tolerates loose output:
missing keys fall back to defaults and strings, numbers and lists are
coerced to the declared types.
Emptiness checks (a cover letter with no text) are left to the caller,
which decides whether that is a generation failure.
"""

import logging

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


def _coerce_str_list(v: object) -> list[str]:
    if isinstance(v, str):
        return [s.strip() for s in v.split(",") if s.strip()]
    if isinstance(v, list):
        return [str(s).strip() for s in v if s is not None and str(s).strip()]
    return []


def _coerce_id_list(v: object) -> list[int]:
    """Accept ints, numeric strings and {"id": ...} dicts; drop anything else."""
    if not isinstance(v, list):
        return []
    ids = []
    for item in v:
        if isinstance(item, dict):
            item = item.get("id")
        try:
            ids.append(int(str(item).strip()))
        except (ValueError, TypeError):
            continue
    return ids


# ── Cover letter response ─────────────────────────────────────────────


class CoverLetterAIResponse(BaseModel):
    """Body text of a generated cover letter."""

    cover_letter: str = ""

    @field_validator("cover_letter", mode="before")
    @classmethod
    def coerce_cover_letter(cls, v: object) -> str:
        return str(v).strip() if v else ""


# ── Job analysis response ─────────────────────────────────────────────


class JobAnalysisAIResponse(BaseModel):
    """Structured reading of a job description."""

    requirements: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    seniority: str = "mid"
    industry: str = ""
    summary: str = ""

    @field_validator("requirements", "skills", "keywords", mode="before")
    @classmethod
    def coerce_lists(cls, v: object) -> list[str]:
        return _coerce_str_list(v)

    @field_validator("seniority", mode="before")
    @classmethod
    def normalize_seniority(cls, v: object) -> str:
        allowed = {"entry", "mid", "senior", "executive"}
        s = str(v).lower().strip()
        return s if s in allowed else "mid"

    @field_validator("industry", "summary", mode="before")
    @classmethod
    def coerce_string(cls, v: object) -> str:
        return str(v) if v else ""


# ── Content selection response ───────────────────────────────────────


class RelevanceScore(BaseModel):
    id: int = 0
    type: str = "work"
    score: int = 0
    reasoning: str = ""
    matched_keywords: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> int:
        try:
            return int(str(v).strip())
        except (ValueError, TypeError):
            return 0

    @field_validator("reasoning", mode="before")
    @classmethod
    def coerce_reasoning(cls, v: object) -> str:
        return str(v) if v else ""

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v: object) -> int:
        """Ensure score is an int 0-100, handling strings and floats."""
        try:
            val = int(float(str(v)))
            return max(0, min(100, val))
        except (ValueError, TypeError):
            return 0

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: object) -> str:
        allowed = {"work", "education", "skill", "project", "certification", "achievement"}
        s = str(v).lower().strip()
        return s if s in allowed else "work"

    @field_validator("matched_keywords", mode="before")
    @classmethod
    def coerce_keywords(cls, v: object) -> list[str]:
        return _coerce_str_list(v)


class ContentSelectionAIResponse(BaseModel):
    """Profile items picked for a job, by id per section."""

    selected_work_experiences: list[int] = Field(default_factory=list)
    selected_education: list[int] = Field(default_factory=list)
    selected_skills: list[int] = Field(default_factory=list)
    selected_projects: list[int] = Field(default_factory=list)
    selected_certifications: list[int] = Field(default_factory=list)
    selected_achievements: list[int] = Field(default_factory=list)
    relevance_scores: list[RelevanceScore] = Field(default_factory=list)
    overall_strategy: str = ""
    key_matching_points: list[str] = Field(default_factory=list)

    @field_validator(
        "selected_work_experiences",
        "selected_education",
        "selected_skills",
        "selected_projects",
        "selected_certifications",
        "selected_achievements",
        mode="before",
    )
    @classmethod
    def coerce_ids(cls, v: object) -> list[int]:
        return _coerce_id_list(v)

    @field_validator("relevance_scores", mode="before")
    @classmethod
    def coerce_scores(cls, v: object) -> list:
        if isinstance(v, list):
            return [item for item in v if isinstance(item, dict)]
        return []

    @field_validator("key_matching_points", mode="before")
    @classmethod
    def coerce_points(cls, v: object) -> list[str]:
        return _coerce_str_list(v)

    @field_validator("overall_strategy", mode="before")
    @classmethod
    def coerce_strategy(cls, v: object) -> str:
        return str(v) if v else ""


# ── Conversation starter response ─────────────────────────────────────


class ConversationStarterAIResponse(BaseModel):
    """LinkedIn opener from AI."""

    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v: object) -> str:
        return str(v).strip() if v else ""


# ── Resume import response ────────────────────────────────────────────


def _coerce_dict_list(v: object) -> list[dict]:
    if isinstance(v, dict):
        v = [v]
    if isinstance(v, list):
        return [item for item in v if isinstance(item, dict)]
    return []


class ResumeImportAIResponse(BaseModel):
    """Raw profile sections read from a resume. Field-level cleanup happens in profile.resume_import."""

    profile: dict = Field(default_factory=dict)
    work_experiences: list[dict] = Field(default_factory=list)
    education: list[dict] = Field(default_factory=list)
    skills: list[dict] = Field(default_factory=list)
    projects: list[dict] = Field(default_factory=list)
    certifications: list[dict] = Field(default_factory=list)
    achievements: list[dict] = Field(default_factory=list)
    references: list[dict] = Field(default_factory=list)

    @field_validator("profile", mode="before")
    @classmethod
    def coerce_profile(cls, v: object) -> dict:
        return v if isinstance(v, dict) else {}

    @field_validator(
        "work_experiences",
        "education",
        "skills",
        "projects",
        "certifications",
        "achievements",
        "references",
        mode="before",
    )
    @classmethod
    def coerce_sections(cls, v: object) -> list[dict]:
        return _coerce_dict_list(v)


# ── Validation entry points ───────────────────────────────────────────


def validate_cover_letter(raw: dict) -> dict:
    """Coerce a cover letter response. Never raises."""
    try:
        return CoverLetterAIResponse.model_validate(raw).model_dump()
    except ValidationError:
        logger.exception("Cover letter validation failed, using raw dict")
        return {"cover_letter": str(raw.get("cover_letter") or "")}


def validate_job_analysis(raw: dict) -> dict:
    """Validate and coerce a job analysis response. Never raises."""
    try:
        return JobAnalysisAIResponse.model_validate(raw).model_dump()
    except ValidationError:
        logger.exception("Job analysis validation failed, using defaults")
        return JobAnalysisAIResponse().model_dump()


def validate_content_selection(raw: dict) -> dict:
    """Validate and coerce a content selection response. Never raises."""
    try:
        return ContentSelectionAIResponse.model_validate(raw).model_dump()
    except ValidationError:
        logger.exception("Content selection validation failed, using empty selection")
        return ContentSelectionAIResponse().model_dump()


def validate_conversation_starter(raw: dict) -> dict:
    """Validate and coerce a conversation starter response."""
    try:
        return ConversationStarterAIResponse.model_validate(raw).model_dump()
    except ValidationError:
        logger.exception("Conversation starter validation failed, using raw dict")
        return {"message": str(raw.get("message") or "")}


def validate_resume_import(raw: dict) -> dict:
    """Coerce a resume import response into a profile dict and section lists. Never raises."""
    try:
        return ResumeImportAIResponse.model_validate(raw).model_dump()
    except ValidationError:
        logger.exception("Resume import validation failed, using empty profile")
        return ResumeImportAIResponse().model_dump()
