"""Resume generation: validation, content selection and tailoring.

Everything here works on the serialised profile data produced by
``profile.schemas.dump_resume_data``; only the tailored-resume save touches
the database.
"""

import json
import logging
from uuid import UUID

from sqlalchemy.orm import Session

from ..applications.models import JobApplication
from ..integrations.anthropic_client import (
    AIGenerationError,
    analyze_job_description,
    select_resume_content,
)
from ..integrations.cache import CacheService
from ..resumes.models import Resume
from ..resumes.service import create_resume, get_tailored_resume_by_application
from .schemas import ContentSelection, JobApplicationResumeRequest, ManualOverrides

logger = logging.getLogger(__name__)

# (data key, include flag, id list) for sections filtered by id
_ID_SECTIONS = [
    ("work_experiences", "include_work_experience", "work_experience_ids"),
    ("education", "include_education", "education_ids"),
    ("projects", "include_projects", "project_ids"),
    ("certifications", "include_certifications", "certification_ids"),
    ("achievements", "include_achievements", "achievement_ids"),
    ("references", "include_references", "reference_ids"),
]

# data key -> field of the AI selection response
_AI_FIELDS = {
    "work_experiences": "selected_work_experiences",
    "education": "selected_education",
    "skills": "selected_skills",
    "projects": "selected_projects",
    "certifications": "selected_certifications",
    "achievements": "selected_achievements",
}

# data key -> ManualOverrides field
_OVERRIDE_FIELDS = {
    "work_experiences": "work_experience_ids",
    "education": "education_ids",
    "skills": "skill_ids",
    "projects": "project_ids",
    "certifications": "certification_ids",
    "achievements": "achievement_ids",
}


def _pick(items: list[dict], ids) -> list[dict]:
    """Items whose id is in ``ids``, kept in display order."""
    wanted = set(ids)
    return [item for item in items if item["id"] in wanted]


def _missing_ids(items: list[dict], ids) -> list[int]:
    known = {item["id"] for item in items}
    return [i for i in ids if i not in known]


def validate_generation(data: dict, selection: ContentSelection) -> list[str]:
    """Problems that would make the requested resume empty or wrong. Empty list means valid."""
    errors = []

    if selection.include_personal_info and not data.get("profile"):
        errors.append("Personal information is required but no profile exists")

    if selection.include_work_experience:
        work = data.get("work_experiences", [])
        if not work:
            errors.append("Work experience is included but none has been added")
        elif selection.work_experience_ids:
            missing = _missing_ids(work, selection.work_experience_ids)
            if missing:
                errors.append(f"Work experience IDs not found: {', '.join(map(str, missing))}")

    if selection.include_education:
        education = data.get("education", [])
        if not education:
            errors.append("Education is included but none has been added")
        elif selection.education_ids:
            missing = _missing_ids(education, selection.education_ids)
            if missing:
                errors.append(f"Education IDs not found: {', '.join(map(str, missing))}")

    if selection.include_skills and not data.get("skills"):
        errors.append("Skills are included but none have been added")

    return errors


def filter_resume_data(data: dict, selection: ContentSelection) -> dict:
    """Reduce the profile data to what the content selection asks for."""
    filtered = {"profile": data.get("profile")}
    for key, flag, ids_field in _ID_SECTIONS:
        items = data.get(key, [])
        if not getattr(selection, flag):
            filtered[key] = []
            continue
        ids = getattr(selection, ids_field)
        filtered[key] = _pick(items, ids) if ids is not None else list(items)

    skills = data.get("skills", []) if selection.include_skills else []
    if selection.skill_categories:
        categories = set(selection.skill_categories)
        skills = [s for s in skills if s["category"] in categories]
    filtered["skills"] = list(skills)
    return filtered


def selection_from_data(selected: dict) -> ContentSelection:
    """A content selection that renders exactly the given items."""
    profile = selected.get("profile")
    return ContentSelection(
        include_personal_info=profile is not None,
        include_summary=bool(profile and profile.get("professional_summary")),
        include_work_experience=bool(selected["work_experiences"]),
        work_experience_ids=[i["id"] for i in selected["work_experiences"]],
        include_education=bool(selected["education"]),
        education_ids=[i["id"] for i in selected["education"]],
        include_skills=bool(selected["skills"]),
        include_projects=bool(selected["projects"]),
        project_ids=[i["id"] for i in selected["projects"]],
        include_certifications=bool(selected["certifications"]),
        certification_ids=[i["id"] for i in selected["certifications"]],
        include_achievements=bool(selected["achievements"]),
        achievement_ids=[i["id"] for i in selected["achievements"]],
        include_references=bool(selected.get("references")),
        reference_ids=[i["id"] for i in selected.get("references", [])],
    )


# --- Tailoring for a job application ---


def fallback_selection(data: dict, request: JobApplicationResumeRequest) -> dict:
    """The most recent items of each section, used when AI selection fails."""

    def recent(items: list[dict], limit: int) -> list[int]:
        ordered = sorted(items, key=lambda i: i.get("start_date") or "", reverse=True)
        return [i["id"] for i in ordered[:limit]]

    return {
        "selected_work_experiences": recent(data["work_experiences"], request.max_work_experiences),
        "selected_education": [i["id"] for i in data["education"]],
        "selected_skills": [i["id"] for i in data["skills"][: request.max_skills]],
        "selected_projects": recent(data["projects"], request.max_projects),
        "selected_certifications": [i["id"] for i in data["certifications"]],
        "selected_achievements": [i["id"] for i in data["achievements"]],
        "relevance_scores": [],
        "overall_strategy": "AI selection unavailable; using the most recent items.",
        "key_matching_points": [],
        "fallback": True,
    }


def select_content_for_application(
    data: dict,
    job_description: str,
    request: JobApplicationResumeRequest,
    cache: CacheService | None = None,
) -> dict:
    """Analyse the job, then let the model choose profile items for it.

    Ids the model invents are dropped and every list is capped at the
    request's limits. A generation error falls back to the most recent items;
    a missing API key still propagates.
    """
    try:
        analysis = analyze_job_description(job_description, cache)
        raw = select_resume_content(
            job_description,
            analysis,
            data,
            max_work_experiences=request.max_work_experiences,
            max_projects=request.max_projects,
            max_skills=request.max_skills,
        )
    except AIGenerationError as exc:
        logger.warning("AI content selection failed, falling back to recent items: %s", exc)
        return fallback_selection(data, request)

    limits = {
        "work_experiences": request.max_work_experiences,
        "projects": request.max_projects,
        "skills": request.max_skills,
    }
    selection = {}
    for key, field in _AI_FIELDS.items():
        known = {item["id"] for item in data[key]}
        dropped = [i for i in raw.get(field, []) if i not in known]
        if dropped:
            logger.info("Dropping unknown %s ids from AI selection: %s", key, dropped)
        ids = [i for i in raw.get(field, []) if i in known]
        if key in limits:
            ids = ids[: limits[key]]
        selection[field] = ids

    selection.update(
        relevance_scores=raw.get("relevance_scores", []),
        overall_strategy=raw.get("overall_strategy", ""),
        key_matching_points=raw.get("key_matching_points", []),
        job_analysis={
            k: analysis.get(k) for k in ("requirements", "skills", "seniority", "industry")
        },
        model_used=raw.get("model_used"),
        tokens=raw.get("tokens"),
        cost_usd=raw.get("cost_usd"),
        fallback=False,
    )
    return selection


def apply_ai_selection(data: dict, ai_selection: dict) -> dict:
    selected = {"profile": data.get("profile"), "references": []}
    for key, field in _AI_FIELDS.items():
        selected[key] = _pick(data[key], ai_selection.get(field, []))
    return selected


def apply_manual_overrides(data: dict, selected: dict, overrides: ManualOverrides) -> dict:
    """Replace a section's items wherever the override names ids; leave the rest."""
    result = dict(selected)
    for key, field in _OVERRIDE_FIELDS.items():
        ids = getattr(overrides, field)
        if ids is not None:
            result[key] = _pick(data[key], ids)
    return result


def tailor_resume_data(
    data: dict,
    application: JobApplication,
    request: JobApplicationResumeRequest,
    cache: CacheService | None = None,
) -> tuple[dict, dict | None]:
    """Choose the profile items for a resume aimed at ``application``.

    Returns (selected data, AI selection or None). The caller checks that the
    application has a job description before asking for AI selection.
    """
    ai_selection = None
    if request.use_ai_selection:
        ai_selection = select_content_for_application(data, application.job_description, request, cache)
        selected = apply_ai_selection(data, ai_selection)
    else:
        selected = {**data, "references": []}

    if request.manual_overrides is not None:
        selected = apply_manual_overrides(data, selected, request.manual_overrides)
    return selected, ai_selection


def resume_content(title: str, template: str, selected: dict) -> str:
    """The JSON document stored in ``Resume.content`` for generated resumes."""
    return json.dumps({"title": title, "template": template, **selected}, ensure_ascii=False)


def save_tailored_resume(
    db: Session, user_id: UUID, application: JobApplication, title: str, content: str
) -> tuple[Resume, bool]:
    """Update the application's tailored resume, or create it. Returns (resume, is_new)."""
    resume = get_tailored_resume_by_application(db, user_id, application.id)
    if resume:
        resume.title = title
        resume.content = content
        db.flush()
        return resume, False

    resume = create_resume(
        db,
        user_id,
        {
            "title": title,
            "content": content,
            "is_default": False,
            "is_tailored": True,
            "job_application_id": application.id,
        },
    )
    logger.info("Tailored resume created for application %s", application.id)
    return resume, True
