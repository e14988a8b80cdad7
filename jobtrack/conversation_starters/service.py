"""Conversation starters: short LinkedIn openers written from the user's profile."""

import json
import logging
import re
from uuid import UUID

from sqlalchemy.orm import Session

from ..integrations.anthropic_client import generate_conversation_starter
from ..profile.models import UserProfile
from ..profile.service import describe_profile, get_profile
from ..resumes.models import Resume
from ..resumes.service import get_default_resume
from .schemas import GenerateConversationStarterRequest

logger = logging.getLogger(__name__)

NO_DETAILS = "The sender has not provided profile or resume details."


def truncate(text: str, max_length: int = 600) -> str:
    """Cut at a word boundary and add an ellipsis when longer than ``max_length``."""
    if len(text) <= max_length:
        return text
    return re.sub(r"\s+\S*$", "", text[:max_length]) + "..."


def _parse_resume(resume: Resume | None) -> dict:
    if resume is None or not resume.content:
        return {}
    try:
        parsed = json.loads(resume.content)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _resume_highlights(content: dict) -> tuple[str, str, str]:
    """(summary, experience, skills) text from either free-form or generated resume JSON."""
    summary = content.get("summary") if isinstance(content.get("summary"), str) else ""
    experience = content.get("experience") if isinstance(content.get("experience"), str) else ""
    skills = content.get("skills") if isinstance(content.get("skills"), str) else ""

    if not experience and isinstance(content.get("work_experiences"), list):
        experience = "; ".join(
            f"{w.get('job_title')} at {w.get('company')}"
            for w in content["work_experiences"]
            if isinstance(w, dict) and w.get("job_title")
        )
    if not skills and isinstance(content.get("skills"), list):
        skills = ", ".join(s.get("name") for s in content["skills"] if isinstance(s, dict) and s.get("name"))
    if not summary and isinstance(content.get("profile"), dict):
        summary = content["profile"].get("professional_summary") or ""
    return summary, experience, skills


def build_profile_summary(profile: UserProfile | None, resume: Resume | None) -> str:
    content = _parse_resume(resume)
    summary, experience, skills = _resume_highlights(content)

    lines = describe_profile(profile)
    personal = content.get("personal_info")
    if not (profile and profile.full_name) and isinstance(personal, dict):
        name = str(personal.get("name") or "").strip()
        if name:
            lines.insert(0, f"Name: {name}")
    if not (profile and profile.professional_summary) and summary:
        lines.append(f"Professional summary: {truncate(summary, 400)}")
    if experience:
        lines.append(f"Recent experience highlights: {truncate(experience, 500)}")
    if skills:
        lines.append(f"Key skills: {truncate(skills, 250)}")

    return "\n".join(lines) if lines else NO_DETAILS


def generate_starter(db: Session, user_id: UUID, request: GenerateConversationStarterRequest) -> str:
    """Write an opener for the prospect. AI errors propagate to the caller."""
    profile_summary = build_profile_summary(get_profile(db, user_id), get_default_resume(db, user_id))
    result = generate_conversation_starter(
        prospect_details=request.prospect_details,
        profile_summary=profile_summary,
        additional_context=request.additional_context or "",
    )
    logger.info("Conversation starter generated for user %s (tokens=%s)", user_id, result["tokens"]["total"])
    return result["message"]
