"""Anthropic API client: one function per AI operation, with cost tracking.

Provides a singleton client and one function per AI operation: cover
letter, job analysis, resume content selection, conversation starter and
resume import.
Every operation is a single call; nothing is retried or streamed.
"""

import json
import logging

import anthropic

from ..config import settings
from ..prompts import (
    CONTENT_SELECTION_SYSTEM_PROMPT,
    CONTENT_SELECTION_USER_PROMPT,
    CONVERSATION_STARTER_SYSTEM_PROMPT,
    CONVERSATION_STARTER_USER_PROMPT,
    COVER_LETTER_SYSTEM_PROMPT,
    COVER_LETTER_USER_PROMPT,
    JOB_ANALYSIS_SYSTEM_PROMPT,
    JOB_ANALYSIS_USER_PROMPT,
    RESUME_IMPORT_SYSTEM_PROMPT,
    RESUME_IMPORT_USER_PROMPT,
)
from .cache import CacheService, cache_key
from .json_repair import parse_json_object
from .validation import (
    validate_content_selection,
    validate_conversation_starter,
    validate_cover_letter,
    validate_job_analysis,
    validate_resume_import,
)

logger = logging.getLogger(__name__)

PRICING = {
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
}

CACHE_TTL = 86400  # 24 hours
RESUME_IMPORT_MAX_CHARS = 40_000

_client: anthropic.Anthropic | None = None


class AIServiceNotConfigured(Exception):
    """No API key is configured. Mapped to 503 in main.py."""

    pass


class AIGenerationError(Exception):
    """The model call failed or returned nothing usable. Mapped to 502 in main.py."""

    pass


def get_client() -> anthropic.Anthropic:
    """Get or create the singleton Anthropic client."""
    global _client
    if not settings.ai_configured:
        raise AIServiceNotConfigured("AI service not configured")
    if _client is None:
        _client = anthropic.Anthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.anthropic_timeout,
            max_retries=0,
        )
    return _client


def _calculate_cost(usage: anthropic.types.Usage, model_id: str) -> float:
    pricing = PRICING.get(model_id, PRICING["claude-haiku-4-5-20251001"])
    input_cost = (usage.input_tokens / 1_000_000) * pricing["input"]
    output_cost = (usage.output_tokens / 1_000_000) * pricing["output"]
    return round(input_cost + output_cost, 6)


def _usage_metadata(usage: anthropic.types.Usage, model_id: str) -> dict:
    return {
        "model_used": model_id,
        "tokens": {
            "input": usage.input_tokens,
            "output": usage.output_tokens,
            "total": usage.input_tokens + usage.output_tokens,
        },
        "cost_usd": _calculate_cost(usage, model_id),
    }


def _call_api(system_prompt: str, user_prompt: str, max_tokens: int, temperature: float) -> tuple[dict, dict]:
    """Make one API call and parse its JSON body.

    Returns (parsed, usage metadata). Raises AIServiceNotConfigured when no
    key is set and AIGenerationError for transport errors, empty output or
    output that cannot be parsed as a JSON object.
    """
    client = get_client()
    model_id = settings.anthropic_model

    try:
        message = client.messages.create(
            model=model_id,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
    except anthropic.APIError as exc:
        logger.error("Anthropic API call failed (model=%s): %s", model_id, exc)
        raise AIGenerationError("AI generation failed") from exc

    raw_text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
    if not raw_text.strip():
        logger.warning("Empty AI response (model=%s, stop_reason=%s)", model_id, message.stop_reason)
        raise AIGenerationError("AI returned an empty response")

    try:
        result = parse_json_object(raw_text)
    except json.JSONDecodeError as exc:
        logger.warning(
            "JSON parse failed (model=%s, response_len=%d, first_100=%r)",
            model_id,
            len(raw_text),
            raw_text[:100],
        )
        raise AIGenerationError("AI returned an unparsable response") from exc

    return result, _usage_metadata(message.usage, model_id)


def generate_cover_letter_text(
    company: str,
    position: str,
    job_description: str = "",
    background: str = "",
    applicant_name: str = "",
) -> dict:
    """Write a cover letter. Returns {"cover_letter", "model_used", "tokens", "cost_usd"}."""
    user_prompt = COVER_LETTER_USER_PROMPT.format(
        company=company,
        position=position,
        applicant_name=applicant_name or "Not provided",
        job_description=job_description or "Not provided",
        background=background or "Not provided",
    )
    result, meta = _call_api(COVER_LETTER_SYSTEM_PROMPT, user_prompt, 2048, 0.7)

    result = validate_cover_letter(result)
    if not result["cover_letter"]:
        raise AIGenerationError("AI returned an empty cover letter")

    result.update(meta)
    return result


def analyze_job_description(job_description: str, cache: CacheService | None = None) -> dict:
    """Extract requirements, skills, keywords and seniority from a job description."""
    key = cache_key("job-analysis", settings.anthropic_model, job_description)
    if cache:
        cached = cache.get_json(key)
        if cached:
            cached["from_cache"] = True
            return cached

    user_prompt = JOB_ANALYSIS_USER_PROMPT.format(job_description=job_description)
    result, meta = _call_api(JOB_ANALYSIS_SYSTEM_PROMPT, user_prompt, 1024, 0.3)

    result = validate_job_analysis(result)
    result.update(meta)

    if cache:
        cache.set_json(key, result, CACHE_TTL)
    result["from_cache"] = False
    return result


def _format_items(items: list[dict], fields: list[tuple[str, str]]) -> str:
    if not items:
        return "None"
    blocks = []
    for item in items:
        lines = [f"ID: {item['id']}"]
        for label, key in fields:
            lines.append(f"{label}: {item.get(key) or 'Not specified'}")
        blocks.append("\n".join(lines) + "\n---")
    return "\n".join(blocks)


def select_resume_content(
    job_description: str,
    job_analysis: dict,
    profile_data: dict,
    max_work_experiences: int,
    max_projects: int,
    max_skills: int,
) -> dict:
    """Ask the model which profile items fit the job best.

    ``profile_data`` holds serialised section lists keyed like
    ``profile.service.SECTION_MODELS``. Returned ids are not yet checked
    against the profile; the caller drops unknown ones.
    """
    user_prompt = CONTENT_SELECTION_USER_PROMPT.format(
        job_description=job_description,
        requirements=", ".join(job_analysis.get("requirements", [])) or "None specified",
        skills=", ".join(job_analysis.get("skills", [])) or "None specified",
        seniority=job_analysis.get("seniority") or "Unknown",
        industry=job_analysis.get("industry") or "Unknown",
        work_experiences=_format_items(
            profile_data.get("work_experiences", []),
            [
                ("Title", "job_title"),
                ("Company", "company"),
                ("Start", "start_date"),
                ("End", "end_date"),
                ("Description", "description"),
                ("Technologies", "technologies"),
            ],
        ),
        skills_list=_format_items(
            profile_data.get("skills", []),
            [
                ("Name", "name"),
                ("Category", "category"),
                ("Level", "proficiency_level"),
                ("Years", "years_of_experience"),
            ],
        ),
        projects=_format_items(
            profile_data.get("projects", []),
            [("Title", "title"), ("Description", "description"), ("Technologies", "technologies")],
        ),
        education=_format_items(
            profile_data.get("education", []),
            [
                ("Degree", "degree"),
                ("Field", "field_of_study"),
                ("Institution", "institution"),
                ("Courses", "relevant_coursework"),
            ],
        ),
        certifications=_format_items(
            profile_data.get("certifications", []),
            [("Name", "name"), ("Issuer", "issuing_organization"), ("Date", "issue_date")],
        ),
        achievements=_format_items(
            profile_data.get("achievements", []),
            [("Title", "title"), ("Description", "description"), ("Organization", "organization")],
        ),
        max_work_experiences=max_work_experiences,
        max_projects=max_projects,
        max_skills=max_skills,
    )
    result, meta = _call_api(CONTENT_SELECTION_SYSTEM_PROMPT, user_prompt, 4096, 0.2)

    result = validate_content_selection(result)
    result.update(meta)
    return result


def generate_conversation_starter(
    prospect_details: str,
    profile_summary: str,
    additional_context: str = "",
) -> dict:
    """Write a short LinkedIn opener. Returns {"message", "model_used", "tokens", "cost_usd"}."""
    user_prompt = CONVERSATION_STARTER_USER_PROMPT.format(
        prospect_details=prospect_details,
        profile_summary=profile_summary,
        additional_context=additional_context or "None provided",
    )
    result, meta = _call_api(CONVERSATION_STARTER_SYSTEM_PROMPT, user_prompt, 600, 0.65)

    result = validate_conversation_starter(result)
    if not result["message"]:
        raise AIGenerationError("AI returned an empty message")

    result.update(meta)
    return result


def extract_resume_profile(resume_text: str) -> dict:
    """Read profile sections out of resume text.

    Returns the coerced sections from ``validate_resume_import`` plus usage
    metadata. Text beyond RESUME_IMPORT_MAX_CHARS is not sent.
    """
    if len(resume_text) > RESUME_IMPORT_MAX_CHARS:
        logger.info("Resume text truncated from %d to %d chars", len(resume_text), RESUME_IMPORT_MAX_CHARS)
        resume_text = resume_text[:RESUME_IMPORT_MAX_CHARS]

    user_prompt = RESUME_IMPORT_USER_PROMPT.format(resume_text=resume_text)
    result, meta = _call_api(RESUME_IMPORT_SYSTEM_PROMPT, user_prompt, 8192, 0.2)

    result = validate_resume_import(result)
    result.update(meta)
    return result
