"""Resume import: read an uploaded resume and map it onto profile sections.

The upload is turned into plain text (PDF via pypdf, DOCX via python-docx,
or UTF-8 text), the model extracts structured sections and every entry is
normalised to the shape the profile create endpoints accept. Nothing is
saved; entries that cannot be used are skipped and reported as warnings.
"""

import io
import logging
import re
import zipfile
from datetime import datetime
from pathlib import PurePath

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..integrations.anthropic_client import extract_resume_profile

logger = logging.getLogger(__name__)

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPE = "text/plain"
GENERIC_TYPE = "application/octet-stream"

_KIND_BY_TYPE = {PDF_TYPE: "pdf", DOCX_TYPE: "docx", TEXT_TYPE: "text"}
_KIND_BY_SUFFIX = {".pdf": "pdf", ".docx": "docx", ".txt": "text"}

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF, DOCX or plain-text file."
NO_TEXT_WARNING = "The uploaded resume did not contain readable text."

SUMMARY_MAX_CHARS = 600

SKILL_CATEGORIES = {"technical", "soft", "language", "tool", "framework", "other"}
PROFICIENCY_LEVELS = {"beginner", "intermediate", "advanced", "expert"}
RELATIONSHIPS = {"manager", "colleague", "client", "professor", "mentor", "other"}

_PRESENT = {"present", "current", "now", "ongoing"}
_LIST_SEPARATORS = re.compile(r"[\n,;•]")
_PHONE_JUNK = re.compile(r"[^\d+()\s-]")
_YEAR_MONTH = re.compile(r"(\d{4})[-/](\d{1,2})")
_DATE_FORMATS = ("%B %Y", "%b %Y", "%b. %Y", "%m/%Y", "%Y-%m-%d", "%d/%m/%Y")

SECTION_KEYS = (
    "work_experiences",
    "education",
    "skills",
    "projects",
    "certifications",
    "achievements",
    "references",
)


class ResumeImportError(Exception):
    """The upload cannot be imported. Carries the HTTP status for the route."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# --- Text extraction ---


def detect_kind(data: bytes, content_type: str | None, filename: str | None) -> str:
    """Return "pdf", "docx" or "text", or raise a 415 ResumeImportError."""
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type in _KIND_BY_TYPE:
        return _KIND_BY_TYPE[media_type]
    if media_type in ("", GENERIC_TYPE):
        suffix = PurePath(filename or "").suffix.lower()
        if suffix in _KIND_BY_SUFFIX:
            return _KIND_BY_SUFFIX[suffix]
        if data.startswith(b"%PDF"):
            return "pdf"
        if data.startswith(b"PK\x03\x04"):
            return "docx"
    raise ResumeImportError(UNSUPPORTED_MESSAGE, 415)


def _pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except (PdfReadError, ValueError) as exc:
        logger.warning("Unreadable PDF upload: %s", exc)
        raise ResumeImportError("Could not read the uploaded PDF file.") from exc


def _docx_text(data: bytes) -> str:
    try:
        document = Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        logger.warning("Unreadable DOCX upload: %s", exc)
        raise ResumeImportError("Could not read the uploaded DOCX file.") from exc

    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text.strip() for cell in row.cells if cell.text.strip()))
    return "\n".join(lines)


def _plain_text(data: bytes) -> str:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ResumeImportError("Uploaded text file is not valid UTF-8.") from exc
    if not text.strip():
        raise ResumeImportError("Uploaded text file did not contain readable content.")
    return text


def extract_text(data: bytes, content_type: str | None, filename: str | None) -> str:
    """Plain text of an uploaded resume, with trailing spaces and blank runs trimmed."""
    kind = detect_kind(data, content_type, filename)
    if kind == "pdf":
        text = _pdf_text(data)
    elif kind == "docx":
        text = _docx_text(data)
    else:
        text = _plain_text(data)

    lines = [line.rstrip() for line in text.splitlines()]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


# --- Field normalisers ---


def _text(value, max_length: int | None = None) -> str | None:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    s = str(value).strip()
    if not s:
        return None
    return s[:max_length] if max_length else s


def _is_present(value) -> bool:
    return isinstance(value, str) and value.strip().lower() in _PRESENT


def year_month(value) -> str | None:
    """Coerce a resume date to YYYY-MM. "Present" and unparseable dates give None."""
    s = _text(value)
    if not s or _is_present(s):
        return None
    if re.fullmatch(r"\d{4}", s):
        return f"{s}-01"
    match = _YEAR_MONTH.fullmatch(s)
    if match and 1 <= int(match.group(2)) <= 12:
        return f"{match.group(1)}-{int(match.group(2)):02d}"
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).strftime("%Y-%m")
        except ValueError:
            continue
    return None


def url(value) -> str | None:
    """Complete a bare host with https://. Non-http schemes are dropped."""
    s = _text(value)
    if not s:
        return None
    if "://" not in s:
        s = f"https://{s}"
    elif not s.lower().startswith(("http://", "https://")):
        return None
    return s if len(s) <= 500 else None


def phone(value) -> str | None:
    s = _text(value)
    if not s:
        return None
    return _PHONE_JUNK.sub("", s).strip()[:50] or None


def email(value) -> str | None:
    s = _text(value, 255)
    return s if s and re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", s) else None


def joined(value) -> str | None:
    """Lists, or strings split on commas, semicolons, bullets or newlines, as "a, b"."""
    if isinstance(value, list):
        parts = [_text(v) for v in value]
    elif isinstance(value, str):
        parts = [p.strip() for p in _LIST_SEPARATORS.split(value)]
    else:
        return None
    parts = [p for p in parts if p]
    return ", ".join(parts) or None


def summary(value) -> str | None:
    s = _text(value)
    if s and len(s) > SUMMARY_MAX_CHARS:
        return s[: SUMMARY_MAX_CHARS - 3].rstrip() + "..."
    return s


def _choice(value, allowed: set[str]) -> str | None:
    s = _text(value)
    return s.lower() if s and s.lower() in allowed else None


def _years(value) -> int | None:
    try:
        years = round(float(str(value).strip()))
    except (TypeError, ValueError):
        return None
    return max(0, min(80, years))


# --- Section normalisers ---


def normalize_profile(raw: dict) -> dict:
    return {
        "first_name": _text(raw.get("first_name"), 100),
        "last_name": _text(raw.get("last_name"), 100),
        "email": email(raw.get("email")),
        "phone": phone(raw.get("phone")),
        "address": _text(raw.get("address"), 255),
        "city": _text(raw.get("city"), 100),
        "state": _text(raw.get("state"), 100),
        "zip_code": _text(raw.get("zip_code"), 20),
        "country": _text(raw.get("country"), 100),
        "linkedin_url": url(raw.get("linkedin_url")),
        "github_url": url(raw.get("github_url")),
        "portfolio_url": url(raw.get("portfolio_url")),
        "professional_summary": summary(raw.get("professional_summary")),
    }


def _skipped(label: str, position: int, missing: str) -> str:
    return f"Skipped {label} entry at position {position} due to missing {missing}."


def _work_experience(item: dict, position: int, warnings: list[str]) -> dict | None:
    job_title, company = _text(item.get("job_title"), 255), _text(item.get("company"), 255)
    if not job_title or not company:
        warnings.append(_skipped("a work experience", position, "job title or company"))
        return None
    is_current = item.get("is_current") is True or _is_present(item.get("end_date"))
    start_date = year_month(item.get("start_date"))
    if not start_date:
        warnings.append(f"Work experience at {company} is missing a start date.")
    return {
        "job_title": job_title,
        "company": company,
        "location": _text(item.get("location"), 255),
        "start_date": start_date,
        "end_date": None if is_current else year_month(item.get("end_date")),
        "is_current": is_current,
        "description": _text(item.get("description")),
        "technologies": joined(item.get("technologies")),
    }


def _education(item: dict, position: int, warnings: list[str]) -> dict | None:
    degree, institution = _text(item.get("degree"), 255), _text(item.get("institution"), 255)
    if not degree or not institution:
        warnings.append(_skipped("an education", position, "degree or institution"))
        return None
    return {
        "degree": degree,
        "field_of_study": _text(item.get("field_of_study"), 255),
        "institution": institution,
        "location": _text(item.get("location"), 255),
        "start_date": year_month(item.get("start_date")),
        "end_date": year_month(item.get("end_date")),
        "gpa": _text(item.get("gpa"), 20),
        "honors": _text(item.get("honors"), 255),
        "relevant_coursework": joined(item.get("relevant_coursework")),
    }


def _skill(item: dict, position: int, warnings: list[str]) -> dict | None:
    name = _text(item.get("name"), 100)
    if not name:
        warnings.append(_skipped("a skill", position, "name"))
        return None
    return {
        "name": name,
        "category": _choice(item.get("category"), SKILL_CATEGORIES) or "other",
        "proficiency_level": _choice(item.get("proficiency_level"), PROFICIENCY_LEVELS),
        "years_of_experience": _years(item.get("years_of_experience")),
    }


def _project(item: dict, position: int, warnings: list[str]) -> dict | None:
    title = _text(item.get("title"), 255)
    if not title:
        warnings.append(_skipped("a project", position, "title"))
        return None
    is_ongoing = item.get("is_ongoing") is True or _is_present(item.get("end_date"))
    return {
        "title": title,
        "description": _text(item.get("description")),
        "technologies": joined(item.get("technologies")),
        "project_url": url(item.get("project_url")),
        "github_url": url(item.get("github_url")),
        "start_date": year_month(item.get("start_date")),
        "end_date": None if is_ongoing else year_month(item.get("end_date")),
        "is_ongoing": is_ongoing,
    }


def _certification(item: dict, position: int, warnings: list[str]) -> dict | None:
    name, issuer = _text(item.get("name"), 255), _text(item.get("issuing_organization"), 255)
    if not name or not issuer:
        warnings.append(_skipped("a certification", position, "name or issuing organization"))
        return None
    return {
        "name": name,
        "issuing_organization": issuer,
        "issue_date": year_month(item.get("issue_date")),
        "expiration_date": year_month(item.get("expiration_date")),
        "credential_id": _text(item.get("credential_id"), 255),
        "credential_url": url(item.get("credential_url")),
    }


def _achievement(item: dict, position: int, warnings: list[str]) -> dict | None:
    title = _text(item.get("title"), 255)
    if not title:
        warnings.append(_skipped("an achievement", position, "title"))
        return None
    return {
        "title": title,
        "description": _text(item.get("description")),
        "organization": _text(item.get("organization"), 255),
        "date": year_month(item.get("date")),
        "url": url(item.get("url")),
    }


def _reference(item: dict, position: int, warnings: list[str]) -> dict | None:
    name = _text(item.get("name"), 255)
    if not name:
        warnings.append(_skipped("a reference", position, "name"))
        return None
    return {
        "name": name,
        "title": _text(item.get("title"), 255),
        "company": _text(item.get("company"), 255),
        "email": email(item.get("email")),
        "phone": phone(item.get("phone")),
        "relationship": _choice(item.get("relationship"), RELATIONSHIPS),
    }


_NORMALIZERS = {
    "work_experiences": _work_experience,
    "education": _education,
    "skills": _skill,
    "projects": _project,
    "certifications": _certification,
    "achievements": _achievement,
    "references": _reference,
}


def normalize_section(key: str, items: list[dict], warnings: list[str]) -> list[dict]:
    """Normalise one section's entries, numbering ``display_order`` from 0.

    Skills are de-duplicated by name, case-insensitively, first one wins.
    """
    normalize = _NORMALIZERS[key]
    result = []
    seen_skills = set()
    for position, item in enumerate(items, start=1):
        entry = normalize(item, position, warnings)
        if entry is None:
            continue
        if key == "skills":
            if entry["name"].lower() in seen_skills:
                continue
            seen_skills.add(entry["name"].lower())
        entry["display_order"] = len(result)
        result.append(entry)
    return result


def _contact_warnings(profile: dict) -> list[str]:
    warnings = []
    if not profile["first_name"] or not profile["last_name"]:
        warnings.append("Name was not fully detected.")
    if not profile["email"]:
        warnings.append("Email address was not detected.")
    if not profile["phone"]:
        warnings.append("Phone number was not detected.")
    return warnings


def _empty_import(text: str, warnings: list[str]) -> dict:
    result = {"profile": normalize_profile({})}
    result.update({key: [] for key in SECTION_KEYS})
    result.update(text=text, warnings=warnings, metadata=None)
    return result


def import_resume(data: bytes, content_type: str | None, filename: str | None) -> dict:
    """Extract and normalise profile sections from an uploaded resume.

    Returns ``profile``, one list per section, ``text`` (the extracted
    resume text), ``warnings`` and the AI usage ``metadata``. Raises
    ResumeImportError for unusable uploads; AI errors propagate.
    """
    text = extract_text(data, content_type, filename)
    if not text:
        logger.info("Resume upload %r has no extractable text", filename)
        return _empty_import(text, [NO_TEXT_WARNING])

    raw = extract_resume_profile(text)

    warnings: list[str] = []
    result = {"profile": normalize_profile(raw["profile"])}
    for key in SECTION_KEYS:
        result[key] = normalize_section(key, raw[key], warnings)
    warnings.extend(_contact_warnings(result["profile"]))

    logger.info(
        "Resume imported (%s): %s, %d warnings",
        filename,
        ", ".join(f"{key}={len(result[key])}" for key in SECTION_KEYS),
        len(warnings),
    )
    result.update(
        text=text,
        warnings=warnings,
        metadata={k: raw[k] for k in ("model_used", "tokens", "cost_usd")},
    )
    return result
