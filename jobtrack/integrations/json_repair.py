"""Lenient JSON object extraction for model output.

Models wrap JSON in code fences, leave trailing commas, put raw line breaks
inside strings or answer with a Python dict literal. ``parse_json_object``
tries progressively more invasive repairs until one yields a JSON object.
"""

import json
import re
from collections.abc import Iterator

# (pattern, replacement) applied in order by repair(), after comments are gone
_SYNTAX_RULES = [
    (re.compile(r",\s*([}\]])"), r"\1"),
    (re.compile(r'([}\]])\s*\n\s*(["{[\[])'), r"\1,\n\2"),
    (re.compile(r"\bNaN\b"), "null"),
    (re.compile(r"-?\bInfinity\b"), "null"),
]

_PYTHON_LITERALS = [
    (re.compile(r"(?<=[\[{,:])\s*'"), ' "'),
    (re.compile(r"'\s*(?=[\]}:,])"), '"'),
    (re.compile(r"\bTrue\b"), "true"),
    (re.compile(r"\bFalse\b"), "false"),
    (re.compile(r"\bNone\b"), "null"),
]

_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
# String literals are matched whole so a "//" inside one is never taken for a comment
_STRING_OR_COMMENT = re.compile(r'"(?:[^"\\]|\\.)*"|//[^\n]*', re.DOTALL)
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def strip_fences(text: str) -> str:
    """Drop a surrounding ``` or ```json fence."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    _, _, body = text.partition("\n")
    if not body:
        body = text[3:]
    head, fence, _ = body.rpartition("```")
    return (head if fence else body).strip()


def _strip_comments(text: str) -> str:
    return _STRING_OR_COMMENT.sub(lambda m: m.group(0) if m.group(0).startswith('"') else "", text)


def repair(text: str) -> str:
    text = _strip_comments(text)
    for pattern, replacement in _SYNTAX_RULES:
        text = pattern.sub(replacement, text)
    return text


def escape_string_newlines(text: str) -> str:
    """Turn raw line breaks inside string literals into ``\\n`` escapes."""
    return _STRING_LITERAL.sub(lambda m: _LINE_BREAK.sub(r"\\n", m.group(0)), text)


def pythonic_to_json(text: str) -> str:
    """{'a': True} -> {"a": true}. Text not starting with a quoted key is left alone."""
    if not text.lstrip().startswith(("{'", "['")):
        return text
    for pattern, replacement in _PYTHON_LITERALS:
        text = pattern.sub(replacement, text)
    return text


def _candidates(text: str) -> Iterator[str]:
    yield text
    yield repair(text)

    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        body = text[start : end + 1]
        with_controls = body.replace("\t", "\\t").replace("\f", "\\f")
        for variant in (body, with_controls):
            yield repair(variant)
            yield repair(escape_string_newlines(variant))

    pythonic = pythonic_to_json(text)
    if pythonic != text:
        yield pythonic


def parse_json_object(raw_text: str) -> dict:
    """First candidate that parses to a dict. Raises ``json.JSONDecodeError`` otherwise."""
    text = strip_fences(raw_text)
    for candidate in _candidates(text):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise json.JSONDecodeError("No JSON object found in model output", text[:200], 0)
