"""Tolerant parsing of structured classifier output."""
import json
import re
from typing import Any, NamedTuple, Optional

from studybase.models.entry import ClassifiedEntry

FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*")
FENCE_CLOSE = re.compile(r"\s*```$")
OBJECT_SPAN = re.compile(r"\{.*\}", re.DOTALL)


class ParseResult(NamedTuple):
    """Outcome of parsing one model response."""

    ok: bool
    value: Optional[ClassifiedEntry]


FAILED = ParseResult(ok=False, value=None)


def strip_fences(text: str) -> str:
    """
    Remove a fenced code block wrapper around model output.

    Args:
        text: Raw model output

    Returns:
        Text without the opening fence line (and language tag) or closing fence
    """
    text = (text or "").strip()
    if text.startswith("```"):
        text = FENCE_OPEN.sub("", text, count=1)
        text = FENCE_CLOSE.sub("", text, count=1)
        text = text.strip()
    return text


def _decode_object(text: str) -> Optional[dict]:
    try:
        value: Any = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def parse_classifier_output(raw_output: Optional[str]) -> ParseResult:
    """
    Parse a classifier response into a ClassifiedEntry without raising.

    The stripped text is decoded directly first. If that does not yield a
    JSON object, the span from the first "{" to the last "}" is decoded
    instead, which recovers objects wrapped in explanatory prose.

    Args:
        raw_output: Text returned by the classification service

    Returns:
        ParseResult with ok=False when no JSON object could be recovered
    """
    text = strip_fences(raw_output or "")

    data = _decode_object(text)
    if data is None:
        match = OBJECT_SPAN.search(text)
        if match:
            data = _decode_object(match.group(0))

    if data is None:
        return FAILED

    return ParseResult(ok=True, value=ClassifiedEntry.from_dict(data))
