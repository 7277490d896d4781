"""Knowledge entry data models."""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

UNKNOWN_TYPE = "unknown"


@dataclass(frozen=True)
class TextChunk:
    """A contiguous span of normalized text treated as one classification unit."""

    raw: str
    clean: str
    char_len: int


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return min(max(value, 0.0), 1.0)


@dataclass
class ClassifiedEntry:
    """
    Classification service output, not yet validated.

    Fields the model left out stay None so that assembly can tell
    "absent" apart from an explicit value.
    """

    type: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    confidence: Optional[float] = None
    detected_sections: List[str] = field(default_factory=list)
    is_template: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassifiedEntry":
        """
        Build an entry from a decoded JSON object, dropping values of the wrong shape.

        Args:
            data: Decoded classifier output

        Returns:
            ClassifiedEntry with loosely-typed values coerced or discarded
        """
        meta = data.get("meta")
        if not isinstance(meta, dict):
            meta = {}

        entry_type = data.get("type")
        if isinstance(entry_type, str) and entry_type.strip():
            entry_type = entry_type.strip().lower()
        else:
            entry_type = None

        metadata = data.get("metadata")
        is_template = meta.get("is_template")

        return cls(
            type=entry_type,
            title=_optional_text(data.get("title")),
            content=_optional_text(data.get("content")),
            tags=_string_list(data.get("tags")),
            metadata=metadata if isinstance(metadata, dict) else None,
            confidence=_confidence(meta.get("confidence")),
            detected_sections=_string_list(meta.get("detected_sections")),
            is_template=is_template if isinstance(is_template, bool) else None,
        )


@dataclass(frozen=True)
class ProcessedEntry:
    """Validated classification result for a single chunk."""

    chunk_raw: str
    chunk_clean: str
    type: str
    title: Optional[str]
    content: Optional[str]
    tags: List[str]
    metadata: Optional[Dict[str, Any]]
    confidence: float
    is_template: bool
    parse_error: bool

    @classmethod
    def fallback(cls, chunk: TextChunk) -> "ProcessedEntry":
        """Entry substituted when the service call or output parsing fails."""
        return cls(
            chunk_raw=chunk.raw,
            chunk_clean=chunk.clean,
            type=UNKNOWN_TYPE,
            title=None,
            content=None,
            tags=[],
            metadata=None,
            confidence=0.0,
            is_template=False,
            parse_error=True,
        )


@dataclass
class StoredEntry:
    """A processed entry persisted for a user."""

    id: str
    user_id: str
    upload_id: str
    doc_name: str
    chunk_raw: str
    chunk_clean: str
    type: str
    title: Optional[str]
    content: Optional[str]
    tags: List[str]
    metadata: Optional[Dict[str, Any]]
    confidence: float
    is_template: bool
    parse_error: bool
    created_at: datetime
