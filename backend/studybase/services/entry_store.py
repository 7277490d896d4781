"""In-memory storage for processed knowledge entries."""
import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from studybase.exceptions import EntryNotFoundError, NoEntryTypesError
from studybase.models.entry import UNKNOWN_TYPE, ProcessedEntry, StoredEntry
from studybase.utils.logger import logger


@dataclass
class SaveResult:
    """Summary of one save call."""

    saved: int
    by_type: Dict[str, int] = field(default_factory=dict)


@dataclass
class QuizSelection:
    """Random selection of entries for a quiz session."""

    entries: List[StoredEntry]
    total_available: int
    counts_by_type: Dict[str, int] = field(default_factory=dict)


class EntryStore:
    """Thread-safe in-memory entry store keyed by entry id."""

    def __init__(self, allowed_entry_types: Iterable[str]):
        """
        Initialize entry store.

        Args:
            allowed_entry_types: Types stored as-is; anything else is stored as "unknown"
        """
        self.allowed_entry_types = frozenset(allowed_entry_types)
        self._entries: Dict[str, StoredEntry] = {}
        self._lock = threading.Lock()

    def save_entries(
        self,
        entries: Sequence[ProcessedEntry],
        user_id: str,
        upload_id: str,
        doc_name: str,
    ) -> SaveResult:
        """
        Persist the non-template entries of one upload.

        Args:
            entries: Pipeline output for the upload
            user_id: Owner of the entries
            upload_id: Upload identifier
            doc_name: Original document name

        Returns:
            SaveResult with the saved count and counts by type
        """
        to_save = [entry for entry in entries if not entry.is_template]
        by_type: Dict[str, int] = {}
        created_at = datetime.now(timezone.utc)

        with self._lock:
            for entry in to_save:
                entry_type = entry.type if entry.type in self.allowed_entry_types else UNKNOWN_TYPE
                stored = StoredEntry(
                    id=str(uuid.uuid4()),
                    user_id=user_id,
                    upload_id=upload_id,
                    doc_name=doc_name,
                    chunk_raw=entry.chunk_raw,
                    chunk_clean=entry.chunk_clean,
                    type=entry_type,
                    title=entry.title,
                    content=entry.content,
                    tags=list(entry.tags),
                    metadata=entry.metadata,
                    confidence=entry.confidence,
                    is_template=entry.is_template,
                    parse_error=entry.parse_error,
                    created_at=created_at,
                )
                self._entries[stored.id] = stored
                by_type[entry_type] = by_type.get(entry_type, 0) + 1

        logger.info(
            f"Saved {len(to_save)} of {len(entries)} entries for upload {upload_id}",
            extra={"upload_id": upload_id, "by_type": by_type},
        )
        return SaveResult(saved=len(to_save), by_type=by_type)

    def list_entries(
        self,
        user_id: str,
        entry_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[StoredEntry]:
        """
        List a user's non-template entries, newest first.

        Args:
            user_id: Owner of the entries
            entry_type: Restrict to one type ("all" or None for every type)
            search: Case-insensitive substring matched against title and content

        Returns:
            Matching entries
        """
        needle = search.lower() if search else None

        with self._lock:
            entries = [e for e in self._entries.values() if e.user_id == user_id and not e.is_template]

        if entry_type and entry_type != "all":
            entries = [e for e in entries if e.type == entry_type]

        if needle:
            entries = [
                e for e in entries
                if needle in (e.title or "").lower() or needle in (e.content or "").lower()
            ]

        # Insertion order breaks ties between entries saved in the same call
        entries = list(reversed(entries))
        entries.sort(key=lambda e: e.created_at, reverse=True)
        return entries

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        """
        Delete one of a user's entries.

        Raises:
            EntryNotFoundError: If the entry does not exist or belongs to another user
        """
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None or entry.user_id != user_id:
                raise EntryNotFoundError(f"Entry not found: {entry_id}")
            del self._entries[entry_id]

    def counts_by_type(self, user_id: str) -> Dict[str, int]:
        """Count a user's non-template entries per type."""
        counts: Dict[str, int] = {}
        with self._lock:
            for entry in self._entries.values():
                if entry.user_id == user_id and not entry.is_template:
                    counts[entry.type] = counts.get(entry.type, 0) + 1
        return counts

    def sample_entries(
        self,
        user_id: str,
        entry_types: Sequence[str],
        count: int = 10,
        rng: Optional[random.Random] = None,
    ) -> QuizSelection:
        """
        Pick a shuffled selection of a user's entries for a quiz.

        Args:
            user_id: Owner of the entries
            entry_types: Types to draw from
            count: Largest number of entries to return
            rng: Random source (module-level generator when None)

        Returns:
            QuizSelection with the chosen entries, how many matched before
            truncation, and counts by type over all of the user's entries

        Raises:
            NoEntryTypesError: If no entry type is given
        """
        wanted = {t for t in entry_types if t}
        if not wanted:
            raise NoEntryTypesError("At least one entry type required")

        with self._lock:
            candidates = [
                e for e in self._entries.values()
                if e.user_id == user_id and not e.is_template and e.type in wanted
            ]

        (rng or random).shuffle(candidates)
        selected = candidates[:max(count, 0)]

        logger.debug(
            f"Selected {len(selected)} of {len(candidates)} quiz entries",
            extra={"total_chunks": len(candidates)},
        )
        return QuizSelection(
            entries=selected,
            total_available=len(candidates),
            counts_by_type=self.counts_by_type(user_id),
        )
