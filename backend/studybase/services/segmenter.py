"""Segmentation of extracted document text into classification chunks."""
import re
from typing import List, Optional, Pattern, Sequence, Union

from studybase.models.entry import TextChunk
from studybase.utils.logger import logger
from studybase.utils.text_cleaner import normalize

PatternLike = Union[str, Pattern[str]]

DEFAULT_MIN_CHUNK_CHARS = 40
DEFAULT_MERGE_MIN_CHARS = 120
DEFAULT_OVERSIZED_BLOCK_CHARS = 500

# Structural headers that carry no content of their own
DEFAULT_HEADER_PATTERNS: List[str] = [
    r"^#?\s*(vocabulary|quotes|phrases|thought frameworks|expressions)",
    r"^example\s+notes",
    r"^this document is an example",
]

# Line starts that open a new entry inside one oversized block
DEFAULT_ENTRY_START_PATTERNS: List[str] = [
    r"^[A-Z][a-z]+\s*[—–]",  # "Profundity — noun"
    r"^[\"“][^\"”]+[\"”]\s*[—–]",  # "\"The unexamined life...\" — Socrates"
    r"^(Vocabulary|Quotes|Phrases|Thought Frameworks|#\s)",
]

BLANK_LINE_SPLIT = re.compile(r"\n\s*\n")
BULLET_SPLIT = re.compile(r"(?=^(?:[-*•]|\d+[.)])\s+)", re.MULTILINE)


def compile_patterns(patterns: Sequence[PatternLike], flags: int = 0) -> List[Pattern[str]]:
    """Compile string patterns, passing already-compiled ones through unchanged."""
    return [p if isinstance(p, re.Pattern) else re.compile(p, flags) for p in patterns]


def _split_entry_starts(block: str, entry_starts: Sequence[Pattern[str]]) -> List[str]:
    """Re-split one block at every line that opens a new entry."""
    new_blocks: List[str] = []
    current = ""

    for line in block.split("\n"):
        trimmed = line.strip()
        is_new_entry = any(p.search(trimmed) for p in entry_starts)

        if is_new_entry and current.strip():
            new_blocks.append(current.strip())
            current = trimmed
        else:
            current = f"{current}\n{trimmed}" if current else trimmed

    if current.strip():
        new_blocks.append(current.strip())

    return new_blocks


def split_blocks(
    text: str,
    oversized_block_chars: int = DEFAULT_OVERSIZED_BLOCK_CHARS,
    entry_start_patterns: Optional[Sequence[PatternLike]] = None,
) -> List[str]:
    """
    Split normalized text into candidate blocks.

    Blocks are separated by blank lines. A document that yields one block
    longer than oversized_block_chars is re-split at entry-start lines, and
    the re-split is kept only when it produces more than one block. Finally
    every block holding bullet or numbered items is split at each item.

    Args:
        text: Normalized document text
        oversized_block_chars: Length above which a lone block gets re-split
        entry_start_patterns: Line patterns that open a new entry

    Returns:
        Ordered list of non-empty, trimmed blocks
    """
    if entry_start_patterns is None:
        entry_start_patterns = DEFAULT_ENTRY_START_PATTERNS
    entry_starts = compile_patterns(entry_start_patterns)

    blocks = [b.strip() for b in BLANK_LINE_SPLIT.split(text)]
    blocks = [b for b in blocks if b]

    if len(blocks) == 1 and len(blocks[0]) > oversized_block_chars:
        repaired = _split_entry_starts(blocks[0], entry_starts)
        if len(repaired) > 1:
            logger.debug(f"Re-split oversized block into {len(repaired)} blocks")
            blocks = repaired

    out: List[str] = []
    for block in blocks:
        parts = [p.strip() for p in BULLET_SPLIT.split(block)]
        parts = [p for p in parts if p]
        if len(parts) > 1:
            out.extend(parts)
        else:
            out.append(block)

    return out


def merge_small(blocks: Sequence[str], min_chars: int = DEFAULT_MERGE_MIN_CHARS) -> List[str]:
    """
    Fold short blocks into their neighbours.

    A block joins the running buffer (newline-separated) while either the
    buffer or the block is shorter than min_chars; otherwise the buffer is
    emitted and the block starts a new one.

    Args:
        blocks: Ordered candidate blocks
        min_chars: Length below which a block is merged

    Returns:
        Ordered list of merged blocks, none empty
    """
    merged: List[str] = []
    buf = ""

    for block in blocks:
        if not buf:
            buf = block
            continue
        if len(buf) < min_chars or len(block) < min_chars:
            buf = f"{buf}\n{block}".strip()
        else:
            if buf.strip():
                merged.append(buf.strip())
            buf = block

    if buf.strip():
        merged.append(buf.strip())

    return merged


class Segmenter:
    """Turns raw document text into an ordered sequence of TextChunk."""

    def __init__(
        self,
        min_chunk_chars: int = DEFAULT_MIN_CHUNK_CHARS,
        merge_min_chars: int = DEFAULT_MERGE_MIN_CHARS,
        header_patterns: Optional[Sequence[PatternLike]] = None,
        oversized_block_chars: int = DEFAULT_OVERSIZED_BLOCK_CHARS,
        entry_start_patterns: Optional[Sequence[PatternLike]] = None,
    ):
        """
        Initialize segmenter.

        Args:
            min_chunk_chars: Chunks shorter than this are discarded
            merge_min_chars: Blocks shorter than this are merged into a neighbour
            header_patterns: Structural-header patterns to drop (strings are
                compiled case-insensitively)
            oversized_block_chars: Length above which a lone block gets re-split
            entry_start_patterns: Line patterns that open a new entry
        """
        if header_patterns is None:
            header_patterns = DEFAULT_HEADER_PATTERNS

        self.min_chunk_chars = min_chunk_chars
        self.merge_min_chars = merge_min_chars
        self.oversized_block_chars = oversized_block_chars
        self.header_patterns = compile_patterns(header_patterns, re.IGNORECASE)
        self.entry_start_patterns = entry_start_patterns

    def is_header(self, text: str) -> bool:
        """Check whether a line or block is a structural header."""
        return any(p.search(text) for p in self.header_patterns)

    def strip_leading_headers(self, block: str) -> str:
        """
        Remove header lines from the top of a block.

        Merging can glue a header onto the content that follows it; only the
        header lines are structure, the rest of the block is kept.
        """
        lines = block.split("\n")
        while lines and (not lines[0].strip() or self.is_header(lines[0].strip())):
            lines.pop(0)
        return "\n".join(lines).strip()

    def filter_blocks(self, blocks: Sequence[str]) -> List[TextChunk]:
        """
        Drop structural headers and short blocks and wrap the rest as TextChunk.

        The chunk keeps the merged block as its raw text; header lines are
        removed from the clean text only.

        Args:
            blocks: Merged candidate blocks

        Returns:
            Chunks whose char_len is at least min_chunk_chars
        """
        chunks: List[TextChunk] = []
        for block in blocks:
            clean = normalize(self.strip_leading_headers(block))
            if len(clean) < self.min_chunk_chars:
                continue
            chunks.append(TextChunk(raw=block, clean=clean, char_len=len(clean)))
        return chunks

    def segment(self, text: str) -> List[TextChunk]:
        """
        Normalize, split, merge and filter a document.

        Args:
            text: Raw extracted text

        Returns:
            Ordered list of TextChunk ready for classification
        """
        cleaned = normalize(text)
        blocks = split_blocks(
            cleaned,
            oversized_block_chars=self.oversized_block_chars,
            entry_start_patterns=self.entry_start_patterns,
        )
        merged = merge_small(blocks, self.merge_min_chars)
        chunks = self.filter_blocks(merged)

        logger.info(
            f"Segmented {len(cleaned):,} characters into {len(chunks)} chunks "
            f"({len(blocks)} blocks, {len(merged)} after merging)",
            extra={"total_chunks": len(chunks)},
        )
        return chunks


def segment_text(text: str) -> List[TextChunk]:
    """Segment text with the default thresholds and patterns."""
    return Segmenter().segment(text)
