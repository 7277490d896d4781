"""Batched classification of text chunks into knowledge entries."""
import asyncio
from typing import Any, Dict, Iterable, List, Optional, Sequence

from prometheus_client import Counter

from studybase.models.entry import UNKNOWN_TYPE, ClassifiedEntry, ProcessedEntry, TextChunk
from studybase.prompts import ClassifierPrompt
from studybase.utils.logger import logger
from studybase.utils.output_parser import parse_classifier_output
from studybase.utils.tracer import get_tracer

DEFAULT_BATCH_SIZE = 25

CLASSIFICATION_OUTCOMES = Counter(
    "studybase_classifications_total",
    "Chunk classifications by outcome",
    ["outcome"],
)


def has_meaningful_metadata(metadata: Optional[Dict[str, Any]]) -> bool:
    """Check whether at least one metadata field is a non-empty string or list."""
    if not isinstance(metadata, dict):
        return False
    return any(
        (isinstance(v, str) and v.strip() != "") or (isinstance(v, list) and len(v) > 0)
        for v in metadata.values()
    )


def assemble_entry(
    chunk: TextChunk, classified: ClassifiedEntry, allowed_types: Iterable[str]
) -> ProcessedEntry:
    """
    Validate a parsed classification against the allowed type set.

    Unknown or missing types become "unknown" while title, content and tags
    are kept. Metadata is dropped entirely unless it carries a value.

    Args:
        chunk: Chunk the classification belongs to
        classified: Parsed classifier output
        allowed_types: Entry types accepted as-is

    Returns:
        ProcessedEntry with parse_error=False
    """
    entry_type = classified.type if classified.type in set(allowed_types) else UNKNOWN_TYPE

    return ProcessedEntry(
        chunk_raw=chunk.raw,
        chunk_clean=chunk.clean,
        type=entry_type,
        title=classified.title,
        content=classified.content,
        tags=list(classified.tags),
        metadata=classified.metadata if has_meaningful_metadata(classified.metadata) else None,
        confidence=classified.confidence if classified.confidence is not None else 0.0,
        is_template=classified.is_template if classified.is_template is not None else False,
        parse_error=False,
    )


class ChunkClassifier:
    """Classifies chunks through the classification service in bounded waves."""

    def __init__(
        self,
        service,
        prompt=ClassifierPrompt,
        allowed_entry_types: Optional[Sequence[str]] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """
        Initialize chunk classifier.

        Args:
            service: Object exposing async complete(system_prompt, user_prompt) -> str
            prompt: Prompt provider with SYSTEM_MESSAGE, build() and entry_types()
            allowed_entry_types: Valid entry types (defaults to the prompt taxonomy)
            batch_size: Number of concurrent classification calls per wave
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.service = service
        self.prompt = prompt
        self.allowed_entry_types = frozenset(
            allowed_entry_types if allowed_entry_types is not None else prompt.entry_types()
        )
        self.batch_size = batch_size

    async def classify_chunk(self, chunk: TextChunk) -> ProcessedEntry:
        """
        Classify a single chunk, falling back instead of raising.

        Args:
            chunk: Chunk to classify

        Returns:
            Validated entry, or the fallback entry on service or parse failure
        """
        try:
            raw_output = await self.service.complete(
                self.prompt.SYSTEM_MESSAGE, self.prompt.build(chunk.clean)
            )
        except Exception as e:
            logger.error(f"Classification error: {str(e)}", exc_info=True)
            CLASSIFICATION_OUTCOMES.labels(outcome="service_error").inc()
            return ProcessedEntry.fallback(chunk)

        parsed = parse_classifier_output(raw_output)
        if not parsed.ok:
            logger.warning(
                f"Unparseable classifier output: {(raw_output or '')[:100]!r}",
                extra={"parse_error": True},
            )
            CLASSIFICATION_OUTCOMES.labels(outcome="parse_failed").inc()
            return ProcessedEntry.fallback(chunk)

        entry = assemble_entry(chunk, parsed.value, self.allowed_entry_types)
        if parsed.value.type != entry.type:
            logger.info(
                f"Coerced entry type {parsed.value.type!r} to {entry.type!r}",
                extra={"entry_type": entry.type},
            )
        CLASSIFICATION_OUTCOMES.labels(outcome="parsed").inc()
        return entry

    async def classify_all(
        self, chunks: Sequence[TextChunk], batch_size: Optional[int] = None
    ) -> List[ProcessedEntry]:
        """
        Classify chunks in sequential batches of concurrent calls.

        Each batch is awaited in full before the next one starts. The result
        has one entry per chunk, in input order.

        Args:
            chunks: Chunks to classify
            batch_size: Overrides the configured batch size

        Returns:
            List of ProcessedEntry aligned with chunks
        """
        if batch_size is None:
            batch_size = self.batch_size
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        tracer = get_tracer()
        results: List[ProcessedEntry] = []

        with tracer.start_as_current_span("classify_all") as span:
            span.set_attribute("studybase.total_chunks", len(chunks))
            span.set_attribute("studybase.batch_size", batch_size)

            for batch_index, start in enumerate(range(0, len(chunks), batch_size)):
                batch = chunks[start:start + batch_size]
                logger.debug(
                    f"Classifying batch {batch_index + 1}",
                    extra={"batch_index": batch_index, "batch_size": len(batch)},
                )
                with tracer.start_as_current_span("classify_batch") as batch_span:
                    batch_span.set_attribute("studybase.batch_index", batch_index)
                    batch_span.set_attribute("studybase.batch_chunks", len(batch))
                    batch_results = await asyncio.gather(*(self.classify_chunk(c) for c in batch))
                    batch_span.set_attribute(
                        "studybase.parse_errors", sum(1 for entry in batch_results if entry.parse_error)
                    )
                results.extend(batch_results)

            parse_errors = sum(1 for entry in results if entry.parse_error)
            span.set_attribute("studybase.parse_errors", parse_errors)

        logger.info(
            f"Classified {len(results)} chunks ({parse_errors} parse errors)",
            extra={"total_chunks": len(results)},
        )
        return results
