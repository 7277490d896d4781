"""Upload service turning documents into stored knowledge entries."""
import random
import time
from typing import Any, Dict, List, Sequence

from prometheus_client import Counter

from studybase.exceptions import DocumentEmptyError, NoChunksError
from studybase.models.entry import UNKNOWN_TYPE, ProcessedEntry, TextChunk
from studybase.prompts import SAMPLE_MATERIAL
from studybase.services.classifier import ChunkClassifier
from studybase.services.document_processor import extract_text_from_pdf
from studybase.services.entry_store import EntryStore
from studybase.services.segmenter import Segmenter
from studybase.utils.logger import logger
from studybase.validators import PDFValidator

SAMPLE_DOC_NAME = "sample-material.pdf"

UPLOADS_PROCESSED = Counter("studybase_uploads_total", "Uploads ingested into the entry store")


def generate_upload_id() -> str:
    """Generate an upload identifier of the form upl_<epoch ms>_<random>."""
    return f"upl_{int(time.time() * 1000)}_{random.randrange(10**9)}"


def unclassified_entries(chunks: Sequence[TextChunk]) -> List[ProcessedEntry]:
    """Build placeholder entries for chunks without calling the classifier."""
    return [
        ProcessedEntry(
            chunk_raw=chunk.raw,
            chunk_clean=chunk.clean,
            type=UNKNOWN_TYPE,
            title=f"Test Entry {i}",
            content=chunk.clean,
            tags=[],
            metadata=None,
            confidence=0.0,
            is_template=False,
            parse_error=False,
        )
        for i, chunk in enumerate(chunks, 1)
    ]


class EntryUploadService:
    """Service running segmentation, classification and storage for one upload."""

    def __init__(
        self,
        segmenter: Segmenter,
        classifier: ChunkClassifier,
        entry_store: EntryStore,
        max_file_size_mb: float = 10,
    ):
        """
        Initialize upload service.

        Args:
            segmenter: Text segmenter
            classifier: Chunk classifier
            entry_store: Entry storage
            max_file_size_mb: Largest accepted upload
        """
        self.segmenter = segmenter
        self.classifier = classifier
        self.entry_store = entry_store
        self.max_file_size_mb = max_file_size_mb

    async def upload_pdf(self, content: bytes, filename: str, user_id: str) -> Dict[str, Any]:
        """
        Validate, extract and ingest an uploaded PDF.

        Args:
            content: Raw PDF bytes
            filename: Original filename
            user_id: Owner of the resulting entries

        Returns:
            Upload summary

        Raises:
            ValidationError: If the file is rejected or yields no chunks
            ExtractionError: If the PDF cannot be read
        """
        PDFValidator.validate_file_type(filename, content)
        PDFValidator.validate_file_size(len(content), self.max_file_size_mb)

        text = extract_text_from_pdf(content)
        if not text.strip():
            raise DocumentEmptyError("Could not extract text from PDF")

        return await self.ingest_text(text, filename, user_id)

    async def upload_sample(self, user_id: str, skip_ai: bool = False) -> Dict[str, Any]:
        """
        Ingest the bundled sample material.

        Args:
            user_id: Owner of the resulting entries
            skip_ai: Store unclassified placeholder entries instead of calling the classifier

        Returns:
            Upload summary
        """
        return await self.ingest_text(SAMPLE_MATERIAL, SAMPLE_DOC_NAME, user_id, skip_ai=skip_ai)

    async def ingest_text(
        self, text: str, doc_name: str, user_id: str, skip_ai: bool = False
    ) -> Dict[str, Any]:
        """Segment, classify and store extracted text."""
        start_time = time.time()

        chunks = self.segmenter.segment(text)
        if not chunks:
            raise NoChunksError("No valid text chunks found in document")

        upload_id = generate_upload_id()

        if skip_ai:
            entries = unclassified_entries(chunks)
        else:
            entries = await self.classifier.classify_all(chunks)

        result = self.entry_store.save_entries(entries, user_id, upload_id, doc_name)
        parse_errors = sum(1 for entry in entries if entry.parse_error)
        UPLOADS_PROCESSED.inc()

        logger.info(
            f"Upload processed: {upload_id}",
            extra={
                "upload_id": upload_id,
                "total_chunks": len(chunks),
                "by_type": result.by_type,
                "response_time_ms": (time.time() - start_time) * 1000,
            },
        )

        return {
            "upload_id": upload_id,
            "doc_name": doc_name,
            "total_chunks": len(chunks),
            "processed_entries": result.saved,
            "parse_errors": parse_errors,
            "by_type": result.by_type,
        }
