"""Pytest configuration and fixtures."""
import json
from unittest.mock import AsyncMock, Mock

import pytest

from studybase.models.entry import TextChunk
from studybase.prompts import ClassifierPrompt
from studybase.services.classifier import ChunkClassifier
from studybase.services.entry_store import EntryStore
from studybase.services.entry_upload_service import EntryUploadService
from studybase.services.llm_service import ClassificationService
from studybase.services.segmenter import Segmenter

CONCEPT_RESPONSE = {
    "type": "concept",
    "title": "Mitochondria",
    "content": "Mitochondria are the powerhouse of the cell.",
    "tags": ["biology"],
    "metadata": {"term": "Mitochondria"},
    "meta": {"confidence": 0.95, "is_template": False},
}


def make_chunk(text: str) -> TextChunk:
    """Build a chunk whose raw and clean text are identical."""
    return TextChunk(raw=text, clean=text, char_len=len(text))


@pytest.fixture
def concept_json():
    """Valid classifier response for the mitochondria chunk."""
    return json.dumps(CONCEPT_RESPONSE)


@pytest.fixture
def mitochondria_chunk():
    """Single chunk just above the minimum length."""
    return make_chunk("Mitochondria are the powerhouse of the cell.")


@pytest.fixture
def sample_chunks():
    """Sample chunks for classification tests."""
    return [make_chunk(f"Chunk number {i} carries enough text to be classified.") for i in range(30)]


@pytest.fixture
def mock_classification_service(concept_json):
    """Mock classification service that always returns a concept."""
    service = Mock(spec=ClassificationService)
    service.complete = AsyncMock(return_value=concept_json)
    return service


@pytest.fixture
def classifier(mock_classification_service):
    """Chunk classifier over the mock service."""
    return ChunkClassifier(service=mock_classification_service, batch_size=25)


@pytest.fixture
def entry_store():
    """Empty entry store accepting the default taxonomy."""
    return EntryStore(allowed_entry_types=ClassifierPrompt.entry_types())


@pytest.fixture
def upload_service(classifier, entry_store):
    """Upload service wired to the mock classifier."""
    return EntryUploadService(
        segmenter=Segmenter(),
        classifier=classifier,
        entry_store=entry_store,
        max_file_size_mb=1,
    )
