"""FastAPI application entry point."""
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic_settings import BaseSettings, SettingsConfigDict
from starlette.responses import Response

from studybase.api.routes import entries, upload
from studybase.prompts import ClassifierPrompt
from studybase.services.classifier import ChunkClassifier
from studybase.services.entry_store import EntryStore
from studybase.services.entry_upload_service import EntryUploadService
from studybase.services.llm_service import ClassificationService
from studybase.services.segmenter import DEFAULT_ENTRY_START_PATTERNS, DEFAULT_HEADER_PATTERNS, Segmenter
from studybase.utils.logger import logger
from studybase.utils.tracer import initialize_tracing, shutdown_tracing


class Settings(BaseSettings):
    """Application settings."""

    # Classification service
    llm_api_key: str = ""
    llm_api_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4o"
    llm_temperature: float = 0.3
    llm_timeout_seconds: float = 60.0

    # Segmentation
    min_chunk_chars: int = 40  # Shorter chunks never reach the classifier
    merge_min_chars: int = 120  # Shorter blocks are merged into a neighbour
    oversized_block_chars: int = 500  # A lone block above this gets re-split
    header_patterns: List[str] = list(DEFAULT_HEADER_PATTERNS)
    entry_start_patterns: List[str] = list(DEFAULT_ENTRY_START_PATTERNS)

    # Classification
    batch_size: int = 25  # Concurrent classification calls per wave
    allowed_entry_types: List[str] = ClassifierPrompt.entry_types()

    # Upload limits
    max_file_size_mb: float = 10

    # OpenTelemetry tracing configuration
    tracing_enabled: bool = False
    otlp_endpoint: str = ""

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), "..", "..", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global services (initialized in lifespan)
settings: Settings = None
segmenter: Segmenter = None
entry_store: EntryStore = None
classification_service: ClassificationService = None
upload_service: EntryUploadService = None
tracer_provider = None


def build_segmenter(app_settings: Settings) -> Segmenter:
    """Create the segmenter from settings."""
    return Segmenter(
        min_chunk_chars=app_settings.min_chunk_chars,
        merge_min_chars=app_settings.merge_min_chars,
        header_patterns=app_settings.header_patterns,
        oversized_block_chars=app_settings.oversized_block_chars,
        entry_start_patterns=app_settings.entry_start_patterns,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global settings, segmenter, entry_store, classification_service, upload_service, tracer_provider

    # Startup
    logger.info("Starting Studybase")
    settings = Settings()

    tracer_provider = initialize_tracing(
        otlp_endpoint=settings.otlp_endpoint or None,
        tracing_enabled=settings.tracing_enabled,
        model=settings.llm_model,
        batch_size=settings.batch_size,
    )

    segmenter = build_segmenter(settings)
    entry_store = EntryStore(allowed_entry_types=settings.allowed_entry_types)

    try:
        classification_service = ClassificationService(
            api_key=settings.llm_api_key or None,
            api_url=settings.llm_api_url,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    except ValueError as e:
        logger.warning(f"Classification service unavailable: {str(e)}. Uploads are disabled.")
        classification_service = None

    if classification_service is not None:
        classifier = ChunkClassifier(
            service=classification_service,
            allowed_entry_types=settings.allowed_entry_types,
            batch_size=settings.batch_size,
        )
        upload_service = EntryUploadService(
            segmenter=segmenter,
            classifier=classifier,
            entry_store=entry_store,
            max_file_size_mb=settings.max_file_size_mb,
        )
        logger.info(
            f"Services initialized (batch size {settings.batch_size}, "
            f"min chunk {settings.min_chunk_chars} chars, merge below {settings.merge_min_chars} chars)"
        )

    yield

    # Shutdown
    logger.info("Shutting down Studybase")
    if classification_service:
        await classification_service.close()
    if tracer_provider:
        shutdown_tracing(tracer_provider)


# Create FastAPI app
app = FastAPI(
    title="Studybase",
    description="Turns study documents into typed knowledge entries",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Studybase"}


# Prometheus metrics endpoint
@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(upload.router, prefix="/api", tags=["upload"])
app.include_router(entries.router, prefix="/api", tags=["entries"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
