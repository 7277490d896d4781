"""OpenTelemetry tracing for segmentation and classification."""
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.openai import OpenAIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from studybase.utils.logger import logger

TRACER_NAME = "studybase.pipeline"


def get_tracer() -> trace.Tracer:
    """Tracer for pipeline spans (no-op until a provider is installed)."""
    return trace.get_tracer(TRACER_NAME)


def initialize_tracing(
    service_name: str = "studybase",
    service_version: str = "1.0.0",
    otlp_endpoint: Optional[str] = None,
    tracing_enabled: bool = True,
    model: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> Optional[TracerProvider]:
    """
    Install a tracer provider for pipeline spans and OpenAI SDK calls.

    Args:
        service_name: Name of the service for traces
        service_version: Version of the service
        otlp_endpoint: OTLP HTTP endpoint (console exporter when None)
        tracing_enabled: Enable/disable tracing
        model: Classification model, recorded on the resource
        batch_size: Classification wave size, recorded on the resource

    Returns:
        TracerProvider instance if tracing is enabled, None otherwise
    """
    if not tracing_enabled:
        logger.info("Tracing is disabled")
        return None

    attributes = {
        "service.name": service_name,
        "service.version": service_version,
    }
    if model:
        attributes["studybase.classifier.model"] = model
    if batch_size:
        attributes["studybase.classifier.batch_size"] = batch_size

    try:
        tracer_provider = TracerProvider(resource=Resource.create(attributes))
        trace.set_tracer_provider(tracer_provider)

        if otlp_endpoint:
            exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
            logger.info(f"Tracing initialized with OTLP exporter: {otlp_endpoint}")
        else:
            exporter = ConsoleSpanExporter()
            logger.info("Tracing initialized with console exporter")

        tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

        # Chunk completions show up as children of the batch spans
        OpenAIInstrumentor().instrument()
        return tracer_provider

    except Exception as e:
        logger.error(f"Failed to initialize tracing: {str(e)}", exc_info=True)
        return None


def shutdown_tracing(tracer_provider: Optional[TracerProvider]) -> None:
    """Flush and shut down the tracer provider."""
    if tracer_provider:
        try:
            tracer_provider.shutdown()
            logger.info("Tracing shutdown completed")
        except Exception as e:
            logger.warning(f"Error during tracing shutdown: {str(e)}")
