"""OpenTelemetry bootstrap: tracing initialisation and span names.

When ``TracingConfig.enabled`` is false (the default) this module is a
no-op and ``tracer`` hands out non-recording spans, so the pipeline can
open spans unconditionally.

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound HTTP spans, covers the OpenAI-compatible provider)
"""

from __future__ import annotations

import base64
import logging

from opentelemetry import trace

from csvchat.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("csvchat")

# ---------------------------------------------------------------------------
# Span names and attribute keys
# ---------------------------------------------------------------------------

SPAN_CHAT_PIPELINE = "chat.pipeline"
SPAN_CSV_SUMMARIZE = "csv.summarize"
SPAN_LLM_GENERATE = "llm.generate"

ATTR_CSV_CHARS = "csv.chars"
ATTR_HISTORY_LEN = "chat.history_len"
ATTR_PROMPT_CHARS = "chat.prompt_chars"
ATTR_RESPONSE_TOKENS = "chat.response_tokens"
ATTR_ERROR_CODE = "chat.error_code"
ATTR_LLM_MODEL = "llm.model"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> bool:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Returns ``True`` when tracing was switched on.  Must run before the
    app serves its first request, since it attaches ASGI middleware.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return False

    if not settings.endpoint or not settings.username or not settings.password:
        logger.warning(
            "Tracing enabled but endpoint/credentials not configured; "
            "skipping OpenTelemetry setup."
        )
        return False

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    credentials = f"{settings.username}:{settings.password}"
    encoded = base64.b64encode(credentials.encode()).decode()
    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers={"Authorization": f"Basic {encoded}"},
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls)
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )
    return True
