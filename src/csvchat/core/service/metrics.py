"""Prometheus metrics for csvchat.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``csvchat_`` prefix.
"""

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from csvchat.configs.system import MetricsConfig, TracingConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Chat pipeline metrics
# ---------------------------------------------------------------------------

CHAT_REQUESTS_ACTIVE = Gauge(
    "csvchat_chat_requests_active",
    "Number of chat pipelines currently in progress",
)

CHAT_REQUESTS_TOTAL = Counter(
    "csvchat_chat_requests_total",
    "Total chat pipelines run, by outcome",
    ["status"],  # "ok" | "cancelled" | error code, e.g. "QUOTA_EXCEEDED"
)

CHAT_REQUEST_DURATION_SECONDS = Histogram(
    "csvchat_chat_request_duration_seconds",
    "End-to-end duration of a chat pipeline",
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60, 120),
)

RESPONSE_ESTIMATED_TOKENS = Histogram(
    "csvchat_response_estimated_tokens",
    "Estimated token count of normalized responses",
    buckets=(64, 128, 256, 512, 1024, 2048, 4096),
)

CSV_SUMMARY_FALLBACKS_TOTAL = Counter(
    "csvchat_csv_summary_fallbacks_total",
    "CSV summaries that fell back to the raw input",
)

# ---------------------------------------------------------------------------
# Provider metrics
# ---------------------------------------------------------------------------

LLM_CALLS_IN_FLIGHT = Gauge(
    "csvchat_llm_calls_in_flight",
    "Number of LLM calls currently in-flight",
    ["model_name"],
)

LLM_CALL_DURATION_SECONDS = Histogram(
    "csvchat_llm_call_duration_seconds",
    "Latency of LLM generate calls",
    ["model_name"],
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60, 120),
)


# ---------------------------------------------------------------------------
# Decorator
# ---------------------------------------------------------------------------


def observe_chat(
    fn: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Decorator for the pipeline coroutine that records chat metrics.

    Tracks the active gauge, the outcome counter (``ok``, ``cancelled``
    or the ``code`` of the raised error) and the duration histogram.
    """

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        CHAT_REQUESTS_ACTIVE.inc()
        start = time.monotonic()
        status = "ok"
        try:
            return await fn(*args, **kwargs)
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        except Exception as exc:
            status = getattr(exc, "code", None) or "error"
            raise
        finally:
            CHAT_REQUESTS_ACTIVE.dec()
            CHAT_REQUESTS_TOTAL.labels(status=status).inc()
            CHAT_REQUEST_DURATION_SECONDS.observe(time.monotonic() - start)

    return wrapper


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------


def setup_metrics(
    app: FastAPI, config: MetricsConfig, tracing: TracingConfig
) -> None:
    """Attach ``prometheus-fastapi-instrumentator`` and the metrics route."""
    if not config.enabled:
        logger.info("Prometheus metrics disabled")
        return

    Instrumentator(
        excluded_handlers=tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint=config.endpoint)

    logger.info("Prometheus metrics initialised")
