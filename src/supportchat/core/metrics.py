"""Prometheus metrics for the support chat backend.

Business metrics that complement the HTTP metrics provided by
``prometheus-fastapi-instrumentator``.  All metrics use the
``supportchat_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from supportchat.configs.config import AppConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LLM metrics
# ---------------------------------------------------------------------------

LLM_REQUESTS_TOTAL = Counter(
    "supportchat_llm_requests_total",
    "LLM adapter calls by provider and outcome",
    # outcome: ok | empty_input | rate_limited | auth_error | timeout
    #          | unavailable | http_error | parse_error | unsupported | error
    ["provider", "outcome"],
)

LLM_LATENCY_SECONDS = Histogram(
    "supportchat_llm_latency_seconds",
    "Wall time of provider calls, including failures",
    ["provider"],
    buckets=(0.25, 0.5, 1, 2, 5, 10, 20, 30, 60),
)

LLM_INPUT_TRUNCATIONS_TOTAL = Counter(
    "supportchat_llm_input_truncations_total",
    "User messages truncated before being sent to the provider",
)

# ---------------------------------------------------------------------------
# Store metrics
# ---------------------------------------------------------------------------

MESSAGES_PERSISTED_TOTAL = Counter(
    "supportchat_messages_persisted_total",
    "Messages written to the store, by sender",
    ["sender"],  # user | ai
)

CONVERSATIONS_CREATED_TOTAL = Counter(
    "supportchat_conversations_created_total",
    "Conversations created",
)

CONVERSATIONS_DELETED_TOTAL = Counter(
    "supportchat_conversations_deleted_total",
    "Conversations deleted, explicitly or by the retention purge",
    ["reason"],  # explicit | purge
)


def instrument_app(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*."""
    if not config.metrics.enabled:
        logger.info("Prometheus metrics disabled.")
        return

    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    logger.info("Prometheus metrics initialised")
