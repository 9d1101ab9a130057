"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
provider_requests_total = Counter(
    "provider_requests_total",
    "Total outbound provider API requests",
    ["provider", "status"],
)

documents_generated_total = Counter(
    "documents_generated_total",
    "Brief and concept prompt generation results",
    ["provider", "outcome"],  # ok, fallback, invalid_input, concept_ok, concept_fallback
)

image_requests_total = Counter(
    "image_requests_total",
    "Image generation requests",
    ["provider", "outcome"],  # success, fallback_success, error kind
)

async_task_polls_total = Counter(
    "async_task_polls_total",
    "Status calls issued against async provider tasks",
    ["provider"],
)

product_events_total = Counter(
    "product_events_total",
    "Product events recorded (visit, rfp, design, email)",
    ["event_type"],
)

notification_failures_total = Counter(
    "notification_failures_total",
    "Post-result notifications that raised",
    ["notification"],
)

# Histograms
provider_request_duration_seconds = Histogram(
    "provider_request_duration_seconds",
    "Provider API request duration",
    ["provider"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60, 120],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
