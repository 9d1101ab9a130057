"""
Product events (visit, rfp, design, email): counted in Prometheus and stored as records.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from aidee.services.records.service import EVENTS, RecordStore
from aidee.utils.metrics import product_events_total

logger = logging.getLogger(__name__)

EVENT_TYPES = frozenset({"visit", "rfp", "design", "email"})


class EventRecorder:
    def __init__(self, store: RecordStore):
        self.store = store

    def record(self, event_type: str, meta: dict[str, Any] | None = None) -> str:
        """
        Raises:
            ValueError: unknown event type.
        """
        event_type = (event_type or "").strip().lower()
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type or '<empty>'}")
        product_events_total.labels(event_type=event_type).inc()
        record_id = self.store.save(
            EVENTS,
            {
                "type": event_type,
                "count": 1,
                "meta": meta or {},
                "recorded_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        logger.info("product_event_recorded", extra={"event_type": event_type, "record_id": record_id})
        return record_id
