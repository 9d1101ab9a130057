import logging
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session as DBSession

from aidee.models.record import StoredRecord

logger = logging.getLogger(__name__)

# Collections written by the application.
BRIEFS = "briefs"
IMAGE_BATCHES = "image_batches"
EVENTS = "events"
PROJECT_STATES = "project_states"


class RecordStore:
    """Key-value store of JSON records grouped into collections."""

    def __init__(self, db: DBSession):
        self.db = db

    def save(self, collection: str, record: dict[str, Any]) -> str:
        """Insert a new record under a generated key; returns the key."""
        key = str(uuid4())
        row = StoredRecord(collection=collection, key=key, payload=dict(record))
        self.db.add(row)
        self.db.commit()
        logger.info("record_saved", extra={"collection": collection, "record_id": key})
        return key

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        row = self._row(collection, key)
        return dict(row.payload) if row else None

    def put(self, collection: str, key: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace the record stored under key."""
        row = self._row(collection, key)
        if row is None:
            row = StoredRecord(collection=collection, key=key, payload=dict(record))
            self.db.add(row)
        else:
            row.payload = dict(record)
        self.db.commit()
        logger.info("record_put", extra={"collection": collection, "record_id": key})
        return dict(row.payload)

    def _row(self, collection: str, key: str) -> StoredRecord | None:
        return (
            self.db.query(StoredRecord)
            .filter(StoredRecord.collection == collection, StoredRecord.key == key)
            .one_or_none()
        )
