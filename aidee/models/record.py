from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, UniqueConstraint

from aidee.db.base import Base


class StoredRecord(Base):
    """Opaque JSON blob addressed by (collection, key)."""

    __tablename__ = "stored_records"
    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_stored_records_collection_key"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    collection = Column(String, nullable=False, index=True)
    key = Column(String, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
