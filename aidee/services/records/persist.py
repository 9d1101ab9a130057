"""
Record writes that run outside the request's DB session (post-result notifications).
"""
from typing import Any, Callable

from sqlalchemy.orm import Session as DBSession

from aidee.services.records.service import RecordStore


def save_record(session_factory: Callable[[], DBSession], collection: str, record: dict[str, Any]) -> str:
    db = session_factory()
    try:
        return RecordStore(db).save(collection, record)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
