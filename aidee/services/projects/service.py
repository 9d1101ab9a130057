"""
Per-project UI state: {idea, survey, rfp_json, user_notes, step}, upserted by project id.
"""
from typing import Any

from aidee.services.records.service import PROJECT_STATES, RecordStore

STATE_FIELDS = ("idea", "survey", "rfp_json", "user_notes", "step")


class ProjectStateService:
    def __init__(self, store: RecordStore):
        self.store = store

    def get_state(self, project_id: str) -> dict[str, Any] | None:
        return self.store.get(PROJECT_STATES, project_id)

    def save_state(self, project_id: str, state: dict[str, Any]) -> dict[str, Any]:
        """Store only the known fields; absent ones are kept as None."""
        normalized = {name: state.get(name) for name in STATE_FIELDS}
        return self.store.put(PROJECT_STATES, project_id, normalized)
