from typing import Any

from pydantic import BaseModel


class ProjectState(BaseModel):
    idea: str | None = None
    survey: Any = None
    rfp_json: dict[str, Any] | None = None
    user_notes: str | None = None
    step: int | None = None


class ProjectStateOut(BaseModel):
    project_id: str
    state: ProjectState | None


class EventIn(BaseModel):
    meta: dict[str, Any] = {}


class EmailIn(BaseModel):
    to: str
    subject: str | None = None
    brief: dict[str, Any] | None = None
    images: list[dict[str, Any]] | None = None
