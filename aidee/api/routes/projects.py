"""
Project state, product events and result email.
"""
import logging
from typing import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from aidee.api.deps import get_db, get_email_sender, get_notifications, get_session_factory
from aidee.schemas.projects import EmailIn, EventIn, ProjectState, ProjectStateOut
from aidee.services.email.service import DEFAULT_SUBJECT, EmailSender, build_summary
from aidee.services.events.service import EVENT_TYPES, EventRecorder
from aidee.services.notifications import PostResultNotifications
from aidee.services.projects.service import ProjectStateService
from aidee.services.records.service import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["projects"])


@router.get("/projects/{project_id}/state", response_model=ProjectStateOut)
def get_project_state(project_id: str, db: Session = Depends(get_db)) -> ProjectStateOut:
    state = ProjectStateService(RecordStore(db)).get_state(project_id)
    return ProjectStateOut(project_id=project_id, state=ProjectState(**state) if state else None)


@router.put("/projects/{project_id}/state", response_model=ProjectStateOut)
def put_project_state(project_id: str, payload: ProjectState, db: Session = Depends(get_db)) -> ProjectStateOut:
    saved = ProjectStateService(RecordStore(db)).save_state(project_id, payload.model_dump())
    return ProjectStateOut(project_id=project_id, state=ProjectState(**saved))


def _record_event(session_factory: Callable[[], Session], event_type: str, meta: dict) -> None:
    db = session_factory()
    try:
        EventRecorder(RecordStore(db)).record(event_type, meta)
    finally:
        db.close()


@router.post("/events/{event_type}", status_code=status.HTTP_202_ACCEPTED)
def record_event(
    event_type: str,
    background_tasks: BackgroundTasks,
    payload: EventIn | None = None,
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    notifications: PostResultNotifications = Depends(get_notifications),
) -> dict:
    event_type = event_type.strip().lower()
    if event_type not in EVENT_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown event type: {event_type}")
    notifications.add(f"event_{event_type}", _record_event, session_factory, event_type, payload.meta if payload else {})
    background_tasks.add_task(notifications.dispatch)
    return {"ok": True}


@router.post("/email")
def send_email(
    payload: EmailIn,
    background_tasks: BackgroundTasks,
    sender: EmailSender = Depends(get_email_sender),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    notifications: PostResultNotifications = Depends(get_notifications),
) -> dict:
    if not payload.to.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="recipient (to) is empty")
    error = sender.send(payload.to.strip(), payload.subject or DEFAULT_SUBJECT, build_summary(payload.brief, payload.images))
    if error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error)

    notifications.add("event_email", _record_event, session_factory, "email", {})
    background_tasks.add_task(notifications.dispatch)
    return {"ok": True}
