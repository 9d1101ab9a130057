"""
Request dependencies. Everything comes from app.state, set once at startup.
"""
from typing import Callable

from fastapi import Request
from sqlalchemy.orm import Session

from aidee.core.providers import GenerationConfig
from aidee.services.document.concept import ConceptPromptWriter
from aidee.services.document.generator import StructuredGenerator
from aidee.services.email.service import EmailSender
from aidee.services.image_generation.router import ProviderRouter
from aidee.services.notifications import PostResultNotifications


def get_session_factory(request: Request) -> Callable[[], Session]:
    return request.app.state.session_factory


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_config(request: Request) -> GenerationConfig:
    return request.app.state.config


def get_generator(request: Request) -> StructuredGenerator:
    return request.app.state.generator


def get_concept_writer(request: Request) -> ConceptPromptWriter:
    return request.app.state.concept_writer


def get_router(request: Request) -> ProviderRouter:
    return request.app.state.image_router


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_notifications() -> PostResultNotifications:
    return PostResultNotifications()
