"""
Main FastAPI application for the Aidee generation API.
Serves health, brief/image generation, project state, events, email and metrics.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from aidee.api.routes import generation, health, projects
from aidee.core.config import Settings, settings
from aidee.core.logging import configure_logging
from aidee.core.providers import GenerationConfig
from aidee.db.session import SessionLocal, init_db
from aidee.services.document.concept import ConceptPromptWriter
from aidee.services.document.generator import StructuredGenerator
from aidee.services.document.providers import build_language_models
from aidee.services.email.service import EmailSender
from aidee.services.image_generation.router import ProviderRouter
from aidee.utils.metrics import router as metrics_router


def create_app(app_settings: Settings | None = None, session_factory: sessionmaker | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(
        title="Aidee API",
        description="Design brief and concept image generation",
        version="1.0.0",
    )

    # Built once; read-only for every request.
    config = GenerationConfig.from_settings(app_settings)
    app.state.config = config
    language_models = build_language_models(config)
    app.state.generator = StructuredGenerator(config, providers=language_models)
    app.state.concept_writer = ConceptPromptWriter(config, providers=language_models)
    app.state.image_router = ProviderRouter(config)
    app.state.email_sender = EmailSender(
        app_settings.resend_api_key,
        app_settings.resend_api_url,
        app_settings.email_sender,
    )
    app.state.session_factory = session_factory or SessionLocal
    if session_factory is None:
        init_db()

    # CORS
    origins = [o.strip() for o in app_settings.cors_origins.split(",") if o.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(health.router, tags=["health"])
    app.include_router(generation.router)
    app.include_router(projects.router)
    app.include_router(metrics_router)
    return app


configure_logging()
app = create_app()
