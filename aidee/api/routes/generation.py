"""
Brief, image, concept-image and design-prompt generation endpoints.
Persistence runs as post-result notifications after the response is built.
"""
import logging
from typing import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from aidee.api.deps import (
    get_concept_writer,
    get_config,
    get_generator,
    get_notifications,
    get_router,
    get_session_factory,
)
from aidee.core.providers import GenerationConfig
from aidee.schemas.generation import (
    BriefIn,
    BriefOut,
    ConceptImagesIn,
    ConceptImagesOut,
    DesignPromptsIn,
    DesignPromptsOut,
    ErrorOut,
    ImagesIn,
    ImagesOut,
)
from aidee.services.document.concept import ConceptPromptWriter
from aidee.services.document.generator import Error, StructuredGenerator
from aidee.services.document.prompts import build_design_prompts
from aidee.services.image_generation.assembler import assemble_images
from aidee.services.image_generation.base import ImageGenerationError
from aidee.services.image_generation.router import ProviderRouter
from aidee.services.notifications import PostResultNotifications
from aidee.services.providers.failure_types import ErrorKind, GenerationError
from aidee.services.records.persist import save_record
from aidee.services.records.service import BRIEFS, IMAGE_BATCHES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])

_ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TASK_TIMED_OUT: status.HTTP_504_GATEWAY_TIMEOUT,
}


def error_response(error: GenerationError) -> JSONResponse:
    code = _ERROR_STATUS.get(error.kind, status.HTTP_502_BAD_GATEWAY)
    return JSONResponse(status_code=code, content=error.to_dict())


@router.post("/briefs", response_model=BriefOut, responses={400: {"model": ErrorOut}})
def create_brief(
    payload: BriefIn,
    background_tasks: BackgroundTasks,
    generator: StructuredGenerator = Depends(get_generator),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    notifications: PostResultNotifications = Depends(get_notifications),
):
    result = generator.generate(payload.idea, provider_preference=payload.provider, auxiliary_context=payload.context)
    if isinstance(result, Error):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": result.message, "kind": result.kind.value, "provider": None},
        )

    notifications.add(
        "save_brief",
        save_record,
        session_factory,
        BRIEFS,
        {"idea": payload.idea, "brief": result.document, "provider": result.provider},
    )
    background_tasks.add_task(notifications.dispatch)
    return BriefOut(brief=result.document)


@router.post(
    "/images",
    response_model=ImagesOut,
    responses={400: {"model": ErrorOut}, 502: {"model": ErrorOut}, 504: {"model": ErrorOut}},
)
def create_images(
    payload: ImagesIn,
    background_tasks: BackgroundTasks,
    image_router: ProviderRouter = Depends(get_router),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    notifications: PostResultNotifications = Depends(get_notifications),
):
    try:
        primary = image_router.resolve(payload.provider).name
        images = image_router.generate(payload.prompt, payload.count, payload.provider, payload.fallback)
    except ImageGenerationError as e:
        logger.warning(
            "image_request_failed",
            extra={"provider": e.provider, "kind": e.kind.value, "error": e.message},
        )
        return error_response(e)

    body = assemble_images(images, payload.count, primary)
    notifications.add(
        "save_image_batch",
        save_record,
        session_factory,
        IMAGE_BATCHES,
        {"prompt": payload.prompt, **body},
    )
    background_tasks.add_task(notifications.dispatch)
    return body


@router.post(
    "/concept-images",
    response_model=ConceptImagesOut,
    responses={400: {"model": ErrorOut}, 502: {"model": ErrorOut}, 504: {"model": ErrorOut}},
)
def create_concept_images(
    payload: ConceptImagesIn,
    background_tasks: BackgroundTasks,
    config: GenerationConfig = Depends(get_config),
    writer: ConceptPromptWriter = Depends(get_concept_writer),
    image_router: ProviderRouter = Depends(get_router),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    notifications: PostResultNotifications = Depends(get_notifications),
):
    """Brief -> English concept prompt -> concept image batch (default: Stability, up to 18 asked)."""
    try:
        concept = writer.write(payload.brief, payload.user_notes, payload.visual_categories)
    except GenerationError as e:
        return error_response(e)

    provider_name = payload.provider or config.concept_image_provider
    requested = config.concept_image_count
    try:
        primary = image_router.resolve(provider_name).name
        images = image_router.generate(concept.text, requested, provider_name, payload.fallback)
    except ImageGenerationError as e:
        logger.warning(
            "concept_images_failed",
            extra={"provider": e.provider, "kind": e.kind.value, "error": e.message},
        )
        return error_response(e)

    body = {**assemble_images(images, requested, primary), "concept_prompt": concept.text}
    notifications.add(
        "save_concept_batch",
        save_record,
        session_factory,
        IMAGE_BATCHES,
        {"prompt": concept.text, "kind": "concept", **body},
    )
    background_tasks.add_task(notifications.dispatch)
    return body


@router.post("/design-prompts", response_model=DesignPromptsOut)
def create_design_prompts(payload: DesignPromptsIn) -> DesignPromptsOut:
    if not payload.idea.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="idea is required")
    return DesignPromptsOut(**build_design_prompts(payload.idea, payload.brief))
