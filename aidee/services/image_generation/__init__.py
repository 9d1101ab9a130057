"""
Image generation service with multi-provider support.
"""
from .base import (
    AsyncImageProvider,
    GenerationTask,
    Image,
    ImageGenerationError,
    ImageProvider,
    ProviderKind,
    SyncImageProvider,
    TaskStatus,
)
from .assembler import assemble_images, image_to_dict
from .factory import ImageProviderFactory
from .poller import AsyncTaskPoller
from .router import NO_FALLBACK, ProviderRouter

__all__ = [
    "AsyncImageProvider",
    "GenerationTask",
    "Image",
    "ImageGenerationError",
    "ImageProvider",
    "ProviderKind",
    "SyncImageProvider",
    "TaskStatus",
    "assemble_images",
    "image_to_dict",
    "ImageProviderFactory",
    "AsyncTaskPoller",
    "NO_FALLBACK",
    "ProviderRouter",
]
