"""
Base classes and types for image generation providers.
Used by the factory, the router, the poller and all providers.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable

from aidee.core.providers import ProviderConfig
from aidee.services.providers.client import ProviderClient
from aidee.services.providers.failure_types import GenerationError

logger = logging.getLogger(__name__)


class ProviderKind(str, Enum):
    SYNC = "sync"  # result in the response to the generation call
    ASYNC = "async"  # task handle now, result via polling


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELED)


@dataclass(frozen=True)
class Image:
    """One visual artifact. Construction fails if a required field is empty."""
    id: str
    thumbnail_ref: str
    full_ref: str
    alt_text: str
    source_provider: str
    author: str | None = None
    link: str | None = None

    def __post_init__(self) -> None:
        for name in ("id", "thumbnail_ref", "full_ref", "alt_text", "source_provider"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"image field {name!r} is empty")


@dataclass
class TaskSnapshot:
    """What one create/status response says about a remote task."""
    status: TaskStatus
    task_id: str | None = None
    result_ref: str | None = None
    error: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerationTask:
    """
    Local handle of a remote async task, owned by the call that started it.
    Mutated only from status responses; closed once the poller returns.
    """
    id: str
    provider: str
    prompt: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    result_ref: str | None = None
    closed: bool = False


class ImageGenerationError(GenerationError):
    """Raised when image generation fails; kind separates bad input, provider failure and task outcome."""


def clamp_count(requested: int, max_batch_size: int) -> int:
    """Clamp a requested image count into [1, max_batch_size]."""
    return max(1, min(int(requested), max(1, int(max_batch_size))))


def collect_images(
    items: Iterable[Any],
    build: Callable[[Any], Image],
    provider: str,
    limit: int,
) -> list[Image]:
    """Map raw provider items to images, dropping items that would be partially populated."""
    images: list[Image] = []
    for item in items:
        if len(images) >= limit:
            break
        try:
            images.append(build(item))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.info("image_item_skipped", extra={"provider": provider, "error": str(e)})
    return images


class ImageProvider(ABC):
    """Base class for image generation providers."""

    kind: ProviderKind = ProviderKind.SYNC

    def __init__(self, config: ProviderConfig, client: ProviderClient | None = None) -> None:
        self.config = config
        self.client = client or ProviderClient(config.name)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def max_batch_size(self) -> int:
        return max(1, self.config.max_batch_size)

    def is_available(self) -> bool:
        """Check if provider is configured (credential present)."""
        return self.config.is_configured


class SyncImageProvider(ImageProvider):
    kind = ProviderKind.SYNC

    @abstractmethod
    def generate(self, prompt: str, count: int) -> list[Image]:
        """Return up to count images. Raises ProviderCallError on transport failure."""


class AsyncImageProvider(ImageProvider):
    kind = ProviderKind.ASYNC

    @abstractmethod
    def create_task(self, prompt: str, count: int) -> TaskSnapshot:
        """Issue the creation call; the snapshot must carry task_id."""

    @abstractmethod
    def fetch_status(self, task_id: str) -> TaskSnapshot:
        """Issue one status call."""

    @abstractmethod
    def images_from(self, task: GenerationTask, snapshot: TaskSnapshot) -> list[Image]:
        """Map a succeeded snapshot to images."""


def data_uri(b64: str, mime: str = "image/png") -> str:
    """Inline base64 image data as a data: URI usable as both thumbnail and full ref."""
    return f"data:{mime};base64,{b64}"


def new_image_id(provider: str) -> str:
    """Id for generated images that carry no provider-side id."""
    return f"{provider}-{uuid.uuid4().hex[:12]}"
