"""
Image generation routing: resolve provider, clamp count, run, fall back once.

There is no safe fallback image, so failures propagate as ImageGenerationError
after at most one attempt against the call site's fallback provider.
"""
import logging
from typing import Callable

from aidee.core.providers import GenerationConfig
from aidee.services.image_generation.base import (
    AsyncImageProvider,
    Image,
    ImageGenerationError,
    ImageProvider,
    ProviderKind,
    SyncImageProvider,
    clamp_count,
)
from aidee.services.image_generation.factory import ImageProviderFactory
from aidee.services.image_generation.poller import AsyncTaskPoller
from aidee.services.providers.failure_types import ErrorKind, ProviderCallError
from aidee.utils.metrics import image_requests_total

logger = logging.getLogger(__name__)

# Explicit "no fallback" marker for callers that must not use the configured map.
NO_FALLBACK = "none"


class ProviderRouter:
    def __init__(
        self,
        config: GenerationConfig,
        providers: dict[str, ImageProvider] | None = None,
        poller_factory: Callable[[AsyncImageProvider], AsyncTaskPoller] = AsyncTaskPoller,
    ) -> None:
        self.config = config
        self.providers = providers if providers is not None else ImageProviderFactory.create_all(config)
        self.poller_factory = poller_factory

    def resolve(self, name: str | None) -> ImageProvider:
        """
        Raises:
            ImageGenerationError: INVALID_INPUT for an unknown provider name.
        """
        key = (name or self.config.image_provider).strip().lower()
        provider = self.providers.get(key)
        if provider is None:
            available = ", ".join(sorted(self.providers)) or "none"
            raise ImageGenerationError(
                ErrorKind.INVALID_INPUT,
                f"Unknown image provider: {key}. Available providers: {available}",
                provider=key,
            )
        return provider

    def _fallback_name(self, primary: str, fallback: str | None) -> str | None:
        if fallback is None:
            name = self.config.fallback_for(primary)
        else:
            name = fallback.strip().lower()
        if not name or name == NO_FALLBACK or name == primary:
            return None
        return name

    def generate(
        self,
        prompt: str,
        requested_count: int,
        provider_preference: str | None = None,
        fallback: str | None = None,
    ) -> list[Image]:
        """
        Produce up to requested_count images (clamped into [1, max batch]).

        fallback overrides the configured fallback for this call site; NO_FALLBACK disables it.

        Raises:
            ImageGenerationError: INVALID_INPUT (blank prompt, bad count, unknown provider or call-site
                fallback) before any network call; otherwise the failure kind of the last provider tried.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise ImageGenerationError(ErrorKind.INVALID_INPUT, "prompt must be a non-empty string")
        try:
            requested = int(requested_count)
        except (TypeError, ValueError, OverflowError) as e:
            raise ImageGenerationError(ErrorKind.INVALID_INPUT, f"invalid image count: {requested_count!r}") from e

        primary = self.resolve(provider_preference)
        fallback_name = self._fallback_name(primary.name, fallback)
        if fallback is not None and fallback_name:
            # A call-site fallback is checked up front; the configured map is only consulted on failure.
            self.resolve(fallback_name)

        count = clamp_count(requested, primary.max_batch_size)
        try:
            images = self._run(primary, prompt.strip(), count, requested)
        except ImageGenerationError as primary_error:
            image_requests_total.labels(provider=primary.name, outcome=primary_error.kind.value).inc()
            fallback_provider = self.providers.get(fallback_name) if fallback_name else None
            if fallback_provider is None:
                if fallback_name:
                    logger.warning(
                        "image_fallback_unknown",
                        extra={"provider": primary.name, "fallback_provider": fallback_name},
                    )
                raise
            logger.warning(
                "image_provider_fallback",
                extra={
                    "provider": primary.name,
                    "fallback_provider": fallback_provider.name,
                    "kind": primary_error.kind.value,
                    "error": primary_error.message,
                },
            )
            # Same clamped count, clamped again to the fallback's own limit.
            fallback_count = clamp_count(count, fallback_provider.max_batch_size)
            try:
                images = self._run(fallback_provider, prompt.strip(), fallback_count, requested)
            except ImageGenerationError as fallback_error:
                image_requests_total.labels(provider=fallback_provider.name, outcome=fallback_error.kind.value).inc()
                fallback_error.detail = {**fallback_error.detail, "primary": primary_error.to_dict()}
                raise fallback_error from primary_error
            image_requests_total.labels(provider=fallback_provider.name, outcome="fallback_success").inc()
            return images

        image_requests_total.labels(provider=primary.name, outcome="success").inc()
        return images

    def _run(self, provider: ImageProvider, prompt: str, count: int, requested: int) -> list[Image]:
        if not provider.is_available():
            raise ImageGenerationError(
                ErrorKind.PROVIDER_FAILURE,
                f"{provider.name} is not configured (missing credential)",
                provider=provider.name,
            )
        logger.info(
            "image_generation_started",
            extra={"provider": provider.name, "requested": requested, "clamped": count},
        )

        if provider.kind == ProviderKind.ASYNC:
            images = self.poller_factory(provider).run(prompt, count)
        else:
            images = self._run_sync(provider, prompt, count)

        # Partial batches are returned as-is; an empty batch is a failure.
        images = images[:count]
        if not images:
            raise ImageGenerationError(
                ErrorKind.PROVIDER_FAILURE,
                f"{provider.name} returned no usable images",
                provider=provider.name,
            )
        logger.info(
            "image_generation_succeeded",
            extra={"provider": provider.name, "clamped": count, "delivered": len(images)},
        )
        return images

    def _run_sync(self, provider: SyncImageProvider, prompt: str, count: int) -> list[Image]:
        try:
            return provider.generate(prompt, count)
        except ProviderCallError as e:
            raise ImageGenerationError(
                ErrorKind.PROVIDER_FAILURE, str(e), provider=provider.name, detail=e.to_detail()
            ) from e
        except ValueError as e:
            # Body declared JSON but did not parse.
            raise ImageGenerationError(
                ErrorKind.PROVIDER_FAILURE,
                f"{provider.name} returned an unreadable body: {e}",
                provider=provider.name,
            ) from e
