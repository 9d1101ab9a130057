"""
Factory for creating image generation providers based on configuration.
"""
import logging

from aidee.core.providers import GenerationConfig, ProviderConfig
from aidee.services.image_generation.base import ImageProvider
from aidee.services.image_generation.providers.huggingface import HuggingFaceProvider
from aidee.services.image_generation.providers.meshy import MeshyProvider
from aidee.services.image_generation.providers.openai import OpenAIImageProvider
from aidee.services.image_generation.providers.pexels import PexelsProvider
from aidee.services.image_generation.providers.replicate import ReplicateProvider
from aidee.services.image_generation.providers.stability import StabilityProvider
from aidee.services.image_generation.providers.unsplash import UnsplashProvider
from aidee.services.providers.client import ProviderClient

logger = logging.getLogger(__name__)


class ImageProviderFactory:
    """Factory for creating image generation providers."""

    PROVIDERS: dict[str, type[ImageProvider]] = {
        "pexels": PexelsProvider,
        "unsplash": UnsplashProvider,
        "openai": OpenAIImageProvider,
        "stability": StabilityProvider,
        "huggingface": HuggingFaceProvider,
        "replicate": ReplicateProvider,
        "meshy": MeshyProvider,
    }

    @classmethod
    def create(
        cls,
        provider_name: str,
        config: ProviderConfig,
        client: ProviderClient | None = None,
    ) -> ImageProvider:
        """
        Create provider instance by name.

        Raises:
            ValueError: If provider name is unknown
        """
        provider_class = cls.PROVIDERS.get(provider_name.lower())
        if not provider_class:
            available = ", ".join(cls.PROVIDERS.keys())
            raise ValueError(f"Unknown provider: {provider_name}. Available providers: {available}")

        provider = provider_class(config, client)
        if not provider.is_available():
            logger.info("image_provider_not_configured", extra={"provider": provider_name})
        return provider

    @classmethod
    def create_all(cls, config: GenerationConfig) -> dict[str, ImageProvider]:
        """One instance per configured image provider; unconfigured ones are kept and report unavailable."""
        providers: dict[str, ImageProvider] = {}
        for name, provider_config in config.image_providers.items():
            if name not in cls.PROVIDERS:
                logger.warning("unknown image provider skipped", extra={"provider": name})
                continue
            providers[name] = cls.create(name, provider_config)
        return providers
