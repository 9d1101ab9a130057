"""
Read-only provider configuration shared by all requests.

Built once by the process entry point (GenerationConfig.from_settings) and passed
explicitly into the generators and the image router.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aidee.core.config import Settings


class AuthScheme(str, Enum):
    BEARER = "bearer"  # Authorization: Bearer <token>
    RAW = "raw"  # Authorization: <token> (Pexels)
    CLIENT_ID = "client_id"  # Authorization: Client-ID <token> (Unsplash)
    QUERY = "query"  # ?key=<token> (Gemini)


@dataclass(frozen=True)
class AuthConfig:
    token: str = ""
    scheme: AuthScheme = AuthScheme.BEARER
    param_name: str = "key"

    @property
    def is_configured(self) -> bool:
        return bool(self.token.strip())

    def apply(self, headers: dict[str, str], params: dict[str, Any]) -> None:
        """Inject credentials into outgoing headers or query params."""
        if not self.is_configured:
            return
        token = self.token.strip()
        if self.scheme == AuthScheme.BEARER:
            headers["Authorization"] = f"Bearer {token}"
        elif self.scheme == AuthScheme.RAW:
            headers["Authorization"] = token
        elif self.scheme == AuthScheme.CLIENT_ID:
            headers["Authorization"] = f"Client-ID {token}"
        elif self.scheme == AuthScheme.QUERY:
            params[self.param_name] = token


@dataclass(frozen=True)
class ProviderConfig:
    """Static configuration of one backend (language model or image)."""
    name: str
    base_url: str
    auth: AuthConfig = field(default_factory=AuthConfig)
    timeout: float = 30.0
    model: str | None = None
    max_batch_size: int = 1
    poll_interval: float = 2.0
    poll_timeout: float = 60.0
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def is_configured(self) -> bool:
        return self.auth.is_configured


@dataclass(frozen=True)
class GenerationConfig:
    llm_provider: str
    llm_providers: dict[str, ProviderConfig]
    image_provider: str
    image_providers: dict[str, ProviderConfig]
    image_fallbacks: dict[str, str] = field(default_factory=dict)
    brief_language: str = "English"
    concept_image_provider: str = "stability"
    concept_image_count: int = 18

    def fallback_for(self, provider_name: str) -> str | None:
        return self.image_fallbacks.get(provider_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        llm = {
            "openai": ProviderConfig(
                name="openai",
                base_url=settings.openai_api_url.rstrip("/"),
                auth=AuthConfig(settings.openai_api_key),
                timeout=settings.llm_timeout,
                model=settings.openai_text_model,
            ),
            "gemini": ProviderConfig(
                name="gemini",
                base_url=settings.gemini_api_endpoint.rstrip("/"),
                auth=AuthConfig(settings.gemini_api_key, AuthScheme.QUERY, "key"),
                timeout=settings.llm_timeout,
                model=settings.gemini_text_model,
            ),
        }
        images = {
            "pexels": ProviderConfig(
                name="pexels",
                base_url=settings.pexels_api_url.rstrip("/"),
                auth=AuthConfig(settings.pexels_api_key, AuthScheme.RAW),
                timeout=settings.image_request_timeout,
                max_batch_size=settings.pexels_max_batch,
            ),
            "unsplash": ProviderConfig(
                name="unsplash",
                base_url=settings.unsplash_api_url.rstrip("/"),
                auth=AuthConfig(settings.unsplash_access_key, AuthScheme.CLIENT_ID),
                timeout=settings.image_request_timeout,
                max_batch_size=settings.unsplash_max_batch,
            ),
            "openai": ProviderConfig(
                name="openai",
                base_url=settings.openai_api_url.rstrip("/"),
                auth=AuthConfig(settings.openai_api_key),
                timeout=settings.openai_image_timeout,
                model=settings.openai_image_model,
                max_batch_size=settings.openai_image_max_batch,
                options={"size": settings.openai_image_size},
            ),
            "stability": ProviderConfig(
                name="stability",
                base_url=settings.stability_api_url.rstrip("/"),
                auth=AuthConfig(settings.stability_api_key),
                timeout=settings.stability_timeout,
                model=settings.stability_engine,
                max_batch_size=settings.stability_max_batch,
            ),
            "huggingface": ProviderConfig(
                name="huggingface",
                base_url=settings.huggingface_api_url.rstrip("/"),
                auth=AuthConfig(settings.huggingface_api_key),
                timeout=settings.huggingface_timeout,
                model=settings.huggingface_image_model,
                max_batch_size=1,
            ),
            "replicate": ProviderConfig(
                name="replicate",
                base_url=settings.replicate_api_url.rstrip("/"),
                auth=AuthConfig(settings.replicate_api_token),
                timeout=settings.image_request_timeout,
                model=settings.replicate_image_model,
                max_batch_size=settings.replicate_max_batch,
                poll_interval=settings.replicate_poll_interval,
                poll_timeout=settings.replicate_poll_timeout,
            ),
            "meshy": ProviderConfig(
                name="meshy",
                base_url=settings.meshy_api_url.rstrip("/"),
                auth=AuthConfig(settings.meshy_api_key),
                timeout=settings.image_request_timeout,
                max_batch_size=1,
                poll_interval=settings.meshy_poll_interval,
                poll_timeout=settings.meshy_poll_timeout,
                options={"art_style": settings.meshy_art_style},
            ),
        }
        return cls(
            llm_provider=settings.llm_provider,
            llm_providers=llm,
            image_provider=settings.image_provider,
            image_providers=images,
            image_fallbacks=settings.image_fallback_map,
            brief_language=settings.brief_language,
            concept_image_provider=settings.concept_image_provider,
            concept_image_count=settings.concept_image_count,
        )
