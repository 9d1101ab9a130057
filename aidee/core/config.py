"""
Application configuration.
All settings are loaded from environment variables.
Provider credentials default to empty: a missing key disables that provider, it never stops the process.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # Comma-separated list (e.g. http://localhost:3000,https://aidee.app). Empty = default list in main.
    cors_origins: str = ""

    # ===========================================
    # DATABASE
    # ===========================================
    database_url: str = "sqlite:///./aidee.db"

    # ===========================================
    # LANGUAGE MODEL (brief generation)
    # ===========================================
    llm_provider: str = "openai"  # openai, gemini
    llm_timeout: float = 60.0
    # Language the brief values are written in.
    brief_language: str = "English"

    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1"
    openai_text_model: str = "gpt-4o-mini"
    openai_image_model: str = "gpt-image-1"
    openai_image_size: str = "1024x1024"
    openai_image_max_batch: int = 4
    openai_image_timeout: float = 120.0

    gemini_api_key: str = ""
    gemini_api_endpoint: str = "https://generativelanguage.googleapis.com"
    gemini_text_model: str = "gemini-2.5-flash"

    # ===========================================
    # IMAGE PROVIDERS
    # ===========================================
    pexels_api_key: str = ""
    pexels_api_url: str = "https://api.pexels.com/v1"
    pexels_max_batch: int = 4

    unsplash_access_key: str = ""
    unsplash_api_url: str = "https://api.unsplash.com"
    unsplash_max_batch: int = 4

    stability_api_key: str = ""
    stability_api_url: str = "https://api.stability.ai/v1"
    stability_engine: str = "stable-diffusion-xl-1024-v1-0"
    stability_max_batch: int = 10  # API limit: samples <= 10
    stability_timeout: float = 120.0

    huggingface_api_key: str = ""
    huggingface_api_url: str = "https://api-inference.huggingface.co"
    huggingface_image_model: str = "black-forest-labs/FLUX.1-schnell"
    huggingface_timeout: float = 120.0

    replicate_api_token: str = ""
    replicate_api_url: str = "https://api.replicate.com/v1"
    replicate_image_model: str = "black-forest-labs/flux-schnell"
    replicate_max_batch: int = 4
    replicate_poll_interval: float = 2.0
    replicate_poll_timeout: float = 120.0

    meshy_api_key: str = ""
    meshy_api_url: str = "https://api.meshy.ai/openapi/v2"
    meshy_art_style: str = "realistic"
    meshy_poll_interval: float = 3.0
    meshy_poll_timeout: float = 60.0

    # ===========================================
    # IMAGE GENERATION - COMMON SETTINGS
    # ===========================================
    image_provider: str = "pexels"
    # Per-call-site fallback map "primary:fallback,..." (at most one fallback per provider).
    image_fallbacks: str = "pexels:unsplash,unsplash:pexels"
    image_request_timeout: float = 30.0
    # Concept images: the UI shows up to 18, the provider limit still applies.
    concept_image_provider: str = "stability"
    concept_image_count: int = 18

    # ===========================================
    # EMAIL (Resend)
    # ===========================================
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com"
    email_sender: str = "Aidee <onboarding@resend.dev>"

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("llm_provider", "image_provider", "concept_image_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def image_fallback_map(self) -> dict[str, str]:
        """Parse image_fallbacks into {primary: fallback}."""
        result: dict[str, str] = {}
        for pair in self.image_fallbacks.split(","):
            if ":" not in pair:
                continue
            primary, fallback = (p.strip().lower() for p in pair.split(":", 1))
            if primary and fallback and primary != fallback:
                result[primary] = fallback
        return result

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
