"""
Concept-image prompts: brief + user notes + visual categories -> one English
paragraph for a text-to-image model.

The language model only rewrites the context. When it is unavailable or fails,
the context itself is used as the prompt.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

from aidee.core.providers import GenerationConfig
from aidee.services.document.providers import LanguageModelProvider, build_language_models
from aidee.services.providers.failure_types import ErrorKind, GenerationError, ProviderCallError
from aidee.utils.metrics import documents_generated_total

logger = logging.getLogger(__name__)


CONCEPT_SYSTEM_PROMPT = (
    "You write rich but concise English prompts for Stable Diffusion XL to create product "
    "concept reference images. Summarize and translate the given description into ONE English "
    "paragraph (around 60-120 tokens). Describe product type, overall concept, color and tone, "
    "form and style, and space or environment if mentioned. The output must be English only."
)

DEFAULT_VISUAL_CATEGORIES = ("color/tone", "form/style", "space/environment", "similar products")


@dataclass(frozen=True)
class ConceptPrompt:
    text: str
    provider: str | None  # None when the context was used as-is
    detail: dict[str, Any] = field(default_factory=dict)

    @property
    def fell_back(self) -> bool:
        return self.provider is None


def _section(brief: dict[str, Any], key: str) -> dict[str, Any]:
    value = brief.get(key)
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


def build_concept_context(
    brief: dict[str, Any],
    user_notes: str | None = None,
    visual_categories: list[str] | None = None,
) -> str:
    """Labelled lines describing the concept; blank fields are left out."""
    rfp = _section(brief, "visual_rfp")
    concept = _section(brief, "concept_and_references")
    categories = _strings(visual_categories) or list(DEFAULT_VISUAL_CATEGORIES)
    lines = [
        ("Project", _str(rfp.get("project_title"))),
        ("Background", _str(rfp.get("background"))),
        ("Objective", _str(rfp.get("objective"))),
        ("Target users", _str(rfp.get("target_users"))),
        ("Concept", _str(concept.get("concept_summary"))),
        ("Reference keywords", ", ".join(_strings(concept.get("reference_keywords")))),
        ("Visual categories", ", ".join(categories)),
        ("Notes", _str(user_notes)),
    ]
    return "\n".join(f"{label}: {value}" for label, value in lines if value)


class ConceptPromptWriter:
    def __init__(
        self,
        config: GenerationConfig,
        providers: dict[str, LanguageModelProvider] | None = None,
    ) -> None:
        self.config = config
        self.providers = providers if providers is not None else build_language_models(config)

    def write(
        self,
        brief: Any,
        user_notes: str | None = None,
        visual_categories: list[str] | None = None,
        provider_preference: str | None = None,
    ) -> ConceptPrompt:
        """
        Raises:
            GenerationError: INVALID_INPUT when brief is missing or not an object.
        """
        if not isinstance(brief, dict) or not brief:
            raise GenerationError(ErrorKind.INVALID_INPUT, "a brief is required; generate one first")

        context = build_concept_context(brief, user_notes, visual_categories)
        name = (provider_preference or self.config.llm_provider).strip().lower()
        provider = self.providers.get(name)
        if provider is None or not provider.is_available():
            return self._fallback(name, context, {"cause": "provider_unavailable"})

        try:
            text = provider.complete(CONCEPT_SYSTEM_PROMPT, context, json_mode=False)
        except ProviderCallError as e:
            return self._fallback(name, context, e.to_detail())
        except ValueError as e:
            return self._fallback(name, context, {"cause": "response_body", "error": str(e)})
        if not text:
            return self._fallback(name, context, {"cause": "empty_text"})

        documents_generated_total.labels(provider=name, outcome="concept_ok").inc()
        return ConceptPrompt(text=text, provider=name)

    def _fallback(self, name: str, context: str, detail: dict[str, Any]) -> ConceptPrompt:
        logger.warning("concept_prompt_fallback_used", extra={"provider": name, "error": detail})
        documents_generated_total.labels(provider=name, outcome="concept_fallback").inc()
        return ConceptPrompt(text=context, provider=None, detail=detail)
