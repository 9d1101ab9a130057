"""
Language-model providers for structured documents.
Each provider builds its own request and knows where the text sits in its response.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from aidee.core.providers import GenerationConfig, ProviderConfig
from aidee.services.document.schema import SchemaDescriptor
from aidee.services.providers.client import ProviderClient

logger = logging.getLogger(__name__)


SYSTEM_PROMPT_TEMPLATE = (
    "You are a senior consultant with hands-on experience in product design and "
    "bringing hardware products to market. Fill in the JSON structure below, writing "
    "every value in {language}, in plain words a non-expert can follow.\n"
    "Return exactly ONE JSON object. No explanations, no markdown, no code fences.\n\n"
    "{skeleton}"
)


def build_prompts(
    subject_text: str,
    schema: SchemaDescriptor,
    language: str = "English",
    auxiliary_context: dict[str, Any] | None = None,
) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) embedding the idea and the schema skeleton."""
    skeleton = json.dumps(schema.skeleton(), ensure_ascii=False, indent=2)
    system_prompt = SYSTEM_PROMPT_TEMPLATE.format(language=language, skeleton=skeleton)
    user_prompt = f'Product idea: "{subject_text.strip()}". Write it up following the JSON structure above.'
    if auxiliary_context:
        context = json.dumps(auxiliary_context, ensure_ascii=False, default=str)
        user_prompt += f"\n\nAdditional context from the user:\n{context}"
    return system_prompt, user_prompt


class LanguageModelProvider(ABC):
    """Base class for language-model backends."""

    def __init__(self, config: ProviderConfig, client: ProviderClient | None = None) -> None:
        self.config = config
        self.client = client or ProviderClient(config.name)

    @property
    def name(self) -> str:
        return self.config.name

    def is_available(self) -> bool:
        return self.config.is_configured

    @abstractmethod
    def build_request(
        self, system_prompt: str, user_prompt: str, json_mode: bool = True
    ) -> tuple[str, dict[str, Any]]:
        """Return (endpoint, payload). json_mode=False asks for free text."""

    @abstractmethod
    def extract_text(self, body: Any) -> str:
        """Pull the generated text out of a parsed response body; empty string if absent."""

    def complete(self, system_prompt: str, user_prompt: str, json_mode: bool = True) -> str:
        """
        One round trip to the model.

        Raises:
            ProviderCallError: transport failure (from ProviderClient).
            ValueError: response body is not valid JSON.
        """
        endpoint, payload = self.build_request(system_prompt, user_prompt, json_mode)
        raw = self.client.call(endpoint, payload, self.config.auth, self.config.timeout)
        return self.extract_text(raw.json())


class OpenAIChatProvider(LanguageModelProvider):
    """OpenAI chat completions; JSON mode unless free text is asked for."""

    def build_request(
        self, system_prompt: str, user_prompt: str, json_mode: bool = True
    ) -> tuple[str, dict[str, Any]]:
        payload: dict[str, Any] = {
            "model": self.config.model or "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        else:
            payload["temperature"] = 0.7
        return f"{self.config.base_url}/chat/completions", payload

    def extract_text(self, body: Any) -> str:
        if not isinstance(body, dict):
            return ""
        choices = body.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message")
        if not isinstance(message, dict):
            return ""
        content = message.get("content")
        return content.strip() if isinstance(content, str) else ""


class GeminiTextProvider(LanguageModelProvider):
    """Gemini generateContent with a JSON response MIME type."""

    def build_request(
        self, system_prompt: str, user_prompt: str, json_mode: bool = True
    ) -> tuple[str, dict[str, Any]]:
        model = self.config.model or "gemini-2.5-flash"
        payload: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
        }
        if json_mode:
            payload["generationConfig"] = {"responseMimeType": "application/json"}
        return f"{self.config.base_url}/v1beta/models/{model}:generateContent", payload

    def extract_text(self, body: Any) -> str:
        if not isinstance(body, dict):
            return ""
        candidates = body.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        texts = (p.get("text") for p in parts if isinstance(p, dict))
        return "".join(t for t in texts if isinstance(t, str)).strip()


LANGUAGE_MODELS: dict[str, type[LanguageModelProvider]] = {
    "openai": OpenAIChatProvider,
    "gemini": GeminiTextProvider,
}


def build_language_models(config: GenerationConfig) -> dict[str, LanguageModelProvider]:
    """Instantiate every configured language-model provider (available or not)."""
    providers: dict[str, LanguageModelProvider] = {}
    for name, provider_config in config.llm_providers.items():
        provider_class = LANGUAGE_MODELS.get(name)
        if provider_class is None:
            logger.warning("unknown language model provider skipped", extra={"provider": name})
            continue
        providers[name] = provider_class(provider_config)
    return providers
