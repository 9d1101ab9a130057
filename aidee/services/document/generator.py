"""
Structured document generation: free text -> schema-shaped document.

Provider and parse failures never reach the caller: they degrade to a static
fallback document of the same shape. Only invalid input is reported as an error.
"""
import copy
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Union

from aidee.core.providers import GenerationConfig
from aidee.services.document.brief import BRIEF_SCHEMA, FALLBACK_BRIEF
from aidee.services.document.providers import (
    LanguageModelProvider,
    build_language_models,
    build_prompts,
)
from aidee.services.document.schema import SchemaDescriptor, repair
from aidee.services.providers.failure_types import ErrorKind, GenerationError, ProviderCallError
from aidee.utils.metrics import documents_generated_total

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class GenerationRequest:
    subject_text: str
    target_schema: SchemaDescriptor
    provider_preference: str
    auxiliary_context: dict[str, Any] | None = None


@dataclass(frozen=True)
class Ok:
    document: dict[str, Any]
    provider: str


@dataclass(frozen=True)
class Fallback:
    document: dict[str, Any]
    reason: str
    provider: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Error:
    kind: ErrorKind
    message: str


GenerationResult = Union[Ok, Fallback, Error]


def parse_document(text: str) -> dict[str, Any]:
    """
    Parse model text as a JSON object. Tolerates a surrounding code fence.

    Raises:
        ValueError: not JSON, or JSON that is not an object.
    """
    cleaned = (text or "").strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        cleaned = match.group(1)
    parsed = json.loads(cleaned)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


class StructuredGenerator:
    """Orchestrates one 'produce structured document from free text' operation per call."""

    def __init__(
        self,
        config: GenerationConfig,
        providers: dict[str, LanguageModelProvider] | None = None,
        fallback_documents: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.config = config
        self.providers = providers if providers is not None else build_language_models(config)
        self.fallback_documents = {BRIEF_SCHEMA.name: FALLBACK_BRIEF}
        self.fallback_documents.update(fallback_documents or {})

    def fallback_document(self, schema: SchemaDescriptor) -> dict[str, Any]:
        """Pre-authored document for the schema, or all defaults when none was written."""
        authored = self.fallback_documents.get(schema.name, {})
        return repair(copy.deepcopy(authored), schema)

    def generate(
        self,
        subject_text: Any,
        schema: SchemaDescriptor = BRIEF_SCHEMA,
        provider_preference: str | None = None,
        auxiliary_context: dict[str, Any] | None = None,
    ) -> GenerationResult:
        if not isinstance(subject_text, str) or not subject_text.strip():
            documents_generated_total.labels(provider="none", outcome="invalid_input").inc()
            return Error(ErrorKind.INVALID_INPUT, "subject text must be a non-empty string")

        request = GenerationRequest(
            subject_text=subject_text,
            target_schema=schema,
            provider_preference=(provider_preference or self.config.llm_provider).strip().lower(),
            auxiliary_context=auxiliary_context,
        )
        provider = self.providers.get(request.provider_preference)
        if provider is None or not provider.is_available():
            return self._fallback(request, ErrorKind.PROVIDER_FAILURE.value, {"cause": "provider_unavailable"})

        system_prompt, user_prompt = build_prompts(
            request.subject_text,
            schema,
            language=self.config.brief_language,
            auxiliary_context=request.auxiliary_context,
        )
        try:
            text = provider.complete(system_prompt, user_prompt)
        except ProviderCallError as e:
            return self._fallback(request, ErrorKind.PROVIDER_FAILURE.value, e.to_detail())
        except ValueError as e:
            return self._fallback(request, ErrorKind.PARSE_ERROR.value, {"cause": "response_body", "error": str(e)})
        except Exception as e:
            logger.exception("document_provider_unexpected_error", extra={"provider": provider.name})
            return self._fallback(
                request, ErrorKind.PROVIDER_FAILURE.value, {"cause": "unexpected", "error": repr(e)}
            )

        try:
            parsed = parse_document(text)
        except ValueError as e:
            return self._fallback(request, ErrorKind.PARSE_ERROR.value, {"error": str(e), "text": text[:200]})

        documents_generated_total.labels(provider=provider.name, outcome="ok").inc()
        return Ok(document=repair(parsed, schema), provider=provider.name)

    def _fallback(self, request: GenerationRequest, reason: str, detail: dict[str, Any]) -> Fallback:
        logger.warning(
            "document_fallback_used",
            extra={"provider": request.provider_preference, "reason": reason, "error": detail},
        )
        documents_generated_total.labels(provider=request.provider_preference, outcome="fallback").inc()
        return Fallback(
            document=self.fallback_document(request.target_schema),
            reason=reason,
            provider=request.provider_preference,
            detail=detail,
        )

    def generate_document(
        self,
        subject_text: Any,
        auxiliary_context: dict[str, Any] | None = None,
        provider_preference: str | None = None,
    ) -> dict[str, Any]:
        """
        Caller-facing brief generation. Always returns a complete brief.

        Raises:
            GenerationError: INVALID_INPUT when subject_text is empty or not a string.
        """
        result = self.generate(subject_text, BRIEF_SCHEMA, provider_preference, auxiliary_context)
        if isinstance(result, Error):
            raise GenerationError(result.kind, result.message)
        return result.document
