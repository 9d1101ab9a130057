"""Tests for StructuredGenerator: Ok / Fallback / Error and the brief facade."""
import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest

from aidee.services.document.brief import BRIEF_SCHEMA, FALLBACK_BRIEF
from aidee.services.document.generator import Error, Fallback, Ok, StructuredGenerator, parse_document
from aidee.services.document.providers import GeminiTextProvider, OpenAIChatProvider, build_prompts
from aidee.services.providers.failure_types import CallFailure, ErrorKind, GenerationError, ProviderCallError


def _provider(name="openai", text=None, error=None, available=True):
    provider = MagicMock()
    provider.name = name
    provider.is_available.return_value = available
    if error is not None:
        provider.complete.side_effect = error
    else:
        provider.complete.return_value = text
    return provider


class TestGenerate:
    @pytest.mark.parametrize("subject", ["", "   ", None, 42])
    def test_invalid_input_makes_no_call(self, config, subject):
        provider = _provider(text="{}")
        generator = StructuredGenerator(config, providers={"openai": provider})

        result = generator.generate(subject)

        assert isinstance(result, Error)
        assert result.kind == ErrorKind.INVALID_INPUT
        provider.complete.assert_not_called()

    def test_ok_is_repaired(self, config):
        provider = _provider(text=json.dumps({"visual_rfp": {"project_title": "Smart chair"}}))
        generator = StructuredGenerator(config, providers={"openai": provider})

        result = generator.generate("a smart camping chair")

        assert isinstance(result, Ok)
        assert result.provider == "openai"
        assert result.document["visual_rfp"]["project_title"] == "Smart chair"
        assert result.document["key_features"]

    def test_malformed_text_falls_back_and_logs(self, config, caplog):
        provider = _provider(text="Sure! Here is your brief: {not json")
        generator = StructuredGenerator(config, providers={"openai": provider})

        with caplog.at_level(logging.WARNING):
            result = generator.generate("a smart camping chair")

        assert isinstance(result, Fallback)
        assert result.reason == ErrorKind.PARSE_ERROR.value
        assert result.document == FALLBACK_BRIEF
        assert any(r.getMessage() == "document_fallback_used" for r in caplog.records)

    def test_non_object_json_falls_back(self, config):
        generator = StructuredGenerator(config, providers={"openai": _provider(text="[1, 2]")})
        result = generator.generate("idea")
        assert isinstance(result, Fallback)
        assert result.reason == ErrorKind.PARSE_ERROR.value

    def test_provider_error_falls_back(self, config):
        error = ProviderCallError("boom", provider="openai", kind=CallFailure.HTTP_STATUS, status_code=500, retryable=True)
        generator = StructuredGenerator(config, providers={"openai": _provider(error=error)})

        result = generator.generate("idea")

        assert isinstance(result, Fallback)
        assert result.reason == ErrorKind.PROVIDER_FAILURE.value
        assert result.detail["http_status"] == 500

    def test_unexpected_provider_exception_falls_back(self, config):
        generator = StructuredGenerator(config, providers={"openai": _provider(error=AttributeError("boom"))})

        result = generator.generate("idea")

        assert isinstance(result, Fallback)
        assert result.reason == ErrorKind.PROVIDER_FAILURE.value
        assert result.detail["cause"] == "unexpected"

    def test_unavailable_provider_falls_back_without_call(self, config):
        provider = _provider(text="{}", available=False)
        generator = StructuredGenerator(config, providers={"openai": provider})

        result = generator.generate("idea")

        assert isinstance(result, Fallback)
        provider.complete.assert_not_called()

    def test_unknown_provider_falls_back(self, config):
        generator = StructuredGenerator(config, providers={"openai": _provider(text="{}")})
        result = generator.generate("idea", provider_preference="nope")
        assert isinstance(result, Fallback)

    def test_fallback_for_schema_without_authored_document(self, config):
        from aidee.services.document.schema import FieldSpec, FieldType, SchemaDescriptor

        schema = SchemaDescriptor("note", (FieldSpec("title", FieldType.STRING, default="Untitled"),))
        generator = StructuredGenerator(config, providers={})

        result = generator.generate("idea", schema=schema)

        assert isinstance(result, Fallback)
        assert result.document == {"title": "Untitled"}

    def test_fallback_document_is_a_copy(self, config):
        generator = StructuredGenerator(config, providers={})
        first = generator.generate("idea")
        first.document["visual_rfp"]["project_title"] = "changed"
        second = generator.generate("idea")
        assert second.document["visual_rfp"]["project_title"] == FALLBACK_BRIEF["visual_rfp"]["project_title"]


class TestGenerateDocument:
    def test_returns_document(self, config):
        generator = StructuredGenerator(config, providers={})
        assert generator.generate_document("idea") == FALLBACK_BRIEF

    def test_invalid_input_raises(self, config):
        generator = StructuredGenerator(config, providers={})
        with pytest.raises(GenerationError) as exc:
            generator.generate_document("")
        assert exc.value.kind == ErrorKind.INVALID_INPUT


class TestParseDocument:
    def test_code_fence_is_stripped(self):
        assert parse_document('```json\n{"a": 1}\n```') == {"a": 1}

    def test_invalid_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_document("nope")


class TestLanguageModelProviders:
    def test_openai_request_and_text(self, config, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": '{"x": "y"}'}}]})

        provider = OpenAIChatProvider(config.llm_providers["openai"], make_client(handler, "openai"))
        system_prompt, user_prompt = build_prompts("idea", BRIEF_SCHEMA)

        assert provider.complete(system_prompt, user_prompt) == '{"x": "y"}'
        assert seen["url"].endswith("/chat/completions")
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["response_format"] == {"type": "json_object"}
        assert seen["body"]["messages"][0]["role"] == "system"

    def test_gemini_uses_query_key(self, config, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": '{"a": '}, {"text": '"b"}'}]}}]}
            )

        provider = GeminiTextProvider(config.llm_providers["gemini"], make_client(handler, "gemini"))

        assert provider.complete("sys", "user") == '{"a": "b"}'
        assert seen["url"].params["key"] == "gm-test"
        assert ":generateContent" in str(seen["url"])

    def test_end_to_end_http_500_falls_back(self, config, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"message": "overloaded"}})

        provider = OpenAIChatProvider(config.llm_providers["openai"], make_client(handler, "openai"))
        generator = StructuredGenerator(config, providers={"openai": provider})

        result = generator.generate("idea")

        assert isinstance(result, Fallback)
        assert result.detail["retryable"] is True

    @pytest.mark.parametrize(
        "name,body",
        [
            ("openai", {"choices": [{"message": "oops"}]}),
            ("openai", {"choices": [{"message": {"content": [{"type": "text", "text": "{}"}]}}]}),
            ("openai", {"choices": {"0": "x"}}),
            ("openai", {"choices": [{"message": {"content": None}}]}),
            ("gemini", {"candidates": [{"content": "x"}]}),
            ("gemini", {"candidates": [{"content": {"parts": "x"}}]}),
            ("gemini", {"candidates": [{"content": {"parts": [{"text": 5}]}}]}),
            ("gemini", {"candidates": 3}),
        ],
    )
    def test_unexpected_response_shape_falls_back(self, config, make_client, name, body):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        provider_class = OpenAIChatProvider if name == "openai" else GeminiTextProvider
        provider = provider_class(config.llm_providers[name], make_client(handler, name))
        generator = StructuredGenerator(config, providers={name: provider})

        result = generator.generate("a folding chair", provider_preference=name)

        assert isinstance(result, Fallback)
        assert result.document == FALLBACK_BRIEF

    def test_free_text_request_drops_json_mode(self, config):
        openai = OpenAIChatProvider(config.llm_providers["openai"], MagicMock())
        gemini = GeminiTextProvider(config.llm_providers["gemini"], MagicMock())

        _, openai_payload = openai.build_request("sys", "user", json_mode=False)
        _, gemini_payload = gemini.build_request("sys", "user", json_mode=False)

        assert "response_format" not in openai_payload
        assert "generationConfig" not in gemini_payload

    def test_context_is_embedded_in_user_prompt(self):
        _, user_prompt = build_prompts("idea", BRIEF_SCHEMA, auxiliary_context={"budget": "low"})
        assert '"budget": "low"' in user_prompt
