"""Tests for design prompts and concept-image prompts built from a brief."""
import json
from unittest.mock import MagicMock

import httpx
import pytest

from aidee.services.document.brief import FALLBACK_BRIEF
from aidee.services.document.concept import (
    CONCEPT_SYSTEM_PROMPT,
    ConceptPromptWriter,
    build_concept_context,
)
from aidee.services.document.prompts import build_design_prompts
from aidee.services.document.providers import OpenAIChatProvider
from aidee.services.providers.failure_types import CallFailure, ErrorKind, GenerationError, ProviderCallError


class TestDesignPrompts:
    def test_brief_fields_are_used(self):
        prompts = build_design_prompts("running purifier", FALLBACK_BRIEF)
        assert FALLBACK_BRIEF["visual_rfp"]["project_title"] in prompts["prompt_main"]
        assert FALLBACK_BRIEF["key_features"][0]["name"] in prompts["prompt_lifestyle"]
        assert "(Original idea: running purifier)" in prompts["prompt_main"]

    @pytest.mark.parametrize(
        "brief",
        [
            {"visual_rfp": {"project_title": 123}},
            {"visual_rfp": {"target_users": ["a"], "design_direction": {"x": 1}}},
            {"target_and_problem": {"summary": None, "details": 7}},
            {"key_features": "lots", "differentiation": [1, None]},
            {"key_features": [{"name": 1, "description": "d"}, "x"]},
            {"visual_rfp": "oops"},
        ],
    )
    def test_malformed_brief_values_use_defaults(self, brief):
        prompts = build_design_prompts("chair", brief)
        assert 'product called "chair"' in prompts["prompt_main"]
        assert "For target users: everyday users." in prompts["prompt_main"]


class TestConceptContext:
    def test_context_lines(self):
        context = build_concept_context(FALLBACK_BRIEF, "matte finish", ["color/tone"])
        assert f"Project: {FALLBACK_BRIEF['visual_rfp']['project_title']}" in context
        assert "Visual categories: color/tone" in context
        assert context.endswith("Notes: matte finish")

    def test_default_categories_and_blank_fields(self):
        context = build_concept_context({"visual_rfp": {"project_title": "Lamp", "background": 5}})
        assert context.splitlines() == [
            "Project: Lamp",
            "Visual categories: color/tone, form/style, space/environment, similar products",
        ]


def _provider(text=None, error=None, available=True):
    provider = MagicMock()
    provider.name = "openai"
    provider.is_available.return_value = available
    if error is not None:
        provider.complete.side_effect = error
    else:
        provider.complete.return_value = text
    return provider


class TestConceptPromptWriter:
    def test_model_text_is_used(self, config):
        provider = _provider(text="A slim matte-black wearable purifier on a night road.")
        writer = ConceptPromptWriter(config, providers={"openai": provider})

        concept = writer.write(FALLBACK_BRIEF, "matte finish")

        assert concept.text.startswith("A slim matte-black")
        assert concept.provider == "openai"
        assert not concept.fell_back
        system_prompt, context = provider.complete.call_args.args
        assert system_prompt == CONCEPT_SYSTEM_PROMPT
        assert "Notes: matte finish" in context
        assert provider.complete.call_args.kwargs == {"json_mode": False}

    @pytest.mark.parametrize("brief", [None, {}, "brief", [1]])
    def test_missing_brief_is_invalid_input(self, config, brief):
        provider = _provider(text="x")
        writer = ConceptPromptWriter(config, providers={"openai": provider})
        with pytest.raises(GenerationError) as exc:
            writer.write(brief)
        assert exc.value.kind == ErrorKind.INVALID_INPUT
        provider.complete.assert_not_called()

    @pytest.mark.parametrize(
        "provider",
        [
            _provider(error=ProviderCallError("down", provider="openai", kind=CallFailure.TIMEOUT)),
            _provider(error=ValueError("not json")),
            _provider(text=""),
            _provider(text="x", available=False),
        ],
    )
    def test_failures_use_context_as_prompt(self, config, provider):
        writer = ConceptPromptWriter(config, providers={"openai": provider})

        concept = writer.write(FALLBACK_BRIEF)

        assert concept.fell_back
        assert concept.text == build_concept_context(FALLBACK_BRIEF)

    def test_free_text_request_over_http(self, config, make_client):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": " A desk lamp. "}}]})

        provider = OpenAIChatProvider(config.llm_providers["openai"], make_client(handler, "openai"))
        writer = ConceptPromptWriter(config, providers={"openai": provider})

        concept = writer.write({"visual_rfp": {"project_title": "Lamp"}})

        assert concept.text == "A desk lamp."
        assert "response_format" not in seen["body"]
        assert seen["body"]["messages"][0]["content"] == CONCEPT_SYSTEM_PROMPT
