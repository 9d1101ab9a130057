"""Tests for the concrete image providers' request building and response mapping."""
import base64
import json

import httpx
import pytest

from aidee.services.image_generation.assembler import assemble_images, image_to_dict
from aidee.services.image_generation.base import GenerationTask, Image, ProviderKind, TaskStatus, clamp_count
from aidee.services.image_generation.factory import ImageProviderFactory
from aidee.services.image_generation.providers.huggingface import HuggingFaceProvider
from aidee.services.image_generation.providers.openai import OpenAIImageProvider
from aidee.services.image_generation.providers.pexels import PexelsProvider
from aidee.services.image_generation.providers.replicate import ReplicateProvider
from aidee.services.image_generation.providers.stability import StabilityProvider
from aidee.services.providers.failure_types import CallFailure, ProviderCallError


class TestPexels:
    def test_maps_photos_and_skips_incomplete(self, config, make_client):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"photos": [
                {"id": 1, "src": {"medium": "https://p/m1", "large2x": "https://p/l1"},
                 "alt": "", "photographer": "Bo", "url": "https://pexels.com/1"},
                {"id": 2, "src": {}},
                {"id": 3, "src": {"tiny": "https://p/t3", "original": "https://p/o3"}, "alt": "red chair"},
            ]})

        provider = PexelsProvider(config.image_providers["pexels"], make_client(handler, "pexels"))
        images = provider.generate("camping chair", 4)

        assert seen["auth"] == "px-test"
        assert seen["params"] == {"query": "camping chair", "per_page": "4"}
        assert [i.id for i in images] == ["1", "3"]
        assert images[0].alt_text == "camping chair"
        assert images[0].author == "Bo"
        assert images[1].thumbnail_ref == "https://p/t3"
        assert images[1].full_ref == "https://p/o3"

    def test_missing_photos_key_is_empty(self, config, make_client):
        provider = PexelsProvider(config.image_providers["pexels"], make_client(lambda r: httpx.Response(200, json={})))
        assert provider.generate("x", 2) == []


class TestOpenAIImage:
    def test_b64_is_returned_as_data_uri(self, config, make_client):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [{"b64_json": "AAAA"}, {"b64_json": "BBBB"}]})

        provider = OpenAIImageProvider(config.image_providers["openai"], make_client(handler, "openai"))
        images = provider.generate("chair", 2)

        assert seen["body"]["model"] == "gpt-image-1"
        assert seen["body"]["n"] == 2
        assert "response_format" not in seen["body"]
        assert images[0].full_ref == "data:image/png;base64,AAAA"
        assert images[0].thumbnail_ref == images[0].full_ref
        assert images[0].id != images[1].id


class TestStability:
    def test_samples_and_negative_prompt(self, config, make_client):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"artifacts": [
                {"base64": "QQ==", "seed": 11, "finishReason": "SUCCESS"},
                {"base64": "Qg==", "seed": 12, "finishReason": "ERROR"},
            ]})

        provider = StabilityProvider(config.image_providers["stability"], make_client(handler, "stability"))
        images = provider.generate("chair", 2)

        assert seen["path"].endswith("/generation/stable-diffusion-xl-1024-v1-0/text-to-image")
        assert seen["body"]["samples"] == 2
        assert seen["body"]["text_prompts"][1]["weight"] == -1
        assert [i.id for i in images] == ["11"]

    def test_max_batch_never_exceeds_api_limit(self, config):
        from dataclasses import replace

        provider = StabilityProvider(replace(config.image_providers["stability"], max_batch_size=50))
        assert provider.max_batch_size == 10


class TestHuggingFace:
    def test_binary_body_becomes_data_uri(self, config, make_client):
        png = b"\x89PNG\r\n"

        def handler(request):
            return httpx.Response(200, content=png, headers={"content-type": "image/png"})

        provider = HuggingFaceProvider(config.image_providers["huggingface"], make_client(handler, "huggingface"))
        images = provider.generate("chair", 1)

        assert provider.max_batch_size == 1
        assert images[0].full_ref == "data:image/png;base64," + base64.b64encode(png).decode()

    def test_json_body_is_rejected(self, config, make_client):
        def handler(request):
            return httpx.Response(200, json={"error": "model loading"})

        provider = HuggingFaceProvider(config.image_providers["huggingface"], make_client(handler, "huggingface"))
        with pytest.raises(ProviderCallError) as exc:
            provider.generate("chair", 1)
        assert exc.value.kind == CallFailure.NON_JSON


class TestReplicate:
    def test_status_mapping_and_outputs(self, config, make_client):
        def handler(request):
            if request.method == "POST":
                body = json.loads(request.content)
                assert body["input"]["num_outputs"] == 2
                assert request.url.path.endswith("/models/black-forest-labs/flux-schnell/predictions")
                return httpx.Response(201, json={"id": "pred-1", "status": "starting"})
            return httpx.Response(200, json={
                "id": "pred-1", "status": "succeeded", "output": ["https://r/1.webp", "https://r/2.webp"],
            })

        provider = ReplicateProvider(config.image_providers["replicate"], make_client(handler, "replicate"))
        created = provider.create_task("chair", 2)
        assert created.task_id == "pred-1"
        assert created.status == TaskStatus.PENDING

        snapshot = provider.fetch_status("pred-1")
        assert snapshot.status == TaskStatus.SUCCEEDED
        task = GenerationTask(id="pred-1", provider="replicate", prompt="chair")
        images = provider.images_from(task, snapshot)
        assert [i.full_ref for i in images] == ["https://r/1.webp", "https://r/2.webp"]
        assert provider.kind == ProviderKind.ASYNC

    def test_failed_prediction_error(self, config, make_client):
        handler = lambda r: httpx.Response(200, json={"id": "p", "status": "failed", "error": "NSFW"})
        provider = ReplicateProvider(config.image_providers["replicate"], make_client(handler, "replicate"))
        snapshot = provider.fetch_status("p")
        assert snapshot.status == TaskStatus.FAILED
        assert snapshot.error == "NSFW"


class TestFactory:
    def test_create_all_covers_configured_providers(self, config):
        providers = ImageProviderFactory.create_all(config)
        assert set(providers) == {"pexels", "unsplash", "openai", "stability", "huggingface", "replicate", "meshy"}
        assert providers["meshy"].kind == ProviderKind.ASYNC
        assert providers["pexels"].kind == ProviderKind.SYNC

    def test_unknown_name(self, config):
        with pytest.raises(ValueError):
            ImageProviderFactory.create("nope", config.image_providers["pexels"])

    def test_missing_credential_is_unavailable(self, config):
        from dataclasses import replace

        from aidee.core.providers import AuthConfig

        provider_config = replace(config.image_providers["pexels"], auth=AuthConfig(""))
        assert ImageProviderFactory.create("pexels", provider_config).is_available() is False


class TestAssembler:
    def _image(self, source, **kwargs):
        return Image(id="1", thumbnail_ref="t", full_ref="f", alt_text="a", source_provider=source, **kwargs)

    def test_shape(self):
        body = assemble_images([self._image("unsplash", author="Ann")], 3, "pexels")
        assert body == {
            "images": [{"id": "1", "thumb": "t", "full": "f", "alt": "a", "source": "unsplash", "author": "Ann"}],
            "provider": "unsplash",
            "requested": 3,
            "delivered": 1,
            "fell_back": True,
        }

    def test_optional_fields_omitted(self):
        assert "link" not in image_to_dict(self._image("pexels"))

    def test_image_requires_fields(self):
        with pytest.raises(ValueError):
            Image(id="1", thumbnail_ref="", full_ref="f", alt_text="a", source_provider="p")


@pytest.mark.parametrize("requested", range(-3, 15))
@pytest.mark.parametrize("max_batch", [1, 2, 4, 10])
def test_clamp_count_bounds(requested, max_batch):
    assert 1 <= clamp_count(requested, max_batch) <= max_batch
