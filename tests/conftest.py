import httpx
import pytest

from aidee.core.config import Settings
from aidee.core.providers import GenerationConfig
from aidee.services.providers.client import ProviderClient


@pytest.fixture
def app_settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        openai_api_key="sk-test",
        gemini_api_key="gm-test",
        pexels_api_key="px-test",
        unsplash_access_key="us-test",
        stability_api_key="st-test",
        huggingface_api_key="hf-test",
        replicate_api_token="rp-test",
        meshy_api_key="ms-test",
        resend_api_key="re-test",
    )


@pytest.fixture
def config(app_settings):
    return GenerationConfig.from_settings(app_settings)


@pytest.fixture
def make_client():
    """ProviderClient whose requests go to an in-process handler."""

    def _make(handler, provider="test"):
        return ProviderClient(provider, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

    return _make
