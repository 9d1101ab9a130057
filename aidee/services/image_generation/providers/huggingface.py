"""
Hugging Face Inference API provider for image generation.
Supports FLUX, Stable Diffusion, and other text-to-image models.
"""
import base64

from aidee.services.image_generation.base import Image, SyncImageProvider, data_uri, new_image_id
from aidee.services.providers.failure_types import CallFailure, ProviderCallError


class HuggingFaceProvider(SyncImageProvider):
    """Hugging Face Inference API provider. One image per call."""

    @property
    def max_batch_size(self) -> int:
        return 1

    def generate(self, prompt: str, count: int) -> list[Image]:
        model = self.config.model or "black-forest-labs/FLUX.1-schnell"
        # HF returns binary image data directly; errors come back as JSON.
        raw = self.client.call(
            f"{self.config.base_url}/models/{model}",
            {"inputs": prompt},
            self.config.auth,
            self.config.timeout,
            headers={"Accept": "image/png"},
            expect_json=False,
        )
        mime = raw.content_type.split(";")[0].strip().lower()
        if not mime.startswith("image/") or not raw.content:
            raise ProviderCallError(
                f"{self.name} returned {mime or 'no content type'} instead of an image",
                provider=self.name,
                kind=CallFailure.NON_JSON,
                status_code=raw.status_code,
                detail={"body": raw.text[:200]},
            )
        ref = data_uri(base64.b64encode(raw.content).decode("ascii"), mime)
        return [
            Image(
                id=new_image_id(self.name),
                thumbnail_ref=ref,
                full_ref=ref,
                alt_text=prompt,
                source_provider=self.name,
            )
        ]
