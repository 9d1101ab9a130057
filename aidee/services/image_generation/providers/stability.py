"""
Stability AI SDXL text-to-image provider.
"""
from typing import Any

from aidee.services.image_generation.base import (
    Image,
    SyncImageProvider,
    collect_images,
    data_uri,
    new_image_id,
)

NEGATIVE_PROMPT = (
    "blurry, bad quality, low resolution, text, logo, watermark, "
    "human, people, body, face, hands"
)

# Hard API limit on samples per request.
MAX_SAMPLES = 10


class StabilityProvider(SyncImageProvider):
    """Stability /generation/{engine}/text-to-image, square 1024 renders."""

    @property
    def max_batch_size(self) -> int:
        return max(1, min(self.config.max_batch_size, MAX_SAMPLES))

    def generate(self, prompt: str, count: int) -> list[Image]:
        engine = self.config.model or "stable-diffusion-xl-1024-v1-0"
        samples = max(1, min(count, MAX_SAMPLES))
        payload = {
            "steps": 30,
            "width": 1024,
            "height": 1024,
            "cfg_scale": 7,
            "samples": samples,
            "text_prompts": [
                {"text": prompt, "weight": 1},
                {"text": NEGATIVE_PROMPT, "weight": -1},
            ],
        }
        raw = self.client.call(
            f"{self.config.base_url}/generation/{engine}/text-to-image",
            payload,
            self.config.auth,
            self.config.timeout,
        )
        data = raw.json()
        artifacts = data.get("artifacts") if isinstance(data, dict) else None
        return collect_images(artifacts or [], lambda a: self._to_image(a, prompt), self.name, samples)

    def _to_image(self, artifact: dict[str, Any], prompt: str) -> Image:
        if artifact.get("finishReason") == "ERROR":
            raise ValueError("artifact finished with ERROR")
        ref = data_uri(artifact["base64"])
        return Image(
            id=str(artifact.get("seed") or new_image_id(self.name)),
            thumbnail_ref=ref,
            full_ref=ref,
            alt_text=prompt,
            source_provider=self.name,
        )
