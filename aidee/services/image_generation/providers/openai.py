"""
OpenAI image generation provider (gpt-image-1 / DALL-E).
Images come back inline as base64 and are exposed as data URIs.
"""
from typing import Any

from aidee.services.image_generation.base import (
    Image,
    SyncImageProvider,
    collect_images,
    data_uri,
    new_image_id,
)


class OpenAIImageProvider(SyncImageProvider):
    """OpenAI /images/generations."""

    def generate(self, prompt: str, count: int) -> list[Image]:
        model = self.config.model or "gpt-image-1"
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "n": count,
            "size": self.config.options.get("size", "1024x1024"),
        }
        # gpt-image-* always answers with b64_json and rejects response_format.
        if not model.startswith("gpt-image-"):
            payload["response_format"] = "b64_json"

        raw = self.client.call(
            f"{self.config.base_url}/images/generations",
            payload,
            self.config.auth,
            self.config.timeout,
        )
        data = raw.json()
        items = data.get("data") if isinstance(data, dict) else None
        return collect_images(items or [], lambda d: self._to_image(d, prompt), self.name, count)

    def _to_image(self, item: dict[str, Any], prompt: str) -> Image:
        ref = data_uri(item["b64_json"]) if item.get("b64_json") else item.get("url") or ""
        return Image(
            id=new_image_id(self.name),
            thumbnail_ref=ref,
            full_ref=ref,
            alt_text=item.get("revised_prompt") or prompt,
            source_provider=self.name,
        )
