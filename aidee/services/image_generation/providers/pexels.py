"""
Pexels stock photo search provider.
Returns existing photos matching the prompt; nothing is generated.
"""
from typing import Any

from aidee.services.image_generation.base import Image, SyncImageProvider, collect_images


class PexelsProvider(SyncImageProvider):
    """Pexels /search, authenticated with the raw key in Authorization."""

    def generate(self, prompt: str, count: int) -> list[Image]:
        raw = self.client.call(
            f"{self.config.base_url}/search",
            auth=self.config.auth,
            timeout=self.config.timeout,
            method="GET",
            params={"query": prompt, "per_page": count},
        )
        data = raw.json()
        photos = data.get("photos") if isinstance(data, dict) else None
        if not isinstance(photos, list):
            photos = []
        return collect_images(photos, lambda p: self._to_image(p, prompt), self.name, count)

    def _to_image(self, photo: dict[str, Any], prompt: str) -> Image:
        src = photo.get("src") or {}
        return Image(
            id=str(photo["id"]),
            thumbnail_ref=src.get("medium") or src.get("small") or src.get("tiny") or "",
            full_ref=src.get("large2x") or src.get("large") or src.get("original") or "",
            alt_text=photo.get("alt") or prompt,
            source_provider=self.name,
            author=photo.get("photographer"),
            link=photo.get("url"),
        )
