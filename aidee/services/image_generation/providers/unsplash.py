"""
Unsplash stock photo search provider.
"""
from typing import Any

from aidee.services.image_generation.base import Image, SyncImageProvider, collect_images


class UnsplashProvider(SyncImageProvider):
    """Unsplash /search/photos with content_filter=high, Client-ID auth."""

    def generate(self, prompt: str, count: int) -> list[Image]:
        raw = self.client.call(
            f"{self.config.base_url}/search/photos",
            auth=self.config.auth,
            timeout=self.config.timeout,
            method="GET",
            params={"query": prompt, "per_page": count, "content_filter": "high"},
        )
        data = raw.json()
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            results = []
        return collect_images(results, lambda p: self._to_image(p, prompt), self.name, count)

    def _to_image(self, photo: dict[str, Any], prompt: str) -> Image:
        urls = photo.get("urls") or {}
        return Image(
            id=str(photo["id"]),
            thumbnail_ref=urls.get("small") or urls.get("thumb") or "",
            full_ref=urls.get("regular") or urls.get("full") or "",
            alt_text=photo.get("alt_description") or photo.get("description") or prompt,
            source_provider=self.name,
            author=(photo.get("user") or {}).get("name"),
            link=(photo.get("links") or {}).get("html"),
        )
