"""
Caller-facing response shapes for generated images.
"""
from typing import Any

from aidee.services.image_generation.base import Image


def image_to_dict(image: Image) -> dict[str, Any]:
    """Image -> {id, thumb, full, alt, source, author?, link?}."""
    data: dict[str, Any] = {
        "id": image.id,
        "thumb": image.thumbnail_ref,
        "full": image.full_ref,
        "alt": image.alt_text,
        "source": image.source_provider,
    }
    if image.author:
        data["author"] = image.author
    if image.link:
        data["link"] = image.link
    return data


def assemble_images(images: list[Image], requested: int, primary_provider: str) -> dict[str, Any]:
    """
    Merge router output into the response body.
    fell_back is true when the images came from a provider other than the requested one.
    """
    provider = images[0].source_provider if images else primary_provider
    return {
        "images": [image_to_dict(image) for image in images],
        "provider": provider,
        "requested": requested,
        "delivered": len(images),
        "fell_back": provider != primary_provider,
    }
