"""
Request/response schemas for brief and image generation.
"""
from typing import Any

from pydantic import BaseModel, Field


class BriefIn(BaseModel):
    idea: str = Field(..., description="Free-text product idea")
    context: dict[str, Any] | None = Field(default=None, description="Survey answers, user notes")
    provider: str | None = Field(default=None, description="Language model provider (openai, gemini)")


class BriefOut(BaseModel):
    brief: dict[str, Any]


class ImagesIn(BaseModel):
    prompt: str
    count: int = Field(default=4, description="Advisory; reduced to the provider's maximum")
    provider: str | None = None
    fallback: str | None = Field(default=None, description="Fallback provider, or 'none'")


class ImageOut(BaseModel):
    id: str
    thumb: str
    full: str
    alt: str
    source: str
    author: str | None = None
    link: str | None = None


class ImagesOut(BaseModel):
    images: list[ImageOut]
    provider: str
    requested: int
    delivered: int
    fell_back: bool


class ConceptImagesIn(BaseModel):
    brief: dict[str, Any] | None = Field(default=None, description="Brief produced by /briefs")
    user_notes: str | None = None
    visual_categories: list[str] | None = Field(default=None, description="e.g. color/tone, form/style")
    provider: str | None = Field(default=None, description="Image provider; defaults to the concept provider")
    fallback: str | None = Field(default=None, description="Fallback provider, or 'none'")


class ConceptImagesOut(ImagesOut):
    concept_prompt: str


class DesignPromptsIn(BaseModel):
    idea: str
    brief: dict[str, Any] | None = None


class DesignPromptsOut(BaseModel):
    prompt_main: str
    prompt_lifestyle: str


class ErrorOut(BaseModel):
    error: str
    kind: str
    provider: str | None = None
