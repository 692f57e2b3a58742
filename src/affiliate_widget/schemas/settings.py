"""
Pydantic schemas for affiliate widget settings.

Validates settings when they are written so that readers only ever see
values inside the documented ranges.
"""
from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, Field, field_validator

from ..models import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
    MAX_FALLBACK_PRODUCTS,
    KeywordNormalization,
)


class AffiliateSettingsSchema(BaseModel):
    """Persisted settings for keyword extraction, display and fallback."""

    model: str = Field(default=DEFAULT_MODEL, min_length=1, description="OpenAI model id")
    prompt: str = Field(default=DEFAULT_PROMPT, min_length=1, description="System prompt for keyword extraction")
    max_tokens: int = Field(default=256, ge=1, le=4096, description="Maximum tokens for the response")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    frequency_penalty: float = Field(default=0.0, ge=0.0, le=2.0, description="Discourage repetition")
    presence_penalty: float = Field(default=0.0, ge=0.0, le=2.0, description="Encourage new topics")
    keyword_normalization: KeywordNormalization = Field(
        default=KeywordNormalization.NONE,
        description="Cleanup applied to keywords before tag lookup: none, strip, lower"
    )

    # Slider display settings
    items_desktop: int = Field(default=4, ge=1, le=10, description="Items per view (desktop)")
    items_tablet: int = Field(default=2, ge=1, le=6, description="Items per view (tablet)")
    items_mobile: int = Field(default=1, ge=1, le=3, description="Items per view (mobile)")

    fallback_products: List[Union[int, str]] = Field(
        default_factory=list,
        description=f"Fallback product ids, at most {MAX_FALLBACK_PRODUCTS} are kept"
    )

    @field_validator('model', 'prompt')
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator('fallback_products', mode='before')
    @classmethod
    def truncate_fallback(cls, v):
        """Drop empty entries and keep the first five ids."""
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            raise ValueError("fallback_products must be a list of product ids")
        cleaned = [item for item in v if item not in (None, "")]
        return cleaned[:MAX_FALLBACK_PRODUCTS]

    def display_settings(self) -> dict:
        return {
            "items_desktop": self.items_desktop,
            "items_tablet": self.items_tablet,
            "items_mobile": self.items_mobile,
        }


class MatchRequest(BaseModel):
    """Request schema for the match endpoint."""
    content: str = Field(..., description="Article body to find affiliate products for")
