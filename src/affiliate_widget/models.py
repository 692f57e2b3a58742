"""
Data models for affiliate keyword matching.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

EntityId = Union[int, str]

VOCABULARY = "affiliate_tags"
PRODUCT_TYPE = "affiliate_item"

MAX_MATCHED_PRODUCTS = 20
MAX_FALLBACK_PRODUCTS = 5

DEFAULT_MODEL = "gpt-4.1"
DEFAULT_PROMPT = (
    "You are an expert in affiliate marketing. Analyze the text below and return "
    "a clean list of 5-7 relevant keywords that match shopping or affiliate product "
    "intent. Respond with a JSON array of strings only."
)


class KeywordNormalization(str, Enum):
    """How extracted keywords are cleaned up before tag lookup."""

    NONE = "none"
    STRIP = "strip"
    LOWER = "lower"

    def apply(self, keyword: str) -> str:
        if self is KeywordNormalization.NONE:
            return keyword
        collapsed = re.sub(r"\s+", " ", keyword).strip()
        if self is KeywordNormalization.LOWER:
            return collapsed.lower()
        return collapsed


@dataclass(frozen=True)
class PipelineConfig:
    """
    Snapshot of the language model settings for one pipeline run.

    Attributes:
        model: Chat completion model id
        prompt: System prompt sent ahead of the article content
        max_tokens: Response token limit (1-4096)
        temperature: Sampling temperature (0.0-2.0)
        frequency_penalty: Repetition penalty (0.0-2.0)
        presence_penalty: New-topic penalty (0.0-2.0)
        keyword_normalization: Cleanup applied to each extracted keyword
    """

    model: str = DEFAULT_MODEL
    prompt: str = DEFAULT_PROMPT
    max_tokens: int = 256
    temperature: float = 0.3
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    keyword_normalization: KeywordNormalization = KeywordNormalization.NONE

    def __post_init__(self) -> None:
        if not 1 <= self.max_tokens <= 4096:
            raise ValueError(f"max_tokens must be between 1 and 4096, got {self.max_tokens}")
        for name in ("temperature", "frequency_penalty", "presence_penalty"):
            value = getattr(self, name)
            if not 0.0 <= value <= 2.0:
                raise ValueError(f"{name} must be between 0.0 and 2.0, got {value}")

    def is_complete(self) -> bool:
        """Both a model and a prompt are needed to ask for keywords."""
        return bool(self.model and self.model.strip() and self.prompt and self.prompt.strip())

    def to_request_params(self) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "frequency_penalty": self.frequency_penalty,
            "presence_penalty": self.presence_penalty,
        }


@dataclass(frozen=True)
class Tag:
    """A term of the affiliate tag vocabulary."""

    id: EntityId
    name: str
    vocabulary: str = VOCABULARY

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Product:
    """
    An affiliate product record.

    Attributes:
        id: Product identifier
        tag_ids: Identifiers of the affiliate tags on this product
        published: Whether the product may be shown
        product_type: Content type, only affiliate_item is eligible
        title: Product title
        description: Long description
        link: Outbound affiliate link
        image: Image URL
    """

    id: EntityId
    tag_ids: FrozenSet[EntityId] = field(default_factory=frozenset)
    published: bool = True
    product_type: str = PRODUCT_TYPE
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "image": self.image,
            "tag_ids": sorted(self.tag_ids, key=str),
        }


@dataclass(frozen=True)
class FallbackList:
    """Ordered product ids shown when matching finds nothing. Holds at most five."""

    ids: Tuple[EntityId, ...] = ()

    def __post_init__(self) -> None:
        if len(self.ids) > MAX_FALLBACK_PRODUCTS:
            raise ValueError(
                f"FallbackList holds at most {MAX_FALLBACK_PRODUCTS} ids, got {len(self.ids)}"
            )

    @classmethod
    def from_ids(cls, ids: Optional[Iterable[EntityId]]) -> FallbackList:
        """Drop empty entries and keep the first five ids."""
        cleaned = [i for i in (ids or []) if i not in (None, "")]
        return cls(tuple(cleaned[:MAX_FALLBACK_PRODUCTS]))

    def __iter__(self):
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)


class FailureReason(str, Enum):
    """Why keyword extraction produced nothing."""

    MISSING_CREDENTIAL = "missing_credential"
    MISSING_CONFIG = "missing_config"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"
    PARSE = "parse"


@dataclass
class KeywordExtractionResult:
    """Keywords from the language model, or the reason there are none."""

    keywords: List[str] = field(default_factory=list)
    failure: Optional[FailureReason] = None
    detail: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, reason: FailureReason, detail: Optional[str] = None) -> KeywordExtractionResult:
        return cls(keywords=[], failure=reason, detail=detail)


@dataclass
class MatchResult:
    """Outcome of one pipeline run."""

    products: List[Product] = field(default_factory=list)
    source: str = "fallback"  # "matched" or "fallback"
    keywords: List[str] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    failure: Optional[str] = None
    display: Dict[str, int] = field(default_factory=dict)

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "keywords": self.keywords,
            "tags": [t.to_dict() for t in self.tags],
            "count": len(self.products),
            "products": [p.to_dict() for p in self.products],
            "failure": self.failure,
            "display": self.display,
        }
