"""
Business logic services for affiliate matching.

Provides modular components for:
- Credential lookup
- LLM-powered keyword extraction
- Tag matching and product resolution
- Fallback products and the pipeline tying them together
"""

from .credentials import CredentialProvider, EnvCredentialProvider, StaticCredentialProvider
from .keyword_extractor import KeywordExtractor, parse_keywords
from .tag_matcher import TagMatcher
from .product_resolver import ProductResolver
from .fallback_resolver import FallbackResolver
from .pipeline import AffiliateMatcher

__all__ = [
    'CredentialProvider',
    'EnvCredentialProvider',
    'StaticCredentialProvider',
    'KeywordExtractor',
    'parse_keywords',
    'TagMatcher',
    'ProductResolver',
    'FallbackResolver',
    'AffiliateMatcher',
]
