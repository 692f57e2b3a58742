"""
Affiliate Widget - AI keyword matching for affiliate products.

Extracts shopping-intent keywords from article text with a language model,
matches them to the affiliate tag vocabulary and resolves published
products, falling back to a configured product list.
"""

__version__ = "1.0.0"
__author__ = "Affiliate Widget"

from .models import FallbackList, MatchResult, PipelineConfig, Product, Tag
from .catalog import InMemoryCatalog
from .services.pipeline import AffiliateMatcher

__all__ = [
    "AffiliateMatcher",
    "FallbackList",
    "InMemoryCatalog",
    "MatchResult",
    "PipelineConfig",
    "Product",
    "Tag",
]
