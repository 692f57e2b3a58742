"""
Affiliate matching pipeline.

Keyword extraction -> tag matching -> product resolution, with the
configured fallback products whenever that chain yields nothing. Every
failure along the way is logged and ends in the fallback; callers never
see an exception.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from ..catalog import Catalog
from ..logger import get_logger
from ..models import FallbackList, FailureReason, MatchResult, Product
from ..schemas.settings import AffiliateSettingsSchema
from ..settings import SettingsStore, load_settings, to_pipeline_config
from .credentials import OPENAI_KEY_NAME, CredentialProvider
from .fallback_resolver import FallbackResolver
from .keyword_extractor import KeywordExtractor
from .product_resolver import ProductResolver
from .tag_matcher import TagMatcher


class AffiliateMatcher:
    """
    Find affiliate products for a piece of content.

    Holds only injected collaborators, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        settings: SettingsStore,
        credentials: CredentialProvider,
        catalog: Catalog,
        *,
        extractor: Optional[KeywordExtractor] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Key-value store holding model and fallback settings
            credentials: Resolves the ``openai_key`` secret
            catalog: Tag and product lookups
            extractor: Keyword extractor (built from ``session`` if omitted)
            session: HTTP session for the default extractor
            logger: Logger shared by all pipeline stages
        """
        self.logger = logger or get_logger(__name__)
        self.settings = settings
        self.credentials = credentials
        self.extractor = extractor or KeywordExtractor(session=session, logger=self.logger)
        self.tag_matcher = TagMatcher(catalog, logger=self.logger)
        self.product_resolver = ProductResolver(catalog, logger=self.logger)
        self.fallback_resolver = FallbackResolver(catalog, logger=self.logger)

    def run(self, content: str) -> List[Product]:
        """Return matched products, or the fallback products."""
        return self.match(content).products

    def match(self, content: str) -> MatchResult:
        """
        Run the pipeline and report how the products were found.

        Args:
            content: Article body

        Returns:
            MatchResult with source "matched" or "fallback"
        """
        settings = self.load_settings()

        try:
            result = self._match_primary(content, settings)
        except Exception as e:
            self.logger.error(f"Affiliate matching failed: {e}", exc_info=True)
            result = MatchResult(failure="error")

        result.display = settings.display_settings()

        if result.products:
            result.source = "matched"
            return result

        self.logger.info(f"No matched products ({result.failure or 'no match'}), using fallback products")
        result.source = "fallback"
        result.products = self._fallback_products(settings)
        return result

    def load_settings(self) -> AffiliateSettingsSchema:
        """Snapshot settings once per run; unreadable settings mean defaults."""
        try:
            return load_settings(self.settings, self.logger)
        except Exception as e:
            self.logger.error(f"Could not read affiliate settings, using defaults: {e}")
            return AffiliateSettingsSchema()

    def _match_primary(self, content: str, settings: AffiliateSettingsSchema) -> MatchResult:
        if not isinstance(content, str) or not content.strip():
            return MatchResult(failure="empty_content")

        api_key = self.credentials.resolve(OPENAI_KEY_NAME)
        if not api_key:
            self.logger.warning("OpenAI key not found, skipping keyword extraction")
            return MatchResult(failure=FailureReason.MISSING_CREDENTIAL.value)

        extraction = self.extractor.extract(content, to_pipeline_config(settings), api_key)
        if not extraction.keywords:
            failure = extraction.failure.value if extraction.failure else "no_keywords"
            return MatchResult(failure=failure)

        tags = self.tag_matcher.match_tags(extraction.keywords)
        if not tags:
            return MatchResult(keywords=extraction.keywords, failure="no_tag_match")

        products = self.product_resolver.resolve_products(tags)
        return MatchResult(
            products=products,
            keywords=extraction.keywords,
            tags=tags,
            failure=None if products else "no_product_match",
        )

    def _fallback_products(self, settings: AffiliateSettingsSchema) -> List[Product]:
        try:
            return self.fallback_resolver.get_fallback_products(
                FallbackList.from_ids(settings.fallback_products)
            )
        except Exception as e:
            self.logger.error(f"Could not load fallback products: {e}", exc_info=True)
            return []
