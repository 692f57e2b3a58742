"""
Match extracted keywords against the affiliate tag vocabulary.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..catalog import Catalog
from ..logger import get_logger
from ..models import Tag, VOCABULARY


class TagMatcher:
    """
    Exact, case-sensitive name lookup in one vocabulary.

    Keywords are matched as given; any normalization happens upstream in
    the keyword extractor.
    """

    def __init__(self, catalog: Catalog, vocabulary: str = VOCABULARY, logger: Optional[logging.Logger] = None):
        self.catalog = catalog
        self.vocabulary = vocabulary
        self.logger = logger or get_logger(__name__)

    def match_tags(self, keywords: Sequence[str]) -> List[Tag]:
        """
        Find vocabulary tags whose name equals one of the keywords.

        Args:
            keywords: Extracted keywords, duplicates allowed

        Returns:
            Matching tags without duplicates (empty when nothing matches)
        """
        if not keywords:
            return []

        names = list(dict.fromkeys(keywords))
        found = self.catalog.find_tags_by_names(self.vocabulary, names)

        unique = {}
        for tag in found:
            unique.setdefault(tag.id, tag)
        tags = list(unique.values())

        self.logger.info(f"Matched {len(tags)} tags for {len(names)} keywords")
        return tags
