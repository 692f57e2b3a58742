"""
Resolve matched tags to published affiliate products.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..catalog import Catalog
from ..logger import get_logger
from ..models import MAX_MATCHED_PRODUCTS, PRODUCT_TYPE, Product, Tag


class ProductResolver:
    """Load the published products carrying any of the matched tags."""

    def __init__(
        self,
        catalog: Catalog,
        product_type: str = PRODUCT_TYPE,
        limit: int = MAX_MATCHED_PRODUCTS,
        logger: Optional[logging.Logger] = None,
    ):
        self.catalog = catalog
        self.product_type = product_type
        self.limit = min(limit, MAX_MATCHED_PRODUCTS)
        self.logger = logger or get_logger(__name__)

    def resolve_products(self, tags: Sequence[Tag]) -> List[Product]:
        """
        Find products tagged with any of the given tags.

        Only the ids returned by the filtered query are loaded, never the
        whole product type.

        Args:
            tags: Matched vocabulary tags

        Returns:
            At most ``limit`` published products, in catalog order
        """
        if not tags:
            return []

        tag_ids = list(dict.fromkeys(t.id for t in tags))
        ids = self.catalog.find_product_ids(
            product_type=self.product_type,
            tag_ids=tag_ids,
            published=True,
            limit=self.limit,
        )
        if not ids:
            self.logger.info(f"No products found for tags {tag_ids}")
            return []

        wanted = set(tag_ids)
        products = [
            p for p in self.catalog.load_products(ids[:self.limit])
            if p.published and p.product_type == self.product_type and p.tag_ids & wanted
        ]

        self.logger.info(f"Resolved {len(products)} products for {len(tag_ids)} tags")
        return products[:self.limit]
