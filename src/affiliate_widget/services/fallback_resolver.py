"""
Load the configured fallback products.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..catalog import Catalog
from ..logger import get_logger
from ..models import PRODUCT_TYPE, FallbackList, Product


class FallbackResolver:
    """Return the configured fallback products in their stored order."""

    def __init__(self, catalog: Catalog, product_type: str = PRODUCT_TYPE, logger: Optional[logging.Logger] = None):
        self.catalog = catalog
        self.product_type = product_type
        self.logger = logger or get_logger(__name__)

    def get_fallback_products(self, fallback: FallbackList) -> List[Product]:
        """
        Load the fallback products.

        Deleted, unpublished or foreign products are skipped silently.

        Args:
            fallback: Configured product ids (at most five)

        Returns:
            Loaded products in the configured order
        """
        if not fallback:
            return []

        loaded = {p.id: p for p in self.catalog.load_products(list(fallback))}
        products = []
        for product_id in fallback:
            product = loaded.get(product_id)
            if product is None:
                self.logger.debug(f"Fallback product {product_id} not found")
                continue
            if not product.published or product.product_type != self.product_type:
                self.logger.debug(f"Fallback product {product_id} is not an eligible published product")
                continue
            products.append(product)

        return products
