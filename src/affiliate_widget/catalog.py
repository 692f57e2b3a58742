"""
Query surface over the affiliate tag vocabulary and product records.

The matcher services only depend on the ``Catalog`` protocol. The
in-memory implementation backs tests and the JSON catalog export used by
the API.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Protocol, Sequence, Union

from .logger import get_logger
from .models import EntityId, Product, Tag, VOCABULARY, PRODUCT_TYPE

logger = get_logger(__name__)


class Catalog(Protocol):
    """Read-only lookups the matching pipeline needs from storage."""

    def find_tags_by_names(self, vocabulary: str, names: Sequence[str]) -> List[Tag]:
        ...

    def find_product_ids(
        self,
        product_type: str,
        tag_ids: Sequence[EntityId],
        published: bool,
        limit: int,
    ) -> List[EntityId]:
        ...

    def load_products(self, ids: Sequence[EntityId]) -> List[Product]:
        ...


def _sort_key(value: EntityId):
    # Numeric ids sort numerically and ahead of string ids
    if isinstance(value, int):
        return (0, value, "")
    return (1, 0, str(value))


class InMemoryCatalog:
    """Catalog held in memory, ordered by ascending id."""

    def __init__(self, tags: Iterable[Tag] = (), products: Iterable[Product] = ()):
        self._tags: List[Tag] = sorted(tags, key=lambda t: _sort_key(t.id))
        self._products: Dict[EntityId, Product] = {p.id: p for p in products}

    @classmethod
    def from_dict(cls, data: dict) -> InMemoryCatalog:
        """
        Build a catalog from an export mapping.

        Expected shape::

            {
                "tags": [{"id": 1, "name": "yoga mat"}],
                "products": [{"id": 10, "tag_ids": [1], "published": true, "title": "..."}]
            }
        """
        tags = [
            Tag(id=t["id"], name=t["name"], vocabulary=t.get("vocabulary", VOCABULARY))
            for t in data.get("tags", [])
        ]
        products = [
            Product(
                id=p["id"],
                tag_ids=frozenset(p.get("tag_ids", [])),
                published=bool(p.get("published", True)),
                product_type=p.get("product_type", PRODUCT_TYPE),
                title=p.get("title"),
                description=p.get("description"),
                link=p.get("link"),
                image=p.get("image"),
            )
            for p in data.get("products", [])
        ]
        return cls(tags=tags, products=products)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> InMemoryCatalog:
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        catalog = cls.from_dict(data)
        logger.info(f"Loaded catalog from {path}: {len(catalog._tags)} tags, {len(catalog._products)} products")
        return catalog

    def find_tags_by_names(self, vocabulary: str, names: Sequence[str]) -> List[Tag]:
        wanted = set(names)
        return [t for t in self._tags if t.vocabulary == vocabulary and t.name in wanted]

    def find_product_ids(
        self,
        product_type: str,
        tag_ids: Sequence[EntityId],
        published: bool,
        limit: int,
    ) -> List[EntityId]:
        wanted = set(tag_ids)
        ids = [
            p.id for p in self._products.values()
            if p.product_type == product_type
            and p.published == published
            and p.tag_ids & wanted
        ]
        ids.sort(key=_sort_key)
        return ids[:limit]

    def load_products(self, ids: Sequence[EntityId]) -> List[Product]:
        return [self._products[i] for i in ids if i in self._products]

    def has_vocabulary(self, vocabulary: str = VOCABULARY) -> bool:
        return any(t.vocabulary == vocabulary for t in self._tags)

    def has_product_type(self, product_type: str = PRODUCT_TYPE) -> bool:
        return any(p.product_type == product_type for p in self._products.values())
