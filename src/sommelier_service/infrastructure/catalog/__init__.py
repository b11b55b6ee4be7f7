"""Static strain catalog: loader and read-only queries.

The catalog is parsed once per process from ``strains.json`` and shared by
every request. Nothing here mutates it.
"""

from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

import orjson
import structlog

from shared.constants import MOOD_CANDIDATE_LIMIT, SEARCH_RESULT_LIMIT
from sommelier_service.exceptions import CatalogError
from sommelier_service.models import (
    Difficulty,
    Effect,
    Product,
    StrainCategory,
    Terpene,
)

logger = structlog.get_logger()

CATALOG_PATH = Path(__file__).parent / "strains.json"

MOOD_EFFECTS: dict[str, tuple[str, ...]] = {
    "relax": ("relaxed", "sleepy", "happy"),
    "energy": ("energetic", "uplifted", "focused"),
    "creative": ("creative", "euphoric", "uplifted"),
    "social": ("talkative", "giggly", "happy"),
    "sleep": ("sleepy", "relaxed"),
    "pain": ("relaxed", "happy", "euphoric"),
    "focus": ("focused", "energetic", "creative"),
    "happy": ("happy", "euphoric", "uplifted"),
}


def _range(raw: Any, field_name: str, product_id: str) -> tuple[float, float]:
    try:
        low, high = (float(v) for v in raw)
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{product_id}: {field_name} must be a [min, max] pair") from e
    if low < 0 or high < 0 or low > high:
        raise CatalogError(f"{product_id}: invalid {field_name} {low}-{high}")
    return low, high


def _parse_product(raw: dict[str, Any]) -> Product:
    product_id = raw.get("id", "<missing id>")
    try:
        effects = tuple(Effect(e).value for e in raw["effect_tags"])
        category = StrainCategory(raw["category"])
        difficulty = Difficulty(raw["difficulty"])
        rating = float(raw["community_rating"])
        rating_count = int(raw["rating_count"])
        product = Product(
            id=raw["id"],
            name=raw["name"],
            category=category,
            thc_range=_range(raw["thc_range"], "thc_range", product_id),
            cbd_range=_range(raw["cbd_range"], "cbd_range", product_id),
            effect_tags=effects,
            negative_tags=tuple(raw.get("negative_tags", ())),
            aromatic_tags=tuple(raw.get("aromatic_tags", ())),
            medical_use_tags=tuple(raw.get("medical_use_tags", ())),
            description=raw["description"],
            community_rating=rating,
            rating_count=rating_count,
            difficulty=difficulty,
            terpenes=tuple(
                Terpene(name=t["name"], aroma=t.get("aroma", ""), percentage=t.get("percentage"))
                for t in raw.get("terpenes", ())
            ),
            lineage=tuple(raw.get("lineage", ())),
        )
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, CatalogError):
            raise
        raise CatalogError(f"{product_id}: {e}") from e

    if not 0 <= product.community_rating <= 5:
        raise CatalogError(f"{product_id}: rating out of range {product.community_rating}")
    if product.rating_count < 0:
        raise CatalogError(f"{product_id}: negative rating count")
    return product


def parse_catalog(payload: bytes | str) -> "Catalog":
    """Parse a JSON catalog document, validating every entry."""
    try:
        raw_products = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise CatalogError(f"Catalog is not valid JSON: {e}") from e
    if not isinstance(raw_products, list):
        raise CatalogError("Catalog root must be a list of products")

    products = [_parse_product(raw) for raw in raw_products]
    ids = [p.id for p in products]
    if len(set(ids)) != len(ids):
        raise CatalogError("Catalog contains duplicate product ids")
    return Catalog(products)


@lru_cache
def load_catalog(path: Path = CATALOG_PATH) -> "Catalog":
    """Load and cache the catalog for the lifetime of the process."""
    catalog = parse_catalog(path.read_bytes())
    logger.info("Catalog loaded", products=len(catalog), path=str(path))
    return catalog


class Catalog:
    """Read-only queries over the product list. Results keep catalog order."""

    def __init__(self, products: Sequence[Product]):
        self._products = tuple(products)
        self._by_id = {p.id: p for p in self._products}

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    def get(self, product_id: str) -> Product | None:
        return self._by_id.get(product_id)

    def find_by_name(self, name: str) -> Product | None:
        wanted = name.strip().lower()
        for product in self._products:
            if product.name.lower() == wanted:
                return product
        return None

    def search(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> list[Product]:
        q = query.lower()
        matches = [
            p
            for p in self._products
            if q in p.name.lower()
            or any(q in e for e in p.effect_tags)
            or any(q in a.lower() for a in p.aromatic_tags)
            or q in p.category.value
        ]
        return matches[:limit]

    def by_category(self, category: StrainCategory | str) -> list[Product]:
        category = StrainCategory(category)
        return [p for p in self._products if p.category == category]

    def with_any_effect(self, effects: Iterable[str]) -> list[Product]:
        wanted = set(effects)
        return [p for p in self._products if wanted.intersection(p.effect_tags)]

    def for_mood(self, mood: str, limit: int = MOOD_CANDIDATE_LIMIT) -> list[Product]:
        effects = MOOD_EFFECTS.get(mood.lower(), ())
        return self.with_any_effect(effects)[:limit]

    def for_medical_condition(self, condition: str) -> list[Product]:
        c = condition.lower()
        return [p for p in self._products if any(c in use.lower() for use in p.medical_use_tags)]

    def top_rated(self, limit: int = 10, category: StrainCategory | str | None = None) -> list[Product]:
        pool = self._products if category is None else self.by_category(category)
        return sorted(pool, key=lambda p: p.community_rating, reverse=True)[:limit]
