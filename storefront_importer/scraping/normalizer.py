"""
Storefront JSON normalization.

Maps the loosely-typed /products.json payload into ScrapedProduct. Every
raw field is optional; missing values get empty defaults so later stages
never branch on absent keys.
"""

from typing import Any, Dict, List, Optional

from ..models import ProductImage, ProductOption, ProductVariant, ScrapedProduct

RawProduct = Dict[str, Any]


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def _objects(value: Any) -> List[Dict[str, Any]]:
    """Entries of a raw list that are JSON objects; anything else is dropped."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def normalize_image(raw: Dict[str, Any], index: int) -> ProductImage:
    return ProductImage(
        src=raw.get("src") or "",
        alt=raw.get("alt") or None,
        position=_as_int(raw.get("position")) or index + 1,
    )


def normalize_variant(raw: Dict[str, Any]) -> ProductVariant:
    return ProductVariant(
        title=raw.get("title") or "Default",
        price=str(raw.get("price") or "0.00"),
        compare_at_price=_optional_str(raw.get("compare_at_price")),
        sku=raw.get("sku") or "",
        weight=_as_float(raw.get("weight")),
        weight_unit=raw.get("weight_unit") or "kg",
        inventory_quantity=_as_int(raw.get("inventory_quantity")),
        option1=_optional_str(raw.get("option1")),
        option2=_optional_str(raw.get("option2")),
        option3=_optional_str(raw.get("option3")),
    )


def normalize_option(raw: Dict[str, Any]) -> ProductOption:
    values = raw.get("values")
    return ProductOption(
        name=raw.get("name") or "",
        values=[str(v) for v in values if v is not None] if isinstance(values, list) else [],
    )


def normalize_tags(raw_tags: Any) -> List[str]:
    """Tags arrive as "a, b, c" on some endpoints and as a list on others."""
    if isinstance(raw_tags, str):
        return [tag.strip() for tag in raw_tags.split(",") if tag.strip()]
    if not isinstance(raw_tags, list):
        return []
    return [str(tag) for tag in raw_tags if tag is not None]


def normalize_product(raw: Optional[RawProduct], source_url: str, source_store: str) -> ScrapedProduct:
    """
    Convert a raw storefront product into a ScrapedProduct.

    Args:
        raw: Product object from products.json (may be None or partial)
        source_url: URL the product was scraped from
        source_store: Storefront hostname

    Returns:
        ScrapedProduct with defaults for every missing field
    """
    if not isinstance(raw, dict):
        raw = {}

    return ScrapedProduct(
        external_id=raw.get("id"),
        title=raw.get("title") or "",
        handle=raw.get("handle") or "",
        description=raw.get("body_html") or "",
        vendor=raw.get("vendor") or "",
        product_type=raw.get("product_type") or "",
        tags=normalize_tags(raw.get("tags")),
        images=[normalize_image(img, i) for i, img in enumerate(_objects(raw.get("images")))],
        variants=[normalize_variant(v) for v in _objects(raw.get("variants"))],
        options=[normalize_option(o) for o in _objects(raw.get("options"))],
        source_url=source_url,
        source_store=source_store,
    )


def deduplicate_products(products: List[ScrapedProduct]) -> List[ScrapedProduct]:
    """
    Keep the first product seen per (source_store, external_id).

    Encounter order is preserved for the survivors.
    """
    seen = {}
    for product in products:
        if product.dedup_key not in seen:
            seen[product.dedup_key] = product
    return list(seen.values())
