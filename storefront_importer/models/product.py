"""
Product data models.

Pure data classes for representing scraped and optimized product information.
No business logic - only data structure definitions.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class ProductImage:
    """Product image with metadata."""
    src: str
    position: int
    alt: Optional[str] = None


@dataclass
class ProductVariant:
    """
    Product variant data.

    Prices are decimal strings. After the pricing engine has run they are
    always fixed two-decimal strings (e.g. "19.95").
    """
    title: str = "Default"
    price: str = "0.00"
    compare_at_price: Optional[str] = None
    sku: str = ""
    weight: float = 0
    weight_unit: str = "kg"
    inventory_quantity: int = 0
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None


@dataclass
class ProductOption:
    """Named product option (e.g. Size) with its values."""
    name: str = ""
    values: List[str] = field(default_factory=list)


@dataclass
class ScrapedProduct:
    """
    Canonical representation of one product pulled from a source storefront.

    (source_store, external_id) identifies a product across a scrape batch.
    """

    external_id: Optional[int]
    title: str = ""
    handle: str = ""
    description: str = ""       # HTML body
    vendor: str = ""
    product_type: str = ""
    tags: List[str] = field(default_factory=list)
    images: List[ProductImage] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    options: List[ProductOption] = field(default_factory=list)
    source_url: str = ""
    source_store: str = ""

    @property
    def dedup_key(self) -> str:
        return f"{self.source_store}:{self.external_id}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapedProduct":
        """Rebuild a product from its to_dict() form (e.g. a JSON payload)."""
        names = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in names}
        values.setdefault("external_id", None)
        values["images"] = [ProductImage(**img) for img in data.get("images", [])]
        values["variants"] = [ProductVariant(**v) for v in data.get("variants", [])]
        values["options"] = [ProductOption(**o) for o in data.get("options", [])]
        return cls(**values)


@dataclass
class OptimizedProduct(ScrapedProduct):
    """
    A ScrapedProduct after AI content optimization.

    title/description hold the rewritten text; the displaced originals are
    kept alongside for audit.
    """
    original_title: str = ""
    original_description: str = ""

    @classmethod
    def from_scraped(cls, product: ScrapedProduct, **changes: Any) -> "OptimizedProduct":
        values = {k: v for k, v in vars(product).items()
                  if k not in ("original_title", "original_description")}
        values.update(changes)
        return cls(
            original_title=product.title,
            original_description=product.description,
            **values,
        )


@dataclass
class GeneratedImage:
    """AI-generated image ready to be attached to a catalog product."""
    base64_data: str
    mime_type: str = "image/png"
    alt_text: str = ""
    prompt: str = ""
