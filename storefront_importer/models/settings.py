"""
Merchant configuration and audit records.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class StoreSettings:
    """Per-shop import settings (one record per shop)."""
    shop: str
    vendor: str = ""
    language: str = "English"
    region: str = ""
    default_inventory: int = 99
    track_inventory: bool = True
    retail_price_multiplier: float = 1.0
    compare_at_price_multiplier: float = 0.0
    retail_price_manual: bool = False
    compare_at_price_manual: bool = False
    price_rounding: str = ".95"
    product_status: str = "ACTIVE"       # ACTIVE or DRAFT
    sales_channels: bool = True
    vat_enabled: bool = True
    alt_text_optimization: bool = True
    variant_pricing: bool = False
    inventory_policy: str = "CONTINUE"   # CONTINUE or DENY
    product_tags_enabled: bool = False
    product_type_enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreSettings":
        """Build settings from a row or payload, ignoring unknown keys."""
        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            # SQLite stores booleans as 0/1
            if known[key].type in (bool, "bool"):
                value = bool(value)
            values[key] = value
        return cls(**values)


@dataclass
class PromptTemplate:
    """Named pair of AI instructions for titles and descriptions."""
    id: int
    shop: str
    name: str
    title_prompt: str = ""
    description_prompt: str = ""
    created_at: int = 0
    updated_at: int = 0


@dataclass
class NegativeWord:
    """Denylisted word, stripped from all AI-generated text."""
    shop: str
    word: str
    id: Optional[int] = None


@dataclass
class ImportBatch:
    """Audit record of one bulk import run."""
    id: int
    shop: str
    status: str = "pending"
    total_products: int = 0
    imported_products: int = 0
    failed_products: int = 0
    source_urls: List[str] = field(default_factory=list)
    settings_snapshot: Dict[str, Any] = field(default_factory=dict)
    created_at: int = 0
    completed_at: Optional[int] = None

    @property
    def duration_seconds(self) -> Optional[int]:
        if self.completed_at is None:
            return None
        return self.completed_at - self.created_at
