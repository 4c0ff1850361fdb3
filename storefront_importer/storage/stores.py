"""
Per-shop configuration stores: settings, prompt templates, negative words.

Point lookups, inserts and whole-row updates only.
"""

import logging
import time
from dataclasses import fields
from typing import Any, Dict, Iterable, List, Optional

from ..common.config_loader import load_default_negative_words, load_store_defaults
from ..common.constants import LANGUAGE_OPTIONS, PRICE_ROUNDING_OPTIONS
from ..models import NegativeWord, PromptTemplate, StoreSettings
from .database import Database

logger = logging.getLogger(__name__)

SETTINGS_COLUMNS = [f.name for f in fields(StoreSettings)]

PRODUCT_STATUSES = ("ACTIVE", "DRAFT")
INVENTORY_POLICIES = ("CONTINUE", "DENY")


def validate_settings(settings: StoreSettings) -> None:
    """
    Reject settings the pipeline cannot apply.

    Raises:
        ValueError: Naming the first invalid field
    """
    if settings.language not in LANGUAGE_OPTIONS:
        raise ValueError(f"Unsupported language: {settings.language}")
    if settings.product_status not in PRODUCT_STATUSES:
        raise ValueError(f"product_status must be one of {PRODUCT_STATUSES}")
    if settings.inventory_policy not in INVENTORY_POLICIES:
        raise ValueError(f"inventory_policy must be one of {INVENTORY_POLICIES}")
    if settings.retail_price_multiplier < 0 or settings.compare_at_price_multiplier < 0:
        raise ValueError("Price multipliers cannot be negative")
    if settings.price_rounding not in PRICE_ROUNDING_OPTIONS:
        try:
            fraction = float(settings.price_rounding)
        except ValueError:
            fraction = -1
        if not 0 <= fraction < 1:
            raise ValueError(f"Invalid price rounding: {settings.price_rounding}")


class SettingsStore:
    """StoreSettings keyed by shop, created with defaults on first read."""

    def __init__(self, db: Database, defaults: Optional[Dict[str, Any]] = None):
        self.db = db
        self.defaults = load_store_defaults() if defaults is None else defaults

    def get(self, shop: str) -> StoreSettings:
        row = self.db.query_one("SELECT * FROM store_settings WHERE shop = ?", (shop,))
        if row is not None:
            return StoreSettings.from_dict(dict(row))

        settings = StoreSettings.from_dict({**self.defaults, "shop": shop})
        self.save(settings)
        logger.info("Created default settings for %s", shop)
        return settings

    def save(self, settings: StoreSettings) -> None:
        """
        Replace the shop's settings wholesale.

        Raises:
            ValueError: If a value is out of range (nothing is written)
        """
        validate_settings(settings)
        values = settings.to_dict()
        placeholders = ", ".join("?" for _ in SETTINGS_COLUMNS)
        self.db.execute(
            f"INSERT OR REPLACE INTO store_settings ({', '.join(SETTINGS_COLUMNS)}, updated_at) "
            f"VALUES ({placeholders}, ?)",
            [values[column] for column in SETTINGS_COLUMNS] + [int(time.time())],
        )


class TemplateStore:
    """Prompt templates scoped to a shop."""

    def __init__(self, db: Database):
        self.db = db

    def list(self, shop: str) -> List[PromptTemplate]:
        rows = self.db.query_all(
            "SELECT * FROM prompt_templates WHERE shop = ? ORDER BY updated_at DESC, id DESC",
            (shop,),
        )
        return [PromptTemplate(**dict(row)) for row in rows]

    def get(self, template_id: int, shop: str) -> Optional[PromptTemplate]:
        row = self.db.query_one(
            "SELECT * FROM prompt_templates WHERE id = ? AND shop = ?", (template_id, shop)
        )
        return PromptTemplate(**dict(row)) if row else None

    def create(self, shop: str, name: str, title_prompt: str = "", description_prompt: str = "") -> int:
        """
        Create a template.

        Raises:
            ValueError: If name is blank
        """
        if not (name or "").strip():
            raise ValueError("Template name is required")

        now = int(time.time())
        cursor = self.db.execute(
            "INSERT INTO prompt_templates (shop, name, title_prompt, description_prompt, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (shop, name.strip(), title_prompt or "", description_prompt or "", now, now),
        )
        return cursor.lastrowid

    def update(self, template_id: int, shop: str, name: str, title_prompt: str, description_prompt: str) -> bool:
        if not (name or "").strip():
            raise ValueError("Template name is required")

        cursor = self.db.execute(
            "UPDATE prompt_templates SET name = ?, title_prompt = ?, description_prompt = ?, updated_at = ? "
            "WHERE id = ? AND shop = ?",
            (name.strip(), title_prompt or "", description_prompt or "", int(time.time()), template_id, shop),
        )
        return cursor.rowcount > 0

    def delete(self, template_id: int, shop: str) -> bool:
        cursor = self.db.execute(
            "DELETE FROM prompt_templates WHERE id = ? AND shop = ?", (template_id, shop)
        )
        return cursor.rowcount > 0

    def title_prompt(self, template_id: Optional[int], shop: str) -> Optional[str]:
        """Title instructions of a template, or None if unset/missing/blank."""
        template = self.get(template_id, shop) if template_id else None
        return (template.title_prompt or None) if template else None

    def description_prompt(self, template_id: Optional[int], shop: str) -> Optional[str]:
        template = self.get(template_id, shop) if template_id else None
        return (template.description_prompt or None) if template else None


class NegativeWordStore:
    """Denylist entries scoped to a shop."""

    def __init__(self, db: Database):
        self.db = db

    def entries(self, shop: str) -> List[NegativeWord]:
        rows = self.db.query_all(
            "SELECT id, shop, word FROM negative_words WHERE shop = ? ORDER BY id", (shop,)
        )
        return [NegativeWord(**dict(row)) for row in rows]

    def list(self, shop: str) -> List[str]:
        return [entry.word for entry in self.entries(shop)]

    def add(self, shop: str, word: str) -> None:
        word = (word or "").strip()
        if word:
            self.db.execute(
                "INSERT OR IGNORE INTO negative_words (shop, word) VALUES (?, ?)", (shop, word)
            )

    def remove(self, shop: str, word: str) -> bool:
        cursor = self.db.execute(
            "DELETE FROM negative_words WHERE shop = ? AND word = ?", (shop, word.strip())
        )
        return cursor.rowcount > 0

    def replace(self, shop: str, words: Iterable[str]) -> List[str]:
        """Replace the shop's whole denylist; blank and duplicate words are dropped."""
        self.db.execute("DELETE FROM negative_words WHERE shop = ?", (shop,))
        for word in words:
            self.add(shop, word)
        return self.list(shop)

    def seed_defaults(self, shop: str) -> List[str]:
        """Give a shop with no denylist the default words."""
        existing = self.list(shop)
        if existing:
            return existing
        return self.replace(shop, load_default_negative_words())
