"""
Pricing Engine

Applies, in fixed order:
    1. currency conversion (source -> USD -> target, static rate table)
    2. retail price multiplier
    3. compare-at price multiplier
    4. rounding policy (floor + fixed fractional part)

Every function here is pure and total: bad input prices count as 0 and
unknown currencies are left unconverted.
"""

import math
from dataclasses import replace
from typing import Dict, List, Optional

from ..common.constants import CURRENCY_TO_USD, DEFAULT_CURRENCY, REGION_CURRENCIES
from ..models import ProductVariant, StoreSettings

# Presets that map straight to a fractional part
FIXED_SUFFIXES = {
    ".99": 0.99,
    ".95": 0.95,
    ".90": 0.90,
    ".50": 0.50,
    ".49": 0.49,
}


def parse_price(value: Optional[str]) -> float:
    """Parse a decimal price string; anything unparseable or non-finite is 0."""
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def format_price(value: float) -> str:
    return f"{value:.2f}"


def apply_rounding(price: float, rounding: str) -> float:
    """
    Round a price to the configured policy.

    ".99"/".95"/".90"/".50"/".49" give floor(price) + suffix, ".00" rounds
    to the nearest whole number, and any other fraction in [0, 1) (e.g.
    "0.75") is added to floor(price). Prices <= 0 become 0.

    Examples:
        apply_rounding(12.30, ".95") -> 12.95
        apply_rounding(12.50, ".00") -> 13
        apply_rounding(-5, ".99")    -> 0
    """
    if price <= 0:
        return 0

    whole = math.floor(price)

    if rounding in FIXED_SUFFIXES:
        return whole + FIXED_SUFFIXES[rounding]

    if rounding == ".00":
        return math.floor(price + 0.5)

    try:
        fraction = float(rounding)
    except (TypeError, ValueError):
        return price

    if 0 <= fraction < 1:
        return whole + fraction
    return price


def convert_currency(
    amount: float,
    source_currency: str,
    target_currency: str,
    rates: Optional[Dict[str, float]] = None,
) -> float:
    """
    Convert amount between currencies via USD.

    Args:
        amount: Amount in source currency
        source_currency: ISO code (e.g. "EUR")
        target_currency: ISO code (e.g. "GBP")
        rates: Currency -> USD value table (default: CURRENCY_TO_USD)

    Returns:
        Converted amount, or the input amount if either currency is unknown
    """
    source = (source_currency or DEFAULT_CURRENCY).upper()
    target = (target_currency or DEFAULT_CURRENCY).upper()
    if source == target:
        return amount

    rates = rates or CURRENCY_TO_USD
    source_rate = rates.get(source)
    target_rate = rates.get(target)
    if not source_rate or not target_rate:
        return amount

    usd = amount * source_rate
    return usd / target_rate


def detect_currency(region: Optional[str], regions: Optional[Dict[str, str]] = None) -> str:
    """Map a region name (case-insensitive) to its currency; USD when unknown."""
    regions = regions or REGION_CURRENCIES
    return regions.get((region or "").strip().lower(), DEFAULT_CURRENCY)


def apply_pricing(
    variant: ProductVariant,
    settings: StoreSettings,
    source_currency: str = DEFAULT_CURRENCY,
    target_currency: str = DEFAULT_CURRENCY,
    rates: Optional[Dict[str, float]] = None,
) -> ProductVariant:
    """
    Reprice a single variant.

    With compare_at_price_manual set (or a multiplier <= 0) the scraped
    compare-at price is kept, converted and rounded but not recomputed.

    Returns:
        New ProductVariant with two-decimal price strings
    """
    price = parse_price(variant.price)
    compare_at = parse_price(variant.compare_at_price) if variant.compare_at_price else None

    if (source_currency or DEFAULT_CURRENCY).upper() != (target_currency or DEFAULT_CURRENCY).upper():
        price = convert_currency(price, source_currency, target_currency, rates)
        if compare_at is not None:
            compare_at = convert_currency(compare_at, source_currency, target_currency, rates)

    if not settings.retail_price_manual and settings.retail_price_multiplier != 1:
        price = price * settings.retail_price_multiplier

    if not settings.compare_at_price_manual and settings.compare_at_price_multiplier > 0:
        compare_at = price * settings.compare_at_price_multiplier

    price = apply_rounding(price, settings.price_rounding)
    if compare_at is not None and compare_at > 0:
        compare_at = apply_rounding(compare_at, settings.price_rounding)

    return replace(
        variant,
        price=format_price(price),
        compare_at_price=format_price(compare_at) if compare_at and compare_at > 0 else None,
    )


def apply_pricing_to_all_variants(
    variants: List[ProductVariant],
    settings: StoreSettings,
    source_currency: str = DEFAULT_CURRENCY,
    target_currency: str = DEFAULT_CURRENCY,
    rates: Optional[Dict[str, float]] = None,
) -> List[ProductVariant]:
    """
    Reprice every variant of a product.

    With variant_pricing enabled all variants take the first variant's
    price and compare-at price.
    """
    processed = [
        apply_pricing(v, settings, source_currency, target_currency, rates)
        for v in variants
    ]

    if settings.variant_pricing and processed:
        first = processed[0]
        return [
            replace(v, price=first.price, compare_at_price=first.compare_at_price)
            for v in processed
        ]

    return processed
