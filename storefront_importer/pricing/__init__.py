from .engine import (
    apply_pricing,
    apply_pricing_to_all_variants,
    apply_rounding,
    convert_currency,
    detect_currency,
    format_price,
    parse_price,
)

__all__ = [
    'apply_rounding',
    'apply_pricing',
    'apply_pricing_to_all_variants',
    'convert_currency',
    'detect_currency',
    'parse_price',
    'format_price',
]
