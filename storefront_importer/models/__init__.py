"""
Data models for the import pipeline.

This module contains pure data classes with no business logic.
"""

from .product import (
    GeneratedImage,
    OptimizedProduct,
    ProductImage,
    ProductOption,
    ProductVariant,
    ScrapedProduct,
)
from .settings import ImportBatch, NegativeWord, PromptTemplate, StoreSettings

__all__ = [
    'GeneratedImage',
    'ProductImage',
    'ProductVariant',
    'ProductOption',
    'ScrapedProduct',
    'OptimizedProduct',
    'StoreSettings',
    'PromptTemplate',
    'NegativeWord',
    'ImportBatch',
]
