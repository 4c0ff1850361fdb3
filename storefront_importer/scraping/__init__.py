"""
Storefront scraping.

Modules:
    url_resolver        - URL -> (store, handle, type)
    normalizer          - Raw storefront JSON -> ScrapedProduct, deduplication
    storefront_scraper  - HTTP fetching with pagination and error isolation
"""

from .normalizer import deduplicate_products, normalize_product
from .storefront_scraper import ScrapeResult, StorefrontScraper, browser_headers
from .url_resolver import COLLECTION, PRODUCT, ParsedUrl, parse_shopify_url

__all__ = [
    'parse_shopify_url',
    'ParsedUrl',
    'PRODUCT',
    'COLLECTION',
    'normalize_product',
    'deduplicate_products',
    'StorefrontScraper',
    'ScrapeResult',
    'browser_headers',
]
