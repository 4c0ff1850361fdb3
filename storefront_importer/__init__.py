"""
Storefront Product Importer

Scrapes products from Shopify storefronts, optionally rewrites them with
Gemini, reprices them and republishes them into your own Shopify store.

Modules:
    models        - Data models (ScrapedProduct, StoreSettings, ImportBatch, ...)
    common        - Shared utilities (config, logging, errors, text cleanup)
    scraping      - URL resolution and storefront JSON scraping
    pricing       - Currency conversion, multipliers and rounding
    optimization  - Gemini client, content optimizer and image enhancement
    shopify       - Admin API client, catalog publisher, media uploads
    storage       - SQLite settings/template/negative-word stores and batch ledger
    pipeline      - Scrape / optimize / upload operations
"""

__version__ = "0.1.0"
