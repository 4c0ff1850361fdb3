"""
Shopify integration modules.

Modules:
    api_client - Admin GraphQL client (rate limiting, retries, mutations)
    queries    - GraphQL documents
    media      - Staged uploads and product media
    publisher  - Product creation, variant/media updates, collection assignment
    catalog    - Collection listing, product search, content updates
"""

from .api_client import ShopifyAPIClient
from .catalog import list_collections, search_products, update_product_content
from .media import ShopifyMediaUploader, image_media_input
from .publisher import CatalogPublisher, PublishResult, map_weight_unit

__all__ = [
    # API Client
    'ShopifyAPIClient',
    # Media
    'ShopifyMediaUploader',
    'image_media_input',
    # Publishing
    'CatalogPublisher',
    'PublishResult',
    'map_weight_unit',
    # Catalog
    'list_collections',
    'search_products',
    'update_product_content',
]
