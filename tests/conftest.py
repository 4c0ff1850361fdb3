"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from storefront_importer.models import (
    ProductImage,
    ProductVariant,
    ScrapedProduct,
    StoreSettings,
)
from storefront_importer.optimization import RetryPolicy
from storefront_importer.shopify import ShopifyAPIClient
from storefront_importer.storage import Database

NO_DELAY = RetryPolicy(base_delay=0, rate_limit_base_delay=0, success_delay=0)


def make_response(status_code=200, json_data=None, text="", headers=None, content=b""):
    """Build a MagicMock standing in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {}
    response.text = text
    response.headers = headers or {}
    response.content = content
    return response


def raw_product(product_id, title=None, price="10.00"):
    """Minimal storefront products.json entry."""
    return {
        "id": product_id,
        "title": title or f"Product {product_id}",
        "handle": f"product-{product_id}",
        "body_html": "<p>Description</p>",
        "vendor": "Acme",
        "product_type": "Mugs",
        "tags": ["kitchen"],
        "images": [{"src": f"https://cdn.example.com/{product_id}.jpg", "position": 1}],
        "variants": [{"title": "Default Title", "price": price, "sku": f"SKU-{product_id}"}],
        "options": [{"name": "Title", "values": ["Default Title"]}],
    }


@pytest.fixture
def db(tmp_path):
    """Migrated SQLite database in a temp dir."""
    database = Database(str(tmp_path / "importer.db"))
    yield database
    database.close()


@pytest.fixture
def settings():
    """Settings that leave prices untouched except for .95 rounding."""
    return StoreSettings(shop="test-store")


@pytest.fixture
def sample_product():
    return ScrapedProduct(
        external_id=101,
        title="Blue Ceramic Mug",
        handle="blue-ceramic-mug",
        description="<p>A <b>sturdy</b> mug for coffee.</p>",
        vendor="Acme",
        product_type="Mugs",
        tags=["kitchen", "coffee"],
        images=[
            ProductImage(src="https://cdn.example.com/mug-1.jpg", position=1, alt="Mug front"),
            ProductImage(src="https://cdn.example.com/mug-2.jpg", position=2),
        ],
        variants=[ProductVariant(title="Default", price="12.30", compare_at_price="20.00", sku="MUG-1", weight=0.4)],
        source_url="https://source.example.com/products/blue-ceramic-mug",
        source_store="source.example.com",
    )


@pytest.fixture
def shopify_client():
    """Shopify client with rate limiting disabled for fast tests."""
    client = ShopifyAPIClient(shop="test-store", access_token="shpat_test")
    client.min_request_interval = 0
    return client


@pytest.fixture
def gemini():
    """Stand-in for GeminiClient; configure generate_text/generate_image per test."""
    client = MagicMock()
    client.generate_text.return_value = "Generated"
    return client
