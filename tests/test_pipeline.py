"""Tests for storefront_importer/pipeline.py"""

from unittest.mock import MagicMock, patch

import pytest

from storefront_importer.common.errors import AIServiceError, ConfigurationError
from storefront_importer.models import OptimizedProduct, StoreSettings
from storefront_importer.optimization import InlineImage
from storefront_importer.pipeline import ImportPipeline
from storefront_importer.scraping import ScrapeResult
from storefront_importer.shopify import PublishResult, ShopifyMediaUploader
from storefront_importer.storage import STATUS_COMPLETED, STATUS_FAILED


@pytest.fixture
def publisher():
    pub = MagicMock()

    def publish(products, settings, collection_ids=(), prepare=None, throttle=False):
        prepared = [prepare(p) if prepare else p for p in products]
        pub.prepared = prepared
        ids = [f"gid://shopify/Product/{i}" for i, _ in enumerate(prepared, 1)]
        return PublishResult(imported=len(ids), failed=0, total=len(products), created_product_ids=ids)

    pub.publish_products.side_effect = publish
    return pub


@pytest.fixture
def pipeline(db, publisher):
    return ImportPipeline("test-store", db, shopify_client=MagicMock(), publisher=publisher)


class TestScrape:
    def test_delegates_to_scraper(self, db):
        scraper = MagicMock()
        scraper.scrape_urls.return_value = ScrapeResult(errors=[{"url": "x", "error": "bad"}])
        pipeline = ImportPipeline("s", db, scraper=scraper)

        result = pipeline.scrape([" https://a.example.com/products/x ", ""], "product")

        scraper.scrape_urls.assert_called_once_with(["https://a.example.com/products/x"], "product")
        assert result == {"products": [], "errors": [{"url": "x", "error": "bad"}]}


class TestOptimize:
    def test_requires_gemini(self, pipeline, sample_product):
        with pytest.raises(ConfigurationError):
            pipeline.optimize([sample_product])

    def test_uses_template_and_stored_negative_words(self, db, gemini, sample_product):
        pipeline = ImportPipeline("s", db, gemini_client=gemini)
        template_id = pipeline.templates.create("s", "T", "Shout the title", "")
        pipeline.negative_words.replace("s", ["Generated"])

        result = pipeline.optimize([sample_product], title_template_id=template_id, optimize_alt_text=False)

        first_prompt = gemini.generate_text.call_args_list[0][0][0]
        assert first_prompt.startswith("Shout the title")
        assert "Generated" in first_prompt
        assert result["warnings"] == []
        # Every generated field was the denylisted word itself
        assert result["products"][0]["title"] == ""


class TestUpload:
    def test_records_completed_batch(self, pipeline, publisher, sample_product):
        summary = pipeline.upload([sample_product], collection_ids=["gid://c/1"],
                                  source_urls=["https://source.example.com/products/x"])

        assert summary == {"batchId": summary["batchId"], "imported": 1, "failed": 0, "total": 1}
        batch = pipeline.ledger.get_batch(summary["batchId"], "test-store")
        assert batch.status == STATUS_COMPLETED
        assert batch.imported_products == 1
        assert batch.source_urls == ["https://source.example.com/products/x"]
        assert batch.settings_snapshot["shop"] == "test-store"
        kwargs = publisher.publish_products.call_args[1]
        assert kwargs["collection_ids"] == ["gid://c/1"]
        assert kwargs["throttle"] is False

    def test_prepare_applies_pricing(self, pipeline, publisher, sample_product):
        pipeline.upload([sample_product])
        assert publisher.prepared[0].variants[0].price == "12.95"
        assert publisher.prepared[0].variants[0].compare_at_price == "20.95"

    def test_prepare_converts_to_region_currency(self, pipeline, publisher, sample_product):
        pipeline.settings_store.save(StoreSettings(shop="test-store", region="Eurozone-free", price_rounding=".00"))
        pipeline.upload([sample_product])
        assert publisher.prepared[0].variants[0].price == "12.00"

        pipeline.settings_store.save(StoreSettings(shop="test-store", region="Germany", price_rounding=".00"))
        with patch("storefront_importer.pipeline.load_currency_rates", return_value={"USD": 1.0, "EUR": 1.25}):
            pipeline.upload([sample_product])
        assert publisher.prepared[0].variants[0].price == "10.00"

    def test_ai_requires_gemini_before_batch(self, pipeline, sample_product):
        with pytest.raises(ConfigurationError):
            pipeline.upload([sample_product], optimize_content=True)
        assert pipeline.ledger.list_batches("test-store") == []

    def test_optimize_content_and_throttle(self, db, publisher, gemini, sample_product):
        pipeline = ImportPipeline("s", db, shopify_client=MagicMock(), gemini_client=gemini, publisher=publisher)
        gemini.generate_text.return_value = "Optimized"

        pipeline.upload([sample_product], optimize_content=True, negative_words=[])

        prepared = publisher.prepared[0]
        assert isinstance(prepared, OptimizedProduct)
        assert prepared.title == "Optimized"
        assert prepared.original_title == sample_product.title
        assert publisher.publish_products.call_args[1]["throttle"] is True

    def test_enhance_images_with_fallback(self, db, publisher, gemini, sample_product):
        pipeline = ImportPipeline("s", db, shopify_client=MagicMock(), gemini_client=gemini, publisher=publisher)
        publisher.media.upload_base64.return_value = "https://staged/mug.png"

        def enhance(client, url, title, description, index, total):
            if index == 1:
                raise AIServiceError("No image was generated by the API")
            return InlineImage("b64", "image/png")

        with patch("storefront_importer.pipeline.enhance_product_image", side_effect=enhance) as mock_enhance:
            pipeline.upload([sample_product], enhance_images=True)

        images = publisher.prepared[0].images
        assert images[0].src == "https://staged/mug.png"
        assert images[0].alt == "Mug front"
        assert images[1].src == sample_product.images[1].src
        publisher.media.upload_base64.assert_called_once_with("b64", "image/png", "blue-ceramic-mug-1.png")
        assert mock_enhance.call_args_list[0][0][3] == sample_product.description

    def test_incomplete_staged_target_falls_back_per_image(self, db, publisher, gemini, sample_product, shopify_client):
        publisher.media = ShopifyMediaUploader(shopify_client)
        pipeline = ImportPipeline("s", db, shopify_client=shopify_client, gemini_client=gemini, publisher=publisher)
        staged = {"stagedUploadsCreate": {"stagedTargets": [{"resourceUrl": "https://staged/x", "parameters": []}],
                                          "userErrors": []}}

        with patch("storefront_importer.pipeline.enhance_product_image", return_value=InlineImage("aW1n", "image/png")), \
                patch.object(shopify_client, "graphql_request", return_value=staged):
            summary = pipeline.upload([sample_product], enhance_images=True)

        assert (summary["imported"], summary["failed"]) == (1, 0)
        assert [img.src for img in publisher.prepared[0].images] == [img.src for img in sample_product.images]

    def test_unexpected_error_fails_batch(self, pipeline, publisher, sample_product):
        publisher.publish_products.side_effect = RuntimeError("db gone")

        with pytest.raises(RuntimeError):
            pipeline.upload([sample_product])

        assert pipeline.ledger.list_batches("test-store")[0].status == STATUS_FAILED


class TestImages:
    def test_generate_image_requires_gemini(self, pipeline):
        with pytest.raises(ConfigurationError):
            pipeline.generate_image("Mug", "Studio shot")

    def test_generate_image(self, db, gemini):
        gemini.generate_image.return_value = InlineImage("b64", "image/png")
        gemini.generate_text.return_value = "Mug on a table"
        pipeline = ImportPipeline("s", db, gemini_client=gemini)

        image = pipeline.generate_image("Mug", "On a table", negative_words=[])

        assert (image.base64_data, image.alt_text, image.prompt) == ("b64", "Mug on a table", "On a table")

    def test_upload_generated_image(self, pipeline, publisher):
        publisher.media.attach_generated_image.return_value = "https://staged/x.png"
        image = MagicMock()

        assert pipeline.upload_generated_image("gid://p/1", image) == "https://staged/x.png"
        publisher.media.attach_generated_image.assert_called_once_with("gid://p/1", image)

    def test_upload_generated_image_requires_shopify(self, db):
        with pytest.raises(ConfigurationError):
            ImportPipeline("s", db).upload_generated_image("gid://p/1", MagicMock())
