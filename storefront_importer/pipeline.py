"""
Import pipeline operations.

ImportPipeline wires the scraper, optimizer, pricing engine, publisher and
stores together for one shop:

    scrape()                  - products from storefront URLs
    optimize()                - AI preview of titles/descriptions/alt text
    upload()                  - optimize + reprice + enhance + publish, recorded as a batch
    generate_image()          - standalone AI image with alt text
    upload_generated_image()  - attach a generated image to an existing product

Every collaborator is passed in; nothing is read from module globals.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

import requests

from .common.config_loader import load_currency_rates, load_region_currencies
from .common.constants import DEFAULT_CURRENCY
from .common.errors import ConfigurationError, ImporterError
from .common.text_utils import slugify
from .models import GeneratedImage, ProductImage, ScrapedProduct
from .optimization import (
    GeminiClient,
    create_generated_image,
    enhance_product_image,
    optimize_product,
    optimize_products,
)
from .pricing import apply_pricing_to_all_variants, detect_currency
from .scraping import PRODUCT, StorefrontScraper
from .shopify import CatalogPublisher, ShopifyAPIClient, ShopifyMediaUploader
from .storage import BatchLedger, Database, NegativeWordStore, SettingsStore, TemplateStore

logger = logging.getLogger(__name__)


class ImportPipeline:
    """
    Scrape-optimize-publish operations for one shop.

    Usage:
        pipeline = ImportPipeline(shop, db, shopify_client=client, gemini_client=gemini)
        scraped = pipeline.scrape(["https://store.example/collections/sale"], "collection")
        summary = pipeline.upload(scraped["products"], optimize_content=True)
    """

    def __init__(
        self,
        shop: str,
        db: Database,
        shopify_client: Optional[ShopifyAPIClient] = None,
        gemini_client: Optional[GeminiClient] = None,
        scraper: Optional[StorefrontScraper] = None,
        publisher: Optional[CatalogPublisher] = None,
    ):
        self.shop = shop
        self.db = db
        self.shopify_client = shopify_client
        self.gemini_client = gemini_client
        self.scraper = scraper or StorefrontScraper()
        self._publisher = publisher

        self.settings_store = SettingsStore(db)
        self.templates = TemplateStore(db)
        self.negative_words = NegativeWordStore(db)
        self.ledger = BatchLedger(db)

    @property
    def publisher(self) -> CatalogPublisher:
        if self._publisher is None:
            self._publisher = CatalogPublisher(self.require_shopify())
        return self._publisher

    def require_shopify(self) -> ShopifyAPIClient:
        if self.shopify_client is None:
            raise ConfigurationError("Shopify credentials are not configured")
        return self.shopify_client

    def require_gemini(self) -> GeminiClient:
        if self.gemini_client is None:
            raise ConfigurationError("GEMINI_API_KEY is not configured")
        return self.gemini_client

    def _resolve_negative_words(self, negative_words: Optional[Sequence[str]]) -> List[str]:
        if negative_words is None:
            return self.negative_words.list(self.shop)
        return [w for w in negative_words if w and w.strip()]

    # ------------------------------------------------------------------
    # Scrape
    # ------------------------------------------------------------------

    def scrape(self, urls: Sequence[str], import_type: str = PRODUCT) -> Dict[str, Any]:
        """
        Scrape every URL; one bad URL never aborts the others.

        Returns:
            {"products": [...], "errors": [{"url", "error"}]}
        """
        urls = [u.strip() for u in urls if u and u.strip()]
        return self.scraper.scrape_urls(urls, import_type).to_dict()

    # ------------------------------------------------------------------
    # Optimize (preview)
    # ------------------------------------------------------------------

    def optimize(
        self,
        products: Sequence[ScrapedProduct],
        title_template_id: Optional[int] = None,
        description_template_id: Optional[int] = None,
        optimize_alt_text: Optional[bool] = None,
        negative_words: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """
        Optimize products without publishing them.

        Returns:
            {"products": [...], "warnings": [...]}

        Raises:
            ConfigurationError: If no Gemini client is configured
        """
        client = self.require_gemini()
        if optimize_alt_text is None:
            optimize_alt_text = self.settings_store.get(self.shop).alt_text_optimization

        result = optimize_products(
            products,
            self.templates.title_prompt(title_template_id, self.shop),
            self.templates.description_prompt(description_template_id, self.shop),
            self._resolve_negative_words(negative_words),
            client,
            optimize_alt_text=optimize_alt_text,
        )
        return result.to_dict()

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def _enhance_images(self, product: ScrapedProduct, context_description: str) -> List[ProductImage]:
        """
        Enhance and stage every image; an image that fails keeps its original src.
        """
        images = []
        total = len(product.images)
        name = slugify(product.title)
        media = self.publisher.media

        for i, img in enumerate(product.images):
            try:
                enhanced = enhance_product_image(
                    self.gemini_client, img.src, product.title, context_description, i, total
                )
                resource_url = media.upload_base64(
                    enhanced.base64_data,
                    enhanced.mime_type,
                    f"{name}-{i + 1}.{enhanced.extension}",
                )
                images.append(replace(
                    img,
                    src=resource_url,
                    alt=img.alt or f"{product.title} - Image {i + 1}",
                ))
                logger.info("Enhanced image %d/%d for \"%s\"", i + 1, total, product.title)
            except (ImporterError, requests.RequestException, ValueError, KeyError, TypeError) as e:
                logger.warning("Failed to enhance image %d for \"%s\": %s", i + 1, product.title, e)
                images.append(img)
        return images

    def upload(
        self,
        products: Sequence[ScrapedProduct],
        collection_ids: Sequence[str] = (),
        source_urls: Sequence[str] = (),
        enhance_images: bool = False,
        optimize_content: bool = False,
        title_template_id: Optional[int] = None,
        description_template_id: Optional[int] = None,
        negative_words: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """
        Publish products to the shop and record the run in the batch ledger.

        Per product (sequentially): optimize content, apply pricing rules,
        enhance images, then create it in Shopify. Failures are counted per
        product; the batch still completes.

        Returns:
            {"batchId", "imported", "failed", "total"}

        Raises:
            ConfigurationError: If AI work is requested without a Gemini client
                (raised before any batch is recorded)
        """
        if (enhance_images or optimize_content) and self.gemini_client is None:
            raise ConfigurationError("GEMINI_API_KEY is not configured")
        publisher = self.publisher

        settings = self.settings_store.get(self.shop)
        rates = load_currency_rates()
        target_currency = detect_currency(settings.region, load_region_currencies())

        title_prompt = description_prompt = None
        words: List[str] = []
        if optimize_content:
            title_prompt = self.templates.title_prompt(title_template_id, self.shop)
            description_prompt = self.templates.description_prompt(description_template_id, self.shop)
            words = self._resolve_negative_words(negative_words)

        def prepare(product: ScrapedProduct) -> ScrapedProduct:
            processed = product
            if optimize_content:
                processed = optimize_product(
                    product, title_prompt, description_prompt, words,
                    self.gemini_client, settings.alt_text_optimization,
                )

            processed = replace(processed, variants=apply_pricing_to_all_variants(
                processed.variants, settings, DEFAULT_CURRENCY, target_currency, rates,
            ))
            if processed.variants:
                logger.debug("First variant price for \"%s\": %s",
                             processed.title, processed.variants[0].price)

            if enhance_images and processed.images:
                # Enhancement prompts use the scraped description, not the rewritten one
                processed = replace(processed, images=self._enhance_images(processed, product.description))
            return processed

        batch_id = self.ledger.start_batch(
            self.shop, len(products), source_urls, settings.to_dict()
        )
        try:
            result = publisher.publish_products(
                products,
                settings,
                collection_ids=collection_ids,
                prepare=prepare,
                throttle=optimize_content or enhance_images,
            )
        except Exception:
            self.ledger.fail_batch(batch_id)
            raise

        self.ledger.complete_batch(batch_id, result.imported, result.failed)
        return {
            "batchId": batch_id,
            "imported": result.imported,
            "failed": result.failed,
            "total": result.total,
        }

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def generate_image(
        self,
        product_title: str,
        prompt: str,
        mode: str = "generate",
        existing_image_url: Optional[str] = None,
        negative_words: Optional[Sequence[str]] = None,
    ) -> GeneratedImage:
        """Generate (or enhance) an image and its alt text; nothing is saved."""
        return create_generated_image(
            self.require_gemini(),
            product_title,
            prompt,
            mode=mode,
            existing_image_url=existing_image_url,
            negative_words=self._resolve_negative_words(negative_words),
        )

    def upload_generated_image(self, product_id: str, image: GeneratedImage) -> str:
        """Attach a generated image to an existing product; returns the resourceUrl."""
        uploader = self._publisher.media if self._publisher else ShopifyMediaUploader(self.require_shopify())
        return uploader.attach_generated_image(product_id, image)
