"""
Catalog Publisher

Creates scraped (and optionally optimized, always repriced) products in the
merchant's Shopify catalog.

Per product:
    1. productCreate with basic fields     (user errors -> product failed)
    2. update the default variant          (errors logged, non-fatal)
    3. productCreateMedia for all images   (errors logged, non-fatal)
Then, once every product has been attempted, each selected collection gets
one collectionAddProducts call with all created product ids.

Products are processed strictly sequentially and in input order.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from ..common.constants import DEFAULT_WEIGHT_UNIT, WEIGHT_UNITS
from ..common.errors import CatalogMutationError, ImporterError
from ..models import ProductVariant, ScrapedProduct, StoreSettings
from .api_client import ShopifyAPIClient
from .media import ShopifyMediaUploader, image_media_input
from .queries import (
    COLLECTION_ADD_PRODUCTS_MUTATION,
    PRODUCT_CREATE_MUTATION,
    PRODUCT_VARIANT_BULK_UPDATE_MUTATION,
)

logger = logging.getLogger(__name__)

ProductTransform = Callable[[ScrapedProduct], ScrapedProduct]

# Anything a single product or sub-step can fail with; caught at its own boundary
PUBLISH_ERRORS = (ImporterError, requests.RequestException, ValueError, KeyError, TypeError)


@dataclass
class PublishResult:
    """Outcome of a publish run."""
    imported: int = 0
    failed: int = 0
    total: int = 0
    created_product_ids: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    failed_collections: List[str] = field(default_factory=list)


def map_weight_unit(unit: Optional[str]) -> str:
    """Map a storefront weight unit ("kg", "lb", ...) to Shopify's WeightUnit enum."""
    return WEIGHT_UNITS.get((unit or "kg").lower(), DEFAULT_WEIGHT_UNIT)


class CatalogPublisher:
    """
    Publishes products to Shopify via the Admin GraphQL API.

    Usage:
        publisher = CatalogPublisher(client)
        result = publisher.publish_products(products, settings, collection_ids=["gid://..."])
        print(result.imported, result.failed)
    """

    def __init__(
        self,
        client: ShopifyAPIClient,
        media_uploader: Optional[ShopifyMediaUploader] = None,
        product_delay: float = 1.0,
    ):
        """
        Initialize the publisher.

        Args:
            client: Shopify Admin API client
            media_uploader: Media helper (created from client if not given)
            product_delay: Pause between products on throttled (AI) runs, in seconds
        """
        self.client = client
        self.media = media_uploader or ShopifyMediaUploader(client)
        self.product_delay = product_delay

    def build_product_input(self, product: ScrapedProduct, settings: StoreSettings) -> Dict[str, Any]:
        """Minimal productCreate payload; variants and media are added afterwards."""
        return {
            "title": product.title,
            "descriptionHtml": product.description,
            "vendor": settings.vendor or product.vendor,
            "productType": product.product_type,
            "tags": list(product.tags),
            "status": settings.product_status,
        }

    def create_product(self, product: ScrapedProduct, settings: StoreSettings) -> Dict[str, Any]:
        """
        Create the product shell.

        Returns:
            The created product node (id, variants, ...)

        Raises:
            CatalogMutationError: On user errors or request failure
        """
        payload = self.client.mutate(
            PRODUCT_CREATE_MUTATION,
            {"product": self.build_product_input(product, settings)},
            "productCreate",
        )
        created = payload.get("product")
        if not created or not created.get("id"):
            raise CatalogMutationError("productCreate returned no product")
        logger.debug("Product created: %s, tags: %s", created["id"], created.get("tags"))
        return created

    @staticmethod
    def build_variant_input(variant_id: str, variant: ProductVariant) -> Dict[str, Any]:
        return {
            "id": variant_id,
            "price": variant.price,
            "compareAtPrice": variant.compare_at_price or None,
            "sku": variant.sku or None,
            "weight": variant.weight if variant.weight and variant.weight > 0 else None,
            "weightUnit": map_weight_unit(variant.weight_unit),
        }

    def update_default_variant(self, product_id: str, created: Dict[str, Any], product: ScrapedProduct) -> bool:
        """
        Copy the first variant's price, compare-at, sku and weight onto the
        variant Shopify created with the product.

        Returns:
            True if updated; failures are logged, never raised
        """
        edges = (created.get("variants") or {}).get("edges") or []
        if not edges or not product.variants:
            return False

        try:
            variant_input = self.build_variant_input(edges[0]["node"]["id"], product.variants[0])
            self.client.mutate(
                PRODUCT_VARIANT_BULK_UPDATE_MUTATION,
                {"productId": product_id, "variants": [variant_input]},
                "productVariantsBulkUpdate",
            )
        except PUBLISH_ERRORS as e:
            logger.warning("Variant update failed for \"%s\": %s", product.title, e)
            return False

        logger.debug("Updated variant for \"%s\": price=%s", product.title, variant_input["price"])
        return True

    def attach_media(self, product_id: str, product: ScrapedProduct) -> bool:
        """
        Attach the product's images by URL (remote src or staged resourceUrl).

        Returns:
            True if media were created; failures are logged, never raised
        """
        media = [
            image_media_input(img.src, img.alt or f"{product.title} - Image {idx}")
            for idx, img in enumerate(product.images, 1)
            if img.src
        ]
        if not media:
            return False

        try:
            self.media.create_media(product_id, media)
        except PUBLISH_ERRORS as e:
            logger.warning("Failed to add media to \"%s\": %s", product.title, e)
            return False
        return True

    def publish_product(self, product: ScrapedProduct, settings: StoreSettings) -> str:
        """
        Create one product with its variant data and media.

        Returns:
            The new product id

        Raises:
            CatalogMutationError: If the product itself could not be created
        """
        created = self.create_product(product, settings)
        product_id = created["id"]
        self.update_default_variant(product_id, created, product)
        self.attach_media(product_id, product)
        return product_id

    def assign_collections(self, collection_ids: Sequence[str], product_ids: Sequence[str]) -> List[str]:
        """
        Add products to each collection; one failing collection does not block others.

        Returns:
            Ids of collections that could not be updated
        """
        failed: List[str] = []
        if not product_ids:
            return failed

        for collection_id in collection_ids:
            try:
                self.client.mutate(
                    COLLECTION_ADD_PRODUCTS_MUTATION,
                    {"id": collection_id, "productIds": list(product_ids)},
                    "collectionAddProducts",
                )
                logger.info("Added %d products to collection %s", len(product_ids), collection_id)
            except PUBLISH_ERRORS as e:
                logger.error("Failed to add products to collection %s: %s", collection_id, e)
                failed.append(collection_id)
        return failed

    def publish_products(
        self,
        products: Sequence[ScrapedProduct],
        settings: StoreSettings,
        collection_ids: Sequence[str] = (),
        prepare: Optional[ProductTransform] = None,
        throttle: bool = False,
    ) -> PublishResult:
        """
        Publish products one by one, then assign collections.

        Args:
            products: Products to create, in order
            settings: Store settings (vendor override, status, ...)
            collection_ids: Collections to add every created product to
            prepare: Optional per-product transform (optimize/reprice/enhance);
                runs inside the product's failure boundary
            throttle: Pause product_delay seconds between products (AI runs)

        Returns:
            PublishResult with counts and created ids in input order
        """
        result = PublishResult(total=len(products))

        for i, product in enumerate(products, 1):
            logger.info("[%d/%d] %s", i, result.total, product.title[:60])
            try:
                if prepare is not None:
                    product = prepare(product)
                product_id = self.publish_product(product, settings)
                result.created_product_ids.append(product_id)
                result.imported += 1
            except PUBLISH_ERRORS as e:
                logger.error("Failed to create product \"%s\": %s", product.title, e)
                result.failed += 1
                result.errors.append({"title": product.title, "error": str(e)})

            if throttle and i < result.total and self.product_delay > 0:
                time.sleep(self.product_delay)

        if collection_ids:
            result.failed_collections = self.assign_collections(
                collection_ids, result.created_product_ids
            )

        logger.info("Publish complete: %d imported, %d failed, %d total",
                    result.imported, result.failed, result.total)
        return result
