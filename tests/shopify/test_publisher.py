"""Tests for storefront_importer/shopify/publisher.py"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import make_response
from storefront_importer.common.errors import CatalogMutationError
from storefront_importer.models import ProductImage, ProductVariant, ScrapedProduct, StoreSettings
from storefront_importer.shopify.publisher import CatalogPublisher, map_weight_unit


def created_payload(n):
    return {
        "product": {
            "id": f"gid://shopify/Product/{n}",
            "tags": [],
            "variants": {"edges": [{"node": {"id": f"gid://shopify/ProductVariant/{n}"}}]},
        },
        "userErrors": [],
    }


class FakeCatalog:
    """Records mutate() calls and answers like Shopify would."""

    def __init__(self, fail_titles=(), fail_collections=(), fail_variants=False, fail_media=False):
        self.calls = []
        self.created = 0
        self.fail_titles = set(fail_titles)
        self.fail_collections = set(fail_collections)
        self.fail_variants = fail_variants
        self.fail_media = fail_media

    def mutate(self, mutation, variables, root, errors_key="userErrors"):
        self.calls.append((root, variables))
        if root == "productCreate":
            if variables["product"]["title"] in self.fail_titles:
                raise CatalogMutationError("productCreate failed: Title is invalid")
            self.created += 1
            return created_payload(self.created)
        if root == "productVariantsBulkUpdate" and self.fail_variants:
            raise CatalogMutationError("productVariantsBulkUpdate failed: bad price")
        if root == "productCreateMedia" and self.fail_media:
            raise CatalogMutationError("productCreateMedia failed: bad image")
        if root == "collectionAddProducts" and variables["id"] in self.fail_collections:
            raise CatalogMutationError("collectionAddProducts failed: not found")
        return {}

    def roots(self):
        return [root for root, _ in self.calls]


def make_product(title, n_images=1):
    return ScrapedProduct(
        external_id=hash(title),
        title=title,
        description="<p>d</p>",
        vendor="Source Vendor",
        product_type="Mugs",
        tags=["a"],
        images=[ProductImage(src=f"https://cdn/{title}-{i}.jpg", position=i + 1) for i in range(n_images)],
        variants=[ProductVariant(price="9.95", compare_at_price="14.95", sku="SKU", weight=0.5, weight_unit="lb")],
        source_store="s",
    )


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def publisher(catalog):
    client = MagicMock()
    client.mutate.side_effect = catalog.mutate
    return CatalogPublisher(client, media_uploader=None, product_delay=0)


class TestMapWeightUnit:
    @pytest.mark.parametrize("unit, expected", [
        ("kg", "KILOGRAMS"), ("g", "GRAMS"), ("lb", "POUNDS"), ("oz", "OUNCES"),
        ("Pounds", "POUNDS"), (None, "KILOGRAMS"), ("stone", "KILOGRAMS"),
    ])
    def test_mapping(self, unit, expected):
        assert map_weight_unit(unit) == expected


class TestBuildProductInput:
    def test_settings_vendor_overrides(self, publisher):
        settings = StoreSettings(shop="s", vendor="My Brand", product_status="DRAFT")
        payload = publisher.build_product_input(make_product("Mug"), settings)
        assert payload == {
            "title": "Mug",
            "descriptionHtml": "<p>d</p>",
            "vendor": "My Brand",
            "productType": "Mugs",
            "tags": ["a"],
            "status": "DRAFT",
        }

    def test_product_vendor_when_unset(self, publisher, settings):
        assert publisher.build_product_input(make_product("Mug"), settings)["vendor"] == "Source Vendor"

    def test_variant_input_nulls_zero_weight(self):
        variant_input = CatalogPublisher.build_variant_input("gid://v", ProductVariant(price="5.00", weight=0))
        assert variant_input["weight"] is None
        assert variant_input["compareAtPrice"] is None
        assert variant_input["sku"] is None
        assert variant_input["weightUnit"] == "KILOGRAMS"


class TestPublishProducts:
    def test_second_product_failing_does_not_stop_others(self, settings):
        catalog = FakeCatalog(fail_titles={"P2"})
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        publisher = CatalogPublisher(client, product_delay=0)
        products = [make_product(f"P{i}") for i in range(1, 5)]

        result = publisher.publish_products(products, settings, collection_ids=["gid://c/1"])

        assert (result.imported, result.failed, result.total) == (3, 1, 4)
        assert result.created_product_ids == [
            "gid://shopify/Product/1", "gid://shopify/Product/2", "gid://shopify/Product/3",
        ]
        assert result.errors == [{"title": "P2", "error": "productCreate failed: Title is invalid"}]
        collection_calls = [v for root, v in catalog.calls if root == "collectionAddProducts"]
        assert collection_calls == [{"id": "gid://c/1", "productIds": result.created_product_ids}]

    def test_call_sequence_per_product(self, publisher, catalog, settings):
        publisher.publish_products([make_product("Mug", n_images=2)], settings)

        assert catalog.roots() == ["productCreate", "productVariantsBulkUpdate", "productCreateMedia"]
        variant_vars = catalog.calls[1][1]
        assert variant_vars["productId"] == "gid://shopify/Product/1"
        assert variant_vars["variants"][0] == {
            "id": "gid://shopify/ProductVariant/1",
            "price": "9.95",
            "compareAtPrice": "14.95",
            "sku": "SKU",
            "weight": 0.5,
            "weightUnit": "POUNDS",
        }
        media = catalog.calls[2][1]["media"]
        assert [m["alt"] for m in media] == ["Mug - Image 1", "Mug - Image 2"]
        assert media[0]["originalSource"] == "https://cdn/Mug-0.jpg"

    def test_variant_and_media_failures_are_non_fatal(self, settings):
        catalog = FakeCatalog(fail_variants=True, fail_media=True)
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        publisher = CatalogPublisher(client, product_delay=0)

        result = publisher.publish_products([make_product("Mug")], settings)

        assert (result.imported, result.failed) == (1, 0)

    @pytest.mark.parametrize("root, error", [
        ("productVariantsBulkUpdate", ValueError("unexpected payload")),
        ("productCreateMedia", KeyError("media")),
        ("productCreateMedia", requests.ConnectionError("reset")),
    ])
    def test_unexpected_sub_step_errors_keep_product(self, settings, root, error):
        catalog = FakeCatalog()

        def mutate(mutation, variables, name, errors_key="userErrors"):
            if name == root:
                raise error
            return catalog.mutate(mutation, variables, name, errors_key)

        client = MagicMock()
        client.mutate.side_effect = mutate
        publisher = CatalogPublisher(client, product_delay=0)

        result = publisher.publish_products([make_product("Mug")], settings, ["gid://c/1"])

        assert (result.imported, result.failed) == (1, 0)
        assert result.created_product_ids == ["gid://shopify/Product/1"]
        assert catalog.roots()[-1] == "collectionAddProducts"

    def test_malformed_variant_edge_is_non_fatal(self, settings):
        client = MagicMock()
        client.mutate.return_value = {
            "product": {"id": "gid://shopify/Product/9", "variants": {"edges": [{"node": {}}]}},
        }
        publisher = CatalogPublisher(client, product_delay=0)

        result = publisher.publish_products([make_product("Mug")], settings)

        assert result.created_product_ids == ["gid://shopify/Product/9"]
        roots = [c[0][2] for c in client.mutate.call_args_list]
        assert "productVariantsBulkUpdate" not in roots

    def test_undecodable_variant_response_keeps_product(self, shopify_client, settings):
        created = make_response(json_data={"data": {"productCreate": created_payload(1)}})
        garbled = make_response(text="<html>")
        garbled.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        media = make_response(json_data={"data": {"productCreateMedia": {"media": [], "mediaUserErrors": []}}})
        publisher = CatalogPublisher(shopify_client, product_delay=0)

        with patch.object(shopify_client.session, "post", side_effect=[created, garbled, media]):
            result = publisher.publish_products([make_product("Mug")], settings)

        assert (result.imported, result.failed) == (1, 0)
        assert result.created_product_ids == ["gid://shopify/Product/1"]

    def test_failed_collection_isolated(self, settings):
        catalog = FakeCatalog(fail_collections={"gid://c/1"})
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        publisher = CatalogPublisher(client, product_delay=0)

        result = publisher.publish_products([make_product("Mug")], settings, ["gid://c/1", "gid://c/2"])

        assert result.failed_collections == ["gid://c/1"]
        assert [v["id"] for root, v in catalog.calls if root == "collectionAddProducts"] == ["gid://c/1", "gid://c/2"]

    def test_no_collection_call_without_products(self, settings):
        catalog = FakeCatalog(fail_titles={"Mug"})
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        publisher = CatalogPublisher(client, product_delay=0)

        publisher.publish_products([make_product("Mug")], settings, ["gid://c/1"])

        assert "collectionAddProducts" not in catalog.roots()

    def test_prepare_failure_counts_as_failed(self, publisher, settings):
        def prepare(product):
            if product.title == "Bad":
                raise ValueError("bad data")
            return product

        result = publisher.publish_products([make_product("Good"), make_product("Bad")], settings, prepare=prepare)

        assert (result.imported, result.failed) == (1, 1)

    def test_prepare_output_is_published(self, publisher, catalog, settings):
        publisher.publish_products([make_product("Old")], settings,
                                   prepare=lambda p: ScrapedProduct(**{**vars(p), "title": "New"}))
        assert catalog.calls[0][1]["product"]["title"] == "New"

    @patch("storefront_importer.shopify.publisher.time.sleep")
    def test_throttle_sleeps_between_products(self, mock_sleep, catalog, settings):
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        publisher = CatalogPublisher(client, product_delay=1.0)

        publisher.publish_products([make_product("A"), make_product("B"), make_product("C")], settings, throttle=True)

        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(1.0)

    @patch("storefront_importer.shopify.publisher.time.sleep")
    def test_no_sleep_without_throttle(self, mock_sleep, catalog, settings):
        client = MagicMock()
        client.mutate.side_effect = catalog.mutate
        CatalogPublisher(client, product_delay=1.0).publish_products(
            [make_product("A"), make_product("B")], settings
        )
        mock_sleep.assert_not_called()
