#!/usr/bin/env python3
"""
Command-line entry point.

Usage:
    # Scrape a collection into a JSON file
    storefront-importer scrape https://store.example/collections/sale --type collection -o scraped.json

    # Preview AI-optimized content
    storefront-importer optimize scraped.json --title-template 2 -o optimized.json

    # Publish to the configured shop, optimizing and enhancing along the way
    storefront-importer upload scraped.json --optimize --enhance-images --collection gid://shopify/Collection/1

    # Review import history
    storefront-importer batches --limit 10

Credentials are read from the environment (or .env):
    SHOPIFY_SHOP, SHOPIFY_ACCESS_TOKEN, GEMINI_API_KEY, IMPORTER_DB_PATH

Exit status is 1 only when a whole command fails. Per-URL and per-product
failures are reported in the printed JSON.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .common.config_loader import AppConfig, load_app_config
from .common.errors import ImporterError
from .common.log_config import setup_logging
from .models import GeneratedImage, ScrapedProduct
from .optimization import GeminiClient
from .pipeline import ImportPipeline
from .scraping import COLLECTION, PRODUCT
from .shopify import ShopifyAPIClient, list_collections, search_products, update_product_content
from .storage import Database

logger = logging.getLogger(__name__)


def _emit(data: Any, output: Optional[str] = None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
        logger.info("Wrote %s", output)
    else:
        print(text)


def _load_products(path: str) -> List[ScrapedProduct]:
    """Read products from a JSON file (a list, or a scrape/optimize result)."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("products", [])
    return [ScrapedProduct.from_dict(item) for item in data]


def build_pipeline(config: AppConfig, db: Database) -> ImportPipeline:
    shopify_client = None
    if config.shopify_shop and config.shopify_access_token:
        shopify_client = ShopifyAPIClient(config.shopify_shop, config.shopify_access_token)

    gemini_client = GeminiClient(config.gemini_api_key) if config.gemini_api_key else None

    shop = shopify_client.shop if shopify_client else (config.shopify_shop or "local")
    return ImportPipeline(shop, db, shopify_client=shopify_client, gemini_client=gemini_client)


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------

def cmd_scrape(pipeline: ImportPipeline, args) -> int:
    result = pipeline.scrape(args.urls, args.type)
    _emit(result, args.output)
    logger.info("Scraped %d products (%d errors)", len(result["products"]), len(result["errors"]))
    return 0


def cmd_optimize(pipeline: ImportPipeline, args) -> int:
    result = pipeline.optimize(
        _load_products(args.input),
        title_template_id=args.title_template,
        description_template_id=args.description_template,
        optimize_alt_text=False if args.no_alt_text else None,
    )
    _emit(result, args.output)
    return 0


def cmd_upload(pipeline: ImportPipeline, args) -> int:
    summary = pipeline.upload(
        _load_products(args.input),
        collection_ids=args.collection or [],
        source_urls=args.source_url or [],
        enhance_images=args.enhance_images,
        optimize_content=args.optimize,
        title_template_id=args.title_template,
        description_template_id=args.description_template,
    )
    _emit(summary)
    return 0


def cmd_batches(pipeline: ImportPipeline, args) -> int:
    if args.id is not None:
        batch = pipeline.ledger.get_batch(args.id, pipeline.shop)
        if batch is None:
            logger.error("Batch %d not found", args.id)
            return 1
        _emit({**vars(batch), "duration_seconds": batch.duration_seconds})
        return 0

    _emit([vars(b) for b in pipeline.ledger.list_batches(pipeline.shop, args.limit)])
    return 0


def cmd_collections(pipeline: ImportPipeline, args) -> int:
    client = pipeline.require_shopify()
    _emit(list_collections(client, args.query))
    return 0


def cmd_products(pipeline: ImportPipeline, args) -> int:
    client = pipeline.require_shopify()
    products, page_info = search_products(client, args.query, first=args.first, after=args.after)
    _emit({"products": products, "pageInfo": page_info})
    return 0


def cmd_update_products(pipeline: ImportPipeline, args) -> int:
    client = pipeline.require_shopify()
    with open(args.input, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("products", [])
    summary = update_product_content(client, data)
    _emit(summary)
    return 0


def _parse_setting(value: str):
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def cmd_settings(pipeline: ImportPipeline, args) -> int:
    settings = pipeline.settings_store.get(pipeline.shop)
    if args.set:
        data = settings.to_dict()
        for item in args.set:
            key, sep, value = item.partition("=")
            if not sep or key not in data or key == "shop":
                logger.error("Invalid setting: %s", item)
                return 1
            # price_rounding is a string even when it looks numeric (".95")
            data[key] = value if key == "price_rounding" else _parse_setting(value)
        settings = type(settings).from_dict(data)
        pipeline.settings_store.save(settings)
    _emit(settings.to_dict())
    return 0


def cmd_templates(pipeline: ImportPipeline, args) -> int:
    store = pipeline.templates
    if args.action == "create":
        template_id = store.create(pipeline.shop, args.name, args.title_prompt, args.description_prompt)
        _emit({"id": template_id})
    elif args.action == "delete":
        if not store.delete(args.id, pipeline.shop):
            logger.error("Template %s not found", args.id)
            return 1
    else:
        _emit([vars(t) for t in store.list(pipeline.shop)])
    return 0


def cmd_negative_words(pipeline: ImportPipeline, args) -> int:
    store = pipeline.negative_words
    if args.action == "set":
        words = store.replace(pipeline.shop, args.words)
    elif args.action == "seed":
        words = store.seed_defaults(pipeline.shop)
    else:
        words = store.list(pipeline.shop)
    _emit(words)
    return 0


def cmd_generate_image(pipeline: ImportPipeline, args) -> int:
    image = pipeline.generate_image(
        args.title,
        args.prompt,
        mode=args.mode,
        existing_image_url=args.image_url,
    )
    if args.attach:
        resource_url = pipeline.upload_generated_image(args.attach, image)
        _emit({"success": True, "resourceUrl": resource_url, "altText": image.alt_text})
        return 0

    _emit(vars(image), args.output)
    return 0


def cmd_attach_image(pipeline: ImportPipeline, args) -> int:
    with open(args.input, 'r', encoding='utf-8') as f:
        image = GeneratedImage(**json.load(f))
    resource_url = pipeline.upload_generated_image(args.product_id, image)
    _emit({"success": True, "resourceUrl": resource_url})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-importer",
        description="Import products from public Shopify storefronts into your store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Warnings and errors only')
    parser.add_argument('--log-file', type=str, help='Also write a DEBUG log to this file')
    parser.add_argument('--env-file', type=str, help='Path to a .env file')
    parser.add_argument('--db', type=str, help='SQLite database path (overrides IMPORTER_DB_PATH)')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('scrape', help='Scrape product or collection URLs')
    p.add_argument('urls', nargs='+')
    p.add_argument('--type', '-t', choices=[PRODUCT, COLLECTION], default=PRODUCT)
    p.add_argument('--output', '-o', type=str)
    p.set_defaults(func=cmd_scrape)

    p = sub.add_parser('optimize', help='Preview AI-optimized content')
    p.add_argument('input', help='Products JSON (scrape output)')
    p.add_argument('--title-template', type=int)
    p.add_argument('--description-template', type=int)
    p.add_argument('--no-alt-text', action='store_true', help='Skip alt text optimization')
    p.add_argument('--output', '-o', type=str)
    p.set_defaults(func=cmd_optimize)

    p = sub.add_parser('upload', help='Publish products to Shopify')
    p.add_argument('input', help='Products JSON (scrape output)')
    p.add_argument('--collection', action='append', help='Collection GID (repeatable)')
    p.add_argument('--source-url', action='append', help='Source URL to record (repeatable)')
    p.add_argument('--optimize', action='store_true', help='Optimize content with AI')
    p.add_argument('--enhance-images', action='store_true', help='Enhance images with AI')
    p.add_argument('--title-template', type=int)
    p.add_argument('--description-template', type=int)
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser('batches', help='Show import history')
    p.add_argument('--id', type=int, help='Show a single batch')
    p.add_argument('--limit', type=int, default=50)
    p.set_defaults(func=cmd_batches)

    p = sub.add_parser('collections', help='List shop collections')
    p.add_argument('--query', type=str)
    p.set_defaults(func=cmd_collections)

    p = sub.add_parser('products', help='Search shop products')
    p.add_argument('--query', type=str)
    p.add_argument('--first', type=int, default=24)
    p.add_argument('--after', type=str)
    p.set_defaults(func=cmd_products)

    p = sub.add_parser('update-products', help='Write optimized titles/descriptions to existing products')
    p.add_argument('input', help='JSON list of {id, title, descriptionHtml}')
    p.set_defaults(func=cmd_update_products)

    p = sub.add_parser('settings', help='Show or change store settings')
    p.add_argument('--set', action='append', metavar='KEY=VALUE')
    p.set_defaults(func=cmd_settings)

    p = sub.add_parser('templates', help='Manage prompt templates')
    p.add_argument('action', choices=['list', 'create', 'delete'], nargs='?', default='list')
    p.add_argument('--id', type=int)
    p.add_argument('--name', type=str, default='')
    p.add_argument('--title-prompt', type=str, default='')
    p.add_argument('--description-prompt', type=str, default='')
    p.set_defaults(func=cmd_templates)

    p = sub.add_parser('negative-words', help='Manage the negative word list')
    p.add_argument('action', choices=['list', 'set', 'seed'], nargs='?', default='list')
    p.add_argument('words', nargs='*')
    p.set_defaults(func=cmd_negative_words)

    p = sub.add_parser('generate-image', help='Generate or enhance a product image')
    p.add_argument('--title', required=True, help='Product title')
    p.add_argument('--prompt', required=True)
    p.add_argument('--mode', choices=['generate', 'enhance'], default='generate')
    p.add_argument('--image-url', type=str, help='Existing image (enhance mode)')
    p.add_argument('--attach', type=str, metavar='PRODUCT_ID', help='Upload to this product')
    p.add_argument('--output', '-o', type=str)
    p.set_defaults(func=cmd_generate_image)

    p = sub.add_parser('attach-image', help='Attach a saved generated image to a product')
    p.add_argument('product_id')
    p.add_argument('input', help='JSON written by generate-image --output')
    p.set_defaults(func=cmd_attach_image)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    config = load_app_config(args.env_file)
    db_path = args.db or config.db_path

    try:
        with Database(db_path) as db:
            return args.func(build_pipeline(config, db), args)
    except ImporterError as e:
        logger.error("%s", e)
        return 1
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
