"""
Storefront Scraper

Fetches product JSON from public Shopify storefronts:

    GET https://{store}/products/{handle}.json
    GET https://{store}/collections/{handle}/products.json?limit=250&page=N

Features:
- Browser-like headers (many storefronts filter bare clients)
- Collection pagination until an empty or short page
- Per-URL error isolation when scraping a list of URLs
- First-seen-wins deduplication across URLs
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import requests

from ..common.constants import STOREFRONT_PAGE_SIZE
from ..common.errors import RemoteFetchError, ScrapeError
from ..models import ScrapedProduct
from .normalizer import deduplicate_products, normalize_product
from .url_resolver import PRODUCT, ParsedUrl, parse_shopify_url

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


def browser_headers(referer: str) -> Dict[str, str]:
    """Header set that passes basic storefront bot filtering."""
    return {
        "User-Agent": USER_AGENT,
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
        "Referer": referer,
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


@dataclass
class ScrapeResult:
    """Products scraped from a list of URLs plus per-URL errors."""
    products: List[ScrapedProduct] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "products": [p.to_dict() for p in self.products],
            "errors": self.errors,
        }


class StorefrontScraper:
    """
    Scrapes products from Shopify storefront JSON endpoints.

    Usage:
        with StorefrontScraper() as scraper:
            product = scraper.fetch_product("shop.example.com", "blue-mug")
            products = scraper.fetch_collection("shop.example.com", "mugs")
            result = scraper.scrape_urls(["shop.example.com/products/blue-mug"])
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 30):
        """
        Initialize the scraper.

        Args:
            session: Shared HTTP session (created if not given)
            timeout: Per-request timeout in seconds
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _get_json(self, url: str, referer: str) -> dict:
        self.requests_made += 1
        response = self.session.get(url, headers=browser_headers(referer), timeout=self.timeout)
        if not 200 <= response.status_code < 300:
            raise RemoteFetchError(response.status_code, url)
        data = response.json()
        if not isinstance(data, dict):
            raise ScrapeError(f"Unexpected response from {url}: expected a JSON object")
        return data

    def fetch_product(self, store: str, handle: str) -> ScrapedProduct:
        """
        Fetch a single product.

        Raises:
            RemoteFetchError: On non-2xx responses
            ScrapeError: If the response holds no product object
        """
        url = f"https://{store}/products/{handle}.json"
        try:
            data = self._get_json(url, referer=f"https://{store}/")
        except RemoteFetchError as e:
            raise RemoteFetchError(
                e.status, url, f"HTTP {e.status} fetching product {handle} from {store}"
            ) from None

        raw = data.get("product")
        if not isinstance(raw, dict):
            raise ScrapeError(f"No product object in response from {url}")
        return normalize_product(raw, f"https://{store}/products/{handle}", store)

    def fetch_collection(self, store: str, handle: str) -> List[ScrapedProduct]:
        """
        Fetch every product in a collection, page by page.

        Stops on the first empty page or the first page shorter than the
        page size. A collection holding an exact multiple of 250 products
        therefore costs one extra (empty) page request.

        Raises:
            RemoteFetchError: On non-2xx responses for any page
            ScrapeError: If a page is not a products listing
        """
        collection_url = f"https://{store}/collections/{handle}"
        products: List[ScrapedProduct] = []
        page = 1

        while True:
            url = f"{collection_url}/products.json?limit={STOREFRONT_PAGE_SIZE}&page={page}"
            try:
                data = self._get_json(url, referer=collection_url)
            except RemoteFetchError as e:
                raise RemoteFetchError(
                    e.status, url,
                    f"HTTP {e.status} fetching collection {handle} from {store} (page {page})",
                ) from None

            raw_products = data.get("products") or []
            if not isinstance(raw_products, list):
                raise ScrapeError(f"Unexpected products list in response from {url}")
            if not raw_products:
                break

            products.extend(
                normalize_product(raw, collection_url, store)
                for raw in raw_products
                if isinstance(raw, dict)
            )

            logger.debug("Collection %s page %d: %d products", handle, page, len(raw_products))

            if len(raw_products) < STOREFRONT_PAGE_SIZE:
                break
            page += 1

        logger.info("Collection %s on %s: %d products", handle, store, len(products))
        return products

    def scrape_target(self, target: ParsedUrl) -> List[ScrapedProduct]:
        if target.type == PRODUCT:
            return [self.fetch_product(target.store, target.handle)]
        return self.fetch_collection(target.store, target.handle)

    def scrape_urls(self, urls: Iterable[str], default_type: str = PRODUCT) -> ScrapeResult:
        """
        Scrape a list of product/collection URLs.

        A failing URL is recorded in errors and does not stop the others.

        Args:
            urls: Raw URLs (blank entries are skipped)
            default_type: Type used when a URL path is ambiguous

        Returns:
            ScrapeResult with deduplicated products
        """
        result = ScrapeResult()
        scraped: List[ScrapedProduct] = []

        for raw_url in urls:
            url = raw_url.strip()
            if not url:
                continue

            try:
                target = parse_shopify_url(url, default_type)
                scraped.extend(self.scrape_target(target))
            except (ScrapeError, RemoteFetchError) as e:
                logger.warning("Scrape failed for %s: %s", url, e)
                result.errors.append({"url": url, "error": str(e)})
            except (requests.RequestException, ValueError, KeyError, TypeError) as e:
                logger.warning("Scrape failed for %s: %s", url, e)
                result.errors.append({"url": url, "error": str(e) or "Failed to scrape"})

        result.products = deduplicate_products(scraped)
        logger.info("Scraped %d products (%d unique), %d errors",
                    len(scraped), len(result.products), len(result.errors))
        return result
