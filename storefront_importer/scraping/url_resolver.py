"""
Storefront URL resolution.

Turns a user-supplied storefront URL into the (store, handle, type) triple
the scraper needs.
"""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from ..common.errors import InvalidUrlError, UnresolvableHandleError

PRODUCT = "product"
COLLECTION = "collection"
URL_TYPES = (PRODUCT, COLLECTION)


@dataclass(frozen=True)
class ParsedUrl:
    store: str
    handle: str
    type: str


def parse_shopify_url(url: str, default_type: str = PRODUCT) -> ParsedUrl:
    """
    Parse a storefront URL into store, handle and type.

    /collections/<handle> wins over /products/<handle>, so
    https://s/collections/c/products/p resolves to collection "c". Other
    paths fall back to the last segment with default_type.

    Args:
        url: Raw URL, scheme optional (e.g. "shop.com/products/mug")
        default_type: "product" or "collection" for ambiguous paths

    Returns:
        ParsedUrl

    Raises:
        InvalidUrlError: If the input is not a usable URL
        UnresolvableHandleError: If the path has no segments
    """
    if default_type not in URL_TYPES:
        raise ValueError(f"Unsupported URL type: {default_type}")

    trimmed = (url or "").strip()
    candidate = trimmed if trimmed.startswith("http") else f"https://{trimmed}"

    try:
        parsed = urlparse(candidate)
        store = parsed.hostname
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {trimmed}") from e

    if not store or re.search(r'\s', store):
        raise InvalidUrlError(f"Invalid URL: {trimmed}")

    path_parts = [part for part in parsed.path.split("/") if part]

    if len(path_parts) >= 2 and path_parts[0] == "collections":
        return ParsedUrl(store=store, handle=path_parts[1], type=COLLECTION)

    if len(path_parts) >= 2 and path_parts[0] == "products":
        return ParsedUrl(store=store, handle=path_parts[1], type=PRODUCT)

    if path_parts:
        return ParsedUrl(store=store, handle=path_parts[-1], type=default_type)

    raise UnresolvableHandleError(f"Could not parse handle from URL: {trimmed}")
