"""
Catalog browsing and in-place content updates.

Backs the collection picker on import, product search for the optimize and
image tools, and writing optimized copy back to existing products.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..common.errors import CatalogMutationError
from .api_client import ShopifyAPIClient
from .queries import COLLECTIONS_QUERY, PRODUCT_UPDATE_MUTATION, PRODUCTS_QUERY

logger = logging.getLogger(__name__)

PageInfo = Dict[str, Any]
EMPTY_PAGE_INFO: PageInfo = {"hasNextPage": False, "endCursor": None}


def _nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [edge["node"] for edge in (connection or {}).get("edges", [])]


def list_collections(client: ShopifyAPIClient, query: Optional[str] = None, page_size: int = 250) -> List[Dict[str, Any]]:
    """Fetch every collection (id, title, handle, productsCount), following cursors."""
    collections: List[Dict[str, Any]] = []
    after = None

    while True:
        variables: Dict[str, Any] = {"first": page_size}
        if after:
            variables["after"] = after
        if query:
            variables["query"] = query

        data = client.graphql_request(COLLECTIONS_QUERY, variables)
        if not data:
            break

        connection = data.get("collections") or {}
        collections.extend(_nodes(connection))

        page_info = connection.get("pageInfo") or EMPTY_PAGE_INFO
        if not page_info.get("hasNextPage"):
            break
        after = page_info.get("endCursor")
        if not after:
            logger.warning("Collections page reported more results without a cursor; stopping")
            break

    logger.info("Found %d collections", len(collections))
    return collections


def search_products(
    client: ShopifyAPIClient,
    query: Optional[str] = None,
    first: int = 24,
    after: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], PageInfo]:
    """
    One page of catalog products matching a search query.

    Returns:
        (product nodes, pageInfo)
    """
    variables: Dict[str, Any] = {"first": first}
    if after:
        variables["after"] = after
    if query:
        variables["query"] = query

    data = client.graphql_request(PRODUCTS_QUERY, variables)
    connection = (data or {}).get("products") or {}
    return _nodes(connection), connection.get("pageInfo") or dict(EMPTY_PAGE_INFO)


def update_product_content(client: ShopifyAPIClient, products: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    """
    Write optimized title/description back to existing products.

    Args:
        products: Dicts with id, title and descriptionHtml

    Returns:
        {"updated": n, "failed": n, "total": n}
    """
    updated = 0
    failed = 0

    for product in products:
        try:
            client.mutate(
                PRODUCT_UPDATE_MUTATION,
                {
                    "input": {
                        "id": product["id"],
                        "title": product["title"],
                        "descriptionHtml": product["descriptionHtml"],
                    }
                },
                "productUpdate",
            )
            updated += 1
        except (CatalogMutationError, KeyError) as e:
            logger.error("Failed to update product %s: %s", product.get("id"), e)
            failed += 1

    return {"updated": updated, "failed": failed, "total": len(products)}
