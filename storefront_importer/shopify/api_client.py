"""
Shopify API Client

Thin wrapper over the Admin GraphQL endpoint for one shop. Requests are
spaced out client-side and retried when Shopify pushes back, either with
an HTTP status (429, gateway errors) or with a THROTTLED error in an
otherwise successful response.
"""

import logging
import re
import time
from typing import Any, Dict, List, Optional

import requests

from ..common.errors import CatalogMutationError

logger = logging.getLogger(__name__)

_OPERATION_RE = re.compile(r"^\s*(query|mutation)\s+(\w+)")


def operation_name(query: str) -> str:
    """'mutation productCreate(...)' -> 'productCreate'; anonymous queries -> 'query'."""
    match = _OPERATION_RE.match(query)
    return match.group(2) if match else "query"


def _is_throttled(errors: List[Dict[str, Any]]) -> bool:
    return any(
        (err.get("extensions") or {}).get("code") == "THROTTLED"
        for err in errors
    )


class ShopifyAPIClient:
    """
    Admin GraphQL client bound to one shop.

    Usage:
        with ShopifyAPIClient(shop="my-store", access_token="shpat_xxx") as client:
            data = client.graphql_request(query, variables)
            payload = client.mutate(PRODUCT_CREATE, variables, "productCreate")
    """

    API_VERSION = "2025-01"
    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
    MAX_RETRY_DELAY = 30.0

    def __init__(self, shop: str, access_token: str, timeout: int = 30):
        """
        Args:
            shop: Shop handle ("my-store") or any form of its myshopify domain
            access_token: Admin API access token
            timeout: Default per-request timeout in seconds
        """
        host = shop.strip().split("://")[-1].rstrip("/")
        self.shop = host.split(".myshopify.com")[0]
        self.timeout = timeout
        self.graphql_url = (
            f"https://{self.shop_domain}/admin/api/{self.API_VERSION}/graphql.json"
        )

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        # Client-side spacing between calls (0 disables it)
        self.min_request_interval = 0.5
        self.last_request_time = 0.0

    @property
    def shop_domain(self) -> str:
        return f"{self.shop}.myshopify.com"

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        self.session.close()

    def _wait_for_slot(self):
        wait = self.min_request_interval - (time.time() - self.last_request_time)
        if wait > 0:
            time.sleep(wait)
        self.last_request_time = time.time()

    def _retry_delay(self, response: Optional[requests.Response], attempt: int) -> float:
        """Seconds to wait before the next attempt: Retry-After when usable, else 2^attempt."""
        fallback = float(2 ** attempt)
        header = response.headers.get("Retry-After") if response is not None else None
        if header is None:
            return min(fallback, self.MAX_RETRY_DELAY)
        try:
            delay = float(header)
        except (TypeError, ValueError):
            return min(fallback, self.MAX_RETRY_DELAY)
        return min(max(delay, 0.0), self.MAX_RETRY_DELAY)

    def _post(self, payload: Dict[str, Any], timeout: Optional[int]) -> requests.Response:
        self._wait_for_slot()
        return self.session.post(self.graphql_url, json=payload, timeout=timeout or self.timeout)

    def graphql_request(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Run a query or mutation and return its `data` object.

        Throttling is retried up to MAX_RETRIES attempts. Anything else that
        goes wrong (HTTP error, top-level GraphQL errors, network failure) is
        logged and returns None. userErrors live inside `data` and are left
        to the caller; see mutate().
        """
        name = operation_name(query)
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        for attempt in range(self.MAX_RETRIES):
            try:
                response = self._post(payload, timeout)
            except requests.exceptions.Timeout:
                logger.error("%s timed out after %ss", name, timeout or self.timeout)
                return None
            except requests.exceptions.RequestException as e:
                logger.error("%s failed: %s", name, e)
                return None

            if response.status_code in self.RETRYABLE_STATUS_CODES:
                delay = self._retry_delay(response, attempt)
                logger.warning("%s got HTTP %d (attempt %d/%d), waiting %.1fs",
                               name, response.status_code, attempt + 1, self.MAX_RETRIES, delay)
                time.sleep(delay)
                continue

            if response.status_code >= 400:
                logger.error("%s got HTTP %d: %s", name, response.status_code, response.text[:200])
                return None

            try:
                body = response.json()
            except ValueError as e:
                logger.error("%s returned a non-JSON body: %s", name, e)
                return None
            if not isinstance(body, dict):
                logger.error("%s returned an unexpected body: %r", name, body)
                return None
            errors = body.get("errors")
            if errors:
                if _is_throttled(errors):
                    delay = self._retry_delay(None, attempt)
                    logger.warning("%s throttled by Shopify (attempt %d/%d), waiting %.1fs",
                                   name, attempt + 1, self.MAX_RETRIES, delay)
                    time.sleep(delay)
                    continue
                logger.error("%s returned errors: %s", name, errors)
                return None

            return body.get("data")

        logger.error("%s gave up after %d attempts", name, self.MAX_RETRIES)
        return None

    def upload_to_staged_target(
        self,
        url: str,
        parameters: Dict[str, str],
        filename: str,
        content: bytes,
        mime_type: str,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """
        POST a file to a staged upload target.

        Uses a bare request: the target is a storage bucket, not the Admin
        API, so the access token must not be sent.
        """
        return requests.post(
            url,
            data=parameters,
            files={"file": (filename, content, mime_type)},
            timeout=timeout or self.timeout,
        )

    def mutate(
        self,
        mutation: str,
        variables: Dict[str, Any],
        root: str,
        errors_key: str = "userErrors",
    ) -> Dict[str, Any]:
        """
        Run a mutation and return its root payload.

        Raises:
            CatalogMutationError: If the request failed or returned user errors
        """
        data = self.graphql_request(mutation, variables)
        if data is None:
            raise CatalogMutationError(f"{root} request failed")

        payload = data.get(root) or {}
        user_errors = payload.get(errors_key) or []
        if user_errors:
            raise CatalogMutationError.from_user_errors(root, user_errors)
        return payload
