"""
Shopify media uploads.

Binary images (e.g. AI-enhanced ones) reach Shopify in three steps:
    1. stagedUploadsCreate  -> upload URL + form parameters + resourceUrl
    2. multipart POST of the parameters and file to the upload URL
    3. productCreateMedia with originalSource = resourceUrl
Remote image URLs skip straight to step 3.
"""

import base64
import binascii
import logging
import time
from typing import Any, Dict, List

import requests

from ..common.errors import CatalogMutationError
from ..models import GeneratedImage
from .api_client import ShopifyAPIClient
from .queries import PRODUCT_CREATE_MEDIA_MUTATION, STAGED_UPLOADS_CREATE_MUTATION

logger = logging.getLogger(__name__)


def image_media_input(source: str, alt: str) -> Dict[str, Any]:
    return {"originalSource": source, "alt": alt, "mediaContentType": "IMAGE"}


class ShopifyMediaUploader:
    """
    Uploads binary images to Shopify and attaches media to products.

    Usage:
        uploader = ShopifyMediaUploader(client)
        resource_url = uploader.upload_base64(data, "image/png", "blue-mug-1.png")
        uploader.create_media(product_id, [image_media_input(resource_url, "Blue mug")])
    """

    def __init__(self, client: ShopifyAPIClient):
        self.client = client

    def create_staged_target(self, filename: str, mime_type: str) -> Dict[str, Any]:
        """Request a staged upload slot for one image."""
        payload = self.client.mutate(
            STAGED_UPLOADS_CREATE_MUTATION,
            {
                "input": [{
                    "filename": filename,
                    "mimeType": mime_type,
                    "resource": "IMAGE",
                    "httpMethod": "POST",
                }]
            },
            "stagedUploadsCreate",
        )
        targets = payload.get("stagedTargets") or []
        if not targets:
            raise CatalogMutationError("Failed to get staged upload URL from Shopify")
        return targets[0]

    def upload_bytes(self, content: bytes, mime_type: str, filename: str) -> str:
        """
        Upload raw image bytes to a staged target.

        Returns:
            resourceUrl to use as a media originalSource

        Raises:
            CatalogMutationError: If staging or the upload fails
        """
        target = self.create_staged_target(filename, mime_type)
        upload_url = target.get("url")
        resource_url = target.get("resourceUrl")
        if not upload_url or not resource_url:
            raise CatalogMutationError(f"Staged upload target for {filename} is missing url or resourceUrl")
        parameters = {
            p["name"]: p.get("value", "")
            for p in target.get("parameters") or []
            if isinstance(p, dict) and p.get("name")
        }

        try:
            response = self.client.upload_to_staged_target(
                upload_url, parameters, filename, content, mime_type
            )
        except requests.RequestException as e:
            raise CatalogMutationError(f"Failed to upload image to Shopify CDN: {e}") from e

        if not 200 <= response.status_code < 300:
            raise CatalogMutationError(
                f"Failed to upload image to Shopify CDN: {response.status_code}"
            )

        logger.debug("Uploaded %s (%d bytes)", filename, len(content))
        return resource_url

    def upload_base64(self, base64_data: str, mime_type: str, filename: str) -> str:
        """Decode a base64 image and upload it; returns the resourceUrl."""
        try:
            content = base64.b64decode(base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CatalogMutationError(f"Invalid image data for {filename}: {e}") from e
        return self.upload_bytes(content, mime_type, filename)

    def create_media(self, product_id: str, media: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Attach media to a product.

        Raises:
            CatalogMutationError: On request failure or mediaUserErrors
        """
        payload = self.client.mutate(
            PRODUCT_CREATE_MEDIA_MUTATION,
            {"productId": product_id, "media": media},
            "productCreateMedia",
            errors_key="mediaUserErrors",
        )
        return payload.get("media") or []

    def attach_generated_image(self, product_id: str, image: GeneratedImage) -> str:
        """
        Upload an AI-generated image and attach it to an existing product.

        Returns:
            The staged resourceUrl of the uploaded image
        """
        mime_type = image.mime_type or "image/png"
        filename = f"ai-generated-{int(time.time() * 1000)}.{mime_type.split('/')[-1]}"
        resource_url = self.upload_base64(image.base64_data, mime_type, filename)
        self.create_media(product_id, [image_media_input(resource_url, image.alt_text or "")])
        logger.info("Attached generated image to %s", product_id)
        return resource_url
