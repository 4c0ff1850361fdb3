"""
Gemini API Client

Thin client for the Gemini generateContent REST endpoints (text and image).
All calls go through a RetryPolicy; exhausted retries raise AIServiceError.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..common.errors import AIServiceError, RemoteFetchError
from .retry import IMAGE_POLICY, TEXT_POLICY, RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class InlineImage:
    """Base64 image payload as exchanged with Gemini."""
    base64_data: str
    mime_type: str = "image/png"

    def to_part(self) -> Dict[str, Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.base64_data}}

    @property
    def extension(self) -> str:
        return self.mime_type.split("/")[-1] or "png"


class GeminiClient:
    """
    Client for Gemini text and image generation.

    Usage:
        client = GeminiClient(api_key="...")
        title = client.generate_text("Rewrite this title: ...")
        image = client.generate_image("Studio shot", reference=client.fetch_image(url))
    """

    API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
    TEXT_MODEL = "gemini-2.0-flash"
    IMAGE_MODEL = "gemini-2.0-flash-exp"

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        text_policy: RetryPolicy = TEXT_POLICY,
        image_policy: RetryPolicy = IMAGE_POLICY,
        text_timeout: int = 60,
        image_timeout: int = 120,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key
            session: Shared HTTP session (created if not given)
            text_policy: Retry policy for text generation
            image_policy: Retry policy for image generation
            text_timeout: Per-call timeout in seconds for text
            image_timeout: Per-call timeout in seconds for images
        """
        self.api_key = api_key
        self.session = session or requests.Session()
        self.text_policy = text_policy
        self.image_policy = image_policy
        self.text_timeout = text_timeout
        self.image_timeout = image_timeout

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _generate(self, model: str, body: Dict[str, Any], timeout: int) -> Dict[str, Any]:
        response = self.session.post(
            f"{self.API_BASE}/{model}:generateContent",
            params={"key": self.api_key},
            json=body,
            timeout=timeout,
        )
        if response.status_code != 200:
            raise AIServiceError(
                f"Gemini API error {response.status_code}: {response.text[:200]}",
                status=response.status_code,
            )
        return response.json()

    @staticmethod
    def _response_parts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = data.get("candidates") or [{}]
        return (candidates[0].get("content") or {}).get("parts") or []

    def generate_text(self, prompt: str, temperature: float = 0.7, max_output_tokens: int = 2048) -> str:
        """
        Generate text for a single prompt.

        Raises:
            AIServiceError: After exhausting retries, or on empty responses
        """
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }

        def attempt() -> str:
            data = self._generate(self.TEXT_MODEL, body, self.text_timeout)
            parts = self._response_parts(data)
            text = parts[0].get("text") if parts else None
            if not text:
                raise AIServiceError("Empty response from Gemini API")
            return text.strip()

        return self.text_policy.call(attempt, "Gemini text")

    def generate_images(
        self,
        prompt: str,
        reference: Optional[InlineImage] = None,
        response_modalities: Sequence[str] = ("IMAGE", "TEXT"),
        temperature: float = 0.7,
        require_image: bool = False,
    ) -> List[InlineImage]:
        """
        Generate or edit images; returns every inline image part (maybe none).

        Args:
            prompt: Instructions
            reference: Optional source image to edit
            response_modalities: Gemini responseModalities
            temperature: Sampling temperature
            require_image: Treat a response without images as a failed attempt
        """
        parts: List[Dict[str, Any]] = []
        if reference is not None:
            parts.append(reference.to_part())
        parts.append({"text": prompt})

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": list(response_modalities),
                "temperature": temperature,
            },
        }

        def attempt() -> List[InlineImage]:
            data = self._generate(self.IMAGE_MODEL, body, self.image_timeout)
            images = [
                InlineImage(
                    base64_data=part["inlineData"]["data"],
                    mime_type=part["inlineData"].get("mimeType") or "image/png",
                )
                for part in self._response_parts(data)
                if part.get("inlineData")
            ]
            if require_image and not images:
                raise AIServiceError("No image was generated by the API")
            return images

        return self.image_policy.call(attempt, "Gemini image")

    def generate_image(self, prompt: str, reference: Optional[InlineImage] = None, **kwargs: Any) -> InlineImage:
        """
        Generate exactly one image.

        Raises:
            AIServiceError: If the call fails or returns no image
        """
        return self.generate_images(prompt, reference, require_image=True, **kwargs)[0]

    def fetch_image(self, url: str, timeout: int = 30) -> InlineImage:
        """
        Download an image and encode it for use as a reference part.

        Raises:
            RemoteFetchError: On non-2xx responses
        """
        response = self.session.get(url, timeout=timeout)
        if not 200 <= response.status_code < 300:
            raise RemoteFetchError(response.status_code, url,
                                   f"Failed to fetch image: {response.status_code}")
        content_type = response.headers.get("content-type") or "image/jpeg"
        return InlineImage(
            base64_data=base64.b64encode(response.content).decode("ascii"),
            mime_type=content_type.split(";")[0].strip(),
        )
