"""
AI image enhancement and generation.

enhance_product_image() reworks an existing product photo: the first image
is treated as the hero shot (clean-up only), later images get lifestyle
framing. generate_product_image() and generate_image_alt_text() back the
standalone image tool.
"""

import logging
from typing import Optional, Sequence

from ..common.text_utils import clean_generated_text, remove_negative_words
from ..models import GeneratedImage
from . import prompts
from .gemini_client import GeminiClient, InlineImage

logger = logging.getLogger(__name__)

ENHANCE_TEMPERATURE = 0.5

MODE_GENERATE = "generate"
MODE_ENHANCE = "enhance"


def enhance_product_image(
    client: GeminiClient,
    image_url: str,
    product_title: str,
    product_description: str,
    image_index: int,
    total_images: int,
) -> InlineImage:
    """
    Enhance one product image.

    Args:
        client: Gemini client
        image_url: Source image URL
        product_title: Title used in the prompt
        product_description: Description HTML used as context
        image_index: 0-based position (0 = hero image)
        total_images: Number of images on the product

    Raises:
        RemoteFetchError: If the source image cannot be downloaded
        AIServiceError: If generation fails after retries
    """
    reference = client.fetch_image(image_url)
    prompt = prompts.enhancement_prompt(product_title, product_description, image_index, total_images)
    logger.debug("Enhancing image %d/%d for \"%s\"", image_index + 1, total_images, product_title)
    return client.generate_image(
        prompt,
        reference,
        response_modalities=("IMAGE",),
        temperature=ENHANCE_TEMPERATURE,
    )


def generate_product_image(
    client: GeminiClient,
    prompt: str,
    reference_url: Optional[str] = None,
) -> InlineImage:
    """Generate a new image, or edit reference_url when given."""
    reference = client.fetch_image(reference_url) if reference_url else None
    return client.generate_image(prompt, reference)


def generate_image_alt_text(
    client: GeminiClient,
    product_title: str,
    image_context: str,
    negative_words: Sequence[str],
) -> str:
    """SEO alt text for a generated image, with negative words removed."""
    alt_text = client.generate_text(
        prompts.generated_image_alt_text_prompt(product_title, image_context, negative_words)
    )
    alt_text = clean_generated_text(alt_text)
    if negative_words:
        alt_text = remove_negative_words(alt_text, negative_words)
    return alt_text


def create_generated_image(
    client: GeminiClient,
    product_title: str,
    prompt: str,
    mode: str = MODE_GENERATE,
    existing_image_url: Optional[str] = None,
    negative_words: Sequence[str] = (),
) -> GeneratedImage:
    """
    Generate an image plus its alt text.

    In "enhance" mode the existing image is sent as the reference.
    """
    if mode not in (MODE_GENERATE, MODE_ENHANCE):
        raise ValueError(f"Unsupported image mode: {mode}")

    image = generate_product_image(
        client,
        prompt,
        existing_image_url if mode == MODE_ENHANCE else None,
    )
    alt_text = generate_image_alt_text(client, product_title, prompt, negative_words)
    return GeneratedImage(
        base64_data=image.base64_data,
        mime_type=image.mime_type,
        alt_text=alt_text,
        prompt=prompt,
    )
