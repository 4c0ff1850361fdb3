"""
Generative AI content and image optimization (Gemini).

Modules:
    retry              - RetryPolicy shared by text and image calls
    gemini_client      - REST client for Gemini generateContent
    prompts            - Prompt builders (titles, descriptions, alt text, images)
    content_optimizer  - Per-product optimization and batched orchestration
    image_enhancer     - Hero/lifestyle enhancement and image generation
"""

from .content_optimizer import (
    BATCH_SIZE,
    OptimizationResult,
    TaskOutcome,
    optimize_product,
    optimize_products,
    settle,
)
from .gemini_client import GeminiClient, InlineImage
from .image_enhancer import (
    create_generated_image,
    enhance_product_image,
    generate_image_alt_text,
    generate_product_image,
)
from .retry import IMAGE_POLICY, TEXT_POLICY, RetryPolicy

__all__ = [
    'GeminiClient',
    'InlineImage',
    'RetryPolicy',
    'TEXT_POLICY',
    'IMAGE_POLICY',
    'optimize_product',
    'optimize_products',
    'OptimizationResult',
    'TaskOutcome',
    'settle',
    'BATCH_SIZE',
    'enhance_product_image',
    'generate_product_image',
    'generate_image_alt_text',
    'create_generated_image',
]
