"""
Content Optimizer

Rewrites product titles, descriptions and image alt text with Gemini.

Every field is attempted independently and falls back to its original
value on failure, so optimize_product() never raises. Generated text is
always run through the negative-word filter, whatever the prompt said.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from ..common.text_utils import clean_generated_text, remove_negative_words
from ..models import OptimizedProduct, ProductImage, ScrapedProduct
from . import prompts
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

BATCH_SIZE = 3

T = TypeVar("T")


@dataclass
class TaskOutcome(Generic[T]):
    """Result of one concurrent task: a value or the error it failed with."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def settle(func: Callable[..., T], *args: Any, **kwargs: Any) -> TaskOutcome[T]:
    """Run func and wrap its result or exception."""
    try:
        return TaskOutcome(value=func(*args, **kwargs))
    except Exception as e:
        return TaskOutcome(error=e)


@dataclass
class OptimizationResult:
    products: List[OptimizedProduct] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "products": [p.to_dict() for p in self.products],
            "warnings": self.warnings,
        }


def _generate(client: GeminiClient, prompt: str, negative_words: Sequence[str], strip_quotes: bool) -> str:
    text = clean_generated_text(client.generate_text(prompt), strip_quotes=strip_quotes)
    if negative_words:
        text = remove_negative_words(text, negative_words)
    return text


def _optimize_alt_text(
    client: GeminiClient,
    image: ProductImage,
    title: str,
    total: int,
    negative_words: Sequence[str],
    negative_clause: str,
) -> ProductImage:
    try:
        alt = _generate(
            client,
            prompts.alt_text_prompt(title, image.position, total, negative_clause),
            negative_words,
            strip_quotes=True,
        )
    except Exception as e:
        logger.warning("Alt text optimization failed for image %d of \"%s\": %s",
                       image.position, title, e)
        return image
    return replace(image, alt=alt)


def optimize_product(
    product: ScrapedProduct,
    title_prompt: Optional[str],
    description_prompt: Optional[str],
    negative_words: Sequence[str],
    client: GeminiClient,
    optimize_alt_text: bool = True,
) -> OptimizedProduct:
    """
    Optimize one product's title, description and (optionally) alt text.

    Args:
        product: Product to optimize
        title_prompt: Template title instructions, or None for the default
        description_prompt: Template description instructions, or None
        negative_words: Words that must not appear in generated text
        client: Gemini client
        optimize_alt_text: Also rewrite alt text for every image

    Returns:
        OptimizedProduct; fields whose generation failed keep original values
    """
    negative_words = [w for w in negative_words if w and w.strip()]
    negative_clause = prompts.negative_words_clause(negative_words)

    try:
        title = _generate(
            client,
            prompts.title_prompt(product, title_prompt, negative_clause),
            negative_words,
            strip_quotes=True,
        )
    except Exception as e:
        logger.warning("Failed to optimize title for \"%s\": %s", product.title, e)
        title = product.title

    try:
        description = _generate(
            client,
            prompts.description_prompt(product, description_prompt, negative_clause),
            negative_words,
            strip_quotes=False,
        )
    except Exception as e:
        logger.warning("Failed to optimize description for \"%s\": %s", product.title, e)
        description = product.description

    images = list(product.images)
    if optimize_alt_text and images:
        with ThreadPoolExecutor(max_workers=len(images)) as executor:
            images = list(executor.map(
                lambda img: _optimize_alt_text(
                    client, img, title, len(product.images), negative_words, negative_clause
                ),
                product.images,
            ))

    return OptimizedProduct.from_scraped(
        product,
        title=title,
        description=description,
        images=images,
    )


def optimize_products(
    products: Sequence[ScrapedProduct],
    title_prompt: Optional[str],
    description_prompt: Optional[str],
    negative_words: Sequence[str],
    client: GeminiClient,
    optimize_alt_text: bool = True,
    batch_size: int = BATCH_SIZE,
) -> OptimizationResult:
    """
    Optimize products in concurrent batches.

    Each batch runs fully in parallel and must settle before the next one
    starts. A product whose optimization fails produces a warning and an
    unmodified fallback record, in its original position.
    """
    result = OptimizationResult()
    if not products:
        return result

    with ThreadPoolExecutor(max_workers=batch_size) as executor:
        for start in range(0, len(products), batch_size):
            batch = products[start:start + batch_size]
            futures = [
                executor.submit(
                    settle, optimize_product, product, title_prompt, description_prompt,
                    negative_words, client, optimize_alt_text,
                )
                for product in batch
            ]
            outcomes = [future.result() for future in futures]

            for product, outcome in zip(batch, outcomes):
                if outcome.ok:
                    result.products.append(outcome.value)
                    continue
                reason = str(outcome.error) or "Unknown error"
                result.warnings.append(f'Failed to optimize "{product.title}": {reason}')
                result.products.append(OptimizedProduct.from_scraped(product))

            logger.info("Optimized %d/%d products", len(result.products), len(products))

    return result
