"""
Prompt builders for Gemini.

Template prompts (from PromptTemplate) are used verbatim with product
context appended; without a template a generic SEO instruction is used.
"""

from typing import Optional, Sequence

from ..common.text_utils import html_to_text, truncate
from ..models import ScrapedProduct

CONTEXT_SNIPPET_LENGTH = 200


def negative_words_clause(negative_words: Sequence[str]) -> str:
    if not negative_words:
        return ""
    return (
        "\n\nIMPORTANT: The following words must NEVER appear in the output: "
        + ", ".join(negative_words)
    )


def title_prompt(product: ScrapedProduct, template: Optional[str], negative_clause: str = "") -> str:
    if template:
        return (
            f"{template}\n\n"
            f'Original product title: "{product.title}"\n'
            f'Product type: "{product.product_type}"\n'
            f'Vendor: "{product.vendor}"{negative_clause}\n\n'
            "Return ONLY the optimized title text, nothing else."
        )
    return (
        "Optimize this product title for SEO and conversions. Make it compelling, "
        "keyword-rich, and under 70 characters.\n\n"
        f'Original title: "{product.title}"\n'
        f'Product type: "{product.product_type}"{negative_clause}\n\n'
        "Return ONLY the optimized title, nothing else."
    )


def description_prompt(product: ScrapedProduct, template: Optional[str], negative_clause: str = "") -> str:
    if template:
        return (
            f"{template}\n\n"
            f"Original product description:\n{product.description}{negative_clause}\n\n"
            "Return ONLY valid HTML for the product description."
        )
    return (
        "Optimize this product description for SEO. Make it engaging, well-structured "
        "with HTML formatting, and keyword-optimized.\n\n"
        f"Original description:\n{product.description}{negative_clause}\n\n"
        "Return ONLY valid HTML for the description, no markdown."
    )


def alt_text_prompt(title: str, position: int, total: int, negative_clause: str = "") -> str:
    return (
        f'Generate SEO-optimized alt text for a product image. Product: "{title}". '
        f"Image position: {position} of {total}.{negative_clause}\n\n"
        "Return ONLY the alt text, under 125 characters, no quotes."
    )


def generated_image_alt_text_prompt(title: str, image_context: str, negative_words: Sequence[str]) -> str:
    clause = f"\nNever use these words: {', '.join(negative_words)}" if negative_words else ""
    return (
        "Generate SEO-optimized alt text for a product image.\n"
        f'Product: "{title}"\n'
        f"Image context: {image_context}\n"
        f"{clause}\n\n"
        "Return ONLY the alt text, under 125 characters, no quotes."
    )


_PRESERVE_PRODUCT_RULES = """CRITICAL RULES - NEVER BREAK THESE:
- NEVER change the product itself (color, shape, design, branding, labels, text, features)"""

HERO_TEMPLATE = """You are a professional product photographer and image enhancement specialist. Enhance this product image to create a high-quality, professional product photo.

{rules}
- ONLY improve image quality, lighting, background, and presentation
- Preserve all product details EXACTLY as they appear
- Maintain the same product angle and orientation

ENHANCEMENT INSTRUCTIONS for PRODUCT-ONLY IMAGE:
- Remove any distracting or cluttered background
- Place product on a clean, pure white background (#FFFFFF)
- Improve lighting to show the product clearly and evenly
- Enhance sharpness, clarity, and color accuracy
- Remove harsh shadows, but keep subtle shadows for depth
- Ensure professional studio-quality appearance
- Optimize for e-commerce display (clean, clear, professional)
- Image dimensions should be 2048x2048px if possible

Product: {title}
Context: {context}
This is the PRIMARY/HERO image - make it clean, professional, and e-commerce ready."""

LIFESTYLE_TEMPLATE = """You are a professional product photographer and image enhancement specialist. Transform this product image into an engaging lifestyle photo.

{rules}
- The product must remain EXACTLY as it appears in the original image
- ONLY change the setting, background, props, and context around the product
- Maintain product visibility and focus

ENHANCEMENT INSTRUCTIONS for LIFESTYLE IMAGE:
- Place the product in a realistic, attractive usage context
- Add complementary props or environmental elements that make sense
- Show the product in a natural, aspirational setting
- Maintain clear focus on the product - it should stand out
- Create an authentic lifestyle scene (home, office, outdoor, etc.)
- Ensure good lighting that highlights the product
- Make the scene inviting but not overly busy
- Help customers imagine owning and using this product
- Image dimensions should be 2048x2048px if possible

Product: {title}
Context: {context}
This is lifestyle image {number} of {total} - create an engaging context while keeping the product unchanged."""


def enhancement_prompt(title: str, description_html: str, index: int, total: int) -> str:
    """
    Image enhancement instructions by position.

    Index 0 is the hero shot (clean-up only, white background); every other
    image gets lifestyle framing.
    """
    context = truncate(html_to_text(description_html), CONTEXT_SNIPPET_LENGTH)
    if index == 0:
        return HERO_TEMPLATE.format(rules=_PRESERVE_PRODUCT_RULES, title=title, context=context)
    return LIFESTYLE_TEMPLATE.format(
        rules=_PRESERVE_PRODUCT_RULES, title=title, context=context,
        number=index + 1, total=total,
    )
