"""
Text Utilities

Helper functions for cleaning AI output and deriving plain text from HTML.
"""

import re
from typing import Iterable

from bs4 import BeautifulSoup

_FENCE_OPEN = re.compile(r'^```(?:html|json)?\s*\n?', re.MULTILINE)
_FENCE_CLOSE = re.compile(r'\n?```\s*$', re.MULTILINE)
_SURROUNDING_QUOTES = re.compile(r'^["\']|["\']$')


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence wrappers (``` / ```html / ```json)."""
    text = _FENCE_OPEN.sub('', text)
    text = _FENCE_CLOSE.sub('', text)
    return text.strip()


def strip_surrounding_quotes(text: str) -> str:
    """Remove a single leading and trailing quote character."""
    return _SURROUNDING_QUOTES.sub('', text)


def remove_negative_words(text: str, negative_words: Iterable[str]) -> str:
    """
    Remove denylisted words from text.

    Matching is case-insensitive and whole-word only, so "drop" does not
    touch "Dropshipping". Whitespace left behind is collapsed.

    Args:
        text: Generated text
        negative_words: Words/phrases that must not appear

    Returns:
        Cleaned text
    """
    if not text:
        return text

    for word in negative_words:
        word = word.strip()
        if not word:
            continue
        text = re.sub(rf'\b{re.escape(word)}\b', '', text, flags=re.IGNORECASE)

    # Clean up double spaces left by removals
    return re.sub(r'\s{2,}', ' ', text).strip()


def clean_generated_text(text: str, strip_quotes: bool = True) -> str:
    """Apply fence and quote stripping to raw model output."""
    text = strip_code_fences(text)
    if strip_quotes:
        text = strip_surrounding_quotes(text)
    return text


def html_to_text(html: str) -> str:
    """Convert an HTML fragment to single-spaced plain text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    return re.sub(r'\s+', ' ', soup.get_text(" ")).strip()


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut text to limit characters, appending suffix when shortened."""
    if len(text) <= limit:
        return text
    return text[:limit] + suffix


def slugify(text: str, max_length: int = 50) -> str:
    """Lowercase ASCII slug for upload filenames (e.g. "Blue Mug!" -> "blue-mug")."""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
    return slug[:max_length]
