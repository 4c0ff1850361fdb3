"""Tests for storefront_importer/common/text_utils.py"""

from storefront_importer.common.text_utils import (
    clean_generated_text,
    html_to_text,
    remove_negative_words,
    slugify,
    strip_code_fences,
    strip_surrounding_quotes,
    truncate,
)


class TestRemoveNegativeWords:
    def test_removes_whole_word_case_insensitive(self):
        result = remove_negative_words("Fast Shipping worldwide", ["shipping"])
        assert result == "Fast worldwide"

    def test_does_not_touch_substrings(self):
        result = remove_negative_words("Dropshipping friendly", ["drop"])
        assert result == "Dropshipping friendly"

    def test_removes_phrases(self):
        result = remove_negative_words("Call Customer Service today", ["Customer service"])
        assert result == "Call today"

    def test_collapses_double_spaces(self):
        result = remove_negative_words("Free gift with free returns", ["free"])
        assert "  " not in result
        assert result == "gift with returns"

    def test_escapes_regex_characters(self):
        assert remove_negative_words("Buy now", ["now+"]) == "Buy now"

    def test_empty_word_list(self):
        assert remove_negative_words("Blue Mug", []) == "Blue Mug"

    def test_blank_words_ignored(self):
        assert remove_negative_words("Blue Mug", ["", "  "]) == "Blue Mug"

    def test_empty_input(self):
        assert remove_negative_words("", ["free"]) == ""


class TestCleanGeneratedText:
    def test_strips_html_fence(self):
        assert strip_code_fences("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"

    def test_strips_plain_fence(self):
        assert strip_code_fences("```\ntext\n```") == "text"

    def test_strips_one_layer_of_quotes(self):
        assert strip_surrounding_quotes('"Blue Mug"') == "Blue Mug"
        assert strip_surrounding_quotes("'Blue Mug'") == "Blue Mug"

    def test_keeps_inner_quotes(self):
        assert strip_surrounding_quotes('The "Blue" Mug') == 'The "Blue" Mug'

    def test_clean_keeps_quotes_when_asked(self):
        assert clean_generated_text('"<p>x</p>"', strip_quotes=False) == '"<p>x</p>"'

    def test_clean_applies_both(self):
        assert clean_generated_text('```\n"Blue Mug"\n```') == "Blue Mug"


class TestHtmlToText:
    def test_strips_tags(self):
        assert html_to_text("<p>A <b>sturdy</b> mug.</p>") == "A sturdy mug."

    def test_empty(self):
        assert html_to_text("") == ""


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("abc", 5) == "abc"

    def test_long_text_gets_suffix(self):
        assert truncate("abcdef", 3) == "abc..."


class TestSlugify:
    def test_basic(self):
        assert slugify("Blue Mug (Large)!") == "blue-mug-large"

    def test_max_length(self):
        assert len(slugify("x" * 80)) == 50
