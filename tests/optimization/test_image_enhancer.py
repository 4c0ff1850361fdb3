"""Tests for storefront_importer/optimization/image_enhancer.py"""

import pytest

from storefront_importer.optimization import InlineImage
from storefront_importer.optimization.image_enhancer import (
    create_generated_image,
    enhance_product_image,
    generate_image_alt_text,
    generate_product_image,
)
from storefront_importer.optimization.prompts import enhancement_prompt


class TestEnhancementPrompt:
    def test_first_image_is_hero(self):
        prompt = enhancement_prompt("Blue Mug", "<p>Nice mug</p>", 0, 3)
        assert "professional product photo" in prompt
        assert "Context: Nice mug" in prompt

    def test_other_images_are_lifestyle(self):
        prompt = enhancement_prompt("Blue Mug", "<p>Nice mug</p>", 1, 3)
        assert "lifestyle image 2 of 3" in prompt

    def test_context_truncated(self):
        prompt = enhancement_prompt("Blue Mug", "<p>" + "x" * 300 + "</p>", 0, 1)
        assert "x" * 200 + "..." in prompt
        assert "x" * 201 not in prompt


class TestEnhanceProductImage:
    def test_sends_reference_image(self, gemini):
        reference = InlineImage("ref", "image/jpeg")
        gemini.fetch_image.return_value = reference
        gemini.generate_image.return_value = InlineImage("out", "image/png")

        result = enhance_product_image(gemini, "https://cdn/x.jpg", "Mug", "<p>d</p>", 0, 2)

        assert result.base64_data == "out"
        gemini.fetch_image.assert_called_once_with("https://cdn/x.jpg")
        args, kwargs = gemini.generate_image.call_args
        assert args[1] is reference
        assert kwargs["response_modalities"] == ("IMAGE",)
        assert kwargs["temperature"] == 0.5


class TestGeneratedImages:
    def test_generate_without_reference(self, gemini):
        gemini.generate_image.return_value = InlineImage("out")
        generate_product_image(gemini, "Studio shot")
        gemini.fetch_image.assert_not_called()
        gemini.generate_image.assert_called_once_with("Studio shot", None)

    def test_alt_text_cleaned(self, gemini):
        gemini.generate_text.return_value = '"Blue mug with free lid"'
        assert generate_image_alt_text(gemini, "Mug", "Studio", ["free"]) == "Blue mug with lid"

    def test_enhance_mode_uses_existing_image(self, gemini):
        gemini.fetch_image.return_value = InlineImage("ref")
        gemini.generate_image.return_value = InlineImage("out", "image/webp")
        gemini.generate_text.return_value = "Alt"

        image = create_generated_image(gemini, "Mug", "Brighter", mode="enhance",
                                       existing_image_url="https://cdn/x.jpg")

        assert (image.base64_data, image.mime_type, image.alt_text, image.prompt) == \
            ("out", "image/webp", "Alt", "Brighter")
        gemini.fetch_image.assert_called_once_with("https://cdn/x.jpg")

    def test_generate_mode_ignores_existing_image(self, gemini):
        gemini.generate_image.return_value = InlineImage("out")
        create_generated_image(gemini, "Mug", "New", existing_image_url="https://cdn/x.jpg")
        gemini.fetch_image.assert_not_called()

    def test_unknown_mode(self, gemini):
        with pytest.raises(ValueError):
            create_generated_image(gemini, "Mug", "x", mode="remix")
