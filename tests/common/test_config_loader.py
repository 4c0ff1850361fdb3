"""Tests for storefront_importer/common/config_loader.py"""

import pytest

from storefront_importer.common.config_loader import (
    load_app_config,
    load_config,
    load_currency_rates,
    load_default_negative_words,
    load_region_currencies,
    load_store_defaults,
)
from storefront_importer.common.constants import DEFAULT_NEGATIVE_WORDS


class TestLoadConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")

    def test_config_dir_override(self, monkeypatch, tmp_path):
        (tmp_path / "currencies.yaml").write_text("currency_to_usd:\n  eur: 2.0\n", encoding="utf-8")
        monkeypatch.setenv("IMPORTER_CONFIG_DIR", str(tmp_path))

        rates = load_currency_rates()

        assert rates["EUR"] == 2.0
        assert rates["USD"] == 1.0

    def test_store_defaults(self):
        defaults = load_store_defaults()
        assert defaults["price_rounding"] == ".95"
        assert defaults["product_status"] == "ACTIVE"

    def test_default_negative_words(self):
        words = load_default_negative_words()
        assert "Dropshipping" in words
        assert len(words) == len(DEFAULT_NEGATIVE_WORDS)

    def test_currency_rates_include_builtin_table(self):
        rates = load_currency_rates()
        assert rates["USD"] == 1.0
        assert rates["EUR"] == pytest.approx(1.08)
        assert "JPY" in rates

    def test_region_currencies_merge_overrides(self):
        regions = load_region_currencies()
        assert regions["united kingdom"] == "GBP"
        assert regions["deutschland"] == "EUR"


class TestAppConfig:
    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHOPIFY_SHOP", "my-store")
        monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_x")
        monkeypatch.setenv("GEMINI_API_KEY", "key")
        monkeypatch.setenv("IMPORTER_DB_PATH", str(tmp_path / "x.db"))

        config = load_app_config(str(tmp_path / "missing.env"))

        assert config.shopify_shop == "my-store"
        assert config.shopify_access_token == "shpat_x"
        assert config.gemini_api_key == "key"
        assert config.db_path.endswith("x.db")

    def test_defaults_db_path(self, monkeypatch, tmp_path):
        monkeypatch.delenv("IMPORTER_DB_PATH", raising=False)
        config = load_app_config(str(tmp_path / "missing.env"))
        assert config.db_path == "importer.db"

