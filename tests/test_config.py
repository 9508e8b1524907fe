"""
Tests for configuration and selector seed loading.
"""

import pytest

from foldscan.core.config import Config, SelectorConfig, load_selector_config


class TestLoadSelectorConfig:

    def test_bundled_selectors(self, monkeypatch):
        monkeypatch.setattr(Config, "SELECTORS_PATH", "")

        selectors = load_selector_config()

        assert isinstance(selectors, SelectorConfig)
        assert '[class*="review"]' in selectors.reviews
        assert selectors.price
        assert 'free shipping' in selectors.shipping_keywords
        assert '[aria-modal="true"]' in selectors.modal

    def test_custom_file(self, tmp_path):
        path = tmp_path / "selectors.yml"
        path.write_text(
            "price: ['.cost']\n"
            "reviews: ['.stars', '']\n"
            "shipping_keywords: ['envío gratis']\n"
            "modal: ['.popup.open']\n",
            encoding="utf-8",
        )

        selectors = load_selector_config(str(path))

        assert selectors == SelectorConfig(
            price=['.cost'],
            reviews=['.stars'],
            shipping_keywords=['envío gratis'],
            modal=['.popup.open'],
        )

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "seeds.yml"
        path.write_text("price: []\nreviews: []\nshipping_keywords: []\nmodal: []\n", encoding="utf-8")
        monkeypatch.setattr(Config, "SELECTORS_PATH", str(path))

        assert load_selector_config() == SelectorConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_selector_config(str(tmp_path / "nope.yml"))

    def test_missing_list(self, tmp_path):
        path = tmp_path / "selectors.yml"
        path.write_text("price: ['.price']\nreviews: ['.review']\nshipping_keywords: []\n", encoding="utf-8")

        with pytest.raises(ValueError, match="modal"):
            load_selector_config(str(path))


class TestConfig:

    def test_validate_requires_base_url(self, monkeypatch):
        monkeypatch.setattr(Config, "BASE_URL", "")

        with pytest.raises(ValueError, match="BASE_URL"):
            Config.validate()

    def test_validate_ok(self, monkeypatch):
        monkeypatch.setattr(Config, "BASE_URL", "https://scan.example.com")

        assert Config.validate()

    def test_timing_defaults(self):
        assert Config.get("MODAL_POLL_INTERVAL_MS") > 0
        assert Config.get("UNKNOWN_KEY", "fallback") == "fallback"
