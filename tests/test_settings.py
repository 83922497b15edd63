"""
Settings and config model tests
"""

import pytest
from pydantic import ValidationError

from chromamark.config import AppSettings
from chromamark.models.sanitize import SanitizeConfig


class TestAppSettings:
    """Environment-driven configuration"""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.cache_enabled is True
        assert settings.cache_max_entries == 10000
        assert settings.signatures_disable_links is False
        assert "javascript" not in settings.broad_schemes
        assert settings.narrow_schemes == ["http", "https", "mailto"]

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CHROMAMARK_CACHE_ENABLED", "false")
        monkeypatch.setenv("CHROMAMARK_CACHE_MAX_ENTRIES", "25")
        monkeypatch.setenv("CHROMAMARK_SIGNATURES_DISABLE_IMAGES", "true")

        settings = AppSettings(_env_file=None)

        assert settings.cache_enabled is False
        assert settings.cache_max_entries == 25
        assert settings.signatures_disable_images is True

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, cache_max_entries=0)

    def test_cache_key(self):
        assert AppSettings(_env_file=None).cacheKey_make("12", "plaintext") == "12|plaintext"


class TestSanitizeConfig:
    """Registration phase followed by freezing"""

    def test_registration_then_freeze(self):
        config = SanitizeConfig(allowed_tags={"p"}, non_boolean_attributes={"title"})
        config.tags_allow("span")
        config.attributes_allow("span", "lang")
        config.global_attributes_merge()
        config.freeze()

        assert config.allowed_tags == frozenset({"p", "span"})
        assert config.allowed_attributes["span"] == frozenset({"lang", "title"})
        assert config.allowed_attributes["p"] == frozenset({"title"})

    def test_frozen_rejects_changes(self):
        config = SanitizeConfig(allowed_tags={"p"}, allowed_schemes=["https"])
        config.freeze()

        with pytest.raises(RuntimeError):
            config.tags_allow("script")
        with pytest.raises(RuntimeError):
            config.global_attributes_merge()
        with pytest.raises(TypeError):
            config.allowed_attributes["p"] = frozenset({"onclick"})
        assert config.allowed_schemes == ("https",)
