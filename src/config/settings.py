"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use CHROMAMARK_ prefix (e.g., CHROMAMARK_CACHE_MAX_ENTRIES=500).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use CHROMAMARK_ prefix.

    Examples:
        CHROMAMARK_CACHE_ENABLED=false
        CHROMAMARK_CACHE_MAX_ENTRIES=2000
        CHROMAMARK_SIGNATURES_DISABLE_LINKS=true
    """

    model_config = SettingsConfigDict(
        env_prefix="CHROMAMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Render cache configuration
    cache_enabled: bool = Field(
        default=True,
        description="Memoize rendered post content keyed by (pid, variant)",
    )

    cache_max_entries: int = Field(
        default=10000,
        ge=1,
        description="Maximum number of rendered entries kept before least-recently-used eviction",
    )

    # Signature configuration
    signatures_disable_links: bool = Field(
        default=False,
        description="Strip <a> tags (keeping their text) from user signatures",
    )

    signatures_disable_images: bool = Field(
        default=False,
        description="Strip <img> tags from user signatures",
    )

    # Sanitizer configuration
    broad_schemes: List[str] = Field(
        default=["http", "https", "ftp", "mailto", "tel"],
        description="URL schemes permitted in links by the post sanitizer",
    )

    narrow_schemes: List[str] = Field(
        default=["http", "https", "mailto"],
        description="URL schemes permitted in links by the narrow sanitizer",
    )

    def cacheKey_make(self, content_id: str, variant: str) -> str:
        """
        Build the flat cache key for a content id and variant.

        Example:
            >>> AppSettings().cacheKey_make("12", "default")
            '12|default'
        """
        return f"{content_id}|{variant}"


# Singleton instance - import this in your code
appsettings = AppSettings()
