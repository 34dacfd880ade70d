"""Configuration management for eventgallery.

Values come from environment variables with Streamlit secrets as fallback,
so the same settings work for the Streamlit shell and the batch import CLI.
"""

import os
from typing import Any

try:
    import streamlit as st

    STREAMLIT_AVAILABLE = True
except ImportError:
    STREAMLIT_AVAILABLE = False

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE = "2024 全球科技创新峰会 - 精彩瞬间"
DEFAULT_BANNER = "https://images.unsplash.com/photo-1540575861501-7cf05a4b125a?auto=format&fit=crop&w=1600&q=80"

# Roughly what a browser grants a single origin for local storage
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

# How often the viewer page polls the photo store
DEFAULT_VIEWER_REFRESH_SECONDS = 5

STORAGE_BACKENDS = ("file", "duckdb", "memory")


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables or Streamlit secrets.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        # Check cache first
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        # Try environment variable first
        value = os.getenv(key)

        # Fallback to Streamlit secrets if available
        if value is None and STREAMLIT_AVAILABLE:
            try:
                value = st.secrets.get(key)
            except Exception:  # nosec B110
                # No secrets file or not running inside Streamlit
                pass

        # Use default if still None
        if value is None:
            value = default

        # Cast to requested type
        if value is not None:
            try:
                if cast_type is bool:
                    # Handle boolean conversion properly
                    if isinstance(value, str):
                        value = value.lower() in ("true", "1", "yes", "on")  # type: ignore[assignment]
                    else:
                        value = bool(value)  # type: ignore[assignment]
                elif cast_type is not str:
                    value = cast_type(value)
            except (ValueError, TypeError) as e:
                logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                value = default

        # Cache the result
        self._cache[cache_key] = value
        return value

    def is_development(self) -> bool:
        """Check if running in development mode."""
        environment = self.get("ENVIRONMENT", "development").lower()
        return environment in ["development", "dev", "local"]

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


# Convenience functions for common configuration patterns
def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


# Gallery configuration getters
def get_storage_backend() -> str:
    """Get the durable storage backend name."""
    backend = str(get_env("GALLERY_STORAGE_BACKEND", "file")).lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning("unknown_storage_backend", backend=backend, fallback="file")
        return "file"
    return backend


def get_storage_path() -> str:
    """Get the directory used by file and DuckDB backends."""
    return str(get_env("GALLERY_STORAGE_PATH", ".gallery_data"))


def get_storage_quota() -> int | None:
    """Get the storage quota in bytes, None when unlimited."""
    quota = get_env("GALLERY_STORAGE_QUOTA_BYTES", DEFAULT_QUOTA_BYTES, int)
    if quota is None or quota <= 0:
        return None
    return int(quota)


def get_default_title() -> str:
    """Get the title shown before the operator sets one."""
    return str(get_env("GALLERY_DEFAULT_TITLE", DEFAULT_TITLE))


def get_default_banner() -> str:
    """Get the banner shown before the operator sets one."""
    return str(get_env("GALLERY_DEFAULT_BANNER", DEFAULT_BANNER))


def get_viewer_refresh_seconds() -> float:
    """Get the viewer polling interval in seconds, at least one second."""
    seconds = get_env("GALLERY_VIEWER_REFRESH_SECONDS", DEFAULT_VIEWER_REFRESH_SECONDS, float)
    return max(1.0, float(seconds))
