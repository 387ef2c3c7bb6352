"""Pipeline-level defaults shared across modules."""
from __future__ import annotations

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_RETRY_DELAY_SECONDS = 1.0

DEFAULT_CACHE_TTL_SECONDS = 3600.0  # 1 hour
DEFAULT_CACHE_MAX_ITEMS = 100

CODE_BLOCK_LANGUAGE_TAG = "cardlink"
DEFAULT_IMAGE_EXTENSION = ".png"
