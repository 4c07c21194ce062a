"""
config.py

Purpose:
    - get_supabase_client(): create a Supabase Python client from env vars
      (catalog + favorites storage).
    - load_settings(): read the remaining knobs (captioning provider, fetch
      bounds, extra synonym file) with defaults.

Usage:
    from recipe_match.config import get_supabase_client, load_settings
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Supabase client setup where env vars are used for configuration. Client connection details are not hardcoded.
from supabase import create_client, Client

from dotenv import load_dotenv

from recipe_match.logging_utils import get_logger

load_dotenv()  # loads .env

logger = get_logger("config")

DEFAULT_CAPTION_MODEL = "Salesforce/blip-image-captioning-large"


@dataclass(frozen=True)
class Settings:
    huggingface_api_key: str = ""
    caption_provider: str = "huggingface"
    caption_model_id: str = DEFAULT_CAPTION_MODEL
    caption_timeout_seconds: float = 60.0
    max_image_size_mb: int = 10

    # Catalog fetch bounds for filter-then-paginate
    search_fetch_min: int = 200
    search_fetch_max: int = 2000
    suggestion_pool_min: int = 100

    synonyms_tsv: Optional[str] = None

    @property
    def max_image_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Invalid integer for %s=%r; using default %d",
            key,
            raw,
            default,
            extra={
                "invoking_func": "load_settings",
                "invoking_purpose": "Read settings from environment",
                "next_step": "Continue with default value",
                "resolution": f"Set {key} to a whole number",
            },
        )
        return default


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            "Invalid number for %s=%r; using default %s",
            key,
            raw,
            default,
            extra={
                "invoking_func": "load_settings",
                "invoking_purpose": "Read settings from environment",
                "next_step": "Continue with default value",
                "resolution": f"Set {key} to a number",
            },
        )
        return default


def load_settings() -> Settings:
    """Build Settings from the current environment (after .env is loaded)."""
    return Settings(
        huggingface_api_key=os.getenv("HUGGINGFACE_API_KEY", ""),
        caption_provider=(os.getenv("CAPTION_PROVIDER") or "huggingface").strip().lower(),
        caption_model_id=os.getenv("CAPTION_MODEL_ID") or DEFAULT_CAPTION_MODEL,
        caption_timeout_seconds=_float_env("CAPTION_TIMEOUT_SECONDS", 60.0),
        max_image_size_mb=_int_env("MAX_IMAGE_SIZE_MB", 10),
        search_fetch_min=_int_env("SEARCH_FETCH_MIN", 200),
        search_fetch_max=_int_env("SEARCH_FETCH_MAX", 2000),
        suggestion_pool_min=_int_env("SUGGESTION_POOL_MIN", 100),
        synonyms_tsv=os.getenv("SYNONYMS_TSV") or None,
    )


# Function to create and return a Supabase client. This is like building a database connection.
def get_supabase_client() -> Client:
    """Create a Supabase client using env vars."""
    url = os.environ["SUPABASE_URL"]
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    if not key:
        raise RuntimeError("Set SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY")
    return create_client(url, key)
