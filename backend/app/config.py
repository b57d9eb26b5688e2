"""
Centralized configuration for the Wine Cellar backend.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import os
from pathlib import Path
from typing import Optional


class Config:
    """Application configuration constants."""

    # === Remote Store ===
    WINES_TABLE = "wines"
    SETTINGS_TABLE = "user_settings"

    # === Legacy Local Store ===
    # Flat key used by the old browser client before keys moved to user_settings
    LEGACY_API_KEY_KEY = "wijnkelder_openai_key"

    # === Pairing ===
    MAX_RECOMMENDATIONS = 3
    UNKNOWN_PLACEHOLDER = "unknown"

    # === Environment ===
    @staticmethod
    def use_mocks() -> bool:
        """Check if mock mode is enabled (canned completions, no API calls)."""
        return os.getenv("USE_MOCKS", "false").lower() == "true"

    @staticmethod
    def supabase_url() -> str:
        """Base URL of the Supabase project (REST + auth)."""
        return os.getenv("SUPABASE_URL", "").rstrip("/")

    @staticmethod
    def supabase_anon_key() -> str:
        """Public anon key sent as the `apikey` header."""
        return os.getenv("SUPABASE_ANON_KEY", "")

    @staticmethod
    def supabase_access_token() -> Optional[str]:
        """Optional session token to start with (single-user deployments)."""
        return os.getenv("SUPABASE_ACCESS_TOKEN") or None

    @staticmethod
    def completion_model() -> str:
        """LiteLLM model identifier. Default: gpt-4o-mini."""
        return os.getenv("COMPLETION_MODEL", "gpt-4o-mini")

    @staticmethod
    def completion_temperature() -> float:
        """Sampling temperature for enrichment and pairing. Default: 0.7."""
        try:
            return float(os.getenv("COMPLETION_TEMPERATURE", "0.7"))
        except ValueError:
            return 0.7

    @staticmethod
    def completion_timeout() -> float:
        """Timeout in seconds for a completion call. Default: 30.0."""
        try:
            return float(os.getenv("COMPLETION_TIMEOUT", "30.0"))
        except ValueError:
            return 30.0

    @staticmethod
    def http_timeout() -> float:
        """Timeout in seconds for remote store calls. Default: 15.0."""
        try:
            return float(os.getenv("HTTP_TIMEOUT", "15.0"))
        except ValueError:
            return 15.0

    @staticmethod
    def legacy_store_path() -> str:
        """Path to the SQLite file holding the legacy local key/value store.
        Default: backend/app/data/local_storage.db (relative to app package).
        """
        default = str(Path(__file__).parent / "data" / "local_storage.db")
        return os.getenv("LEGACY_STORE_PATH", default)

    @staticmethod
    def locale() -> str:
        """Locale for user-facing error messages (en or nl). Default: en."""
        return os.getenv("LOCALE", "en").lower()

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()
