"""
On/off switches for the optional cellar features.

Read once from the environment (FEATURE_ENRICHMENT, FEATURE_PAIRING,
FEATURE_LEGACY_KEY_MIGRATION). Everything is on unless switched off.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class FeatureFlags(BaseSettings):
    # AI lookup of grapes, region and drink window for new wines
    feature_enrichment: bool = True
    # Dish-to-cellar recommendations
    feature_pairing: bool = True
    # Move a key left in the local store into user_settings on sign-in
    feature_legacy_key_migration: bool = True

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
    }


@lru_cache()
def get_feature_flags() -> FeatureFlags:
    """Route dependency; tests swap it via dependency_overrides."""
    return FeatureFlags()
