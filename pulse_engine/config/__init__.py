"""
Configuration module.

Handles environment variables, store credentials, and scoring settings.
"""

from pulse_engine.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_TABLE,
    REQUEST_TIMEOUT,
    UPDATE_BATCH_SIZE,
    UPDATE_BATCH_DELAY,
    RELATED_POSTS_LIMIT,
    RELATED_TAGS_LIMIT,
    CITATION_POST_LIMIT,
    SCORING_WORKERS,
    LEXICON_PATH,
    is_production,
    is_development,
    validate_config,
    configure_logging,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_TABLE",
    "REQUEST_TIMEOUT",
    "UPDATE_BATCH_SIZE",
    "UPDATE_BATCH_DELAY",
    "RELATED_POSTS_LIMIT",
    "RELATED_TAGS_LIMIT",
    "CITATION_POST_LIMIT",
    "SCORING_WORKERS",
    "LEXICON_PATH",
    "is_production",
    "is_development",
    "validate_config",
    "configure_logging",
    "print_config_summary",
]
