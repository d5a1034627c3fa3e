"""
Configuration module for Pulse Engine.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of pulse_engine/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Log level name for the root logger (DEBUG=true forces "DEBUG")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# =============================================================================
# Score Store (Supabase) Configuration
# =============================================================================

# Supabase project URL, e.g. https://abcd.supabase.co
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

# Service role key used for score write-back
SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

# Table holding scored articles
SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "news_items")

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Write-back Batching
# =============================================================================

# Number of score updates sent per batch
UPDATE_BATCH_SIZE: int = int(os.getenv("UPDATE_BATCH_SIZE", "50"))

# Pause between batches in seconds (downstream rate limits)
UPDATE_BATCH_DELAY: float = float(os.getenv("UPDATE_BATCH_DELAY", "0.5"))


# =============================================================================
# Scoring Configuration
# =============================================================================

# How many related posts / tags a topic or article keeps
RELATED_POSTS_LIMIT: int = int(os.getenv("RELATED_POSTS_LIMIT", "5"))
RELATED_TAGS_LIMIT: int = int(os.getenv("RELATED_TAGS_LIMIT", "5"))

# Maximum social-post citations attached to a topic
CITATION_POST_LIMIT: int = int(os.getenv("CITATION_POST_LIMIT", "5"))

# Worker threads for per-item scoring (1 = sequential)
SCORING_WORKERS: int = int(os.getenv("SCORING_WORKERS", "1"))

# Optional JSON lexicon file; empty means the built-in lexicon
LEXICON_PATH: str = os.getenv("LEXICON_PATH", "")


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production():
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_SERVICE_ROLE_KEY:
            errors.append("SUPABASE_SERVICE_ROLE_KEY is required in production")

    if UPDATE_BATCH_SIZE < 1:
        errors.append("UPDATE_BATCH_SIZE must be at least 1")

    if UPDATE_BATCH_DELAY < 0:
        errors.append("UPDATE_BATCH_DELAY cannot be negative")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    for name, value in (
        ("RELATED_POSTS_LIMIT", RELATED_POSTS_LIMIT),
        ("RELATED_TAGS_LIMIT", RELATED_TAGS_LIMIT),
        ("CITATION_POST_LIMIT", CITATION_POST_LIMIT),
    ):
        if value < 0:
            errors.append(f"{name} cannot be negative")

    if SCORING_WORKERS < 1:
        errors.append("SCORING_WORKERS must be at least 1")

    if LEXICON_PATH and not Path(LEXICON_PATH).is_file():
        errors.append(f"LEXICON_PATH does not point to a file: {LEXICON_PATH}")

    return errors


def configure_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for command-line runs.

    Args:
        verbose: Force DEBUG level regardless of LOG_LEVEL.
    """
    level_name = "DEBUG" if (verbose or DEBUG) else LOG_LEVEL
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_SERVICE_ROLE_KEY: {'***' if SUPABASE_SERVICE_ROLE_KEY else '(not set)'}")
    print(f"  SUPABASE_TABLE: {SUPABASE_TABLE}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  UPDATE_BATCH_SIZE: {UPDATE_BATCH_SIZE}")
    print(f"  UPDATE_BATCH_DELAY: {UPDATE_BATCH_DELAY}s")
    print(f"  RELATED_POSTS_LIMIT: {RELATED_POSTS_LIMIT}")
    print(f"  RELATED_TAGS_LIMIT: {RELATED_TAGS_LIMIT}")
    print(f"  CITATION_POST_LIMIT: {CITATION_POST_LIMIT}")
    print(f"  SCORING_WORKERS: {SCORING_WORKERS}")
    print(f"  LEXICON_PATH: {LEXICON_PATH or '(built-in)'}")
