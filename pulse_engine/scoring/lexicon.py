"""
Keyword lexicon for Pulse Engine.

A KeywordLexicon is the single source of truth for what the base scorer
cares about. It is an immutable value passed into every scoring call; there
is no process-wide "current lexicon".

It holds:
1. Weights: phrase -> score. The base scorer takes the MAXIMUM weight of all
   phrases found in an item's title and body.
2. Stop words: tokens dropped by keyword extraction.
3. Quality sources: publishers whose items get a quality multiplier.

CUSTOMIZATION:

To add a phrase:
    1. Add it to DEFAULT_KEYWORD_WEIGHTS (lowercase) with a weight
    2. Phrases are matched as substrings ("deal" also matches "ideal" - be specific!)

To run with a different lexicon without editing code:
    1. Write a JSON file with any of the keys "weights", "stop_words",
       "quality_sources", "quality_multiplier", "default_score"
    2. Point LEXICON_PATH at it (or pass --lexicon to main.py)
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from pulse_engine.errors import ValidationError


# =============================================================================
# Keyword Weights
# =============================================================================

# Mapping of phrase -> weight (all lowercase)
DEFAULT_KEYWORD_WEIGHTS: dict[str, float] = {
    # Headline-worthy business impact terms
    "exclusive": 170,
    "breaking": 170,
    "just announced": 170,
    "just in": 165,
    "first look": 165,
    "world first": 165,
    "global launch": 160,
    "major announcement": 160,
    "industry first": 160,
    "official announcement": 155,
    "officially launches": 155,
    "officially announces": 155,
    "officially unveiled": 155,
    "just launched": 155,
    "just released": 155,
    "just unveiled": 155,
    "just revealed": 150,

    # High-impact business terms
    "partnership": 155,
    "acquisition": 155,
    "merger": 155,
    "billion dollar": 155,
    "million dollar": 150,
    "funding": 150,
    "investment": 150,
    "revenue": 145,
    "profit": 145,
    "market share": 145,
    "executive": 140,
    "leadership": 140,
    "strategy": 140,

    # Breakthrough terms
    "breakthrough": 150,
    "revolutionary": 150,
    "game-changing": 150,
    "paradigm shift": 150,
    "historic": 145,
    "unprecedented": 145,
    "transformative": 145,
    "disrupting": 145,
    "major leap": 140,
    "quantum leap": 140,

    # Innovation terms
    "innovation": 140,
    "groundbreaking": 140,
    "pioneering": 140,
    "milestone": 135,
    "cutting-edge": 135,
    "state-of-the-art": 135,
    "next-generation": 130,
    "innovative": 130,
    "emerging": 130,

    # AI-specific terms
    "new ai": 150,
    "ai breakthrough": 150,
    "ai revolution": 150,
    "ai transformation": 145,
    "claude 3": 160,
    "gpt-5": 160,
    "gpt-4o": 160,
    "gemini": 155,
    "llama 3": 155,
    "mistral": 150,
    "anthropic": 150,
    "openai": 150,
    "google ai": 150,
    "meta ai": 150,
    "microsoft ai": 150,
    "nvidia ai": 155,
    "ai chip": 145,
    "ai hardware": 145,
    "ai startup": 145,
    "ai research": 140,
    "ai safety": 140,
    "ai alignment": 140,
    "ai policy": 140,
}


# =============================================================================
# Stop Words
# =============================================================================

# Tokens that never count as keywords. Tokens of length <= 3 are dropped
# anyway, so most of the value here is in the longer function words.
DEFAULT_STOP_WORDS: frozenset[str] = frozenset({
    "the", "and", "or", "a", "an", "in", "on", "at", "to", "for", "with",
    "by", "about", "as", "of", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "should", "can", "could", "may", "might", "must", "shall", "this",
    "that", "these", "those", "they", "them", "their", "there", "here",
    "where", "when", "why", "how", "what", "who", "whom", "which", "whose",
    "some", "any", "all", "none", "many", "much", "more", "most", "other",
    "another", "such", "no", "nor", "not", "only", "own", "same", "so",
    "than", "too", "very", "just", "but", "however", "still", "yet", "also",
    "from", "into", "over", "after", "your", "http", "https",
})


# =============================================================================
# Source Quality
# =============================================================================

# Publishers that earn the quality multiplier (case-insensitive substring)
DEFAULT_QUALITY_SOURCES: tuple[str, ...] = (
    "Hacker News",
    "ArXiv",
    "Reddit r/MachineLearning",
    "Reddit r/artificial",
    "TechCrunch",
    "VentureBeat",
    "MIT Technology Review",
    "Wired",
)

DEFAULT_QUALITY_MULTIPLIER: float = 1.15

# Keyword score used when no phrase matches
DEFAULT_BASE_SCORE: float = 100.0


@dataclass(frozen=True)
class KeywordLexicon:
    """
    Immutable scoring configuration.

    Attributes:
        weights: Ordered, read-only mapping of lowercase phrase -> weight.
        stop_words: Tokens excluded from keyword extraction.
        quality_sources: Allow-list of high-quality source names.
        quality_multiplier: Multiplier applied to allow-listed sources.
        default_score: Keyword score when no phrase matches.
    """

    weights: Mapping[str, float] = field(default_factory=dict)
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS
    quality_sources: tuple[str, ...] = DEFAULT_QUALITY_SOURCES
    quality_multiplier: float = DEFAULT_QUALITY_MULTIPLIER
    default_score: float = DEFAULT_BASE_SCORE

    def __post_init__(self) -> None:
        normalized = {}
        for phrase, weight in dict(self.weights).items():
            key = str(phrase).strip().lower()
            if not key:
                raise ValidationError("lexicon phrases cannot be empty")
            if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
                raise ValidationError(f"weight for {phrase!r} must be a non-negative number, got {weight!r}")
            normalized[key] = float(weight)

        if self.quality_multiplier <= 0:
            raise ValidationError("quality_multiplier must be positive")
        if self.default_score < 0:
            raise ValidationError("default_score cannot be negative")

        # frozen: assign through object.__setattr__
        object.__setattr__(self, "weights", MappingProxyType(normalized))
        object.__setattr__(self, "stop_words", frozenset(w.lower() for w in self.stop_words))
        object.__setattr__(self, "quality_sources", tuple(self.quality_sources))

    def weight_for(self, phrase: str) -> Optional[float]:
        """Return the weight for a phrase, or None if it is not in the lexicon."""
        return self.weights.get((phrase or "").strip().lower())

    def phrases(self) -> list[str]:
        """All phrases in lexicon order."""
        return list(self.weights.keys())

    def is_stop_word(self, token: str) -> bool:
        return (token or "").lower() in self.stop_words

    def is_quality_source(self, source_name: Optional[str]) -> bool:
        """True when any allow-listed name occurs in source_name (case-insensitive)."""
        name = (source_name or "").lower()
        if not name:
            return False
        return any(source.lower() in name for source in self.quality_sources)

    def with_weights(self, weights: Mapping[str, float]) -> "KeywordLexicon":
        """Return a copy of this lexicon with different weights."""
        return replace(self, weights=dict(weights))

    def __len__(self) -> int:
        return len(self.weights)


def default_lexicon() -> KeywordLexicon:
    """Build the stock lexicon."""
    return KeywordLexicon(weights=DEFAULT_KEYWORD_WEIGHTS)


def lexicon_from_dict(data: dict) -> KeywordLexicon:
    """
    Build a lexicon from a plain dictionary, falling back to defaults.

    Raises:
        ValidationError: If a key has the wrong type.
    """
    if not isinstance(data, dict):
        raise ValidationError("lexicon definition must be a JSON object")

    weights = data.get("weights", DEFAULT_KEYWORD_WEIGHTS)
    if not isinstance(weights, dict):
        raise ValidationError("lexicon 'weights' must be an object of phrase -> weight")

    stop_words = data.get("stop_words", DEFAULT_STOP_WORDS)
    quality_sources = data.get("quality_sources", DEFAULT_QUALITY_SOURCES)
    for key, value in (("stop_words", stop_words), ("quality_sources", quality_sources)):
        if not isinstance(value, (list, tuple, set, frozenset)) or not all(isinstance(v, str) for v in value):
            raise ValidationError(f"lexicon '{key}' must be a list of strings")

    try:
        quality_multiplier = float(data.get("quality_multiplier", DEFAULT_QUALITY_MULTIPLIER))
        default_score = float(data.get("default_score", DEFAULT_BASE_SCORE))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"invalid numeric lexicon setting: {e}") from e

    return KeywordLexicon(
        weights=weights,
        stop_words=frozenset(stop_words),
        quality_sources=tuple(quality_sources),
        quality_multiplier=quality_multiplier,
        default_score=default_score,
    )


def load_lexicon(path) -> KeywordLexicon:
    """
    Load a lexicon from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        KeywordLexicon built from the file.

    Raises:
        ValidationError: If the file is not valid JSON or has bad types.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"lexicon file {path} is not valid JSON: {e}") from e
    return lexicon_from_dict(data)
