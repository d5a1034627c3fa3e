"""
Text normalization for Pulse Engine.

Pure, total functions: they never raise and return "" or an empty set for
None or empty input.
"""

import re
from typing import Iterable, Optional

from pulse_engine.scoring.lexicon import DEFAULT_STOP_WORDS


# Named entities decoded by clean(); anything else passes through unchanged
ENTITIES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#x2F;": "/",
}

# Tokens of this length or shorter are never keywords
MIN_KEYWORD_LENGTH: int = 4

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in ENTITIES))
_WHITESPACE_RE = re.compile(r"\s+")
# Everything that is not a letter or digit separates tokens ("_" included)
_PUNCT_RE = re.compile(r"[\W_]+", re.UNICODE)


def clean(text: Optional[str]) -> str:
    """
    Strip markup, decode the common entities and collapse whitespace.

    Tags are removed before entities are decoded, so "&lt;b&gt;" survives
    as the literal text "<b>".

    Example:
        >>> clean("<p>AI &amp; ML   news</p>")
        'AI & ML news'
    """
    if not text:
        return ""
    without_tags = _TAG_RE.sub(" ", str(text))
    decoded = _ENTITY_RE.sub(lambda m: ENTITIES[m.group(0)], without_tags)
    return _WHITESPACE_RE.sub(" ", decoded).strip()


def tokenize(text: Optional[str]) -> list[str]:
    """Lowercase and split on anything that is not a letter or digit."""
    if not text:
        return []
    return [t for t in _PUNCT_RE.split(str(text).lower()) if t]


def extract_keywords(
    text: Optional[str],
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> set[str]:
    """
    Extract the deduplicated keyword set from free text.

    Rules:
    - Lowercased, punctuation treated as whitespace
    - Tokens of length <= 3 dropped
    - Stop words dropped

    Re-extracting from already extracted keywords never adds tokens.

    Args:
        text: Free text (may be None).
        stop_words: Tokens to exclude.

    Returns:
        Set of keywords (may be empty).
    """
    stop = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    return {
        token
        for token in tokenize(text)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in stop
    }
