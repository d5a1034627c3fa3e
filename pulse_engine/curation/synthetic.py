"""
Placeholder and synthetic data detection.

The digest must never present fabricated social evidence as real. Any
emitted post, citation, username or id that carries one of these markers is
rejected with SyntheticDataError.

Matching rules (all case-insensitive):
- Domain markers are plain substrings ("example.com" anywhere in a URL).
- Identifiers (URLs, author handles, post ids) match word markers as plain
  substrings too, so "testuser" and "mocknews.io" are rejected.
- Free text (post content, citation titles, tag names) matches word markers
  only as whole tokens, split on anything that is not a letter or digit.
  "test_user" and "mock tweet" match, "latest" and "contest" do not.
- Id prefixes apply to post ids and to the status id at the end of a URL.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from pulse_engine.errors import SyntheticDataError
from pulse_engine.models.digest import Citation
from pulse_engine.models.items import SocialPost
from pulse_engine.scoring.text import tokenize

logger = logging.getLogger(__name__)


DOMAIN_MARKERS: tuple[str, ...] = (
    "example.com",
    "localhost",
    "127.0.0.1",
    "${",  # unrendered template
)

WORD_MARKERS: tuple[str, ...] = (
    "placeholder",
    "sample",
    "test",
    "fake",
    "mock",
    "dummy",
)

ID_PREFIXES: tuple[str, ...] = (
    "grok-",
    "mock-",
    "sample-",
    "test-",
    "fake-",
    "placeholder-",
)


def find_synthetic_marker(value: Optional[str]) -> Optional[str]:
    """
    Return the first denylist marker found in value, or None.

    Example:
        >>> find_synthetic_marker("https://x.com/test_user/status/12345")
        'test'
        >>> find_synthetic_marker("The latest GPT-5 benchmarks") is None
        True
    """
    if not value:
        return None
    text = str(value).lower()

    for marker in DOMAIN_MARKERS:
        if marker in text:
            return marker

    tokens = set(tokenize(text))
    for marker in WORD_MARKERS:
        if marker in tokens:
            return marker

    return None


def find_identifier_marker(value: Optional[str]) -> Optional[str]:
    """
    Return the first denylist marker occurring anywhere in an identifier.

    Used for URLs, author handles and ids, where a marker embedded in a
    longer word is still a placeholder.

    Example:
        >>> find_identifier_marker("https://x.com/testuser/status/1")
        'test'
    """
    if not value:
        return None
    text = str(value).lower()
    for marker in DOMAIN_MARKERS + WORD_MARKERS:
        if marker in text:
            return marker
    return None


def find_id_prefix(identifier: Optional[str]) -> Optional[str]:
    """Return the synthetic id prefix identifier starts with, or None."""
    text = str(identifier or "").strip().lower()
    for prefix in ID_PREFIXES:
        if text.startswith(prefix):
            return prefix
    return None


def url_status_id(url: Optional[str]) -> str:
    """Last non-empty path segment of a URL ("" when there is none)."""
    if not url:
        return ""
    segments = [s for s in urlparse(url).path.split("/") if s]
    return segments[-1] if segments else ""


def check_not_synthetic(value: Optional[str], field_name: str) -> None:
    """
    Raise if value carries a denylist marker.

    Raises:
        SyntheticDataError: With the matching marker attached.
    """
    marker = find_synthetic_marker(value)
    if marker:
        raise SyntheticDataError(
            f"{field_name} contains placeholder marker {marker!r}: {str(value)[:80]!r}",
            marker=marker,
            value=str(value),
        )


def check_identifier(value: Optional[str], field_name: str) -> None:
    """
    Raise if a URL, handle or id contains a denylist marker anywhere.

    Raises:
        SyntheticDataError: With the matching marker attached.
    """
    marker = find_identifier_marker(value)
    if marker:
        raise SyntheticDataError(
            f"{field_name} contains placeholder marker {marker!r}: {str(value)[:80]!r}",
            marker=marker,
            value=str(value),
        )


def check_id(identifier: Optional[str], field_name: str) -> None:
    """Raise if identifier starts with a synthetic prefix."""
    prefix = find_id_prefix(identifier)
    if prefix:
        raise SyntheticDataError(
            f"{field_name} has synthetic prefix {prefix!r}: {identifier!r}",
            marker=prefix,
            value=str(identifier),
        )


def check_post(post: SocialPost) -> None:
    """
    Reject a post whose id, URL, author handle or content looks fabricated.

    Raises:
        SyntheticDataError: On the first marker found.
    """
    check_id(post.id, f"post {post.id} id")
    check_identifier(post.id, f"post {post.id} id")
    check_identifier(post.url, f"post {post.id} url")
    check_id(url_status_id(post.url), f"post {post.id} status id")
    check_identifier(post.author_handle, f"post {post.id} author handle")
    check_not_synthetic(post.content, f"post {post.id} content")


def check_citation(citation: Citation) -> None:
    """
    Reject a citation whose URL or title looks fabricated.

    Raises:
        SyntheticDataError: On the first marker found.
    """
    check_identifier(citation.url, "citation url")
    check_id(url_status_id(citation.url), "citation status id")
    check_not_synthetic(citation.title, "citation title")


def is_synthetic_post(post: SocialPost) -> bool:
    """Non-raising form of check_post()."""
    try:
        check_post(post)
    except SyntheticDataError as e:
        logger.debug("Synthetic post %s: %s", post.id, e)
        return True
    return False
