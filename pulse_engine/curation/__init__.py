"""
Curation module.

Rebuilds topic citations from verified evidence and rejects placeholder data.
"""

from pulse_engine.curation.synthetic import (
    DOMAIN_MARKERS,
    WORD_MARKERS,
    ID_PREFIXES,
    find_synthetic_marker,
    find_identifier_marker,
    find_id_prefix,
    check_not_synthetic,
    check_identifier,
    check_post,
    check_citation,
    is_synthetic_post,
)

from pulse_engine.curation.citations import (
    validate_url,
    validate_citation,
    citation_from_post,
    curate,
    enrich_topic,
)

__all__ = [
    # Synthetic data detection
    "DOMAIN_MARKERS",
    "WORD_MARKERS",
    "ID_PREFIXES",
    "find_synthetic_marker",
    "find_identifier_marker",
    "find_id_prefix",
    "check_not_synthetic",
    "check_identifier",
    "check_post",
    "check_citation",
    "is_synthetic_post",
    # Citation curation
    "validate_url",
    "validate_citation",
    "citation_from_post",
    "curate",
    "enrich_topic",
]
