"""
Pulse Engine - relevance and impact scoring for news digests.

Scores articles by keywords, source quality and recency, boosts them with
matching social evidence, and curates topic citations from verified posts.
"""

__version__ = "1.0.0"
