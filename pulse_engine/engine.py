"""
Pulse Engine scoring pass - core execution logic.

This module orchestrates one scoring pass over a snapshot:

    Candidate pool → Article scoring → Topic curation → Rerank → Write-back

Steps:
1. Validate the social candidate pool and fill derived impact scores
2. Score each article (base score, relevance, boost)
3. Curate each topic's citations and related evidence
4. Rerank articles and topics by their scores
5. Write final scores back to the store in batches (unless dry-run)
6. Report a pass summary

Design principles:
- Failure isolation: one bad item is recorded and skipped, the pass continues
- Read-only pool: candidates are validated once and never mutated afterwards
- Idempotency: updates are keyed by article id, re-running rewrites the same values
- One clock per pass: every item is scored against the same `now`
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, TypeVar

from pulse_engine.aggregation.aggregator import score_article
from pulse_engine.config import (
    CITATION_POST_LIMIT,
    LEXICON_PATH,
    RELATED_POSTS_LIMIT,
    RELATED_TAGS_LIMIT,
    SCORING_WORKERS,
    SUPABASE_URL,
    UPDATE_BATCH_DELAY,
    UPDATE_BATCH_SIZE,
)
from pulse_engine.curation.citations import enrich_topic
from pulse_engine.curation.synthetic import find_synthetic_marker, is_synthetic_post
from pulse_engine.errors import PulseEngineError, ValidationError
from pulse_engine.matching.relevance import candidate_text
from pulse_engine.models.digest import ScoredItem, Topic
from pulse_engine.models.items import SocialPost, Tag, TextItem
from pulse_engine.ranking.reranker import RankChange, deduplicate, rank_changes, rerank
from pulse_engine.scoring.engagement import merge_tags, tags_from_posts, with_post_impact
from pulse_engine.scoring.lexicon import KeywordLexicon, default_lexicon, load_lexicon
from pulse_engine.storage import MockScoreStore, ScoreStore, SupabaseScoreStore, UpdateResult, write_in_batches

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# Pass Result Data Structures
# =============================================================================

@dataclass(frozen=True)
class CandidatePool:
    """
    Validated social evidence shared read-only by every item in a pass.

    Topics are curated against the full pool so that placeholder-only
    evidence can be detected. Articles are boosted only by real_posts and
    real_tags, which exclude anything carrying a placeholder marker.
    """
    posts: tuple = ()
    tags: tuple = ()
    real_posts: tuple = ()
    real_tags: tuple = ()
    rejected: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.posts and not self.tags


@dataclass
class ItemFailure:
    """An item that could not be processed."""
    key: str
    stage: str
    error: str

    def __str__(self) -> str:
        return f"[{self.stage}] {self.key}: {self.error}"


@dataclass
class PassResult:
    """Complete result of a scoring pass."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    now: Optional[datetime] = None
    dry_run: bool = False

    # Input counts
    articles_in: int = 0
    topics_in: int = 0
    posts_in: int = 0
    tags_in: int = 0
    candidates_rejected: int = 0

    # Outputs, best first
    scored: List[ScoredItem] = field(default_factory=list)
    topics: List[Topic] = field(default_factory=list)
    changes: List[RankChange] = field(default_factory=list)

    failures: List[ItemFailure] = field(default_factory=list)

    # Write-back result (None if dry-run or nothing to write)
    write_result: Optional[UpdateResult] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    @property
    def success(self) -> bool:
        """True when every attempted write-back went through."""
        return self.write_result is None or self.write_result.ok

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "SCORING PASS SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Duration: {self.duration_seconds:.2f}s",
            f"Mode:     {'DRY RUN' if self.dry_run else 'LIVE'}",
            "",
            "Input:",
            f"  Articles: {self.articles_in}",
            f"  Topics:   {self.topics_in}",
            f"  Posts:    {self.posts_in} ({self.candidates_rejected} candidates rejected)",
            f"  Tags:     {self.tags_in}",
            "",
            f"Articles scored: {len(self.scored)}",
            f"Topics curated:  {len(self.topics)}",
        ]

        if self.scored:
            lines.append("")
            lines.append("Top articles:")
            for item in self.scored[:5]:
                lines.append(f"  {item.final_score:>5}  {item.item.title[:50]} (+{item.boost_percentage:g}%)")

        moved = [c for c in self.changes if c.delta]
        if moved:
            lines.append("")
            lines.append(f"Rank changes: {len(moved)}")
            for change in moved[:5]:
                lines.append(f"  {change}")

        if self.write_result is not None:
            lines.extend([
                "",
                "Write-back:",
                f"  Updated: {self.write_result.updated}",
                f"  Failed:  {self.write_result.failed}",
                f"  Batches: {self.write_result.batches}",
            ])
            if self.write_result.aborted:
                lines.append("  ABORTED before completion")
        elif self.dry_run:
            lines.append("\nWrite-back: SKIPPED (dry-run mode)")

        if self.failures:
            lines.extend(["", "Failures:"])
            for failure in self.failures[:5]:
                lines.append(f"  - {failure}")
            if len(self.failures) > 5:
                lines.append(f"  ... and {len(self.failures) - 5} more")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Pass Configuration
# =============================================================================

@dataclass
class PassConfig:
    """
    Configuration for a scoring pass.

    CLI arguments override environment defaults.
    """
    now: Optional[datetime] = None
    lexicon: Optional[KeywordLexicon] = None
    related_posts_limit: int = RELATED_POSTS_LIMIT
    related_tags_limit: int = RELATED_TAGS_LIMIT
    citation_limit: int = CITATION_POST_LIMIT
    workers: int = SCORING_WORKERS
    dry_run: bool = False
    batch_size: int = UPDATE_BATCH_SIZE
    batch_delay: float = UPDATE_BATCH_DELAY
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValidationError(f"workers must be at least 1, got {self.workers}")
        if self.batch_size < 1:
            raise ValidationError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.batch_delay < 0:
            raise ValidationError(f"batch_delay cannot be negative, got {self.batch_delay}")


# =============================================================================
# Scoring Pass
# =============================================================================

class ScoringPass:
    """
    One scoring pass over a snapshot of articles, topics and social evidence.

    Usage:
        config = PassConfig(dry_run=True)
        result = ScoringPass(config).run(articles, topics, posts, tags)
        print(result.to_summary())
    """

    def __init__(self, config: PassConfig = None):
        """
        Initialize the pass.

        Args:
            config: Pass configuration. Defaults to PassConfig().
        """
        self.config = config or PassConfig()
        self.lexicon = self.config.lexicon or self._load_default_lexicon()

    @staticmethod
    def _load_default_lexicon() -> KeywordLexicon:
        if LEXICON_PATH:
            logger.info("Loading lexicon from %s", LEXICON_PATH)
            return load_lexicon(LEXICON_PATH)
        return default_lexicon()

    def _get_store(self) -> ScoreStore:
        """Get the configured write-back backend."""
        if SUPABASE_URL:
            return SupabaseScoreStore()
        return MockScoreStore()

    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Apply func to every item, on a thread pool when workers > 1. Keeps input order."""
        if self.config.workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                return list(executor.map(func, items))
        return [func(item) for item in items]

    # =========================================================================
    # Steps
    # =========================================================================

    def prepare_pool(self, posts: Sequence[SocialPost], tags: Sequence[Tag] = ()) -> CandidatePool:
        """
        Validate candidates and fill derived impact scores.

        Invalid posts and tags are dropped and counted. Duplicate tags are
        merged and post hashtags are folded into the tag aggregates.
        """
        rejected = 0

        valid_posts = []
        for post in posts:
            try:
                post.validate()
                candidate_text(post)
            except ValidationError as e:
                rejected += 1
                logger.warning("Dropping invalid post %s: %s", post.id, e)
                continue
            valid_posts.append(with_post_impact(post))

        valid_tags = []
        for tag in tags:
            try:
                tag.validate()
            except ValidationError as e:
                rejected += 1
                logger.warning("Dropping invalid tag %r: %s", tag.name, e)
                continue
            valid_tags.append(tag)

        real_posts = [p for p in valid_posts if not is_synthetic_post(p)]
        merged_tags = merge_tags(valid_tags + tags_from_posts(real_posts))
        real_tags = [t for t in merged_tags if not find_synthetic_marker(t.name)]

        logger.info(
            "Candidate pool: %d posts (%d real), %d tags (%d rejected)",
            len(valid_posts), len(real_posts), len(merged_tags), rejected,
        )
        return CandidatePool(
            posts=tuple(valid_posts),
            tags=tuple(merged_tags),
            real_posts=tuple(real_posts),
            real_tags=tuple(real_tags),
            rejected=rejected,
        )

    def _score_one(self, article: TextItem, pool: CandidatePool, now: datetime):
        try:
            scored = score_article(
                article,
                self.lexicon,
                pool.real_posts,
                pool.real_tags,
                now=now,
                related_posts_limit=self.config.related_posts_limit,
                related_tags_limit=self.config.related_tags_limit,
            )
            return scored, None
        except PulseEngineError as e:
            logger.warning("Failed to score article %s: %s", article.id, e)
            return None, ItemFailure(key=article.id, stage="score", error=str(e))

    def score_articles(
        self,
        articles: Sequence[TextItem],
        pool: CandidatePool,
        now: Optional[datetime] = None,
    ) -> tuple[List[ScoredItem], List[ScoredItem], List[ItemFailure]]:
        """
        Score every article against the pool.

        Returns:
            (scored in input order, scored reranked, failures)
        """
        now = now or self.config.now or datetime.now(timezone.utc)
        unique = deduplicate(articles)
        if len(unique) < len(articles):
            logger.info("Skipped %d duplicate articles", len(articles) - len(unique))

        outcomes = self._map(lambda a: self._score_one(a, pool, now), unique)
        scored = [s for s, _ in outcomes if s is not None]
        failures = [f for _, f in outcomes if f is not None]
        return scored, rerank(scored), failures

    def _curate_one(self, topic: Topic, pool: CandidatePool):
        try:
            enriched = enrich_topic(
                topic,
                pool.posts,
                pool.tags,
                post_limit=self.config.related_posts_limit,
                tag_limit=self.config.related_tags_limit,
                citation_limit=self.config.citation_limit,
                stop_words=self.lexicon.stop_words,
            )
            return enriched, None
        except PulseEngineError as e:
            logger.warning("Failed to curate topic %r: %s", topic.key, e)
            return None, ItemFailure(key=topic.key, stage="curate", error=str(e))

    def curate_topics(
        self,
        topics: Sequence[Topic],
        pool: CandidatePool,
    ) -> tuple[List[Topic], List[ItemFailure]]:
        """
        Curate every topic against the pool.

        Returns:
            (topics reranked by social impact, failures)
        """
        outcomes = self._map(lambda t: self._curate_one(t, pool), deduplicate(topics))
        curated = [t for t, _ in outcomes if t is not None]
        failures = [f for _, f in outcomes if f is not None]
        return rerank(curated), failures

    def run(
        self,
        articles: Sequence[TextItem] = (),
        topics: Sequence[Topic] = (),
        posts: Sequence[SocialPost] = (),
        tags: Sequence[Tag] = (),
        store: Optional[ScoreStore] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> PassResult:
        """
        Execute the full pass.

        Args:
            articles: Articles to score.
            topics: Topics to curate.
            posts: Social post candidates.
            tags: Hashtag candidates.
            store: Write-back backend. Defaults to the configured one.
            stop_event: Signal that aborts write-back between batches.

        Returns:
            PassResult with execution details.
        """
        now = self.config.now or datetime.now(timezone.utc)
        result = PassResult(
            started_at=datetime.now(),
            now=now,
            dry_run=self.config.dry_run,
            articles_in=len(articles),
            topics_in=len(topics),
            posts_in=len(posts),
            tags_in=len(tags),
        )

        pool = self.prepare_pool(posts, tags)
        result.candidates_rejected = pool.rejected

        if articles:
            in_order, ranked, failures = self.score_articles(articles, pool, now)
            result.scored = ranked
            result.changes = rank_changes(in_order, ranked)
            result.failures.extend(failures)
            logger.info("Scored %d of %d articles", len(ranked), len(articles))

        if topics:
            curated, failures = self.curate_topics(topics, pool)
            result.topics = curated
            result.failures.extend(failures)
            logger.info("Curated %d of %d topics", len(curated), len(topics))

        if self.config.dry_run:
            logger.info("Dry run: skipping write-back of %d updates", len(result.scored))
        elif result.scored:
            target = store or self._get_store()
            logger.info("Writing %d updates to %s", len(result.scored), target.name)
            result.write_result = write_in_batches(
                target,
                [item.to_update() for item in result.scored],
                batch_size=self.config.batch_size,
                delay=self.config.batch_delay,
                stop_event=stop_event,
            )

        result.finished_at = datetime.now()
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def run_pass(
    articles: Sequence[TextItem] = (),
    topics: Sequence[Topic] = (),
    posts: Sequence[SocialPost] = (),
    tags: Sequence[Tag] = (),
    now: Optional[datetime] = None,
    dry_run: bool = False,
    store: Optional[ScoreStore] = None,
) -> PassResult:
    """
    Run a scoring pass with default settings.

    Convenience function for programmatic use.
    """
    config = PassConfig(now=now, dry_run=dry_run)
    return ScoringPass(config).run(articles, topics, posts, tags, store=store)
