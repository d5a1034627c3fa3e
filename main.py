#!/usr/bin/env python3
"""
Pulse Engine - relevance and impact scoring pass.

Command-line entry point for running one scoring pass over a JSON snapshot:
  - Score articles by keywords, source quality and recency
  - Boost them with matching social posts and hashtags
  - Curate topic citations from verified posts
  - Write final scores back to Supabase (or mock storage in dev)
  - Print pass summary

The snapshot is a JSON object with optional "articles", "topics", "posts"
and "tags" lists. Tags may be bare names or objects.

Usage:
    python main.py snapshot.json                 # Score and write back
    python main.py snapshot.json --dry-run       # Score only, no writes
    python main.py snapshot.json -o scored.json  # Also save results
    python main.py snapshot.json --verbose       # Debug logging

Examples:
    # Reproducible development run
    python main.py data/snapshot.json --dry-run --now 2025-01-15T12:00:00Z -v

    # Production run
    python main.py data/snapshot.json --batch-size 50
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

from pulse_engine import __version__
from pulse_engine.config import (
    SCORING_WORKERS,
    UPDATE_BATCH_SIZE,
    configure_logging,
    print_config_summary,
    validate_config,
)
from pulse_engine.engine import PassConfig, PassResult, ScoringPass
from pulse_engine.errors import PulseEngineError, ValidationError
from pulse_engine.models import SocialPost, Tag, TextItem, Topic, parse_datetime
from pulse_engine.scoring.lexicon import load_lexicon

logger = logging.getLogger("pulse_engine.cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="pulse-engine",
        description="Score articles and curate topics against social evidence.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s snapshot.json                    Score and write back
  %(prog)s snapshot.json --dry-run          Score only, skip write-back
  %(prog)s snapshot.json --now 2025-01-15T12:00:00Z
                                            Score against a fixed clock
  %(prog)s snapshot.json -o out.json        Save scored output as JSON
  %(prog)s snapshot.json --workers 4        Score items on 4 threads
  %(prog)s --show-config                    Print configuration and exit
        """,
    )

    parser.add_argument(
        "snapshot",
        nargs="?",
        metavar="SNAPSHOT.json",
        help="JSON snapshot with articles, topics, posts and tags",
    )

    # Core options
    parser.add_argument(
        "--now",
        metavar="ISO",
        default=None,
        help="Clock for recency decay (default: current UTC time)",
    )

    parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        default=None,
        help="Write scored articles and curated topics to FILE as JSON",
    )

    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Score and curate but skip write-back (no writes)",
    )

    parser.add_argument(
        "--batch-size", "-b",
        type=int,
        default=None,
        metavar="N",
        help=f"Score updates per write-back batch (default: {UPDATE_BATCH_SIZE})",
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        metavar="N",
        help=f"Worker threads for per-item scoring (default: {SCORING_WORKERS})",
    )

    parser.add_argument(
        "--lexicon",
        metavar="FILE",
        default=None,
        help="JSON lexicon overriding the built-in keyword weights",
    )

    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug logging",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors and final summary",
    )

    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Pulse Engine Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def load_snapshot(path) -> dict:
    """
    Read a snapshot file into model objects.

    Returns:
        Dict with "articles", "topics", "posts" and "tags" lists.

    Raises:
        OSError: If the file cannot be read.
        ValidationError: If the JSON is malformed or a record is invalid.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"snapshot {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"snapshot {path} must be a JSON object")

    return {
        "articles": [TextItem.from_dict(a) for a in data.get("articles", [])],
        "topics": [Topic.from_dict(t) for t in data.get("topics", [])],
        "posts": [SocialPost.from_dict(p) for p in data.get("posts", [])],
        "tags": [Tag.from_dict(t) for t in data.get("tags", [])],
    }


def write_output(result: PassResult, path) -> None:
    """Save scored articles and curated topics as JSON."""
    payload = {
        "scored_at": result.now.isoformat() if result.now else None,
        "articles": [item.to_dict() for item in result.scored],
        "topics": [topic.to_dict() for topic in result.topics],
        "failures": [str(f) for f in result.failures],
    }
    Path(path).write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    if not args.snapshot:
        parser.error("SNAPSHOT.json is required")

    configure_logging(verbose=args.verbose)
    if args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    # Print header (unless quiet)
    if not args.quiet:
        print("=" * 60)
        print("Pulse Engine Scoring Pass")
        print("=" * 60)

        if args.dry_run:
            print("Mode: DRY RUN (no write-back)")

        if args.verbose:
            print("\nConfiguration:")
            print_config_summary()
            print()

    try:
        snapshot = load_snapshot(args.snapshot)
        now = parse_datetime(args.now) if args.now else None
        lexicon = load_lexicon(args.lexicon) if args.lexicon else None

        overrides = {}
        if args.batch_size is not None:
            overrides["batch_size"] = args.batch_size
        if args.workers is not None:
            overrides["workers"] = args.workers

        config = PassConfig(
            now=now,
            lexicon=lexicon,
            dry_run=args.dry_run,
            verbose=args.verbose,
            **overrides,
        )
    except (OSError, PulseEngineError) as e:
        print(f"\n❌ Could not read input: {e}")
        return 1

    # Show effective settings
    if not args.quiet:
        print("Settings:")
        print(f"  Snapshot: {args.snapshot}")
        print(f"  Now: {config.now.isoformat() if config.now else 'current time'}")
        print(f"  Batch size: {config.batch_size}")
        print(f"  Workers: {config.workers}")
        print(f"  Dry run: {config.dry_run}")
        print()

    stop_event = threading.Event()
    try:
        result = ScoringPass(config).run(
            snapshot["articles"],
            snapshot["topics"],
            snapshot["posts"],
            snapshot["tags"],
            stop_event=stop_event,
        )

        print(result.to_summary())

        if args.output:
            write_output(result, args.output)
            if not args.quiet:
                print(f"\nResults written to {args.output}")

        if not result.success:
            if result.write_result.aborted:
                print("\n⚠️  Write-back aborted before completion")
            else:
                print(f"\n⚠️  {result.write_result.failed} score updates failed to write")
            return 1

        return 0

    except KeyboardInterrupt:
        stop_event.set()
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        logger.exception("Scoring pass failed")
        print(f"\n❌ Scoring pass error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
