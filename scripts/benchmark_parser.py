#!/usr/bin/env python3
"""Benchmark a referers dataset for classification accuracy and speed.

Usage:
    python scripts/benchmark_parser.py
    python scripts/benchmark_parser.py --dataset referers-latest.json
    python scripts/benchmark_parser.py --iterations 10000 --verbose
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from refererparser.dataset import CorruptReferersError
from refererparser.models import Referer
from refererparser.parser import Parser

# Ground truth test set
# (referer, expected_medium, expected_source, expected_term)
BENCHMARK_REFERERS = [
    # Search engines
    ("https://www.google.com/search?q=running+shoes", "search", "Google", "running shoes"),
    ("http://www.google.co.uk/url?sa=t&q=weather%20london", "search", "Google", "weather london"),
    ("https://www.google.com/imgres?imgurl=x&q=cats", "search", "Google Images", "cats"),
    ("https://www.bing.com/search?q=python+dataclasses", "search", "Bing", "python dataclasses"),
    ("https://search.yahoo.com/search?p=hiking+boots", "search", "Yahoo!", "hiking boots"),
    ("https://duckduckgo.com/?q=privacy", "search", "DuckDuckGo", "privacy"),
    ("https://www.baidu.com/s?wd=%E5%A4%A9%E6%B0%94", "search", "Baidu", "天气"),
    ("https://yandex.ru/search/?text=referer", "search", "Yandex", "referer"),
    ("https://www.google.com/", "search", "Google", None),

    # Social
    ("https://www.facebook.com/", "social", "Facebook", None),
    ("https://l.facebook.com/l.php?u=https%3A%2F%2Fexample.com", "social", "Facebook", None),
    ("https://t.co/abc123", "social", "Twitter", None),
    ("https://news.ycombinator.com/item?id=1", "social", "Hacker News", None),
    ("https://www.reddit.com/r/python/", "social", "Reddit", None),

    # Email
    ("https://mail.google.com/mail/u/0/", "email", "Gmail", None),
    ("https://outlook.live.com/mail/0/inbox", "email", "Outlook.com", None),

    # Paid
    ("https://www.google.com/aclk?sa=l&ai=xyz", "paid", "Google", None),
    ("https://googleads.g.doubleclick.net/pagead/ads", "paid", "Google", None),

    # Explicitly unknown sources
    ("https://support.google.com/mail/", "unknown", None, None),

    # No match
    ("https://blog.example.org/post/1", "unknown", None, None),

    # Not classifiable
    ("ftp://www.google.com/", None, None, None),
    ("", None, None, None),
]


def score_result(result: Referer | None, expected: tuple) -> str:
    """Score a classification result.

    Returns "correct", "wrong_source", "wrong_term" or "wrong".
    """
    _, expected_medium, expected_source, expected_term = expected

    if result is None:
        return "correct" if expected_medium is None else "wrong"

    if expected_medium is None or result.medium.value != expected_medium:
        return "wrong"

    if getattr(result, "source", None) != expected_source:
        return "wrong_source"

    if getattr(result, "term", None) != expected_term:
        return "wrong_term"

    return "correct"


def run_benchmark(parser: Parser, iterations: int, verbose: bool = False) -> bool:
    """Run accuracy and throughput checks, print results.

    Returns True if every referer was classified as expected.
    """
    print(f"\n{'='*60}")
    print(f"Accuracy ({len(BENCHMARK_REFERERS)} referers)")
    print(f"{'='*60}")

    failures = 0
    for expected in BENCHMARK_REFERERS:
        referer = expected[0]
        result = parser.parse(referer)
        status = score_result(result, expected)

        if status != "correct":
            failures += 1

        indicator = "OK" if status == "correct" else status.upper()
        actual = result.to_dict() if result else "NOT_CLASSIFIABLE"
        if verbose or status != "correct":
            print(f"  [{indicator:>12}] {referer[:55]:<55} → {actual}")

    total = len(BENCHMARK_REFERERS)
    accuracy = (total - failures) / total * 100
    print(f"\n  Accuracy: {total - failures}/{total} ({accuracy:.0f}%)")

    print(f"\n{'='*60}")
    print(f"Throughput ({iterations} iterations)")
    print(f"{'='*60}")

    referers = [expected[0] for expected in BENCHMARK_REFERERS]
    start = time.monotonic()
    for _ in range(iterations):
        for referer in referers:
            parser.parse(referer)
    elapsed = time.monotonic() - start

    calls = iterations * len(referers)
    print(f"  Total time:  {elapsed:.2f}s")
    print(f"  Per referer: {elapsed / calls * 1e6:.1f}µs")
    print(f"  Referers/s:  {calls / elapsed:,.0f}" if elapsed > 0 else "  Referers/s:  n/a")

    return failures == 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark referer classification")
    parser.add_argument(
        "--dataset",
        type=Path,
        default=None,
        help="Path to a referers JSON dataset (default: bundled dataset)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=1000,
        help="Number of passes over the benchmark referers for timing",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show every result, not only failures",
    )
    args = parser.parse_args()

    try:
        if args.dataset:
            referer_parser = Parser.from_file(args.dataset)
        else:
            referer_parser = Parser.from_default()
    except CorruptReferersError as e:
        print(f"Failed to load dataset: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Loaded {len(referer_parser.referers)} referer entries")

    if not run_benchmark(referer_parser, args.iterations, verbose=args.verbose):
        sys.exit(1)


if __name__ == "__main__":
    main()
