#!/usr/bin/env python3
"""
Merge Compare - Count the comparisons made by k-way merge functions

Runs each merge function over two standard data sets of CountingInt values
and reports how many times ``<`` and ``==`` were called:

    No overlap   - sources hold consecutive blocks (0..999), (1000..1999), ...
                   so one source wins for a long stretch at a time.
    Interleaved  - sources hold round-robin values (0,16,32,...),
                   (1,17,33,...), ... so the winner changes on every pull.

Usage Examples:
    # Default: 16 sources of 1000 items each
    merge-compare

    # More sources, shorter runs
    merge-compare --sources 64 --size 250
"""

import argparse
import heapq
import sys
from typing import Callable, Iterable, List, Tuple

from kway_merge_tools.core.merge import merge


class CountingInt(int):
    """int that counts every ``<`` and ``==`` made on any instance."""

    lt = 0
    eq = 0

    def __lt__(self, other):
        CountingInt.lt += 1
        return int.__lt__(self, other)

    def __eq__(self, other):
        CountingInt.eq += 1
        return int.__eq__(self, other)

    __hash__ = int.__hash__

    @classmethod
    def reset(cls):
        cls.lt = cls.eq = 0


def comparisons(mergefunc: Callable, iterables: Iterable[Iterable]) -> Tuple[int, int]:
    """
    Drain ``mergefunc(*iterables)`` and count the comparisons it made.

    Returns:
        tuple: (lt_count, eq_count)
    """
    CountingInt.reset()
    for _ in mergefunc(*iterables):
        pass
    return CountingInt.lt, CountingInt.eq


def no_overlap(sources: int = 16, size: int = 1000) -> List[List[CountingInt]]:
    """Sources holding consecutive, non-overlapping blocks of values."""
    return [
        [CountingInt(x) for x in range(start, start + size)]
        for start in range(0, sources * size, size)
    ]


def interleaved(sources: int = 16, size: int = 1000) -> List[List[CountingInt]]:
    """Sources holding values dealt round-robin."""
    return [
        [CountingInt(x) for x in range(start, sources * size, sources)]
        for start in range(sources)
    ]


MERGE_FUNCTIONS = [
    ("heapq.merge", heapq.merge),
    ("kway_merge_tools.merge", merge),
]


def run_benchmark(mergefuncs=None, sources: int = 16, size: int = 1000):
    """
    Count comparisons for every merge function on both data sets.

    Args:
        mergefuncs: List of (name, function) pairs (default: heapq.merge and
            the tournament tree merge)
        sources: Number of input sources
        size: Items per source

    Returns:
        list: One (name, dataset, lt_count, eq_count) row per run
    """
    if sources < 1 or size < 1:
        raise ValueError("sources and size must be >= 1")

    rows = []
    for name, func in mergefuncs or MERGE_FUNCTIONS:
        for dataset, build in (("No overlap", no_overlap), ("Interleaved", interleaved)):
            lt, eq = comparisons(func, build(sources, size))
            rows.append((name, dataset, lt, eq))
    return rows


def main(argv=None):
    """Main entry point for merge-compare command."""
    parser = argparse.ArgumentParser(
        description="Count comparisons made by heapq.merge and the tournament tree merge",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n  merge-compare\n  merge-compare --sources 64 --size 250",
    )
    parser.add_argument(
        "--sources", type=int, default=16, help="Number of sorted sources (default: 16)"
    )
    parser.add_argument("--size", type=int, default=1000, help="Items per source (default: 1000)")
    args = parser.parse_args(argv)

    try:
        rows = run_benchmark(sources=args.sources, size=args.size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    current = None
    for name, dataset, lt, eq in rows:
        if name != current:
            if current is not None:
                print()
            print(f"==== {name} ====")
            current = name
        print(f"{dataset}: {lt:,} lt; {eq:,} eq")


if __name__ == "__main__":
    main()
