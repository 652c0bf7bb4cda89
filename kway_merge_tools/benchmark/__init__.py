"""Benchmark module - Count the comparisons made by merge functions."""

from .compares import CountingInt, comparisons, interleaved, no_overlap, run_benchmark

__all__ = ["CountingInt", "comparisons", "interleaved", "no_overlap", "run_benchmark"]
