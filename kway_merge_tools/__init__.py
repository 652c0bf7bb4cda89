"""
K-Way Merge Tools

A Python package for merging already-sorted streams.
Provides a tournament tree merge that is a drop-in replacement for
heapq.merge, a tool for merging large sorted text files (such as flat CDXJ
indexes), and a benchmark counting the comparisons each merge performs.

Modules:
    core: Tournament tree merge engine (merge, MergeIterator)
    files: Merging sorted files line by line, line key functions
    benchmark: Comparison counting against heapq.merge
"""

__version__ = "1.0.0"

from .core.merge import MergeIterator, merge
from .files.merge_sorted_files import get_all_files, merge_sorted_files

__all__ = [
    "merge",
    "MergeIterator",
    "merge_sorted_files",
    "get_all_files",
    "__version__",
]
