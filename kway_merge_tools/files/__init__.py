"""Files module - Tools for merging multiple sorted text files."""

from .keys import build_line_key, field_key, surt_key
from .merge_sorted_files import get_all_files, merge_sorted_files

__all__ = ["merge_sorted_files", "get_all_files", "field_key", "surt_key", "build_line_key"]
