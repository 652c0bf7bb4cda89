#!/usr/bin/env python3
"""
Merge Sorted Files - Tournament tree k-way merge for large sorted text files

This script merges multiple sorted files (flat CDXJ indexes, logs, URL lists)
into a single sorted output file. Lines are read one at a time from every
input and combined through a tournament tree, so memory use stays at one
line per input file regardless of file sizes.

Usage Examples:
    # Merge two sorted files to output file
    merge-sorted-files output.cdxj file1.cdxj file2.cdxj

    # Merge all files from directories (recursively)
    merge-sorted-files output.cdxj /path/to/dir1 /path/to/dir2

    # Skip files still being written
    merge-sorted-files output.cdxj /data/indexes/ --exclude '*-open.cdxj' -v

    # Output to stdout (use '-' as output filename)
    merge-sorted-files - *.cdxj | gzip > merged.cdxj.gz

    # Files sorted on the second tab-separated column
    merge-sorted-files merged.tsv a.tsv b.tsv --key-field 1 --separator $'\\t'

    # URL lists sorted by SURT
    merge-sorted-files merged.txt urls1.txt urls2.txt --surt

    # Files sorted in descending order
    merge-sorted-files merged.log a.log b.log --reverse

Requirements:
    - All input files must be sorted in the order being merged on
      (whole line, or the chosen field, ascending unless --reverse)
    - Input files should use the same encoding (default: system encoding)

Performance:
    - Time Complexity: O(N log k) where N is total lines, k is number of files
    - At most one comparison per tree level for each line written
    - Memory efficient: only k lines held in memory at once
"""

import argparse
import fnmatch
import os
import sys
from typing import Callable, Iterable, List, Optional

from kway_merge_tools.core.merge import merge
from kway_merge_tools.files.keys import build_line_key


def should_exclude(filename, exclude_patterns):
    """
    Check if a filename matches any exclusion pattern.

    Args:
        filename: Name of the file to check (basename only)
        exclude_patterns: List of glob-style patterns to match against

    Returns:
        tuple: (should_exclude: bool, matched_pattern: str or None)
    """
    if not exclude_patterns:
        return False, None

    basename = os.path.basename(filename)
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(basename, pattern):
            return True, pattern
    return False, None


def log_progress(message, verbose=False):
    """Log progress message to stderr if verbose is enabled."""
    if verbose:
        print(message, file=sys.stderr)


def get_all_files(paths, exclude_patterns=None, verbose=False):
    """
    Recursively collect all files from the given paths, with optional exclusion.

    Args:
        paths: List of file paths or directory paths
        exclude_patterns: List of glob-style patterns for files to exclude (optional)
        verbose: Whether to log progress to stderr (optional)

    Yields:
        str: Path to each file found (excluding those matching patterns)

    Note:
        Directories are walked in sorted order so the same tree always yields
        files in the same order. That order is also the tie-break order of
        the merge: equal lines come out in the order their files were listed.
    """
    found = included = 0

    for path in paths:
        if os.path.isfile(path):
            candidates = [path]
        elif os.path.isdir(path):
            log_progress(f"[DISCOVER] Scanning directory: {path}", verbose)
            candidates = list(_walk_sorted(path))
        else:
            log_progress(f"[WARNING] Path not found: {path}", verbose)
            continue

        kept = [c for c in candidates if _accept(c, exclude_patterns, verbose)]
        found += len(candidates)
        included += len(kept)

        if os.path.isdir(path):
            log_progress(
                f"[DISCOVER] Directory {path}: {len(candidates)} found, "
                f"{len(candidates) - len(kept)} excluded, {len(kept)} included",
                verbose,
            )
        yield from kept

    if found:
        log_progress(
            f"[SUMMARY] Total: {found} found, {found - included} excluded, "
            f"{included} included",
            verbose,
        )


def _walk_sorted(directory: str) -> Iterable[str]:
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            yield os.path.join(root, name)


def _accept(path: str, exclude_patterns, verbose: bool) -> bool:
    name = os.path.basename(path)
    excluded, pattern = should_exclude(name, exclude_patterns)
    if excluded:
        log_progress(f"[EXCLUDE] {name} (matches: {pattern})", verbose)
        return False
    log_progress(f"[INCLUDE] {name}", verbose)
    return True


def _terminated(lines: Iterable[str]) -> Iterable[str]:
    # A last line without a newline would otherwise run into the next one.
    for line in lines:
        if not line.endswith("\n"):
            line += "\n"
        yield line


def merge_sorted_files(
    files: List[str],
    output_file: str,
    buffer_size: int = 1024 * 1024,
    verbose: bool = False,
    key: Optional[Callable[[str], object]] = None,
    reverse: bool = False,
) -> int:
    """
    Merge multiple sorted files into a single sorted output file.

    Args:
        files: List of paths to sorted input files
        output_file: Path where the merged output will be written, or '-' for stdout
        buffer_size: Buffer size in bytes for file I/O operations (default: 1MB)
        verbose: Whether to log progress to stderr (optional)
        key: Optional key function applied to each line (default: whole line)
        reverse: Input files are sorted in descending order

    Returns:
        int: Number of lines written

    Algorithm:
        1. Opens all input files simultaneously
        2. Builds a tournament tree over the first line of every file
        3. Writes the winning line, then pulls the next line from the same
           file and replays only the games that line took part in
        4. Files that run out are removed from the tree
        5. Continues until all files are exhausted
    """
    log_progress(f"[MERGE] Starting merge of {len(files)} files...", verbose)
    lines_written = 0
    file_handles = []

    try:
        for f in files:
            file_handles.append(open(f, "r", buffering=buffer_size))

        merged = merge(*(_terminated(fh) for fh in file_handles), key=key, reverse=reverse)

        if output_file == "-":
            out = sys.stdout
            for line in merged:
                out.write(line)
                lines_written += 1
            out.flush()
        else:
            with open(output_file, "w", buffering=buffer_size) as out:
                for line in merged:
                    out.write(line)
                    lines_written += 1
    finally:
        for fh in file_handles:
            fh.close()

    log_progress(f"[MERGE] Complete: {lines_written} lines written", verbose)
    return lines_written


def main(argv=None):
    """Main entry point for command-line usage."""
    parser = argparse.ArgumentParser(
        description=(
            "Merge N sorted files or directories into one "
            "(tournament tree merge, optimized for large files)."
        ),
        epilog="Examples:\n"
        "  merge-sorted-files output.cdxj file1.cdxj file2.cdxj\n"
        "  merge-sorted-files output.cdxj /data/indexes/ --exclude '*-open.cdxj' -v\n"
        "  merge-sorted-files - *.cdxj --exclude '*-tmp.cdxj' | gzip > merged.cdxj.gz\n"
        "  merge-sorted-files merged.txt urls1.txt urls2.txt --surt",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("output", help="Output file name (use '-' for stdout)")
    parser.add_argument("paths", nargs="+", help="List of sorted input files or directories")
    parser.add_argument(
        "--exclude",
        action="append",
        dest="exclude_patterns",
        metavar="PATTERN",
        help="Exclude files matching glob pattern (can be used multiple times). "
        "Example: --exclude '*-open.cdxj' --exclude '*-tmp.cdxj'",
    )
    parser.add_argument(
        "--key-field",
        type=int,
        metavar="N",
        help="Merge on the Nth field (0-based) instead of the whole line",
    )
    parser.add_argument(
        "--separator",
        metavar="SEP",
        help="Field separator for --key-field/--surt (default: whitespace)",
    )
    parser.add_argument(
        "--surt",
        action="store_true",
        help="Compare the SURT form of the URL field (field 0 unless --key-field is given)",
    )
    parser.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="Input files are sorted in descending order",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=1024 * 1024,
        metavar="BYTES",
        help="I/O buffer size per file in bytes (default: 1048576)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output to stderr (progress, exclusions, statistics)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all stderr output (overrides --verbose)",
    )
    args = parser.parse_args(argv)

    # Determine verbosity (quiet overrides verbose)
    verbose = args.verbose and not args.quiet

    try:
        key = build_line_key(args.key_field, args.separator, args.surt)
    except ValueError as e:
        log_progress(f"[ERROR] {e}", verbose=not args.quiet)
        sys.exit(1)

    files = list(get_all_files(args.paths, args.exclude_patterns, verbose))

    if not files:
        log_progress("[ERROR] No files to merge after applying exclusions", verbose=not args.quiet)
        sys.exit(1)

    try:
        merge_sorted_files(
            files,
            args.output,
            buffer_size=args.buffer_size,
            verbose=verbose,
            key=key,
            reverse=args.reverse,
        )
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except (OSError, ValueError, TypeError) as e:
        log_progress(f"[ERROR] {e}", verbose=not args.quiet)
        sys.exit(1)


if __name__ == "__main__":
    main()
