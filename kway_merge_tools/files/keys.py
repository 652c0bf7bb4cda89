"""
Key functions for merging sorted text files line by line.

By default lines are merged on their full text, which is the order produced
by ``sort`` with ``LC_ALL=C`` and the order flat CDXJ files are kept in. The
helpers here build keys for files sorted on a single column instead:

    field_key(1)        - second whitespace-separated field
    field_key(0, "\\t")  - first tab-separated field
    surt_key(0)         - SURT form of a URL in the first field

Example SURT ordering:
    http://www.publico.pt/economia  ->  pt,publico)/economia
    http://sapo.pt/                 ->  pt,sapo)/
"""

from typing import Callable, Optional

import surt


def _split_field(line: str, index: int, separator: Optional[str]) -> str:
    parts = line.rstrip("\r\n").split(separator)
    if index >= len(parts):
        return ""
    return parts[index]


def field_key(index: int = 0, separator: Optional[str] = None) -> Callable[[str], str]:
    """
    Build a key returning one field of a line.

    Args:
        index: Zero-based field number
        separator: Field separator (default: any run of whitespace)

    Returns:
        Key function. Lines with too few fields sort as an empty field.
    """
    if index < 0:
        raise ValueError(f"Field index must be >= 0, got {index}")

    def key(line: str) -> str:
        return _split_field(line, index, separator)

    return key


def surt_key(index: int = 0, separator: Optional[str] = None) -> Callable[[str], str]:
    """
    Build a key returning the SURT form of a URL field.

    Useful for files of raw URLs (or URL-first records) that were sorted by
    their SURT, so that the merge sees the same ordering.

    Args:
        index: Zero-based field number holding the URL
        separator: Field separator (default: any run of whitespace)

    Returns:
        Key function. Empty fields map to an empty key.
    """
    if index < 0:
        raise ValueError(f"Field index must be >= 0, got {index}")

    def key(line: str) -> str:
        url = _split_field(line, index, separator)
        if not url:
            return ""
        return surt.surt(url)

    return key


def build_line_key(
    key_field: Optional[int] = None, separator: Optional[str] = None, use_surt: bool = False
) -> Optional[Callable[[str], str]]:
    """
    Pick the key function matching command-line options.

    Returns None (merge on the whole line) when neither a field nor SURT
    conversion is requested.
    """
    if use_surt:
        return surt_key(key_field or 0, separator)
    if key_field is None:
        return None
    return field_key(key_field, separator)
