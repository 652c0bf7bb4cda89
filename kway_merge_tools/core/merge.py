"""
Lazy k-way merge of sorted iterables.

``merge()`` is interchangeable with ``heapq.merge``: it takes the same
arguments and produces the same output. Instead of a heap of
``(key, index, item)`` tuples it keeps a tournament tree
(see ``kway_merge_tools.core.tree``), so items are never wrapped, source
indexes are never compared, and each pull costs at most one ``<`` per tree
level.

    >>> list(merge([1, 3, 5, 7], [0, 2, 4, 8], [5, 10, 15, 20], [], [25]))
    [0, 1, 2, 3, 4, 5, 5, 7, 8, 10, 15, 20, 25]

    >>> list(merge(['dog', 'horse'], ['cat', 'fish', 'kangaroo'], key=len))
    ['dog', 'cat', 'fish', 'horse', 'kangaroo']

    >>> list(merge([7, 5, 3, 1], [8, 4, 2, 0], reverse=True))
    [8, 7, 5, 4, 3, 2, 1, 0]
"""

from typing import Any, Callable, Iterable, Optional

from .tree import TournamentTree

UNBUILT = "unbuilt"
ACTIVE = "active"
EXHAUSTED = "exhausted"


class MergeIterator:
    """
    Single-pass iterator over the merge of several sorted iterables.

    Lifecycle:

        unbuilt    - nothing has been pulled yet; the first ``next()`` builds
                     the tree.
        active     - the tree is built; each ``next()`` replays the last
                     winner's path.
        exhausted  - terminal. Reached when all sources run dry or when a
                     source, the key function or a comparison raises
                     anything, KeyboardInterrupt included. Every later
                     ``next()`` raises StopIteration; an earlier error is
                     not raised again.
    """

    __slots__ = ("_iterables", "_key", "_reverse", "_tree", "_state")

    def __init__(
        self,
        *iterables: Iterable[Any],
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ):
        self._tree = None
        self._reverse = bool(reverse)
        if iterables:
            self._iterables = iterables
            self._key = key
            self._state = UNBUILT
        else:
            self._iterables = None
            self._key = None
            self._state = EXHAUSTED

    @property
    def state(self) -> str:
        """Current lifecycle state: 'unbuilt', 'active' or 'exhausted'."""
        return self._state

    @property
    def reverse(self) -> bool:
        return self._reverse

    def __iter__(self):
        return self

    def __next__(self):
        if self._state == UNBUILT:
            try:
                tree = TournamentTree.build(self._iterables, self._key, self._reverse)
            except BaseException:
                self._finish()
                raise
            if tree is None:
                self._finish()
                raise StopIteration
            self._tree = tree
            self._iterables = self._key = None
            self._state = ACTIVE

        elif self._state == ACTIVE:
            try:
                alive = self._tree.replay()
            except BaseException:
                self._finish()
                raise
            if not alive:
                self._finish()
                raise StopIteration

        else:
            raise StopIteration

        return self._tree.pop_winner()

    def _finish(self):
        """Enter the terminal state and release the tree and its sources."""
        self._state = EXHAUSTED
        self._tree = None
        self._iterables = None
        self._key = None

    def __repr__(self):
        return f"<{type(self).__name__} state={self._state} reverse={self._reverse}>"


def merge(
    *iterables: Iterable[Any],
    key: Optional[Callable[[Any], Any]] = None,
    reverse: bool = False,
) -> MergeIterator:
    """
    Merge multiple sorted inputs into a single sorted output.

    Similar to ``sorted(itertools.chain(*iterables))`` but returns an
    iterator, does not pull the data into memory all at once, and assumes that
    each of the input streams is already sorted (smallest to largest, or
    largest to smallest when ``reverse`` is true).

    Args:
        *iterables: Sorted input iterables. Empty ones are skipped.
        key: Optional key function applied to each item for comparison.
            Never called if only one source has items.
        reverse: Inputs are sorted in descending order.

    Returns:
        MergeIterator: Lazy, single-pass iterator of merged items. Items with
        equal keys are produced in the order of the sources they came from.
    """
    return MergeIterator(*iterables, key=key, reverse=reverse)
