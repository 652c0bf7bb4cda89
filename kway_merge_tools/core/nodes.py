"""
Tournament tree nodes.

A tree is made of two node kinds:

    Leaf      - owns one source iterator, the item most recently pulled from
                it and that item's sort key.
    Internal  - owns two children and remembers which descendant leaf is
                currently winning its subtree.

Ownership only points downwards. The ``parent`` back-reference is a
``weakref.ref`` so a tree never forms a reference cycle, and dropping the root
releases every node, source and pending item immediately.

Internal nodes never store a key of their own: ``winner_key`` is read through
``winner_leaf``, so the only key object in the tree for a given item is the
one held by its leaf.
"""

import weakref
from typing import Any, Iterator, Optional, Union


class _Node:
    """Shared parent handling for both node kinds."""

    __slots__ = ("_parent", "__weakref__")

    is_leaf = False

    def __init__(self):
        self._parent = None

    @property
    def parent(self) -> Optional["Internal"]:
        """Enclosing internal node, or None at the root."""
        if self._parent is None:
            return None
        return self._parent()

    @parent.setter
    def parent(self, node: Optional["Internal"]):
        self._parent = None if node is None else weakref.ref(node)


class Leaf(_Node):
    """Wraps one source iterator and its current front item."""

    __slots__ = ("source", "item", "key")

    is_leaf = True

    def __init__(self, source: Iterator[Any], item: Any, key: Any = None):
        super().__init__()
        self.source = source
        self.item = item
        self.key = key

    @property
    def winner_leaf(self) -> "Leaf":
        # A leaf always wins its own one-node subtree.
        return self

    @property
    def winner_key(self) -> Any:
        return self.key

    def pop_item(self) -> Any:
        """
        Hand out the pending item.

        Clears both the item and its key so the leaf holds no stale
        reference while it waits to be refilled.
        """
        item = self.item
        self.item = None
        self.key = None
        return item

    def __repr__(self):
        return f"Leaf(item={self.item!r}, key={self.key!r})"


class Internal(_Node):
    """Joins two subtrees and caches which leaf currently wins among them."""

    __slots__ = ("left", "right", "winner_leaf")

    def __init__(self, left: "Node", right: "Node", winner: "Node"):
        super().__init__()
        self.left = left
        self.right = right
        # Always a descendant, so this strong reference points downwards.
        self.winner_leaf = winner.winner_leaf
        left.parent = self
        right.parent = self

    @property
    def winner_key(self) -> Any:
        return self.winner_leaf.key

    def sibling_of(self, child: "Node") -> "Node":
        """Return the other child of this node."""
        if child is self.left:
            return self.right
        if child is self.right:
            return self.left
        raise ValueError("node is not a child of this internal node")

    def replace_child(self, old: "Node", new: "Node"):
        """Put ``new`` in the slot currently held by ``old``."""
        if old is self.left:
            self.left = new
        elif old is self.right:
            self.right = new
        else:
            raise ValueError("node is not a child of this internal node")
        new.parent = self

    def __repr__(self):
        return f"Internal(winner={self.winner_leaf!r})"


Node = Union[Leaf, Internal]
