"""
Tournament tree construction and replay.

Algorithm
=========

Every non-empty source becomes a Leaf. Adjacent nodes are paired left to
right under a new Internal node that records the winner of the two; an odd
node at the end of a level is carried up unpaired. Repeating this until one
node is left gives a balanced tree whose root knows the overall winner.

After the root's winner item is handed out, only that winner's leaf changes.
A replay therefore:

    1. Pulls the next item from that leaf's source.
    2. If the source is exhausted, splices the leaf out of the tree: its
       sibling takes the parent's slot and the parent wrapper is dropped.
    3. Walks from the changed node up to the root and re-decides the winner
       at each ancestor between its two immediate children.

Nodes off that path keep their cached winners, which is what bounds each pull
to one comparison per tree level.

Comparison rule
===============

Ascending:  the right candidate wins only if ``right.key < left.key``.
Descending: the right candidate wins only if ``left.key < right.key``.

In both modes equal keys go to the left candidate. Pairing never reorders
nodes, so "left" always means "from an earlier source" and ties come out in
source order.
"""

from typing import Any, Callable, Iterable, List, Optional

from .nodes import Internal, Leaf, Node

KeyFunc = Optional[Callable[[Any], Any]]

# Marks an exhausted source without colliding with any real item.
_EXHAUSTED = object()


def right_wins(left: Node, right: Node, reverse: bool = False) -> bool:
    """
    Decide a single game between two candidates.

    Only ``<`` is called on keys. Any exception raised by the comparison
    propagates to the caller untouched.
    """
    if reverse:
        return bool(left.winner_key < right.winner_key)
    return bool(right.winner_key < left.winner_key)


def make_leaves(iterables: Iterable[Iterable[Any]]) -> List[Leaf]:
    """
    Pull the first item of every source and wrap the non-empty ones in leaves.

    Sources that are already exhausted are dropped. Keys are left unset; the
    caller fills them in once it knows whether keys are needed at all.
    """
    leaves = []
    for iterable in iterables:
        source = iter(iterable)
        item = next(source, _EXHAUSTED)
        if item is _EXHAUSTED:
            continue
        leaves.append(Leaf(source, item))
    return leaves


def pair_nodes(nodes: List[Node], reverse: bool = False) -> List[Node]:
    """Build one tree level: join adjacent pairs, carry a trailing odd node."""
    paired = []
    for i in range(0, len(nodes) - 1, 2):
        left, right = nodes[i], nodes[i + 1]
        winner = right if right_wins(left, right, reverse) else left
        paired.append(Internal(left, right, winner))
    if len(nodes) % 2:
        paired.append(nodes[-1])
    return paired


class TournamentTree:
    """
    Owner of a built tournament tree.

    Holds the root, the key function (dropped once a single source remains)
    and the ordering direction. Use ``TournamentTree.build()`` to create one.
    """

    __slots__ = ("root", "key", "reverse")

    def __init__(self, root: Node, key: KeyFunc = None, reverse: bool = False):
        self.root = root
        self.key = key
        self.reverse = reverse

    @classmethod
    def build(
        cls, iterables: Iterable[Iterable[Any]], key: KeyFunc = None, reverse: bool = False
    ) -> Optional["TournamentTree"]:
        """
        Build the initial tree over all non-empty sources.

        Returns None if every source is empty. With a single non-empty source
        the key function is discarded without ever being called.
        """
        nodes = make_leaves(iterables)
        if not nodes:
            return None

        if len(nodes) == 1:
            key = None

        for leaf in nodes:
            leaf.key = leaf.item if key is None else key(leaf.item)

        while len(nodes) > 1:
            nodes = pair_nodes(nodes, reverse)

        return cls(nodes[0], key, reverse)

    @property
    def winner(self) -> Leaf:
        """Leaf holding the next item to hand out."""
        return self.root.winner_leaf

    def pop_winner(self) -> Any:
        """Take the winning item out of its leaf."""
        return self.root.winner_leaf.pop_item()

    def refill(self, leaf: Leaf) -> bool:
        """
        Pull the next item into ``leaf``.

        Returns False if its source is exhausted. Errors raised by the source
        or the key function propagate.
        """
        item = next(leaf.source, _EXHAUSTED)
        if item is _EXHAUSTED:
            return False
        leaf.key = item if self.key is None else self.key(item)
        leaf.item = item
        return True

    def splice_out(self, leaf: Leaf) -> Optional[Node]:
        """
        Remove an exhausted leaf from the tree.

        The leaf's sibling takes over the slot of their common parent, which
        is discarded together with the leaf. Returns the promoted sibling, or
        None if the leaf was the root (the tree is now empty).
        """
        parent = leaf.parent
        if parent is None:
            self.root = None
            return None

        sibling = parent.sibling_of(leaf)
        grandparent = parent.parent
        if grandparent is None:
            sibling.parent = None
            self.root = sibling
        else:
            grandparent.replace_child(parent, sibling)

        parent.left = parent.right = parent.winner_leaf = None
        leaf.source = None
        return sibling

    def replay_games(self, node: Node):
        """
        Re-decide the winner at every ancestor of ``node``.

        Only the path from ``node`` to the root is visited. A failing
        comparison propagates before the ancestor it concerns is updated.
        """
        root = self.root
        reverse = self.reverse
        while node is not root:
            node = node.parent
            left, right = node.left, node.right
            winner = right if right_wins(left, right, reverse) else left
            node.winner_leaf = winner.winner_leaf

    def replay(self) -> bool:
        """
        Restore the tree after the winner's item has been popped.

        Returns False once every source is exhausted.
        """
        node = self.root.winner_leaf
        if not self.refill(node):
            node = self.splice_out(node)
            if node is None:
                return False
            if self.root.is_leaf:
                # Nothing left to compare against.
                self.key = None
        self.replay_games(node)
        return True

    def depth(self) -> int:
        """Number of levels below the root (0 for a lone leaf)."""

        def _depth(node):
            if node.is_leaf:
                return 0
            return 1 + max(_depth(node.left), _depth(node.right))

        return _depth(self.root) if self.root is not None else 0

    def leaves(self) -> List[Leaf]:
        """Leaves in left-to-right (source) order."""
        result = []
        stack = [self.root] if self.root is not None else []
        while stack:
            node = stack.pop()
            if node.is_leaf:
                result.append(node)
            else:
                stack.append(node.right)
                stack.append(node.left)
        return result
