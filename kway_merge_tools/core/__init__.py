"""Core module - Tournament tree k-way merge engine."""

from .merge import MergeIterator, merge
from .tree import TournamentTree

__all__ = ["merge", "MergeIterator", "TournamentTree"]
