"""Detection of holes in the entry indexes of each raft group."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

__all__ = ["ConsistencyChecker"]


class ConsistencyChecker:
    """Scans a log queue for gaps between consecutive entry indexes.

    ``replay`` takes ``(raft_group_id, indexes)`` pairs in log order, where
    ``indexes`` lists the entry indexes of one item (empty for items that
    carry no entries). ``finish`` returns the corrupted groups mapped to
    their last valid index.
    """

    def __init__(self) -> None:
        self._raft_groups: dict[int, tuple[int, int]] = {}
        self._corrupted: dict[int, int] = {}

    def replay(self, items: Iterable[tuple[int, Sequence[int]]], file_id: Any) -> None:
        """Feed the items of one log batch read from ``file_id``."""
        for raft_group_id, indexes in items:
            if not indexes:
                continue
            first, last = indexes[0], indexes[-1]
            known_first, known_last = self._raft_groups.get(raft_group_id, (first, last))
            if known_last + 1 < first:
                self._corrupted.setdefault(raft_group_id, known_last)
            self._raft_groups[raft_group_id] = (known_first, last)

    def merge(self, other: ConsistencyChecker, queue: Any) -> None:
        """Append the state of ``other``, which scanned later files."""
        corrupted_between: dict[int, int] = {}
        for raft_group_id, (first, last) in other._raft_groups.items():
            existing = self._raft_groups.get(raft_group_id)
            if existing is None:
                self._raft_groups[raft_group_id] = (first, last)
                continue
            known_first, known_last = existing
            if known_last + 1 < first:
                corrupted_between[raft_group_id] = known_last
            self._raft_groups[raft_group_id] = (known_first, last)
        other._raft_groups = {}
        for raft_group_id, last_index in corrupted_between.items():
            self._corrupted.setdefault(raft_group_id, last_index)
        for raft_group_id, last_index in other._corrupted.items():
            self._corrupted.setdefault(raft_group_id, last_index)
        other._corrupted = {}

    def finish(self) -> dict[int, int]:
        """Return corrupted raft group ids mapped to their last valid index."""
        return dict(self._corrupted)