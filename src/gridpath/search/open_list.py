"""Open list: min-priority queue of frontier nodes keyed by f."""

from __future__ import annotations

import heapq
import itertools

from gridpath.grid.node import Node

_REMOVED = None


class OpenList:
    """Binary heap of nodes ordered by ascending ``f``.

    Entries are ``[f, counter, node]``. The counter is taken from a
    monotonic sequence at every push or reposition, so nodes with equal f
    pop in the order they were last keyed. This FIFO order is the fallback
    tie-break whenever tie resolution leaves two candidates equal.

    Repositioning is lazy: the stale entry is tombstoned and a fresh one
    pushed, as in the ``heapq`` documentation's priority queue recipe.
    """

    def __init__(self) -> None:
        self._heap: list[list] = []
        self._entries: dict[Node, list] = {}
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, node: Node) -> bool:
        return node in self._entries

    def is_empty(self) -> bool:
        return not self._entries

    def push(self, node: Node) -> None:
        if node in self._entries:
            self.update_item(node)
            return
        entry = [node.f, next(self._counter), node]
        self._entries[node] = entry
        heapq.heappush(self._heap, entry)

    def update_item(self, node: Node) -> None:
        """Reposition ``node`` after its f changed; no-op when the key is unchanged."""
        entry = self._entries.get(node)
        if entry is None:
            raise ValueError(f"Node ({node.x}, {node.y}) is not in the open list")
        if entry[0] == node.f:
            return
        entry[-1] = _REMOVED
        fresh = [node.f, next(self._counter), node]
        self._entries[node] = fresh
        heapq.heappush(self._heap, fresh)

    def pop_min(self) -> Node:
        while self._heap:
            _, _, node = heapq.heappop(self._heap)
            if node is not _REMOVED:
                del self._entries[node]
                return node
        raise IndexError("pop from an empty open list")
