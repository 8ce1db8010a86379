from __future__ import annotations


class IdAllocator:
    """Hands out strictly increasing node ids; ids are never handed out twice."""

    def __init__(self, start: int = 0):
        self._next = start

    def allocate(self) -> int:
        node_id = self._next
        self._next += 1
        return node_id

    def reserve(self, node_id: int) -> None:
        if node_id >= self._next:
            self._next = node_id + 1

    def peek(self) -> int:
        return self._next
