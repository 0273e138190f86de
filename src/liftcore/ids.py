from __future__ import annotations


class IdSequence:
    """Monotonic id source handed to whoever creates passengers or elevators."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        return self._next
