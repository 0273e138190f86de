from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    """Travel or call direction. ``STOPPED`` doubles as "no direction"."""

    UP = "Up"
    DOWN = "Down"
    STOPPED = "Stopped"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Direction":
        key = text.strip().lower()
        aliases = {
            "up": cls.UP,
            "u": cls.UP,
            "down": cls.DOWN,
            "d": cls.DOWN,
            "stopped": cls.STOPPED,
            "s": cls.STOPPED,
        }
        if key not in aliases:
            raise ValueError(f"Invalid direction '{text}'. Use 'up', 'u', 'down', or 'd'.")
        return aliases[key]

    @property
    def is_travel(self) -> bool:
        return self is not Direction.STOPPED

    @property
    def sign(self) -> int:
        """+1 for up, -1 for down, 0 when stopped."""
        if self is Direction.UP:
            return 1
        if self is Direction.DOWN:
            return -1
        return 0


class ElevatorState(str, Enum):
    MOVING = "Moving"
    STOPPED = "Stopped"
    DOORS_OPEN = "DoorsOpen"
    OUT_OF_SERVICE = "OutOfService"

    def __str__(self) -> str:
        return self.value
