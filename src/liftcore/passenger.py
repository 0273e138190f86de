from __future__ import annotations

from dataclasses import dataclass

from .enums import Direction


@dataclass(frozen=True)
class Passenger:
    """A single journey from ``origin`` to ``destination``."""

    passenger_id: int
    origin: int
    destination: int

    @property
    def direction(self) -> Direction:
        if self.destination > self.origin:
            return Direction.UP
        if self.destination < self.origin:
            return Direction.DOWN
        return Direction.STOPPED

    def __str__(self) -> str:
        return f"Person {self.passenger_id} from floor {self.origin} to floor {self.destination}"
