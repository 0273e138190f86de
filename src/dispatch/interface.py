from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Lightweight view of an elevator for dispatch decisions.

    ``direction`` is +1 (up), -1 (down) or 0 (stopped).
    """

    elevator_id: int
    position: int
    direction: int
    idle: bool
    load: int
    capacity: int
    rider_destinations: Tuple[int, ...] = ()
    upcoming_stops: Tuple[int, ...] = ()

    @property
    def is_full(self) -> bool:
        return self.load >= self.capacity

    def carries_rider_for(self, floor: int) -> bool:
        return floor in self.rider_destinations


@dataclass(frozen=True)
class HallCall:
    """A button press on ``floor``; ``direction`` is +1 for up, -1 for down."""

    floor: int
    direction: int


class Scheduler(Protocol):
    """Strategy interface for choosing which elevator answers a hall call."""

    def select_elevator(
        self,
        elevator_state: Iterable[ElevatorSnapshot],
        call: HallCall,
        total_floors: int,
    ) -> Optional[ElevatorSnapshot]:
        """
        Return the elevator that should serve ``call``, or ``None``.

        Implementations receive only in-service elevators and may decline
        every candidate, in which case the call stays queued on its floor.
        """
        ...
