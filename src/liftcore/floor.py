from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from .enums import Direction
from .passenger import Passenger

logger = logging.getLogger(__name__)


@dataclass
class Floor:
    """Represents a floor with directional FIFO queues."""

    number: int
    waiting_up: Deque[Passenger] = field(default_factory=deque)
    waiting_down: Deque[Passenger] = field(default_factory=deque)

    def add_waiting_person(self, passenger: Passenger) -> None:
        if passenger.destination > self.number:
            self.waiting_up.append(passenger)
            logger.info("%s is now waiting on floor %d to go UP.", passenger, self.number)
        elif passenger.destination < self.number:
            self.waiting_down.append(passenger)
            logger.info("%s is now waiting on floor %d to go DOWN.", passenger, self.number)
        else:
            logger.debug("%s is already at floor %d; not queued.", passenger, self.number)

    def return_waiting_person(self, passenger: Passenger) -> None:
        """Put back a passenger that could not board, ahead of later arrivals."""
        queue = self._queue_for(passenger.direction)
        if queue is None:
            return
        queue.appendleft(passenger)
        logger.debug("%s returned to the head of floor %d queue.", passenger, self.number)

    def get_next_waiting_person(self, direction: Direction) -> Optional[Passenger]:
        queue = self._queue_for(direction)
        if not queue:
            return None
        return queue.popleft()

    def waiting_count(self, direction: Direction) -> int:
        queue = self._queue_for(direction)
        return len(queue) if queue is not None else 0

    def has_waiting(self) -> bool:
        return bool(self.waiting_up or self.waiting_down)

    def _queue_for(self, direction: Direction) -> Optional[Deque[Passenger]]:
        if direction is Direction.UP:
            return self.waiting_up
        if direction is Direction.DOWN:
            return self.waiting_down
        return None

    def __len__(self) -> int:  # pragma: no cover - convenience
        return len(self.waiting_up) + len(self.waiting_down)

    def __str__(self) -> str:
        return (
            f"Floor {self.number}: Waiting Up: {len(self.waiting_up)}, "
            f"Waiting Down: {len(self.waiting_down)}"
        )
