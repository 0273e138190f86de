from __future__ import annotations

import logging
from typing import List, Optional

from .config import UNSET, BuildingConfig
from .elevator import Elevator
from .floor import Floor
from .ids import IdSequence

logger = logging.getLogger(__name__)


class StartingFloorNotSetError(RuntimeError):
    """Raised when an elevator is requested before any starting floor is known."""


class FloorFactory:
    def __init__(self, config: Optional[BuildingConfig] = None) -> None:
        config = config or BuildingConfig()
        self._number_of_floors = config.number_of_floors

    @property
    def number_of_floors(self) -> int:
        return self._number_of_floors

    def set_number_of_floors(self, number_of_floors: int) -> None:
        if number_of_floors < 1:
            logger.error("Rejected number of floors %d.", number_of_floors)
            raise ValueError("Number of floors must be one or greater.")
        self._number_of_floors = number_of_floors
        logger.info("Number of floors set to %d", number_of_floors)

    def create_floor(self, floor_number: int) -> Floor:
        logger.debug("Creating floor %d", floor_number)
        return Floor(floor_number)

    def create_floors(self) -> List[Floor]:
        """Floors are numbered from 1 up to the configured count."""
        if self._number_of_floors < 1:
            raise ValueError("Number of floors is not set.")
        return [self.create_floor(number) for number in range(1, self._number_of_floors + 1)]


class ElevatorFactory:
    """Builds elevators with the configured capacity and starting floor.

    Ids come from ``ids`` so a caller can pin them down; by default each
    factory numbers its elevators from 1. The factory does not know the floor
    count, so it only rejects negative starting floors; whoever builds the
    building checks the floor is between 1 and the number of floors.
    """

    def __init__(self, config: Optional[BuildingConfig] = None, ids: Optional[IdSequence] = None) -> None:
        config = config or BuildingConfig()
        self._max_capacity = config.max_elevator_capacity
        self._default_starting_floor = config.default_starting_floor
        self._number_of_elevators = config.number_of_elevators
        self._ids = ids or IdSequence()

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def default_starting_floor(self) -> int:
        return self._default_starting_floor

    @property
    def number_of_elevators(self) -> int:
        return self._number_of_elevators

    def set_max_capacity(self, capacity: int) -> None:
        if capacity <= 0:
            logger.error("Rejected elevator capacity %d.", capacity)
            raise ValueError("Elevator capacity must be greater than zero.")
        self._max_capacity = capacity
        logger.info("Elevator max capacity set to %d", capacity)

    def set_default_starting_floor(self, floor: int) -> None:
        if floor < 0:
            logger.error("Rejected default starting floor %d.", floor)
            raise ValueError("Default starting floor must be zero or greater.")
        self._default_starting_floor = floor
        logger.info("Default starting floor set to %d", floor)

    def set_number_of_elevators(self, number_of_elevators: int) -> None:
        if number_of_elevators < 1:
            logger.error("Rejected number of elevators %d.", number_of_elevators)
            raise ValueError("Number of elevators must be one or greater.")
        self._number_of_elevators = number_of_elevators
        logger.info("Number of elevators set to %d", number_of_elevators)

    def create_elevator(self, starting_floor: int = UNSET) -> Elevator:
        if starting_floor < 0:
            starting_floor = self._default_starting_floor
            if starting_floor < 0:
                raise StartingFloorNotSetError(
                    "Default starting floor is not set. Please set it before creating an elevator."
                )
        if self._max_capacity <= 0:
            raise ValueError("Elevator capacity is not set.")
        return Elevator(
            elevator_id=self._ids.next_id(),
            max_capacity=self._max_capacity,
            current_floor=starting_floor,
        )

    def create_elevators(self) -> List[Elevator]:
        if self._number_of_elevators < 1:
            raise ValueError("Number of elevators is not set.")
        return [self.create_elevator() for _ in range(self._number_of_elevators)]
