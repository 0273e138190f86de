from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .enums import Direction, ElevatorState
from .passenger import Passenger
from .transitions import (
    Arrived,
    CarState,
    DoorsClosed,
    Effect,
    Moved,
    Pickup,
    Unloaded,
    WentIdle,
    advance,
    unload,
)

logger = logging.getLogger(__name__)


@dataclass
class Elevator:
    """A single car: its position, riders and the stops it still owes."""

    elevator_id: int
    max_capacity: int
    current_floor: int = 1
    direction: Direction = Direction.STOPPED
    state: ElevatorState = ElevatorState.STOPPED
    passengers: List[Passenger] = field(default_factory=list)
    drop_off_floors: Set[int] = field(default_factory=set)
    assigned_pickups: Set[Pickup] = field(default_factory=set)
    travel_direction: Direction = Direction.STOPPED
    fault_reason: Optional[str] = None

    def __post_init__(self) -> None:
        logger.info(
            "Elevator E%d created at F%d, Capacity: %d.",
            self.elevator_id,
            self.current_floor,
            self.max_capacity,
        )

    @property
    def all_upcoming_stops(self) -> Tuple[int, ...]:
        return self.car_state().upcoming_stops

    def in_service(self) -> bool:
        return self.state is not ElevatorState.OUT_OF_SERVICE

    def is_idle(self) -> bool:
        return self.state is ElevatorState.STOPPED and self.direction is Direction.STOPPED

    def add_destination(self, floor: int, call_direction: Direction = Direction.STOPPED) -> None:
        """Register a stop. A travel direction makes it a pickup, otherwise a drop-off."""
        if call_direction.is_travel:
            pickup = Pickup(floor, call_direction)
            if pickup in self.assigned_pickups:
                return
            self.assigned_pickups.add(pickup)
            logger.info(
                "E%d: Pickup request added for F%d (%s). AssignedPickups: [%s]",
                self.elevator_id,
                floor,
                call_direction,
                ";".join(f"F{p.floor}-{p.direction}" for p in self._sorted_pickups()),
            )
            return

        if floor in self.drop_off_floors:
            return
        self.drop_off_floors.add(floor)
        logger.info(
            "E%d: Destination F%d added to drop-off list. DropOffs: [%s]",
            self.elevator_id,
            floor,
            ",".join(str(f) for f in sorted(self.drop_off_floors)),
        )

    def add_passenger(self, passenger: Passenger) -> bool:
        if len(self.passengers) >= self.max_capacity:
            logger.warning(
                "E%d: Cannot board P%d at F%d. Capacity full (%d/%d).",
                self.elevator_id,
                passenger.passenger_id,
                self.current_floor,
                len(self.passengers),
                self.max_capacity,
            )
            return False
        self.passengers.append(passenger)
        self.drop_off_floors.add(passenger.destination)
        logger.info(
            "E%d: P%d (O:%d->D:%d) boarded at F%d. Pax: %d/%d.",
            self.elevator_id,
            passenger.passenger_id,
            passenger.origin,
            passenger.destination,
            self.current_floor,
            len(self.passengers),
            self.max_capacity,
        )
        return True

    def unload_passengers(self) -> List[Passenger]:
        car, unloaded = unload(self.car_state())
        self._apply(car)
        if unloaded is None:
            return []
        self._log_effect(unloaded)
        return list(unloaded.passengers)

    def step(self) -> None:
        if not self.in_service():
            logger.debug("E%d: Out of service, skipping step.", self.elevator_id)
            return
        try:
            logger.debug(
                "E%d: Step BEGIN. F%d, St:%s, Dir:%s, Pax:%d, AllStops:[%s]",
                self.elevator_id,
                self.current_floor,
                self.state,
                self.direction,
                len(self.passengers),
                ",".join(str(f) for f in self.all_upcoming_stops),
            )
            transition = advance(self.car_state())
            self._apply(transition.state)
            for effect in transition.effects:
                self._log_effect(effect)
        except Exception:
            logger.exception("E%d: Error during step; taking elevator out of service.", self.elevator_id)
            self.state = ElevatorState.OUT_OF_SERVICE
            self.direction = Direction.STOPPED
            self.fault_reason = "step failure"

    def trigger_fault(self, reason: Optional[str] = None) -> List[Pickup]:
        """Take the car out of service and hand back the pickups it can no longer serve."""
        released = self._sorted_pickups()
        self.state = ElevatorState.OUT_OF_SERVICE
        self.direction = Direction.STOPPED
        self.fault_reason = reason
        self.assigned_pickups.clear()
        logger.warning("E%d: Out of service (%s).", self.elevator_id, reason or "no reason given")
        return released

    def release_pickups(self) -> List[Pickup]:
        released = self._sorted_pickups()
        self.assigned_pickups.clear()
        return released

    def car_state(self) -> CarState:
        return CarState(
            floor=self.current_floor,
            direction=self.direction,
            state=self.state,
            travel_direction=self.travel_direction,
            riders=tuple(self.passengers),
            drop_offs=frozenset(self.drop_off_floors),
            pickups=frozenset(self.assigned_pickups),
        )

    def _apply(self, car: CarState) -> None:
        self.current_floor = car.floor
        self.direction = car.direction
        self.state = car.state
        self.travel_direction = car.travel_direction
        self.passengers = list(car.riders)
        self.drop_off_floors = set(car.drop_offs)
        self.assigned_pickups = set(car.pickups)

    def _sorted_pickups(self) -> List[Pickup]:
        return sorted(self.assigned_pickups, key=lambda p: (p.floor, p.direction.value))

    def _log_effect(self, effect: Effect) -> None:
        if isinstance(effect, Unloaded):
            logger.info(
                "E%d: Unloaded %d passenger(s) at F%d: %s",
                self.elevator_id,
                len(effect.passengers),
                effect.floor,
                ", ".join(f"P{p.passenger_id}" for p in effect.passengers),
            )
        elif isinstance(effect, DoorsClosed):
            logger.info("E%d: Closing doors at F%d.", self.elevator_id, effect.floor)
        elif isinstance(effect, Moved):
            logger.info(
                "E%d: Moving %s to F%d. Overall target: F%d",
                self.elevator_id,
                effect.direction,
                effect.to_floor,
                effect.target,
            )
        elif isinstance(effect, Arrived):
            logger.info(
                "E%d: Arrived at F%d (travelled %s). Doors open.",
                self.elevator_id,
                effect.floor,
                effect.travel_direction,
            )
            for pickup in effect.cleared:
                logger.info(
                    "E%d: Serviced pickup F%d-%s. Pickups left: %d",
                    self.elevator_id,
                    pickup.floor,
                    pickup.direction,
                    len(self.assigned_pickups),
                )
        elif isinstance(effect, WentIdle):
            if effect.was_moving:
                logger.info("E%d: No more stops. Stopped at F%d.", self.elevator_id, effect.floor)
            else:
                logger.debug("E%d: Idle at F%d.", self.elevator_id, effect.floor)

    def __str__(self) -> str:
        stops = ",".join(str(floor) for floor in self.all_upcoming_stops)
        return (
            f"Elevator E{self.elevator_id}: F{self.current_floor}, Dir:{self.direction}, "
            f"St:{self.state}, Pax:{len(self.passengers)}/{self.max_capacity}, Stops:[{stops}]"
        )
