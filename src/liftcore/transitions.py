"""Pure elevator state machine.

``advance`` takes an immutable :class:`CarState` and returns the state after
one tick together with the effects that happened along the way. It never
touches floors, the building or logging, so every rule of the car can be
checked in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from .enums import Direction, ElevatorState
from .passenger import Passenger


@dataclass(frozen=True)
class Pickup:
    """A hall call assigned to a car: collect riders at ``floor`` heading ``direction``."""

    floor: int
    direction: Direction


@dataclass(frozen=True)
class CarState:
    floor: int
    direction: Direction = Direction.STOPPED
    state: ElevatorState = ElevatorState.STOPPED
    travel_direction: Direction = Direction.STOPPED
    riders: Tuple[Passenger, ...] = ()
    drop_offs: FrozenSet[int] = frozenset()
    pickups: FrozenSet[Pickup] = frozenset()

    @property
    def upcoming_stops(self) -> Tuple[int, ...]:
        stops = set(self.drop_offs)
        stops.update(pickup.floor for pickup in self.pickups)
        return tuple(sorted(stops))


@dataclass(frozen=True)
class Unloaded:
    floor: int
    passengers: Tuple[Passenger, ...]


@dataclass(frozen=True)
class DoorsClosed:
    floor: int


@dataclass(frozen=True)
class Moved:
    from_floor: int
    to_floor: int
    direction: Direction
    target: int


@dataclass(frozen=True)
class Arrived:
    floor: int
    travel_direction: Direction
    cleared: Tuple[Pickup, ...]


@dataclass(frozen=True)
class WentIdle:
    floor: int
    was_moving: bool


Effect = Union[Unloaded, DoorsClosed, Moved, Arrived, WentIdle]


@dataclass(frozen=True)
class Transition:
    state: CarState
    effects: Tuple[Effect, ...] = ()


def next_logical_stop(
    floor: int,
    direction: Direction,
    travel_direction: Direction,
    stops: Iterable[int],
) -> Optional[int]:
    """Pick the next floor to serve using SCAN.

    The car keeps going the way it is heading (or last headed) while stops
    remain on that side, and only then turns around. A car with no direction
    memory heads for the nearest stop, preferring the lower floor on a tie.
    """

    ordered = sorted(set(stops))
    if not ordered:
        return None

    evaluate = direction if direction.is_travel else travel_direction
    if evaluate is Direction.UP:
        ahead = [stop for stop in ordered if stop >= floor]
        if ahead:
            return ahead[0]
        return ordered[-1]
    if evaluate is Direction.DOWN:
        behind = [stop for stop in ordered if stop <= floor]
        if behind:
            return behind[-1]
        return ordered[0]
    return min(ordered, key=lambda stop: (abs(stop - floor), stop))


def unload(car: CarState) -> Tuple[CarState, Optional[Unloaded]]:
    """Let off every rider bound for the current floor while the doors are open."""
    if car.state is not ElevatorState.DOORS_OPEN:
        return car, None
    leaving = tuple(p for p in car.riders if p.destination == car.floor)
    remaining = tuple(p for p in car.riders if p.destination != car.floor)
    updated = replace(car, riders=remaining, drop_offs=car.drop_offs - {car.floor})
    if not leaving:
        return updated, None
    return updated, Unloaded(car.floor, leaving)


def arrive(car: CarState, travelled: Direction) -> Tuple[CarState, Arrived]:
    """Open the doors at the current floor and clear the pickup just served."""
    serviced = Pickup(car.floor, travelled)
    if travelled.is_travel and serviced in car.pickups:
        cleared: Tuple[Pickup, ...] = (serviced,)
    else:
        # Arrived without a matching direction, e.g. an idle car picking the nearest call.
        cleared = tuple(
            sorted(
                (pickup for pickup in car.pickups if pickup.floor == car.floor),
                key=lambda pickup: pickup.direction.value,
            )
        )
    updated = replace(
        car,
        state=ElevatorState.DOORS_OPEN,
        direction=Direction.STOPPED,
        travel_direction=travelled,
        pickups=car.pickups - set(cleared),
    )
    return updated, Arrived(car.floor, travelled, cleared)


def advance(car: CarState) -> Transition:
    """Run one tick of the car: close doors, choose a stop, then move or open.

    Opening the doors also lets off every rider bound for that floor, so the
    loading phase of the same tick sees the freed seats.
    """
    if car.state is ElevatorState.OUT_OF_SERVICE:
        return Transition(car)

    effects: List[Effect] = []
    if car.state is ElevatorState.DOORS_OPEN:
        car, unloaded = unload(car)
        if unloaded is not None:
            effects.append(unloaded)
        car = replace(car, state=ElevatorState.STOPPED)
        effects.append(DoorsClosed(car.floor))

    target = next_logical_stop(car.floor, car.direction, car.travel_direction, car.upcoming_stops)

    if target is None:
        was_moving = car.state is ElevatorState.MOVING
        car = replace(
            car,
            state=ElevatorState.STOPPED,
            direction=Direction.STOPPED,
            travel_direction=Direction.STOPPED,
        )
        effects.append(WentIdle(car.floor, was_moving))
        return Transition(car, tuple(effects))

    if target == car.floor:
        travelled = car.direction if car.direction.is_travel else car.travel_direction
        car = _open_doors(car, travelled, effects)
        return Transition(car, tuple(effects))

    heading = Direction.UP if target > car.floor else Direction.DOWN
    step = 1 if heading is Direction.UP else -1
    origin = car.floor
    car = replace(
        car,
        floor=origin + step,
        direction=heading,
        state=ElevatorState.MOVING,
        travel_direction=heading,
    )
    effects.append(Moved(origin, car.floor, heading, target))

    if car.floor in car.upcoming_stops:
        car = _open_doors(car, heading, effects)
    return Transition(car, tuple(effects))


def _open_doors(car: CarState, travelled: Direction, effects: List[Effect]) -> CarState:
    # Riders leave before anyone waiting at the floor can board.
    car, arrived = arrive(car, travelled)
    effects.append(arrived)
    car, unloaded = unload(car)
    if unloaded is not None:
        effects.append(unloaded)
    return car
