from __future__ import annotations

from .interface import ElevatorSnapshot, HallCall


def travel_distance(elevator: ElevatorSnapshot, floor: int) -> int:
    """Number of floors between the car and ``floor``."""
    return abs(elevator.position - floor)


def is_on_the_way(elevator: ElevatorSnapshot, call: HallCall) -> bool:
    """True when the car already heads the caller's way and has not passed the floor."""
    if elevator.direction == 0 or elevator.direction != call.direction:
        return False
    if call.direction > 0:
        return elevator.position <= call.floor
    return elevator.position >= call.floor


def describe_direction(direction: int) -> str:
    if direction > 0:
        return "Up"
    if direction < 0:
        return "Down"
    return "Stopped"
