"""Core model for the elevator building simulation."""

from .building import Building
from .config import UNSET, BuildingConfig, load_config
from .elevator import Elevator
from .enums import Direction, ElevatorState
from .factory import ElevatorFactory, FloorFactory, StartingFloorNotSetError
from .floor import Floor
from .ids import IdSequence
from .passenger import Passenger
from .transitions import CarState, Pickup, Transition, advance, next_logical_stop

__all__ = [
    "Building",
    "BuildingConfig",
    "CarState",
    "Direction",
    "Elevator",
    "ElevatorFactory",
    "ElevatorState",
    "Floor",
    "FloorFactory",
    "IdSequence",
    "Passenger",
    "Pickup",
    "StartingFloorNotSetError",
    "Transition",
    "UNSET",
    "advance",
    "load_config",
    "next_logical_stop",
]
