from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from liftcore import (
    Building,
    BuildingConfig,
    ElevatorFactory,
    FloorFactory,
    IdSequence,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"


def configure_logging(level: Union[int, str] = "INFO", log_file: Optional[Path] = None) -> None:
    handlers: List[logging.Handler] = []
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    else:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


class SimulationSetupService:
    """Turns a possibly incomplete config into a ready building, asking for gaps."""

    def __init__(
        self,
        config: Optional[BuildingConfig] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        elevator_ids: Optional[IdSequence] = None,
        passenger_ids: Optional[IdSequence] = None,
    ) -> None:
        self.config = config or BuildingConfig()
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.floor_factory = FloorFactory(self.config)
        self.elevator_factory = ElevatorFactory(self.config, ids=elevator_ids)
        self.passenger_ids = passenger_ids or IdSequence()

    def prompt_int(
        self,
        message: str,
        minimum: int = 1,
        maximum: Optional[int] = None,
        default: Optional[int] = None,
    ) -> int:
        suffix = f" [{default}]" if default is not None else ""
        if maximum is None:
            expected = f"an integer greater than or equal to {minimum}"
        else:
            expected = f"an integer from {minimum} to {maximum}"
        while True:
            raw = self.input_fn(f"{message}{suffix}: ").strip()
            if not raw and default is not None:
                logger.debug("Accepted default %d for '%s'", default, message)
                return default
            try:
                value = int(raw)
            except ValueError:
                value = None
            if value is not None and value >= minimum and (maximum is None or value <= maximum):
                logger.debug("Read %d for '%s'", value, message)
                return value
            logger.warning("Invalid input '%s' for '%s'.", raw, message)
            self.output_fn(f"Invalid input '{raw}'. Please enter {expected}.")

    def resolve_settings(self) -> None:
        while self.floor_factory.number_of_floors < 1:
            logger.warning("Number of floors is not set or invalid. Prompting user for input.")
            self.floor_factory.set_number_of_floors(self.prompt_int("Enter number of floors"))
        while self.elevator_factory.number_of_elevators < 1:
            logger.warning("Number of elevators is not set or invalid. Prompting user for input.")
            self.elevator_factory.set_number_of_elevators(self.prompt_int("Enter number of elevators"))
        while self.elevator_factory.max_capacity < 1:
            logger.warning("Elevator capacity is not set or invalid. Prompting user for input.")
            self.elevator_factory.set_max_capacity(self.prompt_int("Enter elevator capacity"))
        floors = self.floor_factory.number_of_floors
        while not 1 <= self.elevator_factory.default_starting_floor <= floors:
            logger.warning(
                "Default starting floor %d is not a floor of this building. Prompting user for input.",
                self.elevator_factory.default_starting_floor,
            )
            self.elevator_factory.set_default_starting_floor(
                self.prompt_int("Enter default starting floor", maximum=floors, default=1)
            )

    def build(self) -> Building:
        logger.info("Starting building setup process...")
        self.resolve_settings()
        logger.info(
            "Building parameters: Floors=%d, Elevators=%d, Capacity=%d",
            self.floor_factory.number_of_floors,
            self.elevator_factory.number_of_elevators,
            self.elevator_factory.max_capacity,
        )
        floors = self.floor_factory.create_floors()
        elevators = self.elevator_factory.create_elevators()
        building = Building(
            scheduler_name=self.config.scheduler,
            random_seed=self.config.random_seed,
            passenger_ids=self.passenger_ids,
        )
        building.initialise(elevators, floors)
        logger.info("Building setup complete. Ready for simulation.")
        return building
