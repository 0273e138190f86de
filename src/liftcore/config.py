from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

UNSET = -1

# PascalCase keys from appsettings.json files.
_LEGACY_KEYS = {
    "NumberOfFloors": "number_of_floors",
    "NumberOfElevators": "number_of_elevators",
    "MaxElevatorCapacity": "max_elevator_capacity",
    "DefaultElevatorStartingFloor": "default_starting_floor",
    "RandomSeed": "random_seed",
    "Scheduler": "scheduler",
}

_PROMPTED = (
    "number_of_floors",
    "number_of_elevators",
    "max_elevator_capacity",
    "default_starting_floor",
)


@dataclass
class BuildingConfig:
    """Building settings. ``UNSET`` (-1) means "ask the operator before building"."""

    number_of_floors: int = UNSET
    number_of_elevators: int = UNSET
    max_elevator_capacity: int = UNSET
    default_starting_floor: int = UNSET
    random_seed: Optional[int] = None
    scheduler: str = "scoring"

    def missing_settings(self) -> List[str]:
        return [name for name in _PROMPTED if getattr(self, name) == UNSET]

    def starting_floor_in_range(self) -> bool:
        return 1 <= self.default_starting_floor <= self.number_of_floors

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildingConfig":
        section = data.get("building", data)
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in section.items():
            name = _LEGACY_KEYS.get(key, key)
            if name in known:
                values[name] = value
        for name in _PROMPTED:
            if name in values:
                values[name] = int(values[name])
        return cls(**values)


def load_config(path: Optional[Union[str, Path]]) -> BuildingConfig:
    """Read settings from a JSON file; a missing file leaves everything unset."""
    if path is None:
        return BuildingConfig()
    config_path = Path(path)
    if not config_path.exists():
        logger.warning("Configuration file %s not found; all settings unset.", config_path)
        return BuildingConfig()
    config = BuildingConfig.from_dict(json.loads(config_path.read_text()))
    logger.info("Loaded configuration from %s: %s", config_path, config)
    return config
