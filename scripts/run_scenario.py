"""CLI for running scripted elevator scenarios defined in JSON configs.

A scenario holds a ``building`` section (same keys as the console config) and
a ``commands`` list written in console syntax, e.g. ``"call 5 up 2"`` or
``"step 3"``.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from console import CommandError, SimulationSetupService, configure_logging, execute, parse_command
from liftcore import Building, BuildingConfig

logger = logging.getLogger("run_scenario")


def build_building(config: Dict) -> Building:
    building_config = BuildingConfig.from_dict(config)
    missing = building_config.missing_settings()
    if missing:
        raise ValueError(f"Scenario leaves settings unset: {', '.join(missing)}")
    if not building_config.starting_floor_in_range():
        raise ValueError(f"Scenario starting floor {building_config.default_starting_floor} is not a floor")
    return SimulationSetupService(building_config).build()


def run_commands(building: Building, commands: List[str]) -> List[Dict]:
    snapshots: List[Dict] = []
    for line in commands:
        try:
            command = parse_command(line)
        except CommandError as exc:
            logger.warning("Skipping scenario command %r: %s", line, exc)
            continue
        if command.kind == "exit":
            break
        execute(building, command)
        if command.kind == "step":
            snapshots.append(building.snapshot())
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write building snapshots after every step as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    configure_logging(args.log_level.upper())
    config = json.loads(args.config.read_text())
    building = build_building(config)
    snapshots = run_commands(building, config.get("commands", []))

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "ticks": building.tick,
        "final_state": building.snapshot(),
        "snapshots": snapshots,
    }
    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(building.display_status())
    if args.output:
        print(f"Saved snapshots to {args.output}")


if __name__ == "__main__":
    main()
