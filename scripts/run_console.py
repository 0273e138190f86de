"""Interactive elevator simulation console.

Settings missing from the config file are asked for before the building is
created. Then press hall buttons with ``call``, advance time with ``step``.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from console import SimulationSetupService, configure_logging, run_loop
from liftcore import load_config


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/appsettings.json"),
        help="JSON settings file (default: config/appsettings.json)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for passenger destinations")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("logs/elevator.log"),
        help="Log file; keeps the console free for the simulation (default: logs/elevator.log)",
    )
    args = parser.parse_args()

    configure_logging(args.log_level.upper(), args.log_file)
    config = load_config(args.config)
    if args.seed is not None:
        config.random_seed = args.seed

    building = SimulationSetupService(config).build()
    run_loop(building)


if __name__ == "__main__":
    main()
