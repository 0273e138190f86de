"""Console driver: builds a building from settings and runs the command loop."""

from .commands import Command, CommandError, execute, parse_command, run_loop
from .setup_service import SimulationSetupService, configure_logging

__all__ = [
    "Command",
    "CommandError",
    "SimulationSetupService",
    "configure_logging",
    "execute",
    "parse_command",
    "run_loop",
]
