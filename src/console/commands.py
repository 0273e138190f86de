from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from liftcore import Building, Direction

logger = logging.getLogger(__name__)

USAGE = "\n".join(
    [
        "Please enter one of:",
        "+ (c)all <FloorNumber> <up/down/u/d> [NumberOfPeople] : Simulates pressing up or down button on a floor.",
        "+ (s)tep [Ticks] : Advance one step (or several).",
        "+ (d)isplay : Display building status without advancing a step.",
        "+ (h)elp : Show this message.",
        "+ (e)xit : Exit the application.",
    ]
)

CALL_USAGE = "Usage: call <floorNumber> <up/down> [numberOfPeople]"


class CommandError(ValueError):
    """Raised for console input that cannot be turned into a command."""


@dataclass(frozen=True)
class Command:
    kind: str
    floor: Optional[int] = None
    direction: Optional[Direction] = None
    people: int = 1
    ticks: int = 1


_KINDS = {
    "call": "call",
    "c": "call",
    "step": "step",
    "s": "step",
    "display": "display",
    "d": "display",
    "help": "help",
    "h": "help",
    "?": "help",
    "exit": "exit",
    "e": "exit",
    "quit": "exit",
    "q": "exit",
}


def _positive_int(text: str, what: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise CommandError(f"Invalid {what} '{text}'. Please enter a positive integer.") from None
    if value < 1:
        raise CommandError(f"Invalid {what} '{text}'. Please enter a positive integer.")
    return value


def parse_command(line: str) -> Command:
    parts = line.strip().lower().split()
    if not parts:
        raise CommandError("No command entered.")
    kind = _KINDS.get(parts[0])
    if kind is None:
        raise CommandError(f"Unknown command '{parts[0]}'.")

    if kind == "call":
        if len(parts) < 3:
            raise CommandError(CALL_USAGE)
        floor = _positive_int(parts[1], "floor number")
        if parts[2] not in ("up", "u", "down", "d"):
            raise CommandError("Invalid direction. Use 'up', 'u', 'down', or 'd'.")
        direction = Direction.parse(parts[2])
        people = _positive_int(parts[3], "number of people") if len(parts) > 3 else 1
        return Command(kind, floor=floor, direction=direction, people=people)

    if kind == "step":
        ticks = _positive_int(parts[1], "number of ticks") if len(parts) > 1 else 1
        return Command(kind, ticks=ticks)

    return Command(kind)


def execute(building: Building, command: Command) -> str:
    if command.kind == "call":
        elevator = building.request_elevator(command.floor, command.direction, command.people)
        logger.info(
            "Elevator called to floor %d for %s for %d people.",
            command.floor,
            command.direction,
            command.people,
        )
        if elevator is None:
            return f"No elevator assigned to floor {command.floor} ({command.direction}); riders remain queued."
        return f"Elevator E{elevator.elevator_id} assigned to floor {command.floor} ({command.direction})."
    if command.kind == "step":
        for _ in range(command.ticks):
            building.step_simulation()
        return building.display_status()
    if command.kind == "display":
        return building.display_status()
    if command.kind == "help":
        return USAGE
    if command.kind == "exit":
        return "Exiting simulation."
    raise CommandError(f"Unknown command '{command.kind}'.")


def run_loop(
    building: Building,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> None:
    """Read commands until ``exit`` or end of input. Bad input never ends the loop."""
    logger.info("Starting building simulation...")
    output_fn(USAGE)
    while True:
        try:
            line = input_fn("> ")
        except EOFError:
            logger.info("End of input; exiting simulation.")
            break
        try:
            command = parse_command(line)
            output_fn(execute(building, command))
        except CommandError as exc:
            output_fn(str(exc))
            continue
        except Exception as exc:
            logger.exception("Error processing command '%s'.", line)
            output_fn(f"Error: {exc}")
            continue
        if command.kind == "exit":
            logger.info("Exiting simulation by user command.")
            break
