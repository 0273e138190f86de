from __future__ import annotations

from typing import Callable, Iterable, List

import pytest

from liftcore import Building, Elevator, Floor, IdSequence


@pytest.fixture
def make_elevator() -> Callable[..., Elevator]:
    ids = IdSequence()

    def _make(floor: int = 1, capacity: int = 5, elevator_id: int = None) -> Elevator:
        if elevator_id is None:
            elevator_id = ids.next_id()
        return Elevator(elevator_id, capacity, current_floor=floor)

    return _make


@pytest.fixture
def make_building() -> Callable[..., Building]:
    def _make(num_floors: int = 10, elevators: Iterable[Elevator] = (), seed: int = 1) -> Building:
        building = Building(random_seed=seed)
        building.initialise(list(elevators), [Floor(n) for n in range(1, num_floors + 1)])
        return building

    return _make


@pytest.fixture
def scripted() -> Callable[[List[str]], Callable[[str], str]]:
    """Stand-in for ``input`` that replays answers, then signals end of input."""

    def _factory(answers: List[str]) -> Callable[[str], str]:
        remaining = iter(answers)

        def _input(prompt: str = "") -> str:
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError

        return _input

    return _factory
