from __future__ import annotations

import logging
from typing import Iterable, Optional

from .interface import ElevatorSnapshot, HallCall
from .utils import describe_direction, is_on_the_way, travel_distance

logger = logging.getLogger(__name__)


class ScoringScheduler:
    """Scores each car by distance, detours and load; lowest score wins.

    A car that is idle, or already travelling the caller's way without having
    passed the floor, pays only the distance. Any other car pays an extra
    ``total_floors`` so detours lose to cars on the way. Riders on board and
    outstanding stops are added so busy cars lose ties against quiet ones.
    """

    def score(self, elevator: ElevatorSnapshot, call: HallCall, total_floors: int) -> Optional[int]:
        if elevator.is_full and not elevator.carries_rider_for(call.floor):
            return None

        score = travel_distance(elevator, call.floor)
        if not (elevator.idle or is_on_the_way(elevator, call)):
            score += total_floors
        score += elevator.load
        score += len(elevator.upcoming_stops)
        return score

    def select_elevator(
        self,
        elevator_state: Iterable[ElevatorSnapshot],
        call: HallCall,
        total_floors: int,
    ) -> Optional[ElevatorSnapshot]:
        best: Optional[ElevatorSnapshot] = None
        best_key = None
        for elevator in elevator_state:
            score = self.score(elevator, call, total_floors)
            if score is None:
                logger.debug(
                    "E%d skipped for F%d(%s): full with no rider for that floor.",
                    elevator.elevator_id,
                    call.floor,
                    describe_direction(call.direction),
                )
                continue
            key = (score, elevator.load, elevator.elevator_id)
            if best_key is None or key < best_key:
                best, best_key = elevator, key

        if best is None:
            logger.debug("No suitable elevator found for F%d(%s).", call.floor, describe_direction(call.direction))
        else:
            logger.debug(
                "Best choice for F%d(%s) is E%d with score %d.",
                call.floor,
                describe_direction(call.direction),
                best.elevator_id,
                best_key[0],
            )
        return best
