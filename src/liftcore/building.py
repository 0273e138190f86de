from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from dispatch import ElevatorSnapshot, HallCall, Scheduler, get_scheduler

from .elevator import Elevator
from .enums import Direction, ElevatorState
from .floor import Floor
from .ids import IdSequence
from .passenger import Passenger
from .transitions import Pickup

logger = logging.getLogger(__name__)


@dataclass
class Building:
    """Owns floors and elevators, answers hall calls and runs the simulation tick."""

    scheduler_name: str = "scoring"
    random_seed: Optional[int] = None
    passenger_ids: IdSequence = field(default_factory=IdSequence)
    elevators: List[Elevator] = field(init=False, default_factory=list)
    floors: List[Floor] = field(init=False, default_factory=list)
    total_floors: int = field(init=False, default=0)
    tick: int = field(init=False, default=0)
    scheduler: Scheduler = field(init=False)
    rng: random.Random = field(init=False, repr=False)
    _floors_by_number: Dict[int, Floor] = field(init=False, default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.scheduler = get_scheduler(self.scheduler_name)
        self.rng = random.Random(self.random_seed)

    def initialise(self, elevators: Optional[Iterable[Elevator]], floors: Optional[Iterable[Floor]]) -> None:
        if elevators is None:
            raise ValueError("Elevators cannot be None.")
        if floors is None:
            raise ValueError("Floors cannot be None.")
        self.elevators = list(elevators)
        self.floors = sorted(floors, key=lambda floor: floor.number)
        self._floors_by_number = {floor.number: floor for floor in self.floors}
        self.total_floors = len(self.floors)
        logger.info(
            "Building initialised with %d elevators and %d floors.",
            len(self.elevators),
            self.total_floors,
        )

    def get_floor(self, floor_number: int) -> Optional[Floor]:
        return self._floors_by_number.get(floor_number)

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None

    def request_elevator(
        self, floor_number: int, direction: Direction, number_of_people: int = 1
    ) -> Optional[Elevator]:
        """Queue riders on ``floor_number`` and assign the best elevator to the call.

        Bad requests are logged and dropped. When no elevator qualifies the
        riders simply stay queued on the floor.
        """
        if self.total_floors == 0:
            logger.warning("RequestElevator: Building not initialised (no floors).")
            return None
        if not 1 <= floor_number <= self.total_floors:
            logger.warning(
                "RequestElevator: Invalid floor number %d. Building has %d floors.",
                floor_number,
                self.total_floors,
            )
            return None
        calling_floor = self.get_floor(floor_number)
        if calling_floor is None:
            logger.warning("RequestElevator: Requested floor %d does not exist.", floor_number)
            return None
        if not direction.is_travel:
            logger.warning("RequestElevator: Call direction must be Up or Down, got %s.", direction)
            return None

        created = 0
        for index in range(number_of_people):
            destination = self._choose_destination(floor_number, direction)
            if destination is None:
                logger.debug(
                    "RequestElevator: Cannot go %s from floor %d for person %d.",
                    direction,
                    floor_number,
                    index + 1,
                )
                continue
            if destination == floor_number:
                logger.warning(
                    "RequestElevator: Rejected rider with destination equal to origin %d.",
                    floor_number,
                )
                continue
            passenger = Passenger(self.passenger_ids.next_id(), floor_number, destination)
            calling_floor.add_waiting_person(passenger)
            created += 1

        if created:
            logger.info(
                "RequestElevator: Call from floor %d (%s) for %d people (requested %d).",
                floor_number,
                direction,
                created,
                number_of_people,
            )
        elif number_of_people > 0:
            logger.info(
                "RequestElevator: Call from floor %d (%s), but no valid journeys could be created.",
                floor_number,
                direction,
            )

        if not self.elevators:
            logger.warning("RequestElevator: No elevators available in the building to dispatch.")
            return None

        best = self.find_best_elevator_for_call(floor_number, direction)
        if best is None:
            logger.info(
                "RequestElevator: No suitable elevator for floor %d (%s). Riders remain queued.",
                floor_number,
                direction,
            )
            return None
        logger.info(
            "RequestElevator: Assigning elevator E%d to floor %d (%s).",
            best.elevator_id,
            floor_number,
            direction,
        )
        best.add_destination(floor_number, direction)
        return best

    def find_best_elevator_for_call(self, call_floor: int, call_direction: Direction) -> Optional[Elevator]:
        call = HallCall(floor=call_floor, direction=call_direction.sign)
        chosen = self.scheduler.select_elevator(self._snapshot_elevators(), call, self.total_floors)
        if chosen is None:
            return None
        return self.get_elevator(chosen.elevator_id)

    def step_simulation(self) -> None:
        """Advance every elevator one tick, then board riders where doors are open.

        Riders still waiting after loading, because the car filled up or was
        taking the other direction, get their call dispatched again as soon as
        some in-service car is eligible.
        """
        if not self.elevators:
            logger.warning("StepSimulation: No elevators in the building to simulate.")
            return
        if not self.floors:
            logger.warning("StepSimulation: No floors in the building. Passenger loading cannot occur.")

        self.tick += 1
        logger.info("--- Building step %d ---", self.tick)

        for elevator in self.elevators:
            was_in_service = elevator.in_service()
            elevator.step()
            if was_in_service and not elevator.in_service():
                self._reassign_pickups(elevator, elevator.release_pickups())

        if not self.floors:
            return

        for elevator in self.elevators:
            if elevator.state is ElevatorState.DOORS_OPEN:
                self.load_passengers(elevator)

        self.dispatch_unserved_calls()

    def dispatch_unserved_calls(self) -> List[Pickup]:
        """Assign a car to every floor queue that no in-service car is coming for."""
        assigned: List[Pickup] = []
        promised = {
            pickup
            for elevator in self.elevators
            if elevator.in_service()
            for pickup in elevator.assigned_pickups
        }
        for floor in self.floors:
            for direction in (Direction.UP, Direction.DOWN):
                pickup = Pickup(floor.number, direction)
                if not floor.waiting_count(direction) or pickup in promised:
                    continue
                elevator = self.find_best_elevator_for_call(floor.number, direction)
                if elevator is None:
                    logger.debug(
                        "F%d-%s: %d riders waiting, no eligible elevator yet.",
                        floor.number,
                        direction,
                        floor.waiting_count(direction),
                    )
                    continue
                logger.info(
                    "Redispatching E%d to F%d (%s) for %d waiting riders.",
                    elevator.elevator_id,
                    floor.number,
                    direction,
                    floor.waiting_count(direction),
                )
                elevator.add_destination(floor.number, direction)
                assigned.append(pickup)
        return assigned

    def load_passengers(self, elevator: Elevator) -> List[Passenger]:
        floor = self.get_floor(elevator.current_floor)
        if floor is None:
            logger.warning(
                "Loading: E%d is at F%d, which is not a floor of this building.",
                elevator.elevator_id,
                elevator.current_floor,
            )
            return []

        service = elevator.direction
        boarded: List[Passenger] = []
        if service is Direction.UP or (
            service is Direction.STOPPED and floor.waiting_count(Direction.UP)
        ):
            boarded.extend(self._board(elevator, floor, Direction.UP))

        # An idle car that just took riders up does not also take riders down.
        took_up = any(p.direction is Direction.UP for p in boarded)
        if service is Direction.DOWN or (
            service is Direction.STOPPED and not took_up and floor.waiting_count(Direction.DOWN)
        ):
            boarded.extend(self._board(elevator, floor, Direction.DOWN))
        return boarded

    def fault_elevator(self, elevator_id: int, reason: Optional[str] = None) -> Optional[Elevator]:
        elevator = self.get_elevator(elevator_id)
        if elevator is None:
            logger.warning("Fault requested for unknown elevator E%d.", elevator_id)
            return None
        self._reassign_pickups(elevator, elevator.trigger_fault(reason))
        return elevator

    def status_lines(self) -> List[str]:
        lines = [f"Building Status at tick {self.tick}:", "-" * 70]
        if not self.elevators:
            lines.append("Building not initialised. No Elevators.")
        else:
            lines.extend(str(elevator) for elevator in self.elevators)
        lines.append("")
        if not self.floors:
            lines.append("Building not initialised. No Floors.")
        else:
            lines.extend(str(floor) for floor in self.floors)
        return lines

    def display_status(self) -> str:
        lines = self.status_lines()
        for line in lines:
            if line:
                logger.info(line)
        return "\n".join(lines)

    def snapshot(self) -> dict:
        return {
            "tick": self.tick,
            "total_floors": self.total_floors,
            "floors": [
                {
                    "number": floor.number,
                    "waiting_up": floor.waiting_count(Direction.UP),
                    "waiting_down": floor.waiting_count(Direction.DOWN),
                }
                for floor in self.floors
            ],
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "floor": elevator.current_floor,
                    "direction": elevator.direction.value,
                    "state": elevator.state.value,
                    "passenger_count": len(elevator.passengers),
                    "capacity": elevator.max_capacity,
                    "stops": list(elevator.all_upcoming_stops),
                }
                for elevator in self.elevators
            ],
        }

    def _choose_destination(self, floor_number: int, direction: Direction) -> Optional[int]:
        if direction is Direction.UP:
            if floor_number >= self.total_floors:
                return None
            return self.rng.randint(floor_number + 1, self.total_floors)
        if floor_number <= 1:
            return None
        return self.rng.randint(1, floor_number - 1)

    def _board(self, elevator: Elevator, floor: Floor, direction: Direction) -> List[Passenger]:
        boarded: List[Passenger] = []
        while floor.waiting_count(direction) and len(elevator.passengers) < elevator.max_capacity:
            passenger = floor.get_next_waiting_person(direction)
            if passenger is None:
                break
            if not elevator.add_passenger(passenger):
                logger.warning(
                    "E%d could not board P%d at F%d. Re-queuing.",
                    elevator.elevator_id,
                    passenger.passenger_id,
                    floor.number,
                )
                floor.return_waiting_person(passenger)
                break
            boarded.append(passenger)
        return boarded

    def _reassign_pickups(self, faulted: Elevator, pickups: List[Pickup]) -> None:
        for pickup in pickups:
            replacement = self.find_best_elevator_for_call(pickup.floor, pickup.direction)
            if replacement is None:
                logger.warning(
                    "Pickup F%d-%s from E%d left unassigned; riders remain queued.",
                    pickup.floor,
                    pickup.direction,
                    faulted.elevator_id,
                )
                continue
            logger.info(
                "Reassigned pickup F%d-%s from E%d to E%d.",
                pickup.floor,
                pickup.direction,
                faulted.elevator_id,
                replacement.elevator_id,
            )
            replacement.add_destination(pickup.floor, pickup.direction)

    def _snapshot_elevators(self) -> List[ElevatorSnapshot]:
        return [
            ElevatorSnapshot(
                elevator_id=elevator.elevator_id,
                position=elevator.current_floor,
                direction=elevator.direction.sign,
                idle=elevator.is_idle(),
                load=len(elevator.passengers),
                capacity=elevator.max_capacity,
                rider_destinations=tuple(p.destination for p in elevator.passengers),
                upcoming_stops=elevator.all_upcoming_stops,
            )
            for elevator in self.elevators
            if elevator.in_service()
        ]
