from __future__ import annotations

import logging

import pytest

from liftcore import Building, Direction, ElevatorState, Floor, IdSequence, Passenger, Pickup

UP, DOWN = Direction.UP, Direction.DOWN


def test_initialise_rejects_missing_collections():
    building = Building()
    with pytest.raises(ValueError):
        building.initialise(None, [Floor(1)])
    with pytest.raises(ValueError):
        building.initialise([], None)


def test_floors_are_sorted_and_counted(make_elevator):
    building = Building()
    building.initialise([make_elevator()], [Floor(3), Floor(1), Floor(2)])

    assert [floor.number for floor in building.floors] == [1, 2, 3]
    assert building.total_floors == 3
    assert building.get_floor(2).number == 2
    assert building.get_floor(9) is None


def test_nearest_idle_elevator_gets_the_call(make_elevator, make_building):
    low, high = make_elevator(floor=1), make_elevator(floor=10)
    building = make_building(elevators=[low, high])

    chosen = building.request_elevator(5, UP)

    assert chosen is low
    assert low.assigned_pickups == {Pickup(5, UP)}
    assert not high.assigned_pickups
    assert building.get_floor(5).waiting_count(UP) == 1


def test_destinations_stay_on_the_requested_side(make_elevator, make_building):
    building = make_building(elevators=[make_elevator()], seed=42)

    building.request_elevator(4, UP, 20)
    building.request_elevator(4, DOWN, 20)

    floor = building.get_floor(4)
    assert all(5 <= p.destination <= 10 for p in floor.waiting_up)
    assert all(1 <= p.destination <= 3 for p in floor.waiting_down)
    assert floor.waiting_count(UP) == floor.waiting_count(DOWN) == 20


def test_passenger_ids_come_from_the_given_sequence(make_elevator):
    building = Building(random_seed=5, passenger_ids=IdSequence(start=100))
    building.initialise([make_elevator()], [Floor(n) for n in range(1, 6)])

    building.request_elevator(2, UP, 3)

    assert [p.passenger_id for p in building.get_floor(2).waiting_up] == [100, 101, 102]


def test_same_seed_draws_same_destinations(make_elevator, make_building):
    first = make_building(elevators=[make_elevator()], seed=9)
    second = make_building(elevators=[make_elevator()], seed=9)

    first.request_elevator(3, UP, 5)
    second.request_elevator(3, UP, 5)

    assert [p.destination for p in first.get_floor(3).waiting_up] == [
        p.destination for p in second.get_floor(3).waiting_up
    ]


def test_impossible_direction_creates_no_riders_but_still_dispatches(make_elevator, make_building):
    elevator = make_elevator()
    building = make_building(elevators=[elevator])

    chosen = building.request_elevator(10, UP, 2)

    assert chosen is elevator
    assert not building.get_floor(10).has_waiting()
    assert building.passenger_ids.peek() == 1


def test_bad_requests_are_logged_and_dropped(make_elevator, make_building, caplog):
    building = make_building(elevators=[make_elevator()])

    with caplog.at_level(logging.WARNING, logger="liftcore.building"):
        assert building.request_elevator(11, UP) is None
        assert building.request_elevator(0, DOWN) is None
        assert building.request_elevator(3, Direction.STOPPED) is None

    messages = [record.getMessage() for record in caplog.records]
    assert any("Invalid floor number 11" in message for message in messages)
    assert any("must be Up or Down" in message for message in messages)
    assert not any(floor.has_waiting() for floor in building.floors)


def test_request_before_initialise_is_ignored(caplog):
    building = Building()

    with caplog.at_level(logging.WARNING, logger="liftcore.building"):
        assert building.request_elevator(1, UP) is None

    assert "not initialised" in caplog.text


def test_full_car_still_chosen_when_a_rider_gets_off_at_the_call_floor(make_elevator, make_building):
    full = make_elevator(floor=4, capacity=1)
    full.add_passenger(Passenger(1, 4, 5))
    far = make_elevator(floor=10)
    building = make_building(elevators=[full, far])

    assert building.request_elevator(5, UP) is full


def test_full_car_without_matching_rider_is_skipped(make_elevator, make_building):
    full = make_elevator(floor=4, capacity=1)
    full.add_passenger(Passenger(1, 4, 9))
    far = make_elevator(floor=10)
    building = make_building(elevators=[full, far])

    assert building.request_elevator(5, UP) is far


def test_full_car_frees_seats_before_boarding(make_elevator, make_building):
    car = make_elevator(floor=1, capacity=2)
    car.add_passenger(Passenger(1, 1, 5))
    car.add_passenger(Passenger(2, 1, 5))
    building = make_building(elevators=[car])

    assert building.request_elevator(5, UP, 2) is car
    for _ in range(4):
        building.step_simulation()

    assert car.current_floor == 5
    assert [p.origin for p in car.passengers] == [5, 5]
    assert not building.get_floor(5).has_waiting()

    for _ in range(40):
        building.step_simulation()
    assert not car.passengers


def test_riders_left_behind_by_a_full_car_get_another_trip(make_elevator, make_building):
    car = make_elevator(floor=1, capacity=1)
    building = make_building(elevators=[car], seed=4)
    building.request_elevator(3, UP, 3)

    for _ in range(2):
        building.step_simulation()
    assert len(car.passengers) == 1
    assert building.get_floor(3).waiting_count(UP) == 2
    assert not car.assigned_pickups

    for _ in range(80):
        building.step_simulation()
        assert len(car.passengers) <= 1

    assert not building.get_floor(3).has_waiting()
    assert not car.passengers


def test_riders_skipped_by_an_idle_stop_are_redispatched(make_elevator, make_building):
    first, second = make_elevator(floor=5), make_elevator(floor=9)
    building = make_building(elevators=[first, second])
    floor = building.get_floor(5)
    floor.add_waiting_person(Passenger(1, 5, 8))
    floor.add_waiting_person(Passenger(2, 5, 2))
    first.add_destination(5, UP)

    building.step_simulation()

    assert [p.passenger_id for p in first.passengers] == [1]
    assert floor.waiting_count(DOWN) == 1
    assert Pickup(5, DOWN) in second.assigned_pickups
    assert building.dispatch_unserved_calls() == []


def test_out_of_service_elevator_is_never_chosen(make_elevator, make_building):
    broken, working = make_elevator(floor=5), make_elevator(floor=10)
    building = make_building(elevators=[broken, working])

    building.fault_elevator(broken.elevator_id, "inspection")

    assert building.request_elevator(5, UP) is working
    assert broken.state is ElevatorState.OUT_OF_SERVICE
    assert broken.fault_reason == "inspection"


def test_fault_hands_pickups_to_another_elevator(make_elevator, make_building):
    first, second = make_elevator(floor=1), make_elevator(floor=10)
    building = make_building(elevators=[first, second])
    building.request_elevator(3, UP)

    building.fault_elevator(first.elevator_id, "maintenance")

    assert not first.assigned_pickups
    assert Pickup(3, UP) in second.assigned_pickups
    assert building.fault_elevator(99) is None


def test_step_failure_takes_only_that_elevator_out(make_elevator, make_building, monkeypatch, caplog):
    first, second = make_elevator(floor=1), make_elevator(floor=10)
    building = make_building(elevators=[first, second])
    building.request_elevator(3, UP)
    assert Pickup(3, UP) in first.assigned_pickups

    def broken_state():
        raise RuntimeError("sensor failure")

    monkeypatch.setattr(first, "car_state", broken_state)
    with caplog.at_level(logging.ERROR, logger="liftcore.elevator"):
        building.step_simulation()

    assert first.state is ElevatorState.OUT_OF_SERVICE
    assert Pickup(3, UP) in second.assigned_pickups
    assert second.current_floor == 9
    assert any(record.exc_info for record in caplog.records)

    building.step_simulation()
    assert building.tick == 2
    assert second.current_floor == 8


def test_loading_follows_service_direction(make_elevator, make_building):
    elevator = make_elevator(floor=3, capacity=2)
    building = make_building(elevators=[elevator])
    floor = building.get_floor(3)
    for passenger_id, destination in enumerate([5, 6, 7], start=1):
        floor.add_waiting_person(Passenger(passenger_id, 3, destination))
    floor.add_waiting_person(Passenger(4, 3, 1))
    elevator.state = ElevatorState.DOORS_OPEN
    elevator.direction = UP

    boarded = building.load_passengers(elevator)

    assert [p.passenger_id for p in boarded] == [1, 2]
    assert floor.waiting_count(UP) == 1
    assert floor.waiting_count(DOWN) == 1
    assert elevator.drop_off_floors == {5, 6}


def test_called_car_boards_waiting_riders_on_arrival(make_elevator, make_building):
    elevator = make_elevator(floor=1, capacity=2)
    building = make_building(elevators=[elevator])
    building.request_elevator(3, UP, 2)

    building.step_simulation()
    building.step_simulation()

    assert elevator.current_floor == 3
    assert elevator.state is ElevatorState.DOORS_OPEN
    assert len(elevator.passengers) == 2
    assert not building.get_floor(3).has_waiting()


def test_idle_car_does_not_mix_directions(make_elevator, make_building):
    elevator = make_elevator(floor=5)
    building = make_building(elevators=[elevator])
    floor = building.get_floor(5)
    floor.add_waiting_person(Passenger(1, 5, 8))
    floor.add_waiting_person(Passenger(2, 5, 2))
    elevator.state = ElevatorState.DOORS_OPEN

    assert [p.passenger_id for p in building.load_passengers(elevator)] == [1]
    assert floor.waiting_count(DOWN) == 1

    assert [p.passenger_id for p in building.load_passengers(elevator)] == [2]


def test_rejected_rider_keeps_its_place_in_line(make_elevator, make_building, monkeypatch):
    elevator = make_elevator(floor=5)
    building = make_building(elevators=[elevator])
    floor = building.get_floor(5)
    floor.add_waiting_person(Passenger(1, 5, 8))
    floor.add_waiting_person(Passenger(2, 5, 9))
    elevator.state = ElevatorState.DOORS_OPEN
    monkeypatch.setattr(elevator, "add_passenger", lambda passenger: False)

    assert building.load_passengers(elevator) == []
    assert [p.passenger_id for p in floor.waiting_up] == [1, 2]


def test_display_status(make_elevator, make_building):
    building = make_building(num_floors=2, elevators=[make_elevator(elevator_id=1)])

    assert building.display_status().splitlines() == [
        "Building Status at tick 0:",
        "-" * 70,
        "Elevator E1: F1, Dir:Stopped, St:Stopped, Pax:0/5, Stops:[]",
        "",
        "Floor 1: Waiting Up: 0, Waiting Down: 0",
        "Floor 2: Waiting Up: 0, Waiting Down: 0",
    ]


def test_empty_building_status_and_step(caplog):
    building = Building()

    with caplog.at_level(logging.WARNING, logger="liftcore.building"):
        building.step_simulation()

    assert building.tick == 0
    assert "No elevators" in caplog.text
    lines = building.status_lines()
    assert "Building not initialised. No Elevators." in lines
    assert "Building not initialised. No Floors." in lines


def test_snapshot_shape(make_elevator, make_building):
    building = make_building(num_floors=3, elevators=[make_elevator(elevator_id=7)])
    building.request_elevator(2, UP)

    snapshot = building.snapshot()

    assert snapshot["tick"] == 0
    assert snapshot["total_floors"] == 3
    assert snapshot["floors"][1] == {"number": 2, "waiting_up": 1, "waiting_down": 0}
    assert snapshot["elevators"] == [
        {
            "id": 7,
            "floor": 1,
            "direction": "Stopped",
            "state": "Stopped",
            "passenger_count": 0,
            "capacity": 5,
            "stops": [2],
        }
    ]


def test_everyone_is_delivered(make_elevator, make_building):
    elevators = [make_elevator(capacity=8), make_elevator(capacity=8)]
    building = make_building(elevators=elevators, seed=11)
    building.request_elevator(1, UP, 3)
    building.request_elevator(8, DOWN, 2)
    building.request_elevator(4, UP, 1)

    for _ in range(60):
        building.step_simulation()
        for elevator in elevators:
            assert len(elevator.passengers) <= elevator.max_capacity
            assert 1 <= elevator.current_floor <= building.total_floors

    assert not any(floor.has_waiting() for floor in building.floors)
    assert all(not elevator.passengers for elevator in elevators)
    assert all(elevator.is_idle() for elevator in elevators)
