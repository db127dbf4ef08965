import pytest

from parking_garage.config import LevelConfig
from parking_garage.errors import InconsistentStateError, InvalidReleaseError, VehicleAlreadyParkedError
from parking_garage.state.level import Level
from parking_garage.state.models import SpotType, VehicleClass, create_vehicle


def test_spots_are_created_per_type(make_level):
    level = make_level("L1", handicap=1, motorcycle=2, compact=3, large=1)

    assert [s.id for s in level.spots] == [
        "L1-H1",
        "L1-M1",
        "L1-M2",
        "L1-C1",
        "L1-C2",
        "L1-C3",
        "L1-L1",
    ]
    assert level.get_free_count(SpotType.COMPACT) == 3
    assert level.get_occupied_count() == 0
    level.check_invariants()


@pytest.mark.parametrize(
    "vehicle_class, spot_type",
    [
        (VehicleClass.HANDICAP, SpotType.HANDICAP),
        (VehicleClass.BIKE, SpotType.MOTORCYCLE),
        (VehicleClass.CAR, SpotType.COMPACT),
        (VehicleClass.BUS, SpotType.LARGE),
    ],
)
def test_allocate_uses_required_spot_type(make_level, vehicle_class, spot_type):
    level = make_level(handicap=1, motorcycle=1, compact=1, large=1)

    spot = level.allocate(vehicle_class)

    assert spot.spot_type == spot_type
    assert spot.occupied
    assert level.get_free_count(spot_type) == 0


def test_allocate_returns_none_when_pool_empty(make_level):
    level = make_level(compact=1)

    assert level.allocate(VehicleClass.BUS) is None
    assert level.allocate(VehicleClass.CAR) is not None
    assert level.allocate(VehicleClass.CAR) is None


def test_allocation_is_fifo_and_release_goes_to_back(make_level):
    level = make_level(compact=3)

    first = level.allocate(VehicleClass.CAR)
    second = level.allocate(VehicleClass.CAR)
    assert (first.id, second.id) == ("L1-C1", "L1-C2")

    level.release(first)
    assert level.allocate(VehicleClass.CAR).id == "L1-C3"
    assert level.allocate(VehicleClass.CAR).id == "L1-C1"


def test_release_returns_spot_to_its_own_pool(make_level):
    level = make_level(motorcycle=1, compact=1)

    spot = level.allocate(VehicleClass.BIKE)
    level.release(spot)

    assert spot.spot_type == SpotType.MOTORCYCLE
    assert level.get_free_count(SpotType.MOTORCYCLE) == 1
    assert level.get_free_count(SpotType.COMPACT) == 1
    level.check_invariants()


def test_release_of_free_spot_is_rejected(make_level):
    level = make_level(compact=2)
    spot = level.spots[0]

    with pytest.raises(InvalidReleaseError):
        level.release(spot)

    assert level.get_free_count(SpotType.COMPACT) == 2
    level.check_invariants()


def test_release_of_foreign_spot_is_rejected(make_level):
    first = make_level("L1", compact=1)
    second = make_level("L2", compact=1)
    spot = first.allocate(VehicleClass.CAR)

    with pytest.raises(InvalidReleaseError):
        second.release(spot)

    assert second.get_free_count(SpotType.COMPACT) == 1


def test_park_issues_ticket_and_binds_spot(make_level, clock):
    level = make_level(compact=1)
    car = create_vehicle(VehicleClass.CAR, "abc-123")

    ticket = level.park(car)

    assert ticket.vehicle_id == "ABC-123"
    assert ticket.spot_id == "L1-C1"
    assert ticket.level_id == "L1"
    assert ticket.issued_at == clock.now
    assert ticket.ticket_number
    assert level.spots[0].vehicle_id == "ABC-123"
    assert level.get_ticket("ABC-123") == ticket
    level.check_invariants()


def test_park_without_free_spot_changes_nothing(make_level):
    level = make_level(compact=1)
    level.park(create_vehicle(VehicleClass.CAR, "AAA"))
    before = level.status()

    assert level.park(create_vehicle(VehicleClass.CAR, "BBB")) is None

    assert level.status() == before
    assert level.get_ticket("BBB") is None
    level.check_invariants()


def test_park_twice_on_same_level_is_rejected(make_level):
    level = make_level(compact=2)
    car = create_vehicle(VehicleClass.CAR, "AAA")
    level.park(car)

    with pytest.raises(VehicleAlreadyParkedError):
        level.park(car)

    assert level.get_occupied_count() == 1


def test_depart_computes_fee_and_frees_spot(make_level, clock):
    level = make_level(large=1)
    level.park(create_vehicle(VehicleClass.BUS, "BUS-1"))
    clock.advance(hours=1, minutes=30)

    receipt = level.depart("BUS-1")

    assert receipt.fee == pytest.approx(15.0)
    assert receipt.hours == pytest.approx(1.5)
    assert receipt.rate == 10.0
    assert receipt.spot_id == "L1-L1"
    assert receipt.departed_at == clock.now
    assert level.get_free_count(SpotType.LARGE) == 1
    assert level.get_ticket("BUS-1") is None
    assert level.find_vehicle("BUS-1") is None
    level.check_invariants()


def test_depart_unknown_vehicle_returns_none(make_level):
    level = make_level(compact=2)
    level.park(create_vehicle(VehicleClass.CAR, "AAA"))
    before = [spot.model_copy() for spot in level.spots]

    assert level.depart("ZZZ") is None

    assert level.spots == before
    level.check_invariants()


def test_status_counts(make_level):
    level = make_level(handicap=1, compact=2)
    level.park(create_vehicle(VehicleClass.CAR, "AAA"))

    status = level.status()

    assert status.total[SpotType.COMPACT] == 2
    assert status.free[SpotType.COMPACT] == 1
    assert status.free[SpotType.HANDICAP] == 1
    assert status.free[SpotType.LARGE] == 0
    assert status.occupied == 1


def test_occupied_plus_free_equals_total_through_a_session(make_level, clock):
    level = make_level(handicap=1, motorcycle=2, compact=2, large=1)
    arrivals = [
        create_vehicle(VehicleClass.CAR, "C1"),
        create_vehicle(VehicleClass.BIKE, "B1"),
        create_vehicle(VehicleClass.CAR, "C2"),
        create_vehicle(VehicleClass.CAR, "C3"),
        create_vehicle(VehicleClass.BUS, "U1"),
        create_vehicle(VehicleClass.HANDICAP, "H1"),
    ]

    for vehicle in arrivals:
        level.park(vehicle)
        level.check_invariants()

    for plate in ["C2", "U1", "C3", "B1"]:
        clock.advance(minutes=20)
        level.depart(plate)
        level.check_invariants()

    free = sum(level.get_free_count(spot_type) for spot_type in SpotType)
    assert free + level.get_occupied_count() == len(level.spots)


def test_release_of_parked_spot_is_rejected(make_level, clock):
    level = make_level(compact=1)
    level.park(create_vehicle(VehicleClass.CAR, "CAR-1"))
    spot = level.find_vehicle("CAR-1")

    with pytest.raises(InvalidReleaseError):
        level.release(spot)

    assert spot.occupied
    assert level.get_ticket("CAR-1") is not None
    assert level.get_free_count(SpotType.COMPACT) == 0
    level.check_invariants()

    clock.advance(hours=1)
    assert level.depart("CAR-1").fee == pytest.approx(5.0)
    level.check_invariants()


def test_release_into_level_with_same_id_is_rejected():
    first = Level(LevelConfig(id="L1", compact=1))
    second = Level(LevelConfig(id="L1", compact=1))
    spot = first.allocate(VehicleClass.CAR)

    with pytest.raises(InvalidReleaseError):
        second.release(spot)

    assert second.get_free_count(SpotType.COMPACT) == 1
    second.check_invariants()


def test_check_invariants_raises_on_corrupted_pool(make_level):
    level = make_level(compact=2)
    level.spots[0].occupied = True

    with pytest.raises(InconsistentStateError):
        level.check_invariants()


def test_depart_normalises_plate(make_level):
    level = make_level(compact=1)
    level.park(create_vehicle(VehicleClass.CAR, "ABC-123"))

    assert level.find_vehicle(" abc-123") is not None
    assert level.get_ticket("abc-123") is not None
    assert level.depart("abc-123").vehicle_id == "ABC-123"
    assert level.get_free_count(SpotType.COMPACT) == 1
