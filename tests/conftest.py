"""Shared fixtures for parking garage tests."""

from datetime import datetime, timedelta

import pytest

from parking_garage.config import LevelConfig, LotConfig, SpotCounts
from parking_garage.state.level import Level
from parking_garage.state.lot import ParkingLot


class FakeClock:
    """Manually advanced replacement for datetime.now."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 8, 0, 0))


@pytest.fixture
def make_level(clock):
    def _make(level_id: str = "L1", **counts) -> Level:
        return Level(LevelConfig(id=level_id, **counts), clock=clock)

    return _make


@pytest.fixture
def make_lot(clock):
    def _make(level_ids=("L1",), **counts) -> ParkingLot:
        return ParkingLot(LotConfig.uniform(list(level_ids), SpotCounts(**counts)), clock=clock)

    return _make
