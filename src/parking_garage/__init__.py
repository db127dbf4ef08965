"""Multi-level parking lot with typed spots and hourly fees."""

from .state import Level, ParkingLot, SpotType, Vehicle, VehicleClass, create_vehicle
from .config import LevelConfig, LotConfig, SpotCounts, load_config
from .errors import (
    InvalidReleaseError,
    LotFullError,
    ParkingError,
    VehicleAlreadyParkedError,
    VehicleNotFoundError,
)
from .fees import FeeSchedule, HourlyFeeStrategy

__version__ = "1.0.0"

__all__ = [
    "Level",
    "ParkingLot",
    "SpotType",
    "Vehicle",
    "VehicleClass",
    "create_vehicle",
    "LevelConfig",
    "LotConfig",
    "SpotCounts",
    "load_config",
    "InvalidReleaseError",
    "LotFullError",
    "ParkingError",
    "VehicleAlreadyParkedError",
    "VehicleNotFoundError",
    "FeeSchedule",
    "HourlyFeeStrategy",
]
