"""State management module."""

from .models import (
    LevelStatus,
    LotStatus,
    Receipt,
    Spot,
    SpotType,
    Ticket,
    Vehicle,
    VehicleClass,
    create_vehicle,
)
from .level import Level
from .lot import ParkingLot

__all__ = [
    "LevelStatus",
    "LotStatus",
    "Receipt",
    "Spot",
    "SpotType",
    "Ticket",
    "Vehicle",
    "VehicleClass",
    "create_vehicle",
    "Level",
    "ParkingLot",
]
