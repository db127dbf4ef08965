"""Data models for vehicles, spots and parking sessions."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VehicleClass(str, Enum):
    """Class of a vehicle, which decides its spot type and hourly rate."""

    HANDICAP = "handicap"
    BIKE = "bike"
    CAR = "car"
    BUS = "bus"


class SpotType(str, Enum):
    """Type of a physical parking spot."""

    HANDICAP = "handicap"
    MOTORCYCLE = "motorcycle"
    COMPACT = "compact"
    LARGE = "large"


SPOT_TYPE_FOR_CLASS: dict[VehicleClass, SpotType] = {
    VehicleClass.HANDICAP: SpotType.HANDICAP,
    VehicleClass.BIKE: SpotType.MOTORCYCLE,
    VehicleClass.CAR: SpotType.COMPACT,
    VehicleClass.BUS: SpotType.LARGE,
}

# Prefix used when numbering spots, e.g. "L1-C3"
SPOT_ID_PREFIX: dict[SpotType, str] = {
    SpotType.HANDICAP: "H",
    SpotType.MOTORCYCLE: "M",
    SpotType.COMPACT: "C",
    SpotType.LARGE: "L",
}


def normalise_plate(plate: str) -> str:
    """Canonical form of a plate: trimmed and upper-cased."""
    return plate.strip().upper()


def required_spot_type(vehicle_class: VehicleClass) -> SpotType:
    """Get the spot type a vehicle class must park in."""
    return SPOT_TYPE_FOR_CLASS[vehicle_class]


class Vehicle(BaseModel):
    """A vehicle identified by its plate."""

    model_config = ConfigDict(frozen=True)

    id: str
    vehicle_class: VehicleClass

    @field_validator("id")
    @classmethod
    def check_plate(cls, v: str) -> str:
        v = normalise_plate(v)
        if not v:
            raise ValueError("Vehicle id cannot be empty")
        return v


def create_vehicle(vehicle_class: VehicleClass | str, plate: str) -> Vehicle:
    """Create a vehicle of the given class."""
    return Vehicle(id=plate, vehicle_class=VehicleClass(vehicle_class))


class Spot(BaseModel):
    """Current state of a single parking spot."""

    id: str
    level_id: str
    spot_type: SpotType
    occupied: bool = False
    vehicle_id: Optional[str] = None  # Plate of the parked vehicle, not the vehicle itself


class Ticket(BaseModel):
    """Record of a parking session's start."""

    model_config = ConfigDict(frozen=True)

    ticket_number: str = Field(default_factory=lambda: uuid.uuid4().hex[:12].upper())
    vehicle_id: str
    vehicle_class: VehicleClass
    level_id: str
    spot_id: str
    issued_at: datetime


class Receipt(BaseModel):
    """Outcome of a departure: the consumed ticket and the fee owed."""

    ticket: Ticket
    departed_at: datetime
    hours: float
    rate: float
    fee: float

    @property
    def vehicle_id(self) -> str:
        return self.ticket.vehicle_id

    @property
    def spot_id(self) -> str:
        return self.ticket.spot_id


class LevelStatus(BaseModel):
    """Snapshot of a level's occupancy."""

    id: str
    total: dict[SpotType, int]
    free: dict[SpotType, int]
    occupied: int


class LotStatus(BaseModel):
    """Snapshot of the whole lot."""

    levels: list[LevelStatus]
    parked_vehicles: int
    timestamp: datetime

    @property
    def free(self) -> dict[SpotType, int]:
        totals = {spot_type: 0 for spot_type in SpotType}
        for level in self.levels:
            for spot_type, count in level.free.items():
                totals[spot_type] += count
        return totals
