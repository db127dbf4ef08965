"""Multi-level parking lot."""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..config import LotConfig
from ..errors import (
    InconsistentStateError,
    LotFullError,
    VehicleAlreadyParkedError,
    VehicleNotFoundError,
)
from ..fees import FeeSchedule
from ..metrics import record_rejection
from .level import Level
from .models import LotStatus, Receipt, Spot, Ticket, Vehicle, normalise_plate

logger = logging.getLogger(__name__)


class ParkingLot:
    """
    Owns the levels of a facility and routes arrivals and departures.

    Levels are tried in configured order and the first one with a
    compatible free spot wins. Spots only hold plates; the vehicles
    currently parked are kept here, keyed by plate.
    """

    def __init__(self, config: LotConfig, clock: Callable[[], datetime] = datetime.now):
        self.fees = FeeSchedule(config.fees)
        self._clock = clock
        self.levels: dict[str, Level] = {
            level_config.id: Level(level_config, fees=self.fees, clock=clock)
            for level_config in config.levels
        }
        self._vehicles: dict[str, Vehicle] = {}

        logger.info(f"Initialized parking lot with levels: {', '.join(self.levels)}")

    def park(self, vehicle: Vehicle) -> Ticket:
        """
        Park a vehicle on the first level that can take it.

        Returns:
            Ticket for the new session

        Raises:
            VehicleAlreadyParkedError: If the plate already has an active session
            LotFullError: If no level has a compatible free spot
        """
        spot = self.locate(vehicle.id)
        if spot is not None:
            logger.warning(f"Vehicle {vehicle.id} is already parked at {spot.id}")
            raise VehicleAlreadyParkedError(vehicle.id, spot.id)

        now = self._clock()
        for level in self.levels.values():
            ticket = level.park(vehicle, now=now)
            if ticket is not None:
                self._vehicles[vehicle.id] = vehicle
                return ticket

        logger.warning(f"Parking full for {vehicle.id}")
        record_rejection(vehicle.vehicle_class.value)
        raise LotFullError(vehicle.id)

    def remove(self, vehicle_id: str) -> Receipt:
        """
        Remove a vehicle from whichever level holds it.

        Returns:
            Receipt with the computed fee

        Raises:
            VehicleNotFoundError: If no level holds the vehicle
        """
        vehicle_id = normalise_plate(vehicle_id)
        now = self._clock()
        for level in self.levels.values():
            receipt = level.depart(vehicle_id, now=now)
            if receipt is not None:
                self._vehicles.pop(vehicle_id, None)
                return receipt

        logger.warning(f"Vehicle not found: {vehicle_id}")
        raise VehicleNotFoundError(vehicle_id)

    def locate(self, vehicle_id: str) -> Optional[Spot]:
        """Find the spot a vehicle is parked in."""
        vehicle_id = normalise_plate(vehicle_id)
        for level in self.levels.values():
            spot = level.find_vehicle(vehicle_id)
            if spot is not None:
                return spot
        return None

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Get a parked vehicle by plate."""
        return self._vehicles.get(normalise_plate(vehicle_id))

    def is_parked(self, vehicle_id: str) -> bool:
        return self.get_vehicle(vehicle_id) is not None

    def status(self) -> LotStatus:
        """Get current lot status."""
        return LotStatus(
            levels=[level.status() for level in self.levels.values()],
            parked_vehicles=len(self._vehicles),
            timestamp=self._clock(),
        )

    def check_invariants(self) -> None:
        """
        Verify every level, and that each parked vehicle holds exactly one spot.

        Raises:
            InconsistentStateError: If any level or the vehicle registry is inconsistent
        """
        for level in self.levels.values():
            level.check_invariants()

        occupants = [s.vehicle_id for level in self.levels.values() for s in level.spots if s.occupied]
        if len(occupants) != len(set(occupants)):
            raise InconsistentStateError("vehicle parked in more than one spot")
        if set(occupants) != set(self._vehicles):
            raise InconsistentStateError("vehicle registry does not match spots")
