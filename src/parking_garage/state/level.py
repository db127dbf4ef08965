"""Spot inventory and allocation for a single parking level."""

import logging
from collections import deque
from datetime import datetime
from typing import Callable, Optional

from ..config import LevelConfig
from ..errors import InconsistentStateError, InvalidReleaseError, VehicleAlreadyParkedError
from ..fees import FeeSchedule
from ..metrics import record_departure, record_park, update_free_spots
from .models import (
    SPOT_ID_PREFIX,
    LevelStatus,
    Receipt,
    Spot,
    SpotType,
    Ticket,
    Vehicle,
    VehicleClass,
    normalise_plate,
    required_spot_type,
)

logger = logging.getLogger(__name__)


class Level:
    """
    A parking level with a fixed set of typed spots.

    Free spots are kept in one FIFO pool per spot type. A spot is in its
    pool exactly when it is not occupied, so allocation is a pop from the
    front and release is an append to the back.
    """

    def __init__(
        self,
        config: LevelConfig,
        fees: Optional[FeeSchedule] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the level.

        Args:
            config: Level id and spot counts per type
            fees: Fee schedule used on departure
            clock: Source of the current time
        """
        self.id = config.id
        self.fees = fees or FeeSchedule()
        self._clock = clock

        self.spots: list[Spot] = []
        self._spots_by_id: dict[str, Spot] = {}
        self._free: dict[SpotType, deque[Spot]] = {spot_type: deque() for spot_type in SpotType}
        self._tickets: dict[str, Ticket] = {}  # vehicle_id -> active ticket

        counts = {
            SpotType.HANDICAP: config.handicap,
            SpotType.MOTORCYCLE: config.motorcycle,
            SpotType.COMPACT: config.compact,
            SpotType.LARGE: config.large,
        }
        for spot_type, count in counts.items():
            for i in range(count):
                self._create_spot(spot_type, i)
            update_free_spots(self.id, spot_type.value, len(self._free[spot_type]))

        logger.info(f"Initialized level {self.id} with {len(self.spots)} spots")

    def _create_spot(self, spot_type: SpotType, index: int) -> None:
        spot = Spot(
            id=f"{self.id}-{SPOT_ID_PREFIX[spot_type]}{index + 1}",
            level_id=self.id,
            spot_type=spot_type,
        )
        self.spots.append(spot)
        self._spots_by_id[spot.id] = spot
        self._free[spot_type].append(spot)

    def allocate(self, vehicle_class: VehicleClass) -> Optional[Spot]:
        """
        Take the oldest free spot compatible with a vehicle class.

        Args:
            vehicle_class: Class of the arriving vehicle

        Returns:
            The spot, now marked occupied, or None if no spot is free
        """
        spot_type = required_spot_type(vehicle_class)
        pool = self._free[spot_type]
        if not pool:
            logger.debug(f"Level {self.id}: no free {spot_type.value} spot")
            return None

        spot = pool.popleft()
        spot.occupied = True
        update_free_spots(self.id, spot_type.value, len(pool))
        return spot

    def release(self, spot: Spot) -> None:
        """
        Return an occupied spot to the back of its type's free pool.

        Raises:
            InvalidReleaseError: If the spot is already free, belongs to another
                level, or still holds a vehicle with an active ticket
        """
        if self._spots_by_id.get(spot.id) is not spot:
            raise InvalidReleaseError(spot.id, "spot does not belong to this level")
        if not spot.occupied:
            raise InvalidReleaseError(spot.id, "spot is already free")
        if spot.vehicle_id in self._tickets:
            raise InvalidReleaseError(spot.id, f"vehicle {spot.vehicle_id} is still parked, use depart")

        spot.occupied = False
        spot.vehicle_id = None
        pool = self._free[spot.spot_type]
        pool.append(spot)
        update_free_spots(self.id, spot.spot_type.value, len(pool))

    def park(self, vehicle: Vehicle, now: Optional[datetime] = None) -> Optional[Ticket]:
        """
        Park a vehicle on this level.

        Args:
            vehicle: Arriving vehicle
            now: Entry time, defaults to the level clock

        Returns:
            Ticket for the new session, or None if no compatible spot is free

        Raises:
            VehicleAlreadyParkedError: If the vehicle already holds a spot here
        """
        if vehicle.id in self._tickets:
            raise VehicleAlreadyParkedError(vehicle.id, self._tickets[vehicle.id].spot_id)

        spot = self.allocate(vehicle.vehicle_class)
        if spot is None:
            return None

        spot.vehicle_id = vehicle.id
        ticket = Ticket(
            vehicle_id=vehicle.id,
            vehicle_class=vehicle.vehicle_class,
            level_id=self.id,
            spot_id=spot.id,
            issued_at=now or self._clock(),
        )
        self._tickets[vehicle.id] = ticket

        logger.info(f"Vehicle {vehicle.id} parked at spot {spot.id}")
        record_park(self.id, vehicle.vehicle_class.value)
        return ticket

    def find_vehicle(self, vehicle_id: str) -> Optional[Spot]:
        """Find the occupied spot bound to a vehicle."""
        vehicle_id = normalise_plate(vehicle_id)
        for spot in self.spots:
            if spot.occupied and spot.vehicle_id == vehicle_id:
                return spot
        return None

    def depart(self, vehicle_id: str, now: Optional[datetime] = None) -> Optional[Receipt]:
        """
        Remove a vehicle from this level and compute its fee.

        Args:
            vehicle_id: Plate of the leaving vehicle
            now: Departure time, defaults to the level clock

        Returns:
            Receipt with the fee, or None if the vehicle is not on this level
        """
        vehicle_id = normalise_plate(vehicle_id)
        spot = self.find_vehicle(vehicle_id)
        if spot is None:
            return None

        now = now or self._clock()
        ticket = self._tickets.pop(vehicle_id)
        strategy = self.fees.strategy_for(ticket.vehicle_class)
        fee = strategy.calculate_fee(ticket.issued_at, now)
        hours = strategy.elapsed_hours(ticket.issued_at, now)

        self.release(spot)

        logger.info(f"Vehicle {vehicle_id} departed from spot {spot.id}, fee={fee:.2f}")
        record_departure(self.id, ticket.vehicle_class.value, fee, hours)
        return Receipt(
            ticket=ticket,
            departed_at=now,
            hours=hours,
            rate=strategy.rate,
            fee=fee,
        )

    def get_ticket(self, vehicle_id: str) -> Optional[Ticket]:
        """Get the active ticket for a vehicle on this level."""
        return self._tickets.get(normalise_plate(vehicle_id))

    def get_free_count(self, spot_type: SpotType) -> int:
        """Get count of free spots of a type."""
        return len(self._free[spot_type])

    def get_occupied_count(self) -> int:
        """Get count of occupied spots."""
        return sum(1 for s in self.spots if s.occupied)

    def status(self) -> LevelStatus:
        """Get current level status."""
        total = {spot_type: 0 for spot_type in SpotType}
        for spot in self.spots:
            total[spot.spot_type] += 1

        return LevelStatus(
            id=self.id,
            total=total,
            free={spot_type: len(pool) for spot_type, pool in self._free.items()},
            occupied=self.get_occupied_count(),
        )

    def check_invariants(self) -> None:
        """
        Verify that free pools and occupancy flags agree.

        Raises:
            InconsistentStateError: If any spot is pooled while occupied, pooled
                twice, pooled under the wrong type, not owned by this level, or
                free but missing from its pool, or if tickets and bound spots differ
        """
        pooled_ids: set[str] = set()
        for spot_type, pool in self._free.items():
            for spot in pool:
                if self._spots_by_id.get(spot.id) is not spot:
                    raise InconsistentStateError(f"{spot.id} is pooled but not owned by level {self.id}")
                if spot.spot_type != spot_type:
                    raise InconsistentStateError(f"{spot.id} pooled as {spot_type.value}")
                if spot.occupied:
                    raise InconsistentStateError(f"{spot.id} is occupied but pooled")
                if spot.id in pooled_ids:
                    raise InconsistentStateError(f"{spot.id} pooled twice")
                pooled_ids.add(spot.id)

        free_ids = {s.id for s in self.spots if not s.occupied}
        if pooled_ids != free_ids:
            raise InconsistentStateError("free pools do not match free spots")
        if set(self._tickets) != {s.vehicle_id for s in self.spots if s.vehicle_id is not None}:
            raise InconsistentStateError("tickets do not match parked vehicles")
