"""Exceptions raised by the parking lot."""


class ParkingError(Exception):
    """Base exception for parking errors."""


class LotFullError(ParkingError):
    """No level has a free spot for the vehicle."""

    def __init__(self, vehicle_id: str):
        super().__init__(f"Parking full for {vehicle_id}")
        self.vehicle_id = vehicle_id


class VehicleNotFoundError(ParkingError):
    """No occupied spot is bound to the vehicle."""

    def __init__(self, vehicle_id: str):
        super().__init__(f"Vehicle not found: {vehicle_id}")
        self.vehicle_id = vehicle_id


class VehicleAlreadyParkedError(ParkingError):
    """The vehicle already has an active parking session."""

    def __init__(self, vehicle_id: str, spot_id: str):
        super().__init__(f"Vehicle {vehicle_id} is already parked at {spot_id}")
        self.vehicle_id = vehicle_id
        self.spot_id = spot_id


class InvalidReleaseError(ParkingError):
    """A spot was released while free, or by a level that does not own it."""

    def __init__(self, spot_id: str, reason: str):
        super().__init__(f"Cannot release spot {spot_id}: {reason}")
        self.spot_id = spot_id


class InconsistentStateError(ParkingError):
    """Free pools, occupancy flags and sessions disagree."""
