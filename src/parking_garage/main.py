"""Main application entry point."""

import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import LotConfig, SpotCounts, get_config_path, load_config
from .errors import ParkingError
from .state.lot import ParkingLot
from .state.models import VehicleClass, create_vehicle

logger = logging.getLogger(__name__)

DEFAULT_LEVELS = ["L1", "L2"]
DEFAULT_COUNTS = SpotCounts(handicap=5, compact=20, large=10, motorcycle=10)


def default_config() -> LotConfig:
    """Two identical levels, used when no configuration file exists."""
    return LotConfig.uniform(DEFAULT_LEVELS, DEFAULT_COUNTS)


def resolve_config(path: str | Path | None = None) -> LotConfig:
    """
    Load the lot configuration, falling back to the built-in layout.

    Args:
        path: Explicit configuration file, must exist if given

    Returns:
        Validated LotConfig instance
    """
    if path is not None:
        return load_config(path)

    config_path = get_config_path()
    if config_path.exists():
        return load_config(config_path)

    return default_config()


def run_demo(lot: ParkingLot) -> list[float]:
    """
    Park a car, a bike and a bus, then send the car home.

    Returns:
        Fees computed for the vehicles that left
    """
    arrivals = [
        create_vehicle(VehicleClass.CAR, "KA-01-1234"),
        create_vehicle(VehicleClass.BIKE, "KA-02-5678"),
        create_vehicle(VehicleClass.BUS, "KA-03-9999"),
    ]
    for vehicle in arrivals:
        try:
            ticket = lot.park(vehicle)
            print(f"Vehicle {vehicle.id} parked at {ticket.spot_id} (ticket {ticket.ticket_number})")
        except ParkingError as e:
            print(f"Error: {e}")

    fees = []
    for plate in ["KA-01-1234"]:
        try:
            receipt = lot.remove(plate)
            print(f"Vehicle {plate} departed from {receipt.spot_id}, fee={receipt.fee:.2f}")
            fees.append(receipt.fee)
        except ParkingError as e:
            print(f"Error: {e}")

    return fees


def main():
    """CLI entry point for the parking lot demonstration."""
    config_arg = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        config = resolve_config(config_arg)
    except (FileNotFoundError, ValidationError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    lot = ParkingLot(config)
    run_demo(lot)

    for level in lot.status().levels:
        free = ", ".join(f"{spot_type.value}={count}" for spot_type, count in level.free.items())
        print(f"Level {level.id}: {level.occupied} occupied, free: {free}")


if __name__ == "__main__":
    main()
