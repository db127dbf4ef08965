"""Time-based parking fees."""

from dataclasses import dataclass
from datetime import datetime

from .config import FeeConfig
from .state.models import VehicleClass


@dataclass(frozen=True)
class HourlyFeeStrategy:
    """Bills a fixed rate per hour, prorated for partial hours."""

    rate: float

    @staticmethod
    def elapsed_hours(entry_time: datetime, now: datetime) -> float:
        """Hours between entry and now, never negative."""
        return max(0.0, (now - entry_time).total_seconds() / 3600)

    def calculate_fee(self, entry_time: datetime, now: datetime) -> float:
        """
        Calculate the fee for a stay.

        Billing is linear: 90 minutes at 5.0/hour costs 7.5, not 10.0.

        Args:
            entry_time: When the ticket was issued
            now: When the vehicle leaves

        Returns:
            Fee amount, zero if now is not after entry_time
        """
        return self.rate * self.elapsed_hours(entry_time, now)


class FeeSchedule:
    """Lookup table from vehicle class to its fee strategy."""

    def __init__(self, config: FeeConfig | None = None):
        config = config or FeeConfig()
        self._strategies: dict[VehicleClass, HourlyFeeStrategy] = {
            VehicleClass.HANDICAP: HourlyFeeStrategy(config.handicap),
            VehicleClass.BIKE: HourlyFeeStrategy(config.bike),
            VehicleClass.CAR: HourlyFeeStrategy(config.car),
            VehicleClass.BUS: HourlyFeeStrategy(config.bus),
        }

    def strategy_for(self, vehicle_class: VehicleClass) -> HourlyFeeStrategy:
        return self._strategies[vehicle_class]

    def rate_for(self, vehicle_class: VehicleClass) -> float:
        return self._strategies[vehicle_class].rate
