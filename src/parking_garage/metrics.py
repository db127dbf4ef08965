"""Prometheus metrics for the parking lot."""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

VEHICLES_PARKED = Counter(
    "parking_vehicles_parked_total",
    "Total number of vehicles assigned a spot",
    ["level_id", "vehicle_class"],
    registry=REGISTRY,
)

PARKING_REJECTIONS = Counter(
    "parking_rejections_total",
    "Vehicles turned away because no level had a free spot",
    ["vehicle_class"],
    registry=REGISTRY,
)

DEPARTURES = Counter(
    "parking_departures_total",
    "Total number of vehicles that left",
    ["level_id", "vehicle_class"],
    registry=REGISTRY,
)

FEES_COLLECTED = Counter(
    "parking_fees_total",
    "Sum of fees computed on departure",
    ["vehicle_class"],
    registry=REGISTRY,
)

# Stay length histogram (in hours)
PARKING_DURATION = Histogram(
    "parking_duration_hours",
    "Length of completed parking sessions",
    buckets=(0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 12.0, 24.0, 48.0),
    registry=REGISTRY,
)

FREE_SPOTS = Gauge(
    "parking_spots_free",
    "Number of free spots per level and spot type",
    ["level_id", "spot_type"],
    registry=REGISTRY,
)


def record_park(level_id: str, vehicle_class: str) -> None:
    """Record a successful park."""
    VEHICLES_PARKED.labels(level_id=level_id, vehicle_class=vehicle_class).inc()


def record_rejection(vehicle_class: str) -> None:
    """Record a vehicle that could not be parked."""
    PARKING_REJECTIONS.labels(vehicle_class=vehicle_class).inc()


def record_departure(level_id: str, vehicle_class: str, fee: float, hours: float) -> None:
    """Record a departure with its fee and duration."""
    DEPARTURES.labels(level_id=level_id, vehicle_class=vehicle_class).inc()
    FEES_COLLECTED.labels(vehicle_class=vehicle_class).inc(fee)
    PARKING_DURATION.observe(hours)


def update_free_spots(level_id: str, spot_type: str, free: int) -> None:
    """Update the free spot gauge for one pool."""
    FREE_SPOTS.labels(level_id=level_id, spot_type=spot_type).set(free)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
