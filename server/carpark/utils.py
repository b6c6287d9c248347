from datetime import UTC
from decimal import Decimal, ROUND_HALF_EVEN
import logging
import math

from .models.vehicle_type import VehicleType

logger = logging.getLogger(__name__)

# rates per minute
RATES_PER_MINUTE = {
    VehicleType.Small: Decimal("0.10"),
    VehicleType.Medium: Decimal("0.20"),
    VehicleType.Large: Decimal("0.40"),
}
ADDITIONAL_CHARGE_PER_FIVE_MINUTES = Decimal("1.00")
CENT = Decimal("0.01")


def as_utc(value):
    """Treat naive timestamps (SQLite drops the zone) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def calculate_duration(time_in, time_out):
    """Whole minutes between two timestamps, partial minutes rounded up."""
    seconds = (as_utc(time_out) - as_utc(time_in)).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 60)


def calculate_charge(vehicle_type, time_in, time_out):
    # (rate x minutes) + 1.00 for every full 5 minutes
    minutes = calculate_duration(time_in, time_out)
    rate = RATES_PER_MINUTE[vehicle_type]

    base_charge = rate * minutes
    additional_charge = (minutes // 5) * ADDITIONAL_CHARGE_PER_FIVE_MINUTES
    total = (base_charge + additional_charge).quantize(CENT, rounding=ROUND_HALF_EVEN)

    logger.debug("%smin = %s + %s = %s", minutes, base_charge, additional_charge, total)
    return total
