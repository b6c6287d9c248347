from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
import enum
from typing import Any, Optional


class FailureKind(enum.Enum):
    VALIDATION_ERROR = "validation_error"
    INVALID_VEHICLE_TYPE = "invalid_vehicle_type"
    ALREADY_PARKED = "already_parked"
    CAR_PARK_FULL = "car_park_full"
    NOT_PARKED = "not_parked"


@dataclass(frozen=True)
class Outcome:
    """Either a successful ``value`` or a ``failure`` with its message."""
    value: Any = None
    failure: Optional[FailureKind] = None
    message: Optional[str] = None

    @property
    def ok(self):
        return self.failure is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def fail(cls, failure, message):
        return cls(failure=failure, message=message)


@dataclass(frozen=True)
class ParkResult:
    vehicle_reg: str
    space_number: int
    time_in: datetime


@dataclass(frozen=True)
class SpaceStatus:
    available: int
    occupied: int


@dataclass(frozen=True)
class ExitResult:
    vehicle_reg: str
    charge: Decimal
    time_in: datetime
    time_out: datetime
