from datetime import datetime, UTC
import logging

from ..models.parking_space import MAX_REG_LENGTH
from ..models.vehicle_type import VehicleType
from ..utils import as_utc, calculate_charge
from .outcome import Outcome, FailureKind, ParkResult, SpaceStatus, ExitResult

logger = logging.getLogger(__name__)

REG_REQUIRED = "Vehicle registration is required."
TYPE_REQUIRED = "Vehicle type is required."
REG_TOO_LONG = f"Vehicle registration must be {MAX_REG_LENGTH} characters or fewer."


def _blank(value):
    return not isinstance(value, str) or not value.strip()


def validate_park_request(vehicle_reg, vehicle_type):
    """Return the validation message for a park request, or None if it is usable"""
    if _blank(vehicle_reg):
        return REG_REQUIRED
    if _blank(vehicle_type):
        return TYPE_REQUIRED
    if len(vehicle_reg) > MAX_REG_LENGTH:
        return REG_TOO_LONG
    return None


def validate_exit_request(vehicle_reg):
    if _blank(vehicle_reg):
        return REG_REQUIRED
    if len(vehicle_reg) > MAX_REG_LENGTH:
        return REG_TOO_LONG
    return None


class ParkingService:
    """Allocates spaces, frees them on exit and prices the stay."""

    def __init__(self, ledger, clock=None):
        self.ledger = ledger
        self.clock = clock or (lambda: datetime.now(UTC))

    def park_vehicle(self, vehicle_reg, vehicle_type_text):
        logger.info("Parking vehicle %s", vehicle_reg)

        message = validate_park_request(vehicle_reg, vehicle_type_text)
        if message:
            logger.warning("Rejected park request: %s", message)
            return Outcome.fail(FailureKind.VALIDATION_ERROR, message)

        vehicle_type = VehicleType.parse(vehicle_type_text)
        if vehicle_type is None:
            logger.warning("Invalid vehicle type: %s", vehicle_type_text)
            return Outcome.fail(
                FailureKind.INVALID_VEHICLE_TYPE,
                f"Invalid vehicle type: {vehicle_type_text}. Must be Small, Medium, or Large.",
            )

        if self.ledger.is_reg_currently_parked(vehicle_reg):
            logger.warning("Vehicle %s is already parked", vehicle_reg)
            return Outcome.fail(
                FailureKind.ALREADY_PARKED, f"Vehicle {vehicle_reg} is already parked."
            )

        space = self.ledger.find_free_space()
        if space is None:
            logger.warning("Car park full")
            return Outcome.fail(
                FailureKind.CAR_PARK_FULL, "Car park is full. No available spaces."
            )

        space.vehicle_reg = vehicle_reg
        space.vehicle_type = vehicle_type
        space.time_in = self.clock()
        space.is_occupied = True
        self.ledger.save(space)

        logger.info("Parked %s in space %s", vehicle_reg, space.space_number)
        return Outcome.success(ParkResult(
            vehicle_reg=vehicle_reg,
            space_number=space.space_number,
            time_in=as_utc(space.time_in),
        ))

    def get_space_status(self):
        return Outcome.success(SpaceStatus(
            available=self.ledger.count_free(),
            occupied=self.ledger.count_occupied(),
        ))

    def process_exit(self, vehicle_reg):
        logger.info("Processing exit for %s", vehicle_reg)

        message = validate_exit_request(vehicle_reg)
        if message:
            logger.warning("Rejected exit request: %s", message)
            return Outcome.fail(FailureKind.VALIDATION_ERROR, message)

        space = self.ledger.find_occupied_space_by_reg(vehicle_reg)
        if space is None:
            logger.warning("Vehicle not found: %s", vehicle_reg)
            return Outcome.fail(
                FailureKind.NOT_PARKED, f"Vehicle {vehicle_reg} is not currently parked."
            )

        time_in = as_utc(space.time_in)
        time_out = self.clock()
        charge = calculate_charge(space.vehicle_type, time_in, time_out)

        logger.info("Exit charge for %s: %s", vehicle_reg, charge)

        # free up the space
        space.time_out = time_out
        space.is_occupied = False
        space.vehicle_reg = None
        space.vehicle_type = None
        space.time_in = None
        self.ledger.save(space)

        return Outcome.success(ExitResult(
            vehicle_reg=vehicle_reg,
            charge=charge,
            time_in=time_in,
            time_out=time_out,
        ))
