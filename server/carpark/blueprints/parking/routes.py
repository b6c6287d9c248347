from . import parking_bp
from flask import request, jsonify
import logging
from server.carpark.extensions import db
from server.carpark.ledger import SqlAlchemySpaceLedger
from server.carpark.services import ParkingService, FailureKind

logger = logging.getLogger(__name__)

FAILURE_STATUS = {
    FailureKind.VALIDATION_ERROR: 400,
    FailureKind.INVALID_VEHICLE_TYPE: 400,
    FailureKind.ALREADY_PARKED: 400,
    FailureKind.CAR_PARK_FULL: 503,
    FailureKind.NOT_PARKED: 404,
}


def _service():
    return ParkingService(SqlAlchemySpaceLedger(db.session))


def _text(message, status):
    return message, status, {"Content-Type": "text/plain; charset=utf-8"}


def _failure(outcome):
    return _text(outcome.message, FAILURE_STATUS[outcome.failure])


def _field(data, name):
    """String value of a JSON body field, None for anything else"""
    value = data.get(name) if isinstance(data, dict) else None
    return value if isinstance(value, str) else None


@parking_bp.route("", methods=["POST"])
def park_vehicle():
    data = request.get_json(silent=True)

    try:
        outcome = _service().park_vehicle(_field(data, "vehicleReg"), _field(data, "vehicleType"))
    except Exception:
        db.session.rollback()
        logger.exception("Error parking vehicle")
        return _text("An error occurred while parking the vehicle.", 500)

    if not outcome.ok:
        return _failure(outcome)

    result = outcome.value
    return jsonify({
        "vehicleReg": result.vehicle_reg,
        "spaceNumber": result.space_number,
        "timeIn": result.time_in.isoformat(),
    }), 200


@parking_bp.route("", methods=["GET"])
def get_space_status():
    try:
        outcome = _service().get_space_status()
    except Exception:
        db.session.rollback()
        logger.exception("Error getting space status")
        return _text("An error occurred while retrieving space status.", 500)

    status = outcome.value
    return jsonify({
        "availableSpaces": status.available,
        "occupiedSpaces": status.occupied,
    }), 200


@parking_bp.route("/exit", methods=["POST"])
def process_exit():
    data = request.get_json(silent=True)

    try:
        outcome = _service().process_exit(_field(data, "vehicleReg"))
    except Exception:
        db.session.rollback()
        logger.exception("Error processing exit")
        return _text("An error occurred while processing vehicle exit.", 500)

    if not outcome.ok:
        return _failure(outcome)

    result = outcome.value
    return jsonify({
        "vehicleReg": result.vehicle_reg,
        # float only at the response boundary
        "vehicleCharge": float(result.charge),
        "timeIn": result.time_in.isoformat(),
        "timeOut": result.time_out.isoformat(),
    }), 200
