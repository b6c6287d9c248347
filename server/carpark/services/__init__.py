from .outcome import Outcome, FailureKind, ParkResult, SpaceStatus, ExitResult
from .parking_service import ParkingService
