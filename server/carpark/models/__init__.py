from .vehicle_type import VehicleType
from .parking_space import ParkingSpace, MAX_REG_LENGTH
