from server.carpark.extensions import db
from server.carpark.models.vehicle_type import VehicleType

MAX_REG_LENGTH = 20


class ParkingSpace(db.Model):
    __tablename__ = "parking_spaces"
    __table_args__ = (
        db.Index(
            "ix_parking_spaces_vehicle_reg",
            "vehicle_reg",
            unique=True,
            sqlite_where=db.text("vehicle_reg IS NOT NULL"),
            postgresql_where=db.text("vehicle_reg IS NOT NULL"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    vehicle_reg = db.Column(db.String(MAX_REG_LENGTH), nullable=True)
    vehicle_type = db.Column(
        db.Enum(VehicleType, native_enum=False, length=10, validate_strings=True),
        nullable=True,
    )
    space_number = db.Column(db.Integer, unique=True, nullable=False)
    time_in = db.Column(db.DateTime(timezone=True), nullable=True)
    time_out = db.Column(db.DateTime(timezone=True), nullable=True)
    is_occupied = db.Column(db.Boolean, default=False, nullable=False)

    def copy(self):
        """Detached copy carrying every column value."""
        return ParkingSpace(
            id=self.id,
            vehicle_reg=self.vehicle_reg,
            vehicle_type=self.vehicle_type,
            space_number=self.space_number,
            time_in=self.time_in,
            time_out=self.time_out,
            is_occupied=self.is_occupied,
        )

    def __repr__(self):
        state = self.vehicle_reg if self.is_occupied else "free"
        return f"<ParkingSpace {self.space_number} {state}>"
