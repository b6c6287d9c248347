"""
Space ledger: the set of parking spaces and their current occupancy.

``SqlAlchemySpaceLedger`` is what the application runs on.
``InMemorySpaceLedger`` keeps the same contract in a dict and is used by the
service tests.
"""
from abc import ABC, abstractmethod
import logging

from sqlalchemy.exc import SQLAlchemyError

from .models.parking_space import ParkingSpace

logger = logging.getLogger(__name__)


class SpaceLedger(ABC):

    @abstractmethod
    def find_free_space(self):
        """Free space with the lowest space number, or None when full"""

    @abstractmethod
    def find_occupied_space_by_reg(self, vehicle_reg):
        """Occupied space holding ``vehicle_reg`` (exact match), or None"""

    @abstractmethod
    def is_reg_currently_parked(self, vehicle_reg):
        pass

    @abstractmethod
    def count_free(self):
        pass

    @abstractmethod
    def count_occupied(self):
        pass

    @abstractmethod
    def save(self, space):
        """Persist every field of ``space``"""

    @abstractmethod
    def seed(self, total):
        """Create spaces 1..total when the ledger is empty. Returns rows created."""


class SqlAlchemySpaceLedger(SpaceLedger):

    def __init__(self, session):
        self.session = session

    def _occupied_by(self, vehicle_reg):
        return ParkingSpace.query.filter(
            ParkingSpace.vehicle_reg == vehicle_reg,
            ParkingSpace.is_occupied.is_(True),
        )

    def find_free_space(self):
        # SKIP LOCKED lets a concurrent park move on to the next free row
        return (
            ParkingSpace.query.filter(ParkingSpace.is_occupied.is_(False))
            .order_by(ParkingSpace.space_number)
            .with_for_update(skip_locked=True)
            .first()
        )

    def find_occupied_space_by_reg(self, vehicle_reg):
        return self._occupied_by(vehicle_reg).with_for_update().first()

    def is_reg_currently_parked(self, vehicle_reg):
        return self.session.query(self._occupied_by(vehicle_reg).exists()).scalar()

    def count_free(self):
        return ParkingSpace.query.filter(ParkingSpace.is_occupied.is_(False)).count()

    def count_occupied(self):
        return ParkingSpace.query.filter(ParkingSpace.is_occupied.is_(True)).count()

    def save(self, space):
        try:
            self.session.add(space)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.error("Failed to save parking space %s", space.space_number)
            raise
        return space

    def seed(self, total):
        if ParkingSpace.query.count():
            return 0

        for number in range(1, total + 1):
            self.session.add(ParkingSpace(id=number, space_number=number, is_occupied=False))

        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        logger.info("Seeded %d parking spaces", total)
        return total


class InMemorySpaceLedger(SpaceLedger):
    """Rows are stored as snapshots, so only ``save`` changes what is stored."""

    def __init__(self, total=0):
        self._spaces = {}
        if total:
            self.seed(total)

    def _occupied(self):
        return [s for s in self._spaces.values() if s.is_occupied]

    def find_free_space(self):
        free = [s for s in self._spaces.values() if not s.is_occupied]
        if not free:
            return None
        return min(free, key=lambda s: s.space_number).copy()

    def find_occupied_space_by_reg(self, vehicle_reg):
        for space in self._occupied():
            if space.vehicle_reg == vehicle_reg:
                return space.copy()
        return None

    def is_reg_currently_parked(self, vehicle_reg):
        return any(s.vehicle_reg == vehicle_reg for s in self._occupied())

    def count_free(self):
        return len(self._spaces) - len(self._occupied())

    def count_occupied(self):
        return len(self._occupied())

    def save(self, space):
        self._spaces[space.space_number] = space.copy()
        return space

    def seed(self, total):
        if self._spaces:
            return 0
        for number in range(1, total + 1):
            self._spaces[number] = ParkingSpace(
                id=number, space_number=number, is_occupied=False
            )
        return total

    def get(self, space_number):
        """Stored snapshot of one space. Not part of ``SpaceLedger``; used by tests."""
        space = self._spaces.get(space_number)
        return space.copy() if space is not None else None
