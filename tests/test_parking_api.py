import unittest
from datetime import datetime
from unittest.mock import patch

from config import TestConfig
from server.run import create_app
from server.carpark.extensions import db
from server.carpark.ledger import SqlAlchemySpaceLedger
from server.carpark.models import ParkingSpace
from server.carpark.services import ParkingService
from tests.clock import FakeClock

ROUTES = "server.carpark.blueprints.parking.routes"


class SmallCarParkConfig(TestConfig):
    TOTAL_SPACES = 2


class ApiTestBase(unittest.TestCase):
    config = TestConfig

    def setUp(self):
        self.app = create_app(self.config)
        self.client = self.app.test_client()
        self.clock = FakeClock()

        clock = self.clock
        patcher = patch(
            f"{ROUTES}._service",
            lambda: ParkingService(SqlAlchemySpaceLedger(db.session), clock=clock),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def park(self, vehicle_reg, vehicle_type="Medium"):
        return self.client.post("/parking", json={"vehicleReg": vehicle_reg, "vehicleType": vehicle_type})

    def exit(self, vehicle_reg):
        return self.client.post("/parking/exit", json={"vehicleReg": vehicle_reg})

    def status(self):
        return self.client.get("/parking").get_json()

    def space(self, space_number):
        with self.app.app_context():
            return ParkingSpace.query.filter_by(space_number=space_number).one().copy()


class TestParkEndpoint(ApiTestBase):

    def test_park_returns_space_and_time(self):
        response = self.park("ABC123")

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["vehicleReg"], "ABC123")
        self.assertEqual(body["spaceNumber"], 1)
        self.assertEqual(datetime.fromisoformat(body["timeIn"]), self.clock.now)

    def test_spaces_are_allocated_in_order(self):
        numbers = [self.park(reg).get_json()["spaceNumber"] for reg in ("A1", "B2", "C3")]
        self.assertEqual(numbers, [1, 2, 3])

    def test_missing_registration(self):
        response = self.client.post("/parking", json={"vehicleType": "Small"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_data(as_text=True), "Vehicle registration is required.")
        self.assertTrue(response.content_type.startswith("text/plain"))

    def test_missing_vehicle_type(self):
        response = self.client.post("/parking", json={"vehicleReg": "ABC123", "vehicleType": " "})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_data(as_text=True), "Vehicle type is required.")

    def test_non_json_body(self):
        response = self.client.post("/parking", data="not json", content_type="text/plain")
        self.assertEqual(response.status_code, 400)

    def test_non_string_fields_are_missing(self):
        response = self.client.post("/parking", json={"vehicleReg": 123, "vehicleType": "Small"})
        self.assertEqual(response.status_code, 400)

    def test_invalid_vehicle_type(self):
        response = self.park("ABC123", "Truck")

        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid vehicle type: Truck", response.get_data(as_text=True))

    def test_already_parked(self):
        self.park("ABC123", "Small")
        response = self.park("ABC123", "Large")

        self.assertEqual(response.status_code, 400)
        self.assertIn("ABC123", response.get_data(as_text=True))
        self.assertIn("already parked", response.get_data(as_text=True))
        self.assertEqual(self.status()["occupiedSpaces"], 1)

    def test_unexpected_error_is_not_echoed(self):
        with patch(f"{ROUTES}._service") as service:
            service.return_value.park_vehicle.side_effect = RuntimeError("password=hunter2")
            with self.assertLogs(ROUTES, level="ERROR"):
                response = self.park("ABC123")

        self.assertEqual(response.status_code, 500)
        body = response.get_data(as_text=True)
        self.assertEqual(body, "An error occurred while parking the vehicle.")
        self.assertNotIn("hunter2", body)


class TestCarParkFull(ApiTestBase):
    config = SmallCarParkConfig

    def test_full_car_park_is_service_unavailable(self):
        self.park("A1")
        self.park("B2")

        response = self.park("C3", "Small")

        self.assertEqual(response.status_code, 503)
        self.assertIn("Car park is full", response.get_data(as_text=True))
        self.assertEqual(self.status(), {"availableSpaces": 0, "occupiedSpaces": 2})


class TestStatusEndpoint(ApiTestBase):

    def test_all_free_after_seed(self):
        self.assertEqual(self.status(), {"availableSpaces": 20, "occupiedSpaces": 0})

    def test_counts_follow_park_and_exit(self):
        self.park("A1")
        self.park("B2")
        self.assertEqual(self.status(), {"availableSpaces": 18, "occupiedSpaces": 2})

        self.exit("A1")
        status = self.status()
        self.assertEqual(status, {"availableSpaces": 19, "occupiedSpaces": 1})
        self.assertEqual(self.status(), status)

    def test_unexpected_error(self):
        with patch(f"{ROUTES}._service") as service:
            service.return_value.get_space_status.side_effect = RuntimeError("boom")
            with self.assertLogs(ROUTES, level="ERROR"):
                response = self.client.get("/parking")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.get_data(as_text=True),
            "An error occurred while retrieving space status.",
        )


class TestExitEndpoint(ApiTestBase):

    def test_exit_returns_charge(self):
        time_in = self.park("ABC123", "Medium").get_json()["timeIn"]
        self.clock.advance(minutes=12)

        response = self.exit("ABC123")

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["vehicleReg"], "ABC123")
        self.assertEqual(body["vehicleCharge"], 4.40)
        self.assertEqual(body["timeIn"], time_in)
        self.assertEqual(datetime.fromisoformat(body["timeOut"]), self.clock.now)

    def test_exit_clears_the_space(self):
        self.park("ABC123", "Large")
        self.clock.advance(minutes=5)
        self.assertEqual(self.exit("ABC123").get_json()["vehicleCharge"], 3.00)

        space = self.space(1)
        self.assertFalse(space.is_occupied)
        self.assertIsNone(space.vehicle_reg)
        self.assertIsNone(space.vehicle_type)
        self.assertIsNone(space.time_in)
        self.assertIsNotNone(space.time_out)

        self.assertEqual(self.park("XYZ789").get_json()["spaceNumber"], 1)

    def test_exit_unknown_vehicle(self):
        response = self.exit("NOPE123")

        self.assertEqual(response.status_code, 404)
        self.assertIn("NOPE123", response.get_data(as_text=True))

    def test_exit_missing_registration(self):
        for body in ({}, {"vehicleReg": ""}, {"vehicleReg": None}):
            response = self.client.post("/parking/exit", json=body)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.get_data(as_text=True), "Vehicle registration is required.")

    def test_exit_registration_too_long(self):
        response = self.exit("X" * 21)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.get_data(as_text=True),
            "Vehicle registration must be 20 characters or fewer.",
        )

    def test_unexpected_error(self):
        with patch(f"{ROUTES}._service") as service:
            service.return_value.process_exit.side_effect = RuntimeError("boom")
            with self.assertLogs(ROUTES, level="ERROR"):
                response = self.exit("ABC123")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.get_data(as_text=True),
            "An error occurred while processing vehicle exit.",
        )


class TestHealthEndpoint(ApiTestBase):

    def test_health(self):
        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
