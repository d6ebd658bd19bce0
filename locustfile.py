import random
import uuid
from datetime import datetime, timedelta

from locust import HttpUser, between, task

# Coinciden con scripts/seed_db.py
CAR_IDS = ["car-1", "car-2", "car-3"]
DATE_FORMAT = "%d/%m/%Y %H:%M"


class APIUser(HttpUser):
    # Wait between 1 and 3 seconds between tasks
    wait_time = between(1, 3)

    def on_start(self):
        """
        Called when a Locust user starts.
        Each simulated user books as a distinct customer.
        """
        self.headers = {
            "X-Linked-Id": f"load-customer-{uuid.uuid4().hex[:12]}",
            "X-User-Role": "customer",
            "Content-Type": "application/json",
        }

    def _payload(self) -> dict:
        start = datetime(2030, 1, 1, 10, 0) + timedelta(hours=random.randint(0, 24 * 365 * 5))
        end = start + timedelta(hours=random.randint(4, 96))
        return {
            "carId": random.choice(CAR_IDS),
            "isDriverRequired": random.random() < 0.3,
            "pickUpLocation": "Cancun Airport T2",
            "returnLocation": "Cancun Airport T2",
            "pickUpDateTime": start.strftime(DATE_FORMAT),
            "returnDateTime": end.strftime(DATE_FORMAT),
            "totalRent": 150,
        }

    @task
    def create_booking(self):
        """
        Task to simulate creating a booking.
        Overlap rejections (400) are expected under load and counted as success.
        """
        with self.client.post(
            "/api/v1/booking/createBooking",
            json=self._payload(),
            headers=self.headers,
            name="/api/v1/booking/createBooking",  # Group all requests under this name in the stats
            catch_response=True,
        ) as response:
            if response.status_code in (201, 400):
                response.success()
            else:
                response.failure(f"Unexpected status {response.status_code}")
