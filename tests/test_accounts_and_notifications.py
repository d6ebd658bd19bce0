from fastapi.testclient import TestClient

from tests.conftest import auth_headers, booking_payload

CUSTOMER = auth_headers("customer-1", "customer")
PARTNER = auth_headers("partner-1", "partner")


def _create(client: TestClient, headers=CUSTOMER, **overrides) -> dict:
    res = client.post("/api/v1/booking/createBooking", json=booking_payload(**overrides), headers=headers)
    assert res.status_code == 201, res.json()
    return res.json()["data"]


class TestAccountRemoval:
    def test_customer_removal_deletes_their_bookings(self, client: TestClient, bundle):
        _create(client)
        _create(client, headers=auth_headers("customer-2", "customer"), carId="car-2")

        res = client.delete("/api/v1/customers/remove", headers=CUSTOMER)

        assert res.status_code == 200
        assert res.json()["data"] == {
            "accountId": "customer-1",
            "role": "customer",
            "deletedBookings": 1,
            "deletedCars": 0,
        }
        remaining = client.get("/api/v1/booking/getAllBooking", headers=PARTNER).json()["data"]
        assert [b["customerId"] for b in remaining] == ["customer-2"]

    def test_partner_removal_deletes_bookings_and_cars(self, client: TestClient, bundle):
        _create(client)

        res = client.delete("/api/v1/partners/remove", headers=PARTNER)

        data = res.json()["data"]
        assert data["deletedBookings"] == 1
        assert data["deletedCars"] == 2
        assert bundle["catalog_repo"].cars == {}

    def test_unknown_driver_is_404(self, client: TestClient, bundle):
        res = client.delete("/api/v1/drivers/remove", headers=auth_headers("driver-404", "driver"))

        assert res.status_code == 404
        assert res.json()["error"]["code"] == "DRIVER_NOT_FOUND"


class TestNotificationInbox:
    def test_list_and_delete(self, client: TestClient, bundle):
        _create(client)
        _create(
            client,
            headers=auth_headers("customer-2", "customer"),
            carId="car-2",
        )

        listed = client.get("/api/v1/notifications", headers=PARTNER).json()["data"]
        assert len(listed) == 2
        assert {n["type"] for n in listed} == {"partner"}
        assert all(n["isRead"] is False for n in listed)

        res = client.delete(f"/api/v1/notifications/{listed[0]['id']}", headers=PARTNER)
        assert res.status_code == 200

        res = client.delete("/api/v1/notifications", headers=PARTNER)
        assert res.json()["data"] == {"deletedCount": 1}
        assert client.get("/api/v1/notifications", headers=PARTNER).json()["data"] == []

    def test_cannot_delete_someone_elses_notification(self, client: TestClient, bundle):
        _create(client)
        notification = bundle["notification_repo"].all()[0]

        res = client.delete(f"/api/v1/notifications/{notification.id}", headers=CUSTOMER)

        assert res.status_code == 404
        assert res.json()["error"]["code"] == "NOTIFICATION_NOT_FOUND"
