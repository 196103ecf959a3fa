"""Tests for the /bookings routes (domain functions mocked)."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from hotelbook.api.factory import create_app
from hotelbook.domain.availability import InvalidRangeError
from hotelbook.domain.booking_lookup import BookingNotFoundError
from hotelbook.domain.models import BookingResult, Hotel, Room, RoomType, StayResult
from hotelbook.infra.time import FixedClock, get_clock


@pytest.fixture
def client():
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: FixedClock(datetime(2026, 5, 1, 12, 0))
    return TestClient(app)


def _customer(email: str = "ann.lee@example.com") -> dict:
    return {
        "first_name": "Ann",
        "last_name": "Lee",
        "email": email,
        "phone": "+44 1234 567890",
        "address": "1 High St",
    }


def _body(**overrides) -> dict:
    body = {
        "customer": _customer(),
        "hotel_name": "Grand Plaza",
        "start_date": "2026-06-01",
        "end_date": "2026-06-02",
        "rooms": [
            {
                "room_number": 1,
                "capacity": 2,
                "room_type": "Double",
                "guests": [_customer("bob.stone@example.com")],
            }
        ],
    }
    body.update(overrides)
    return body


RESULT = BookingResult(
    reference="K3xQ9aZt",
    customer_name="Ann Lee",
    total_price=Decimal("100"),
    room_stays=[
        StayResult("Grand Plaza", "1", date(2026, 6, 1), date(2026, 6, 2), ["Ann Lee"]),
    ],
)


class TestCreateBookingRoute:
    def test_success(self, client):
        with patch(
            "hotelbook.api.routes.bookings.create_booking",
            return_value=(RESULT, "Booking Complete"),
        ) as mock_create:
            response = client.post("/bookings", json=_body())

        assert response.status_code == 200
        assert response.json() == {
            "booking_reference": "K3xQ9aZt",
            "customer_name": "Ann Lee",
            "total_price": 100.0,
            "room_bookings": [
                {
                    "hotel_name": "Grand Plaza",
                    "room_number": "1",
                    "start_date": "2026-06-01",
                    "end_date": "2026-06-02",
                    "guests": ["Ann Lee"],
                }
            ],
        }
        request = mock_create.call_args[0][0]
        assert request.hotel_name == "Grand Plaza"
        assert request.rooms[0].room_number == 1
        assert request.rooms[0].guests[0].email == "bob.stone@example.com"

    def test_hotel_not_found_is_404(self, client):
        with patch(
            "hotelbook.api.routes.bookings.create_booking",
            return_value=(None, "Hotel not found: Grand Plaza"),
        ):
            response = client.post("/bookings", json=_body())

        assert response.status_code == 404
        assert response.json()["detail"] == "Hotel not found: Grand Plaza"

    def test_room_not_found_is_404(self, client):
        with patch(
            "hotelbook.api.routes.bookings.create_booking",
            return_value=(None, "Room not found: Hotel 'Grand Plaza', Room Number '1'"),
        ):
            response = client.post("/bookings", json=_body())

        assert response.status_code == 404

    def test_room_not_available_is_409(self, client):
        with patch(
            "hotelbook.api.routes.bookings.create_booking",
            return_value=(None, "Room not available: Hotel 'Grand Plaza', Room Number '1'"),
        ):
            response = client.post("/bookings", json=_body())

        assert response.status_code == 409

    def test_start_in_past_is_422(self, client):
        with patch("hotelbook.api.routes.bookings.create_booking") as mock_create:
            response = client.post("/bookings", json=_body(start_date="2026-04-30", end_date="2026-05-02"))

        assert response.status_code == 422
        assert response.json()["detail"] == "Start date must be in the future"
        mock_create.assert_not_called()

    def test_start_today_is_accepted(self, client):
        with patch(
            "hotelbook.api.routes.bookings.create_booking",
            return_value=(RESULT, "Booking Complete"),
        ):
            response = client.post("/bookings", json=_body(start_date="2026-05-01", end_date="2026-05-01"))

        assert response.status_code == 200

    def test_end_before_start_is_422(self, client):
        with patch("hotelbook.api.routes.bookings.create_booking") as mock_create:
            response = client.post("/bookings", json=_body(start_date="2026-06-05", end_date="2026-06-01"))

        assert response.status_code == 422
        mock_create.assert_not_called()

    @pytest.mark.parametrize(
        "field,value",
        [("email", "not-an-email"), ("phone", "12ab")],
    )
    def test_bad_contact_details_are_422(self, client, field, value):
        customer = _customer()
        customer[field] = value
        with patch("hotelbook.api.routes.bookings.create_booking") as mock_create:
            response = client.post("/bookings", json=_body(customer=customer))

        assert response.status_code == 422
        mock_create.assert_not_called()

    def test_guests_over_capacity_is_422(self, client):
        rooms = [{"room_number": 1, "capacity": 1, "guests": [_customer(), _customer("b@example.com")]}]
        with patch("hotelbook.api.routes.bookings.create_booking") as mock_create:
            response = client.post("/bookings", json=_body(rooms=rooms))

        assert response.status_code == 422
        mock_create.assert_not_called()

    def test_missing_guest_list_is_422(self, client):
        with patch("hotelbook.api.routes.bookings.create_booking") as mock_create:
            response = client.post("/bookings", json=_body(rooms=[{"room_number": 1, "capacity": 2}]))

        assert response.status_code == 422
        mock_create.assert_not_called()

    def test_unknown_top_level_field_is_422(self, client):
        with patch("hotelbook.api.routes.bookings.create_booking"):
            response = client.post("/bookings", json=_body(total_price=1))

        assert response.status_code == 422


class TestAvailableRoute:
    def test_returns_hotels_with_available_rooms(self, client):
        room = Room(4, 1, RoomType.SUITE, 4, Decimal("175"), 2)
        hotel = Hotel(1, "Grand Plaza", "123 Main St, Cityville", "+44 1234 56789123", (room,))
        with patch(
            "hotelbook.api.routes.bookings.get_available_hotel_rooms", return_value=[hotel]
        ) as mock_available:
            response = client.get(
                "/bookings/available",
                params={"start_date": "2026-07-01", "end_date": "2026-07-03", "number_of_guests": 2},
            )

        assert response.status_code == 200
        assert response.json() == [
            {
                "name": "Grand Plaza",
                "address": "123 Main St, Cityville",
                "phone": "+44 1234 56789123",
                "rooms": [
                    {
                        "hotel_name": "Grand Plaza",
                        "room_type": "Suite",
                        "room_number": 4,
                        "price_per_night": 175.0,
                        "capacity": 2,
                    }
                ],
            }
        ]
        mock_available.assert_called_once_with(date(2026, 7, 1), date(2026, 7, 3), 2)

    def test_invalid_range_is_422(self, client):
        with patch(
            "hotelbook.api.routes.bookings.get_available_hotel_rooms",
            side_effect=InvalidRangeError(date(2026, 7, 3), date(2026, 7, 1)),
        ):
            response = client.get(
                "/bookings/available",
                params={"start_date": "2026-07-03", "end_date": "2026-07-01"},
            )

        assert response.status_code == 422

    def test_missing_dates_is_422(self, client):
        response = client.get("/bookings/available")
        assert response.status_code == 422


class TestLookupRoute:
    def test_found(self, client):
        with patch(
            "hotelbook.api.routes.bookings.get_booking_by_reference", return_value=RESULT
        ) as mock_lookup:
            response = client.get("/bookings/K3xQ9aZt")

        assert response.status_code == 200
        assert response.json()["booking_reference"] == "K3xQ9aZt"
        mock_lookup.assert_called_once_with("K3xQ9aZt")

    def test_not_found_is_404(self, client):
        with patch(
            "hotelbook.api.routes.bookings.get_booking_by_reference",
            side_effect=BookingNotFoundError("NOPE"),
        ):
            response = client.get("/bookings/NOPE")

        assert response.status_code == 404
        assert response.json()["detail"] == "Booking not found: NOPE"
