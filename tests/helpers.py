# Shared HTTP helpers for the API tests.
from __future__ import annotations

from typing import Optional, Tuple

from fastapi.testclient import TestClient

PASSWORD = "changeme123"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# Create a user and return (access_token, user JSON)
def signup(client: TestClient, email: str, role: Optional[str] = None) -> Tuple[str, dict]:
    payload = {"email": email, "password": PASSWORD, "firstName": "Test", "lastName": "User"}
    if role:
        payload["role"] = role
    r = client.post("/api/auth/signup", json=payload)
    assert r.status_code == 201, r.text
    data = r.json()
    return data["accessToken"], data["user"]


def admin(client: TestClient) -> Tuple[str, dict]:
    # admin@example.com is listed in HOTELHUB_ADMIN_EMAILS by conftest
    return signup(client, "admin@example.com")


def create_hotel(client: TestClient, token: str, name: str = "Harbor Inn", city: str = "Shanghai") -> dict:
    r = client.post(
        "/api/hotels",
        headers=auth_headers(token),
        json={"name": name, "address": "1 Bund Road", "city": city},
    )
    assert r.status_code == 201, r.text
    return r.json()


def create_room_type(client: TestClient, token: str, hotel_id: str, name: str = "Double", price: str = "299.00") -> dict:
    r = client.post(
        f"/api/hotels/{hotel_id}/room-types",
        headers=auth_headers(token),
        json={"name": name, "basePrice": price, "maxOccupancy": 2, "amenities": ["wifi"]},
    )
    assert r.status_code == 201, r.text
    return r.json()


def create_room(client: TestClient, token: str, hotel_id: str, room_type_id: str, number: str, **extra) -> dict:
    r = client.post(
        f"/api/hotels/{hotel_id}/rooms",
        headers=auth_headers(token),
        json={"roomTypeId": room_type_id, "roomNumber": number, "floor": 1, **extra},
    )
    assert r.status_code == 201, r.text
    return r.json()


def post_booking(
    client: TestClient,
    token: str,
    hotel_id: str,
    room_id: str,
    check_in: str,
    check_out: str,
    amount: str = "299.00",
):
    return client.post(
        "/api/bookings",
        headers=auth_headers(token),
        json={
            "hotelId": hotel_id,
            "roomId": room_id,
            "checkInDate": check_in,
            "checkOutDate": check_out,
            "guests": 2,
            "totalAmount": amount,
        },
    )


def create_booking(client: TestClient, token: str, hotel_id: str, room_id: str, check_in: str, check_out: str, amount: str = "299.00") -> dict:
    r = post_booking(client, token, hotel_id, room_id, check_in, check_out, amount)
    assert r.status_code == 201, r.text
    return r.json()


def set_booking_status(client: TestClient, token: str, booking_id: str, status: str):
    return client.put(f"/api/bookings/{booking_id}", headers=auth_headers(token), json={"status": status})


def setup_hotel(client: TestClient, rooms: int = 1) -> dict:
    """Merchant + hotel + room type + `rooms` rooms; returns tokens and ids."""
    merchant_token, merchant = signup(client, "merchant@example.com", "merchant")
    hotel = create_hotel(client, merchant_token)
    room_type = create_room_type(client, merchant_token, hotel["id"])
    created = [
        create_room(client, merchant_token, hotel["id"], room_type["id"], f"{100 + i}")
        for i in range(rooms)
    ]
    return {
        "merchant_token": merchant_token,
        "merchant": merchant,
        "hotel": hotel,
        "room_type": room_type,
        "rooms": created,
    }
