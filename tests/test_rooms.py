# Rooms and room types: public listings, owner-only writes and the hotel room counter.
from __future__ import annotations

from fastapi.testclient import TestClient

from helpers import auth_headers, create_hotel, create_room, create_room_type, setup_hotel, signup


def test_room_creation_counts_towards_hotel(client: TestClient):
    ctx = setup_hotel(client, rooms=3)
    hotel_id = ctx["hotel"]["id"]

    hotel = client.get(f"/api/hotels/{hotel_id}").json()
    assert hotel["totalRooms"] == 3

    rooms = client.get(f"/api/hotels/{hotel_id}/rooms")
    assert rooms.status_code == 200
    assert [r["roomNumber"] for r in rooms.json()] == ["100", "101", "102"]
    assert all(r["roomTypeId"] == ctx["room_type"]["id"] for r in rooms.json())


def test_room_types_are_listed_publicly_and_updated_by_owner(client: TestClient):
    ctx = setup_hotel(client, rooms=0)
    token = ctx["merchant_token"]
    hotel_id = ctx["hotel"]["id"]
    create_room_type(client, token, hotel_id, name="Suite", price="899.00")

    listed = client.get(f"/api/hotels/{hotel_id}/room-types")
    assert listed.status_code == 200
    assert [t["name"] for t in listed.json()] == ["Double", "Suite"]

    r = client.put(
        f"/api/room-types/{ctx['room_type']['id']}",
        headers=auth_headers(token),
        json={"basePrice": "349.50", "amenities": ["wifi", "breakfast"]},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert float(body["basePrice"]) == 349.5
    assert body["amenities"] == ["wifi", "breakfast"]
    assert body["name"] == "Double"


def test_customers_cannot_manage_rooms(client: TestClient):
    ctx = setup_hotel(client, rooms=1)
    hotel_id = ctx["hotel"]["id"]
    room_id = ctx["rooms"][0]["id"]
    room_type_id = ctx["room_type"]["id"]
    guest_token, _ = signup(client, "guest@example.com")
    headers = auth_headers(guest_token)

    attempts = [
        client.post(f"/api/hotels/{hotel_id}/rooms", headers=headers, json={"roomTypeId": room_type_id, "roomNumber": "900"}),
        client.post(f"/api/hotels/{hotel_id}/room-types", headers=headers, json={"name": "Loft", "basePrice": "1.00"}),
        client.put(f"/api/rooms/{room_id}", headers=headers, json={"status": "occupied"}),
        client.put(f"/api/room-types/{room_type_id}", headers=headers, json={"name": "Cheap"}),
    ]
    for r in attempts:
        assert r.status_code == 403, r.text
        assert r.json()["message"] == "Insufficient permissions"

    assert client.get(f"/api/hotels/{hotel_id}").json()["totalRooms"] == 1


def test_other_merchant_cannot_manage_rooms(client: TestClient):
    ctx = setup_hotel(client, rooms=1)
    other_token, _ = signup(client, "other@example.com", "merchant")

    r = client.put(f"/api/rooms/{ctx['rooms'][0]['id']}", headers=auth_headers(other_token), json={"floor": 7})
    assert r.status_code == 403

    # a room type from another hotel cannot be attached
    other_hotel = create_hotel(client, other_token, name="Elsewhere")
    foreign_type = create_room_type(client, other_token, other_hotel["id"])
    r_type = client.post(
        f"/api/hotels/{ctx['hotel']['id']}/rooms",
        headers=auth_headers(ctx["merchant_token"]),
        json={"roomTypeId": foreign_type["id"], "roomNumber": "500"},
    )
    assert r_type.status_code == 400


def test_required_room_fields_cannot_be_cleared(client: TestClient):
    ctx = setup_hotel(client, rooms=1)
    token = ctx["merchant_token"]
    room = ctx["rooms"][0]

    for body in ({"status": None}, {"roomNumber": None}, {"isActive": None}):
        r = client.put(f"/api/rooms/{room['id']}", headers=auth_headers(token), json=body)
        assert r.status_code == 400, r.text
        assert r.json()["message"] == "Invalid data"

    r_type = client.put(f"/api/room-types/{ctx['room_type']['id']}", headers=auth_headers(token), json={"basePrice": None})
    assert r_type.status_code == 400

    r_floor = client.put(f"/api/rooms/{room['id']}", headers=auth_headers(token), json={"floor": None})
    assert r_floor.status_code == 200
    assert r_floor.json()["status"] == "available"


def test_new_room_in_unknown_hotel_is_not_found(client: TestClient):
    ctx = setup_hotel(client, rooms=0)
    r = client.post(
        "/api/hotels/00000000-0000-0000-0000-000000000000/rooms",
        headers=auth_headers(ctx["merchant_token"]),
        json={"roomTypeId": ctx["room_type"]["id"], "roomNumber": "1"},
    )
    assert r.status_code == 404
    assert create_room(client, ctx["merchant_token"], ctx["hotel"]["id"], ctx["room_type"]["id"], "1")["status"] == "available"
