from __future__ import annotations

from fastapi.testclient import TestClient

from helpers import auth_headers, create_booking, create_hotel, setup_hotel, signup


def review(client: TestClient, token: str, booking_id: str, rating: int, **extra):
    return client.post(
        "/api/reviews",
        headers=auth_headers(token),
        json={"bookingId": booking_id, "rating": rating, "comment": "Nice stay", **extra},
    )


def test_reviews_update_hotel_rating(client: TestClient):
    ctx = setup_hotel(client, rooms=2)
    hotel_id = ctx["hotel"]["id"]
    alice_token, _ = signup(client, "alice@example.com")
    bob_token, _ = signup(client, "bob@example.com")
    a = create_booking(client, alice_token, hotel_id, ctx["rooms"][0]["id"], "2025-06-01T00:00:00", "2025-06-02T00:00:00")
    b = create_booking(client, bob_token, hotel_id, ctx["rooms"][1]["id"], "2025-06-01T00:00:00", "2025-06-02T00:00:00")

    r = review(client, alice_token, a["id"], 4, hotelId=hotel_id)
    assert r.status_code == 201, r.text
    assert r.json()["hotelId"] == hotel_id
    assert review(client, bob_token, b["id"], 5).status_code == 201

    hotel = client.get(f"/api/hotels/{hotel_id}").json()
    assert float(hotel["rating"]) == 4.5

    listed = client.get(f"/api/hotels/{hotel_id}/reviews").json()
    assert sorted(x["rating"] for x in listed) == [4, 5]


def test_review_rules(client: TestClient):
    ctx = setup_hotel(client, rooms=1)
    alice_token, _ = signup(client, "alice@example.com")
    bob_token, _ = signup(client, "bob@example.com")
    booking = create_booking(client, alice_token, ctx["hotel"]["id"], ctx["rooms"][0]["id"], "2025-06-01T00:00:00", "2025-06-02T00:00:00")

    assert review(client, bob_token, booking["id"], 3).status_code == 403
    assert review(client, alice_token, booking["id"], 6).status_code == 400

    other = create_hotel(client, ctx["merchant_token"], name="Other")
    r = review(client, alice_token, booking["id"], 3, hotelId=other["id"])
    assert r.status_code == 400
    assert r.json()["message"] == "Booking is for a different hotel"
