# Dashboard statistics: per-hotel daily figures and the admin-only platform totals.
from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from hotelhub.timeutils import local_now

from helpers import admin, auth_headers, create_booking, set_booking_status, setup_hotel, signup


def test_hotel_stats_for_today(client: TestClient):
    ctx = setup_hotel(client, rooms=10)
    token = ctx["merchant_token"]
    hotel_id = ctx["hotel"]["id"]
    for room in ctx["rooms"][:3]:
        r = client.put(f"/api/rooms/{room['id']}", headers=auth_headers(token), json={"status": "occupied"})
        assert r.status_code == 200, r.text

    today = local_now().replace(hour=12, minute=0, second=0, microsecond=0)
    guest_token, _ = signup(client, "guest@example.com")
    paid = create_booking(
        client, guest_token, hotel_id, ctx["rooms"][3]["id"],
        today.isoformat(), (today + timedelta(days=1)).isoformat(), amount="299.00",
    )
    assert set_booking_status(client, guest_token, paid["id"], "confirmed").status_code == 200
    create_booking(
        client, guest_token, hotel_id, ctx["rooms"][4]["id"],
        (today + timedelta(days=3)).isoformat(), (today + timedelta(days=5)).isoformat(), amount="500.00",
    )

    r = client.get(f"/api/hotels/{hotel_id}/stats", headers=auth_headers(token))
    assert r.status_code == 200, r.text
    assert r.json() == {"totalRooms": 10, "occupiedRooms": 3, "todayCheckIns": 1, "todayRevenue": 299.0}


def test_hotel_stats_are_limited_to_owner_and_admin(client: TestClient):
    ctx = setup_hotel(client, rooms=2)
    hotel_id = ctx["hotel"]["id"]
    other_token, _ = signup(client, "other@example.com", "merchant")
    guest_token, _ = signup(client, "guest@example.com")

    assert client.get(f"/api/hotels/{hotel_id}/stats", headers=auth_headers(other_token)).status_code == 403
    assert client.get(f"/api/hotels/{hotel_id}/stats", headers=auth_headers(guest_token)).status_code == 403

    admin_token, _ = admin(client)
    r = client.get(f"/api/hotels/{hotel_id}/stats", headers=auth_headers(admin_token))
    assert r.status_code == 200
    assert r.json()["totalRooms"] == 2
    assert r.json()["todayRevenue"] == 0


def test_platform_stats_admin_only(client: TestClient):
    ctx = setup_hotel(client, rooms=2)
    hotel_id = ctx["hotel"]["id"]
    guest_token, _ = signup(client, "guest@example.com")
    signup(client, "second-guest@example.com")
    confirmed = create_booking(client, guest_token, hotel_id, ctx["rooms"][0]["id"], "2025-02-01T00:00:00", "2025-02-03T00:00:00", amount="150.50")
    assert set_booking_status(client, guest_token, confirmed["id"], "confirmed").status_code == 200
    create_booking(client, guest_token, hotel_id, ctx["rooms"][1]["id"], "2025-02-01T00:00:00", "2025-02-03T00:00:00", amount="80.00")

    assert client.get("/api/platform/stats", headers=auth_headers(ctx["merchant_token"])).status_code == 403
    assert client.get("/api/platform/stats").status_code == 403

    admin_token, _ = admin(client)
    r = client.get("/api/platform/stats", headers=auth_headers(admin_token))
    assert r.status_code == 200, r.text
    assert r.json() == {"totalMerchants": 1, "totalUsers": 2, "totalBookings": 2, "totalRevenue": 150.5}
