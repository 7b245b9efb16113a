# Hotel API: role gate on creation, public reads, ownership and admin moderation.
from __future__ import annotations

from fastapi.testclient import TestClient

from helpers import admin, auth_headers, create_hotel, signup


def test_customer_cannot_create_hotel_but_merchant_can(client: TestClient):
    customer_token, _ = signup(client, "guest@example.com")
    payload = {"name": "Lakeside", "address": "2 Shore St", "city": "Hangzhou"}

    r = client.post("/api/hotels", headers=auth_headers(customer_token), json=payload)
    assert r.status_code == 403, r.text
    assert r.json()["message"] == "Insufficient permissions"

    merchant_token, merchant = signup(client, "owner@example.com", "merchant")
    r2 = client.post("/api/hotels", headers=auth_headers(merchant_token), json=payload)
    assert r2.status_code == 201, r2.text
    hotel = r2.json()
    assert hotel["status"] == "pending"
    assert hotel["merchantId"] == merchant["id"]
    assert hotel["totalRooms"] == 0


def test_anonymous_write_is_forbidden_and_reads_are_public(client: TestClient):
    r = client.post("/api/hotels", json={"name": "X", "address": "Y", "city": "Z"})
    assert r.status_code == 403
    assert r.json() == {"message": "Authentication required"}

    merchant_token, _ = signup(client, "owner@example.com", "merchant")
    hotel = create_hotel(client, merchant_token, city="Suzhou")

    r_list = client.get("/api/hotels")
    assert r_list.status_code == 200
    assert [h["id"] for h in r_list.json()] == [hotel["id"]]

    r_detail = client.get(f"/api/hotels/{hotel['id']}")
    assert r_detail.status_code == 200
    assert r_detail.json()["city"] == "Suzhou"


def test_invalid_token_is_forbidden(client: TestClient):
    r = client.post(
        "/api/hotels",
        headers={"Authorization": "Bearer not-a-jwt"},
        json={"name": "X", "address": "Y", "city": "Z"},
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Invalid token"


def test_hotel_list_filters_by_city_and_status(client: TestClient):
    merchant_token, _ = signup(client, "owner@example.com", "merchant")
    a = create_hotel(client, merchant_token, name="A", city="Beijing")
    create_hotel(client, merchant_token, name="B", city="Xian")
    admin_token, _ = admin(client)
    client.put(f"/api/admin/hotels/{a['id']}/status", headers=auth_headers(admin_token), json={"status": "approved"})

    by_city = client.get("/api/hotels", params={"city": "Xian"}).json()
    assert [h["name"] for h in by_city] == ["B"]

    approved = client.get("/api/hotels", params={"status": "approved"}).json()
    assert [h["id"] for h in approved] == [a["id"]]


def test_missing_and_malformed_hotel_ids(client: TestClient):
    r = client.get("/api/hotels/00000000-0000-0000-0000-000000000000")
    assert r.status_code == 404
    assert r.json() == {"message": "Hotel not found"}

    r_bad = client.get("/api/hotels/not-a-uuid")
    assert r_bad.status_code == 400
    body = r_bad.json()
    assert body["message"] == "Invalid data"
    assert body["errors"]


def test_invalid_hotel_payload_returns_validation_errors(client: TestClient):
    merchant_token, _ = signup(client, "owner@example.com", "merchant")
    r = client.post("/api/hotels", headers=auth_headers(merchant_token), json={"name": "No address"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid data"


def test_merchant_hotels_are_self_scoped_and_ownership_enforced(client: TestClient):
    token_a, _ = signup(client, "a@example.com", "merchant")
    token_b, _ = signup(client, "b@example.com", "merchant")
    hotel_a = create_hotel(client, token_a, name="A Hotel")
    create_hotel(client, token_b, name="B Hotel")

    mine = client.get("/api/merchant/hotels", headers=auth_headers(token_a)).json()
    assert [h["name"] for h in mine] == ["A Hotel"]

    r = client.put(f"/api/hotels/{hotel_a['id']}", headers=auth_headers(token_b), json={"name": "Taken"})
    assert r.status_code == 403

    r_ok = client.put(f"/api/hotels/{hotel_a['id']}", headers=auth_headers(token_a), json={"description": "Sea view"})
    assert r_ok.status_code == 200, r_ok.text
    assert r_ok.json()["description"] == "Sea view"
    assert r_ok.json()["name"] == "A Hotel"


def test_admin_status_transitions(client: TestClient):
    merchant_token, _ = signup(client, "owner@example.com", "merchant")
    admin_token, _ = admin(client)
    approved = create_hotel(client, merchant_token, name="Approve me")
    rejected = create_hotel(client, merchant_token, name="Reject me")

    def move(hotel_id: str, status: str, token: str = admin_token):
        return client.put(f"/api/admin/hotels/{hotel_id}/status", headers=auth_headers(token), json={"status": status})

    # only admins moderate
    assert move(approved["id"], "approved", merchant_token).status_code == 403

    r = move(approved["id"], "approved")
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "approved"

    assert move(rejected["id"], "rejected").status_code == 200
    r_back = move(rejected["id"], "approved")
    assert r_back.status_code == 400
    assert "rejected" in r_back.json()["message"]

    assert move(approved["id"], "suspended").status_code == 200
    assert move(approved["id"], "approved").status_code == 400

    assert move(approved["id"], "bogus").status_code == 400


def test_required_hotel_fields_cannot_be_cleared(client: TestClient):
    merchant_token, _ = signup(client, "owner@example.com", "merchant")
    hotel = create_hotel(client, merchant_token, name="Keep me")

    for body in ({"name": None}, {"address": None}, {"city": None}):
        r = client.put(f"/api/hotels/{hotel['id']}", headers=auth_headers(merchant_token), json=body)
        assert r.status_code == 400, r.text
        assert r.json()["message"] == "Invalid data"

    r_ok = client.put(f"/api/hotels/{hotel['id']}", headers=auth_headers(merchant_token), json={"description": None})
    assert r_ok.status_code == 200
    assert client.get(f"/api/hotels/{hotel['id']}").json()["name"] == "Keep me"
