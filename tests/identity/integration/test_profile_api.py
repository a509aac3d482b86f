"""Integration tests for the profile endpoints."""


def test_get_own_profile(client, shopper, shopper_headers):
    response = client.get("/profile", headers=shopper_headers)

    body = response.json()["data"]
    assert response.status_code == 200
    assert body["id"] == shopper.id
    assert body["email"] == shopper.email
    assert body["role"] == "USER"


def test_update_profile(client, shopper_headers):
    response = client.put(
        "/profile",
        json={"first_name": "Asha", "last_name": "Rao", "phone": "9876543210"},
        headers=shopper_headers,
    )
    fetched = client.get("/profile", headers=shopper_headers).json()["data"]

    assert response.status_code == 200
    assert (fetched["first_name"], fetched["last_name"], fetched["phone"]) == ("Asha", "Rao", "9876543210")


def test_invalid_phone_is_rejected(client, shopper_headers):
    response = client.put("/profile", json={"phone": "12ab"}, headers=shopper_headers)

    assert response.status_code == 400
    assert response.json()["message"].startswith("phone:")


def test_profile_requires_a_token(client):
    assert client.get("/profile").status_code == 401
