"""Public profiles and self-service profile updates."""

import uuid

from conftest import API, create_post


def test_public_profile_lists_available_posts(client, ana):
    first = create_post(client, ana, title="Vestido rojo")
    hidden = create_post(client, ana, title="Zapatos")
    client.put(f"{API}/posts/{hidden['id']}", data={"is_available": "false"}, headers=ana["headers"])

    response = client.get(f"{API}/users/{ana['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["name"] == "Ana"
    assert "password_hash" not in body["user"]
    assert body["posts_count"] == 1
    assert [p["id"] for p in body["posts"]] == [first["id"]]


def test_public_profile_unknown_user(client):
    response = client.get(f"{API}/users/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found"}


def test_update_profile(client, ana):
    response = client.put(f"{API}/users/update", json={
        "name": "  Ana María ",
        "phone": "+34 611 111 111",
        "location": {"latitude": 40.4168, "longitude": -3.7038, "city": "Madrid", "country": "España"},
    }, headers=ana["headers"])
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Ana María"
    assert user["phone"] == "+34 611 111 111"
    assert user["address"] == "Calle Mayor 1, Madrid"
    assert user["location"]["coordinates"] == [-3.7038, 40.4168]
    assert user["location"]["city"] == "Madrid"

    me = client.get(f"{API}/auth/me", headers=ana["headers"]).json()["user"]
    assert me["location"]["coordinates"] == [-3.7038, 40.4168]


def test_update_profile_rejects_out_of_range_latitude(client, ana):
    response = client.put(f"{API}/users/update", json={
        "location": {"latitude": 91, "longitude": 0},
    }, headers=ana["headers"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "location.latitude"


def test_update_profile_requires_session(client):
    assert client.put(f"{API}/users/update", json={"name": "Nadie"}).status_code == 401


def test_update_profile_strips_name_before_length_check(client, ana):
    response = client.put(f"{API}/users/update", json={"name": "  a "}, headers=ana["headers"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "name"
    assert client.get(f"{API}/auth/me", headers=ana["headers"]).json()["user"]["name"] == "Ana"
