"""Tests for the cart endpoints."""
import pytest

from models import USERS


@pytest.fixture
def token(signup):
    return signup()


def cart(client, token):
    response = client.post("/getcart", headers={"auth-token": token})
    assert response.status_code == 200
    return response.json()


def test_add_to_cart_increments_slot(client, token):
    response = client.post("/addtocart", json={"itemId": 5}, headers={"auth-token": token})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Added to cart"}
    assert cart(client, token)["5"] == 1


def test_get_cart_returns_full_map(client, token):
    data = cart(client, token)
    assert len(data) == 300
    assert sum(data.values()) == 0


def test_add_then_remove_restores_slot(client, token):
    headers = {"auth-token": token}
    client.post("/addtocart", json={"itemId": 7}, headers=headers)
    before = cart(client, token)["7"]

    client.post("/addtocart", json={"itemId": 7}, headers=headers)
    response = client.post("/removefromcart", json={"itemId": 7}, headers=headers)

    assert response.json() == {"success": True, "message": "Removed from cart"}
    assert cart(client, token)["7"] == before


def test_remove_from_empty_slot_never_goes_negative(client, token):
    response = client.post("/removefromcart", json={"itemId": 3}, headers={"auth-token": token})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert cart(client, token)["3"] == 0


def test_carts_are_per_user(client, signup):
    first = signup(email="one@x.com")
    second = signup(email="two@x.com")

    client.post("/addtocart", json={"itemId": 1}, headers={"auth-token": first})

    assert cart(client, first)["1"] == 1
    assert cart(client, second)["1"] == 0


@pytest.mark.parametrize("item_id", [-1, 300])
def test_item_outside_cart_is_rejected(client, token, item_id):
    response = client.post("/addtocart", json={"itemId": item_id}, headers={"auth-token": token})
    assert response.status_code == 400
    assert len(cart(client, token)) == 300


def test_cart_routes_fail_when_user_is_gone(client, db, token):
    db[USERS].delete_many({})
    headers = {"auth-token": token}

    for path in ("/addtocart", "/removefromcart"):
        response = client.post(path, json={"itemId": 1}, headers=headers)
        assert response.status_code == 500
        assert response.json()["success"] is False

    assert client.post("/getcart", headers=headers).status_code == 500
