"""Tests for signup and login."""
import jwt

from auth import decode_token
from models import USERS
from security import is_hashed


def test_signup_returns_token_for_new_user(client, db):
    response = client.post("/signup", json={"name": "A", "email": "a@x.com", "password": "p"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    user = db[USERS].find_one({"email": "a@x.com"})
    assert decode_token(body["token"]) == str(user["_id"])


def test_signup_stores_hashed_password(client, db, signup):
    signup(password="hunter2")
    user = db[USERS].find_one({"email": "a@x.com"})
    assert user["password"] != "hunter2"
    assert is_hashed(user["password"])


def test_new_user_cart_has_300_zero_slots(client, db, signup):
    signup()
    cart = db[USERS].find_one({"email": "a@x.com"})["cartData"]
    assert len(cart) == 300
    assert set(cart) == {str(slot) for slot in range(300)}
    assert all(quantity == 0 for quantity in cart.values())


def test_duplicate_email_is_rejected_without_second_record(client, db, signup):
    signup()
    response = client.post("/signup", json={"name": "B", "email": "a@x.com", "password": "q"})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "errors": "Existing user found with same email address"
    }
    assert db[USERS].count_documents({"email": "a@x.com"}) == 1


def test_login_with_correct_password(client, signup):
    token = signup(password="p")
    response = client.post("/login", json={"email": "a@x.com", "password": "p"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert decode_token(body["token"]) == decode_token(token)


def test_login_errors_do_not_reveal_cause(client, signup):
    signup(password="p")
    wrong_password = client.post("/login", json={"email": "a@x.com", "password": "P"})
    unknown_email = client.post("/login", json={"email": "b@x.com", "password": "p"})

    expected = {"success": False, "errors": "Invalid email or password"}
    assert wrong_password.status_code == unknown_email.status_code == 200
    assert wrong_password.json() == expected
    assert unknown_email.json() == expected


def test_login_upgrades_legacy_plaintext_password(client, db):
    db[USERS].insert_one({"name": "Old", "email": "old@x.com", "password": "legacy", "cartData": {}})

    response = client.post("/login", json={"email": "old@x.com", "password": "legacy"})

    assert response.json()["success"] is True
    stored = db[USERS].find_one({"email": "old@x.com"})["password"]
    assert is_hashed(stored)
    again = client.post("/login", json={"email": "old@x.com", "password": "legacy"})
    assert again.json()["success"] is True


def test_issued_token_carries_user_claim(client, signup):
    token = signup()
    payload = jwt.decode(token, options={"verify_signature": False})
    assert set(payload["user"]) == {"id"}
