"""
End-to-end HTTP tests through the FastAPI app on a temporary SQLite store.
"""
from __future__ import annotations

from dataclasses import replace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from catalog_api.app import create_app

TOKEN_HEADER = "x-auth-token"
GOOGLETALK = {
    "product_name": "googletalk",
    "price": 250,
    "currency": "INR",
    "vendor": "google",
    "accessories": ["charger", "subscription"],
}


@pytest.fixture()
def client(settings, stores):
    with TestClient(create_app(settings, stores)) as c:
        yield c


def _signup(client, username, password="abc12345", **extra):
    return client.post("/users", json={"username": username, "password": password, **extra})


@pytest.fixture()
def user_token(client):
    return _signup(client, "krunal.shimpi@gmail.com").headers[TOKEN_HEADER]


@pytest.fixture()
def admin_token(client):
    # admins are seeded out of band, as scripts/add_admin.py does
    client.app.state.user_service.register("admin@gmail.com", "abc12345", is_admin=True)
    res = client.post("/auth", json={"username": "admin@gmail.com", "password": "abc12345"})
    return res.headers[TOKEN_HEADER]


def _no_secrets(body):
    text = repr(body).lower()
    assert "password" not in text
    assert "argon2" not in text


# -------------------------- users --------------------------
def test_create_user_with_short_password_is_rejected(client):
    res = _signup(client, "krunal.shimpi@gmail.com", password="abc12")
    assert res.status_code == 400
    assert set(res.json()) == {"message"}


def test_create_user_then_duplicate(client):
    res = _signup(client, "krunal.shimpi@gmail.com")
    assert res.status_code == 201
    assert res.json() == {"username": "krunal.shimpi@gmail.com"}
    assert res.headers[TOKEN_HEADER].startswith("Bearer ")
    assert len(res.headers[TOKEN_HEADER]) > len("Bearer ")
    _no_secrets(res.json())

    again = _signup(client, "krunal.shimpi@gmail.com")
    assert again.status_code == 400
    assert again.json() == {"message": "User already exists"}


def test_signup_cannot_grant_admin(client):
    token = _signup(client, "mallory@gmail.com", isadmin=True).headers[TOKEN_HEADER]
    res = client.delete(f"/products/{ObjectId()}", headers={TOKEN_HEADER: token})
    assert res.status_code == 403


def test_authenticate(client):
    _signup(client, "krunal.shimpi@gmail.com")
    res = client.post("/auth", json={"username": "krunal.shimpi@gmail.com", "password": "abc12345"})
    assert res.status_code == 200
    assert res.json() == {"username": "krunal.shimpi@gmail.com"}
    assert res.headers[TOKEN_HEADER].startswith("Bearer ")

    wrong = client.post("/auth", json={"username": "krunal.shimpi@gmail.com", "password": "abc123456"})
    assert wrong.status_code == 401
    missing = client.post("/auth", json={"username": "nobody@gmail.com", "password": "abc12345"})
    assert missing.status_code == 404
    assert wrong.json() == missing.json() == {"message": "Invalid credentials"}


def test_unparseable_payload_is_422(client):
    res = client.post("/users", content=b"{not json", headers={"content-type": "application/json"})
    assert res.status_code == 422
    assert set(res.json()) == {"message"}


# -------------------------- products --------------------------
def test_product_lifecycle(client, user_token, admin_token):
    res = client.post("/products", json=[GOOGLETALK], headers={TOKEN_HEADER: user_token})
    assert res.status_code == 201
    ids = res.json()
    assert len(ids) == 1 and ObjectId.is_valid(ids[0])
    pid = ids[0]

    listed = client.get("/products", params={"currency": "INR", "vendor": "google"})
    assert listed.status_code == 200
    assert [p["id"] for p in listed.json()] == [pid]
    _no_secrets(listed.json())

    got = client.get(f"/products/{pid}")
    assert got.status_code == 200
    assert got.json()["currency"] == "INR"

    put = client.put(f"/products/{pid}", json={"currency": "USD"}, headers={TOKEN_HEADER: user_token})
    assert put.status_code == 200
    body = put.json()
    assert body["currency"] == "USD"
    assert body["product_name"] == "googletalk"
    assert body["price"] == 250

    forbidden = client.delete(f"/products/{pid}", headers={TOKEN_HEADER: user_token})
    assert forbidden.status_code == 403

    deleted = client.delete(f"/products/{pid}", headers={TOKEN_HEADER: admin_token})
    assert deleted.status_code == 200
    assert deleted.json() == 1
    again = client.delete(f"/products/{pid}", headers={TOKEN_HEADER: admin_token})
    assert again.json() == 0
    assert client.get(f"/products/{pid}").status_code == 404


def test_mutations_require_a_token(client):
    assert client.post("/products", json=[GOOGLETALK]).status_code == 401
    assert client.post("/products", json=[GOOGLETALK], headers={TOKEN_HEADER: "garbage"}).status_code == 401
    pid = str(ObjectId())
    assert client.put(f"/products/{pid}", json={"price": 1}).status_code == 401
    assert client.delete(f"/products/{pid}").status_code == 401


def test_invalid_products_and_ids(client, user_token):
    bad = client.post("/products", json=[dict(GOOGLETALK, price=5000)], headers={TOKEN_HEADER: user_token})
    assert bad.status_code == 400
    assert "price" in bad.json()["message"]

    assert client.get("/products/not-an-id").status_code == 400
    assert client.get("/products", params={"_id": "not-an-id"}).status_code == 400
    assert client.get(f"/products/{ObjectId()}").status_code == 404


def test_body_limit(settings, stores, user_token):
    small = replace(settings, body_limit_bytes=64)
    with TestClient(create_app(small, stores)) as c:
        res = c.post("/products", json=[GOOGLETALK, GOOGLETALK], headers={TOKEN_HEADER: user_token})
    assert res.status_code == 413


def test_body_limit_counts_chunked_bodies(settings, stores, user_token):
    small = replace(settings, body_limit_bytes=64)
    chunks = [b"[" + b" " * 40, b" " * 40, b"]"]
    with TestClient(create_app(small, stores)) as c:
        res = c.post(
            "/products",
            content=iter(chunks),
            headers={TOKEN_HEADER: user_token, "content-type": "application/json"},
        )
        assert res.status_code == 413
        assert res.json() == {"message": "Request payload too large"}

        ok = c.post(
            "/users",
            content=iter([b'{"username": "a@gmail.com",', b' "password": "abc12345"}']),
            headers={"content-type": "application/json"},
        )
        assert ok.status_code == 201


def test_correlation_id_is_echoed(client):
    assert client.get("/products", headers={"X-Correlation-ID": "abc123"}).headers["X-Correlation-ID"] == "abc123"
    assert len(client.get("/products").headers["X-Correlation-ID"]) == 12
