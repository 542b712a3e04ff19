from datetime import timedelta

import pytest
from bson import ObjectId
from fastapi import HTTPException

from ..controller import hash_password, verify_password
from ....middlewares.jwt_auth import JWTAuthController


def test_login_with_seeded_admin(client, settings):
    resp = client.post("/api/login", json={"email": "admin@admin.com", "password": "admin"})
    assert resp.status_code == 200, resp.text
    result = resp.json()["result"]
    assert result["user"]["email"] == "admin@admin.com"
    assert "password" not in result["user"]

    claims = JWTAuthController(settings).decode_access_token(result["token"])
    assert claims.email == "admin@admin.com"
    assert claims.sub == result["user"]["_id"]
    assert claims.exp - claims.iat == timedelta(days=settings.JWT_TOKEN_EXPIRE_DAYS)


def test_login_unknown_email(client):
    resp = client.post("/api/login", json={"email": "nobody@example.com", "password": "admin"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["status"] == 401
    assert body["message"] == "Invalid email address"


def test_login_wrong_password(client):
    resp = client.post("/api/login", json={"email": "admin@admin.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid password"


def test_login_with_legacy_plaintext_record(client, fake_db):
    fake_db["users"].docs.append({"_id": ObjectId(), "email": "owner@shop.com", "password": "s3cret"})

    ok = client.post("/api/login", json={"email": "owner@shop.com", "password": "s3cret"})
    assert ok.status_code == 200
    bad = client.post("/api/login", json={"email": "owner@shop.com", "password": "S3CRET"})
    assert bad.status_code == 401


def test_login_requires_both_fields(client):
    resp = client.post("/api/login", json={"email": "admin@admin.com"})
    assert resp.status_code == 400
    assert resp.json()["status"] == 400


def test_login_store_error(client, fake_db):
    fake_db["users"].fail_on.add("find_one")
    resp = client.post("/api/login", json={"email": "admin@admin.com", "password": "admin"})
    assert resp.status_code == 500


def test_password_helpers():
    hashed = hash_password("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert verify_password("Passw0rd!", hashed)
    assert not verify_password("passw0rd!", hashed)
    assert not verify_password("anything", "")


def test_decode_rejects_foreign_token(settings):
    other = settings.model_copy(update={"JWT_SECRET_KEY": "someone-else"})
    token, _ = JWTAuthController(other).create_access_token("abc", "a@b.com")
    with pytest.raises(HTTPException) as exc:
        JWTAuthController(settings).decode_access_token(token)
    assert exc.value.status_code == 401
