from datetime import timedelta

import pytest
from bson import ObjectId
from jose import jwt

import config
from auth import create_access_token
from conftest import bearer


def test_register_returns_token_and_public_fields(client, mongo):
    response = client.post(
        "/api/auth/register",
        json={"username": "  ana ", "email": "Ana@Negromate.com", "password": "secreto123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "ok"
    assert body["msg"] == "Usuario registrado con éxito"
    data = body["data"]
    assert data["username"] == "ana"
    assert data["email"] == "ana@negromate.com"
    assert data["role"] == "user"
    assert data["token"]
    assert "password_hash" not in data

    stored = mongo["user"].find_one({"_id": ObjectId(data["_id"])})
    assert stored["password_hash"] != "secreto123"
    assert stored["password_hash"].startswith("$2")


def test_register_duplicate_email_is_rejected(client, mongo, user):
    response = client.post(
        "/api/auth/register",
        json={"username": "otra", "email": "ANA@negromate.com", "password": "x"},
    )

    assert response.status_code == 409
    assert response.json() == {"msg": "El email ya está registrado", "data": None, "status": "error"}
    assert mongo["user"].count_documents({}) == 1


@pytest.mark.parametrize("payload", [
    {},
    {"username": "ana", "email": "ana@negromate.com"},
    {"username": "   ", "email": "ana@negromate.com", "password": "x"},
    {"username": "ana", "email": "", "password": "x"},
])
def test_register_requires_all_fields(client, mongo, payload):
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    assert response.json()["msg"] == "Todos los campos son obligatorios"
    assert mongo["user"].count_documents({}) == 0


def test_register_rejects_malformed_email(client, mongo):
    response = client.post("/api/auth/register", json={"username": "ana", "email": "no-es-email", "password": "x"})

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert mongo["user"].count_documents({}) == 0


def test_token_embeds_only_the_user_id(user):
    claims = jwt.decode(user["token"], config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    assert set(claims) == {"sub", "exp"}
    assert claims["sub"] == user["_id"]


def test_login_success(client, user):
    response = client.post("/api/auth/login", json={"email": "ana@negromate.com", "password": "secreto123"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["_id"] == user["_id"]
    assert data["token"]


def test_login_failures_are_indistinguishable(client, user):
    wrong_password = client.post("/api/auth/login", json={"email": "ana@negromate.com", "password": "nope"})
    unknown_user = client.post("/api/auth/login", json={"email": "nadie@negromate.com", "password": "secreto123"})
    empty = client.post("/api/auth/login", json={})

    for response in (wrong_password, unknown_user, empty):
        assert response.status_code == 401
        assert response.json() == {"msg": "Credenciales inválidas", "data": None, "status": "error"}


def test_profile_returns_current_user(client, user):
    response = client.get("/api/auth/profile", headers=bearer(user["token"]))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["_id"] == user["_id"]
    assert data["email"] == "ana@negromate.com"
    assert "password_hash" not in data


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Token abc"},
    {"Authorization": "Bearer not-a-jwt"},
])
def test_profile_without_valid_bearer_is_unauthorized(client, user, headers):
    response = client.get("/api/auth/profile", headers=headers)

    assert response.status_code == 401
    assert response.json()["status"] == "error"


def test_expired_token_is_unauthorized(client, user):
    token = create_access_token(user["_id"], expires_delta=timedelta(seconds=-5))

    response = client.get("/api/auth/profile", headers=bearer(token))

    assert response.status_code == 401


def test_token_signed_with_other_secret_is_unauthorized(client, user):
    claims = jwt.decode(user["token"], config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    forged = jwt.encode(claims, "another-secret", algorithm=config.JWT_ALGORITHM)

    response = client.get("/api/auth/profile", headers=bearer(forged))

    assert response.status_code == 401


def test_token_with_swapped_payload_is_unauthorized(client, user, other_user):
    header, _, signature = user["token"].split(".")
    _, other_payload, _ = other_user["token"].split(".")
    tampered = ".".join([header, other_payload, signature])

    response = client.get("/api/auth/profile", headers=bearer(tampered))

    assert response.status_code == 401


def test_token_for_deleted_user_is_unauthorized(client, mongo, user):
    mongo["user"].delete_one({"_id": ObjectId(user["_id"])})

    response = client.get("/api/auth/profile", headers=bearer(user["token"]))

    assert response.status_code == 401
    assert response.json()["msg"] == "No autorizado, usuario no encontrado."


def test_expired_token_is_rejected_regardless_of_payload(client, mongo, user):
    token = create_access_token(user["_id"], expires_delta=timedelta(seconds=-5))
    product_id = str(mongo["product"].insert_one({"name": "x", "category": "Murals", "price": 1}).inserted_id)

    response = client.post(
        "/api/orders",
        json={"orderItems": [{"product": product_id, "quantity": 1}]},
        headers=bearer(token),
    )

    assert response.status_code == 401
    assert mongo["order"].count_documents({}) == 0
