import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import auth
import create_admin
import database
import main
import mock_data


@pytest.fixture
def mongo(monkeypatch):
    db = mongomock.MongoClient()["storefront_test"]
    for module in (database, auth, main, mock_data, create_admin):
        monkeypatch.setattr(module, "db", db)
    database.ensure_indexes()
    return db


@pytest.fixture
def client(mongo):
    return TestClient(main.app)


def register(client, username="ana", email="ana@negromate.com", password="secreto123"):
    response = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def other_user(client):
    return register(client, username="luis", email="luis@negromate.com")


@pytest.fixture
def admin(client, mongo):
    data = register(client, username="admin", email="admin@negromate.com")
    mongo["user"].update_one({"_id": ObjectId(data["_id"])}, {"$set": {"role": "admin"}})
    return {**data, "role": "admin"}


def add_product(mongo, **overrides):
    doc = {
        "name": "Camiseta Personalizada",
        "category": "CustomClothing",
        "price": 35.0,
        "imageUrl": "https://img.example/shirt.png",
        "description": "Camiseta pintada a mano",
        "details": ["Algodón"],
    }
    doc.update(overrides)
    return str(mongo["product"].insert_one(doc).inserted_id)
