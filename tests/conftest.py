import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient

import cache
import database
from main import app


@pytest.fixture
def mongo(monkeypatch):
    test_db = mongomock.MongoClient()["storefront_test"]
    monkeypatch.setattr(database, "db", test_db)
    return test_db


@pytest.fixture
def redis_client(monkeypatch):
    fake = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(cache, "client", fake)
    return fake


@pytest.fixture
def client(mongo, redis_client):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def make_account(client):
    def _make(email="jane@example.com", password="secret123", **extra):
        body = {
            "email": email,
            "first_name": "Jane",
            "last_name": "Doe",
            "phone_number": "555-0100",
            "password": password,
            **extra,
        }
        res = client.post("/account/add", json=body)
        assert res.status_code == 200, res.json()
        return res.json()["data"]
    return _make


@pytest.fixture
def make_product(client):
    def _make(name="Trail Shoe", price=10.0, category="shoes", **extra):
        body = {
            "name": name,
            "description": "Lightweight",
            "price": price,
            "brand_name": "Stride",
            "category": category,
            **extra,
        }
        res = client.post("/product/add", json=body)
        assert res.status_code == 200, res.json()
        return res.json()["data"]
    return _make
