import database


def test_root(client):
    assert client.get("/").json() == {"message": "Storefront Backend Ready"}


def test_health_reports_cache_and_database(client):
    body = client.get("/test").json()
    assert body["database"] == "✅ Connected & Working"
    assert body["cache"] == "✅ Connected"


def test_store_failure_does_not_leak_detail(client, monkeypatch, make_product):
    product = make_product()

    def boom(*args, **kwargs):
        raise RuntimeError("connection refused to mongo-primary:27017")

    import products
    monkeypatch.setattr(products, "require_active", boom)

    res = client.get("/product/details", params={"product_id": product["id"]})
    assert res.status_code == 500
    assert res.json() == {"message": "Something went wrong."}


def test_missing_database_is_internal_error(client, monkeypatch):
    monkeypatch.setattr(database, "db", None)
    res = client.get("/product/all")
    assert res.status_code == 500
    assert res.json() == {"message": "Something went wrong."}


def test_validation_error_reports_first_violation(client):
    res = client.post("/account/add", json={})
    assert res.status_code == 400
    assert set(res.json()) == {"message"}
    assert res.json()["message"].startswith("email")


def test_holiday_sale_flag(client, redis_client):
    assert client.get("/apps/holiday-sale").json()["data"] == {"enabled": False}
    assert client.post("/apps/holiday-sale", json={"enabled": True}).status_code == 200
    assert redis_client.get("holiday_sale_enabled") == "true"
    assert client.get("/apps/holiday-sale").json()["data"] == {"enabled": True}


def test_holiday_sale_without_cache(client, monkeypatch):
    import cache
    monkeypatch.setattr(cache, "client", None)
    assert client.get("/apps/holiday-sale").json()["data"] == {"enabled": False}
    res = client.post("/apps/holiday-sale", json={"enabled": True})
    assert res.status_code == 500
    assert res.json() == {"message": "Something went wrong."}


def test_method_not_allowed_keeps_allow_header(client):
    res = client.get("/account/add")
    assert res.status_code == 405
    assert "POST" in res.headers["allow"]
    assert res.json() == {"message": "Method Not Allowed"}


def test_missing_jwt_secret_warns(monkeypatch, caplog):
    import importlib
    import logging
    import security

    monkeypatch.delenv("JWT_SECRET", raising=False)
    with caplog.at_level(logging.WARNING, logger="security"):
        importlib.reload(security)
    assert security.JWT_SECRET == security.DEV_JWT_SECRET
    assert "JWT_SECRET is not set" in caplog.text

    monkeypatch.setenv("JWT_SECRET", "s3cret")
    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="security"):
        importlib.reload(security)
    assert security.JWT_SECRET == "s3cret"
    assert "JWT_SECRET is not set" not in caplog.text

    monkeypatch.delenv("JWT_SECRET")
    importlib.reload(security)
