def test_add_product(make_product):
    product = make_product()
    assert product["id"] == 1
    assert product["price"] == 10.0
    assert product["deleted_at"] is None


def test_add_product_rejects_non_positive_price(client, mongo):
    res = client.post("/product/add", json={
        "name": "Freebie", "price": 0, "brand_name": "X", "category": "misc",
    })
    assert res.status_code == 400
    assert res.json()["message"].startswith("price")
    assert mongo["product"].count_documents({}) == 0


def test_add_product_with_unknown_seller(client):
    res = client.post("/product/add", json={
        "name": "Hat", "price": 5, "brand_name": "X", "category": "misc", "seller_id": 42,
    })
    assert res.status_code == 404


def test_edit_product(client, make_product):
    product = make_product()
    res = client.put("/product/edit", json={"product_id": product["id"], "price": 12.5})
    assert res.status_code == 200
    assert res.json()["data"]["price"] == 12.5
    assert res.json()["data"]["name"] == "Trail Shoe"


def test_edit_deleted_product_is_not_found(client, make_product):
    product = make_product()
    client.delete("/product/delete", params={"product_id": product["id"]})
    res = client.put("/product/edit", json={"product_id": product["id"], "price": 12.5})
    assert res.status_code == 404


def test_delete_product_twice(client, make_product):
    product = make_product()
    assert client.delete("/product/delete", params={"product_id": product["id"]}).status_code == 200
    assert client.delete("/product/delete", params={"product_id": product["id"]}).status_code == 404
    assert client.get("/product/details", params={"product_id": product["id"]}).status_code == 404


def test_pagination_counts_active_rows(client, make_product):
    products = [make_product(name=f"Item {i}") for i in range(17)]
    client.delete("/product/delete", params={"product_id": products[0]["id"]})
    client.delete("/product/delete", params={"product_id": products[1]["id"]})

    res = client.get("/product/all", params={"skip": 0, "limit": 10})
    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 10
    assert body["meta"] == {"total": 15, "skip": 0, "limit": 10}

    rest = client.get("/product/all", params={"skip": 10, "limit": 10}).json()
    assert len(rest["data"]) == 5
    assert all(p["deleted_at"] is None for p in rest["data"])


def test_by_category_and_unique_categories(client, make_product):
    make_product(name="Boot", category="shoes")
    make_product(name="Cap", category="hats")
    gone = make_product(name="Scarf", category="scarves")
    client.delete("/product/delete", params={"product_id": gone["id"]})

    res = client.get("/product/category", params={"category": "shoes"})
    assert res.status_code == 200
    assert [p["name"] for p in res.json()["data"]] == ["Boot"]
    assert client.get("/product/category", params={"category": "scarves"}).status_code == 404

    cats = client.get("/product/categories").json()["data"]
    assert cats == ["hats", "shoes"]


def test_review_lifecycle_and_derived_rating(client, make_product):
    product = make_product()
    r1 = client.post("/product/review/add", json={"user_id": 1, "product_id": product["id"], "rating": 5})
    r2 = client.post("/product/review/add", json={
        "user_id": 2, "product_id": product["id"], "rating": 2, "comment": "Meh", "images": ["a.png"],
    })
    assert r1.status_code == 200 and r2.status_code == 200

    details = client.get("/product/details", params={"product_id": product["id"]}).json()["data"]
    assert details["rating"] == 3.5
    assert details["number_of_reviews"] == 2

    review_id = r2.json()["data"]["id"]
    upd = client.put("/product/review/update", json={"review_id": review_id, "user_id": 2, "rating": 4})
    assert upd.status_code == 200
    listing = client.get("/product/reviews", params={"product_id": product["id"]}).json()
    assert listing["meta"] == {"rating": 4.5, "number_of_reviews": 2}

    assert client.delete("/product/review/delete", params={"review_id": review_id, "user_id": 2}).status_code == 200
    listing = client.get("/product/reviews", params={"product_id": product["id"]}).json()
    assert len(listing["data"]) == 1
    assert listing["meta"] == {"rating": 5.0, "number_of_reviews": 1}


def test_review_requires_active_product(client, make_product):
    assert client.post("/product/review/add", json={"user_id": 1, "product_id": 9, "rating": 3}).status_code == 404
    product = make_product()
    client.delete("/product/delete", params={"product_id": product["id"]})
    res = client.post("/product/review/add", json={"user_id": 1, "product_id": product["id"], "rating": 3})
    assert res.status_code == 404


def test_review_rating_bounds(client, make_product):
    product = make_product()
    res = client.post("/product/review/add", json={"user_id": 1, "product_id": product["id"], "rating": 6})
    assert res.status_code == 400
    assert res.json()["message"].startswith("rating")


def test_review_belongs_to_author(client, make_product):
    product = make_product()
    review = client.post("/product/review/add", json={
        "user_id": 1, "product_id": product["id"], "rating": 3,
    }).json()["data"]
    res = client.put("/product/review/update", json={"review_id": review["id"], "user_id": 2, "comment": "mine now"})
    assert res.status_code == 404
    res = client.delete("/product/review/delete", params={"review_id": review["id"], "user_id": 2})
    assert res.status_code == 404


def test_product_without_reviews_has_no_rating(client, make_product):
    product = make_product()
    data = client.get("/product/details", params={"product_id": product["id"]}).json()["data"]
    assert data["rating"] is None
    assert data["number_of_reviews"] == 0


def test_add_product_missing_category(client, mongo):
    res = client.post("/product/add", json={"name": "Hat", "price": 5, "brand_name": "X"})
    assert res.status_code == 400
    assert res.json()["message"].startswith("category")
    assert mongo["product"].count_documents({}) == 0


def test_add_review_missing_rating(client, mongo, make_product):
    product = make_product()
    res = client.post("/product/review/add", json={"user_id": 1, "product_id": product["id"]})
    assert res.status_code == 400
    assert res.json()["message"].startswith("rating")
    assert mongo["review"].count_documents({}) == 0


def test_delete_review_twice(client, make_product):
    product = make_product()
    review = client.post("/product/review/add", json={
        "user_id": 1, "product_id": product["id"], "rating": 4,
    }).json()["data"]
    params = {"review_id": review["id"], "user_id": 1}
    assert client.delete("/product/review/delete", params=params).status_code == 200
    assert client.delete("/product/review/delete", params=params).status_code == 404
