from app.schemas.product import SHOP_CATEGORIES


def test_home_lists_six_newest_products(client, make_product):
    for i in range(8):
        make_product(name=f"Item {i}")

    resp = client.get("/api/home")
    assert resp.status_code == 200
    body = resp.json()
    assert [p["name"] for p in body["products"]] == [f"Item {i}" for i in range(7, 1, -1)]
    assert [c["name"] for c in body["categories"]] == SHOP_CATEGORIES


def test_shop_filters_by_category(client, make_product):
    make_product(name="Oxford", category="Shirts")
    make_product(name="Slim Jeans", category="Jeans")

    resp = client.get("/api/products/", params={"category": "Jeans"})
    assert [p["name"] for p in resp.json()] == ["Slim Jeans"]

    resp = client.get("/api/products/", params={"category": "all"})
    assert len(resp.json()) == 2


def test_shop_sort_options(client, make_product):
    make_product(name="Mid", price=900)
    make_product(name="Cheap", price=300)
    make_product(name="Dear", price=2500)

    low = client.get("/api/products/", params={"sort": "price-low"}).json()
    high = client.get("/api/products/", params={"sort": "price-high"}).json()
    newest = client.get("/api/products/").json()

    assert [p["name"] for p in low] == ["Cheap", "Mid", "Dear"]
    assert [p["name"] for p in high] == ["Dear", "Mid", "Cheap"]
    assert [p["name"] for p in newest] == ["Dear", "Cheap", "Mid"]


def test_shop_rejects_unknown_sort(client):
    assert client.get("/api/products/", params={"sort": "random"}).status_code == 422


def test_product_detail_decodes_legacy_fields(client, make_product):
    product = make_product(sizes='["M", "L"]', images="https://cdn.example.com/x.jpg", in_stock=False)

    resp = client.get(f"/api/products/{product.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["sizes"] == ["M", "L"]
    assert body["images"] == ["https://cdn.example.com/x.jpg"]
    assert body["inStock"] is False


def test_product_detail_with_malformed_sizes_falls_back_to_empty(client, make_product):
    product = make_product(sizes="[broken")

    body = client.get(f"/api/products/{product.id}").json()
    assert body["sizes"] == []


def test_product_detail_not_found(client):
    resp = client.get("/api/products/404")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_categories(client):
    assert client.get("/api/products/categories").json() == SHOP_CATEGORIES
