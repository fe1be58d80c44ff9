import pytest

RICE = {
    "name": "Basmati rice",
    "description": "Long grain",
    "parent_product_id": None,
    "purchase_unit_id": 4,
    "stock_unit_id": 2,
    "purchase_to_stock_factor": 5000.0,
}


@pytest.fixture()
def seeded(fake_db):
    fake_db.seed("products", **{**RICE, "name": "Rice", "description": ""})
    fake_db.seed("products", **{**RICE, "parent_product_id": 1})
    fake_db.seed("products", **{**RICE, "name": "Whole milk", "stock_unit_id": 6})
    return fake_db


def test_create_product(client, fake_db):
    response = client.post("/products", json=RICE)

    assert response.status_code == 201
    product = response.json()["product"]
    assert product["id"] == 1
    assert product["purchase_to_stock_factor"] == 5000.0
    assert product["parent_product_id"] is None
    assert response.headers["location"].endswith("/products/1")

    sql, params = fake_db.statements[0]
    assert sql.startswith("INSERT INTO products (name, description, parent_product_id,")
    assert params == ["Basmati rice", "Long grain", None, 4, 2, 5000.0]


def test_create_product_defaults(client, fake_db):
    response = client.post("/products", json={"name": "Salt", "purchase_unit_id": 1, "stock_unit_id": 1})

    assert response.status_code == 201
    product = response.json()["product"]
    assert product["description"] == ""
    assert product["purchase_to_stock_factor"] == 1.0


def test_create_product_coerces_types(client):
    response = client.post("/products", json={**RICE, "stock_unit_id": "2", "purchase_to_stock_factor": "2.5"})

    assert response.status_code == 201
    assert response.json()["product"]["stock_unit_id"] == 2
    assert response.json()["product"]["purchase_to_stock_factor"] == 2.5


def test_create_product_rejects_non_numeric_unit(client):
    response = client.post("/products", json={**RICE, "stock_unit_id": "grams"})

    assert response.status_code == 422


def test_product_links(client, seeded):
    links = {link["rel"]: link["href"] for link in client.get("/products/2").json()["links"]}

    assert links == {
        "self": "/products/2",
        "stock-unit": "/units/2",
        "purchase-unit": "/units/4",
        "parent": "/products/1",
        "stock-items": "/stock-items?product_id=2",
    }


def test_product_without_parent_has_no_parent_link(client, seeded):
    rels = [link["rel"] for link in client.get("/products/1").json()["links"]]

    assert "parent" not in rels


def test_list_products_filters(client, seeded):
    assert len(client.get("/products").json()) == 3
    assert [p["id"] for p in client.get("/products", params={"name": "rice"}).json()] == [1, 2]
    assert [p["id"] for p in client.get("/products", params={"parent_product_id": 1}).json()] == [2]
    assert [p["id"] for p in client.get("/products", params={"stock_unit_id": 6}).json()] == [3]
    assert client.get("/products", params={"name": "rice", "stock_unit_id": 6}).json() == []


def test_list_products_empty(client):
    response = client.get("/products")

    assert response.status_code == 200
    assert response.json() == []


def test_get_product_not_found(client):
    response = client.get("/products/7")

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


def test_patch_product_can_clear_parent(client, seeded, wait_for_operation):
    accepted = client.patch("/products/2", json={"parent_product_id": None}).json()
    operation = wait_for_operation(accepted["status_url"])

    assert operation["status"] == "completed"
    assert operation["result"]["product"]["parent_product_id"] is None
    assert seeded.rows("products")[1]["parent_product_id"] is None


def test_put_product_writes_every_column(client, seeded, wait_for_operation):
    replacement = {**RICE, "name": "Jasmine rice", "purchase_to_stock_factor": 1000.0}

    accepted = client.put("/products/2", json=replacement).json()
    operation = wait_for_operation(accepted["status_url"])

    assert operation["status"] == "completed"
    sql, params = [s for s in seeded.statements if s[0].startswith("UPDATE")][0]
    assert sql == (
        "UPDATE products SET name=%s, description=%s, parent_product_id=%s, purchase_unit_id=%s, "
        "stock_unit_id=%s, purchase_to_stock_factor=%s WHERE id=%s"
    )
    assert params == ["Jasmine rice", "Long grain", None, 4, 2, 1000.0, 2]


def test_delete_product(client, seeded, wait_for_operation):
    accepted = client.delete("/products/3").json()

    assert accepted["message"] == "Product deletion initiated"
    assert wait_for_operation(accepted["status_url"])["status"] == "completed"
    assert [p["id"] for p in seeded.rows("products")] == [1, 2]
