import pymysql


def test_integrity_error_maps_to_conflict(client, fake_db):
    fake_db.fail_next(pymysql.err.IntegrityError(1452, "Cannot add or update a child row"))

    response = client.post("/stock-items", json={"product_id": 404, "quantity": 1})

    assert response.status_code == 409
    assert "1452" in response.json()["detail"]
    assert fake_db.commits == 0


def test_database_down_maps_to_service_unavailable(client, fake_db):
    fake_db.unavailable = True

    response = client.get("/products")

    assert response.status_code == 503
    assert response.json() == {"detail": "Database unavailable"}


def test_integrity_error_fails_operation(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="gram", plural="grams")
    fake_db.fail_next(pymysql.err.IntegrityError(1451, "Cannot delete or update a parent row"))

    operation = wait_for_operation(client.delete("/units/1").json()["status_url"])

    assert operation["status"] == "failed"
    assert operation["error"]["type"] == "IntegrityError"
    assert len(fake_db.rows("units")) == 1


def test_unknown_operation(client):
    response = client.get("/operations/op-does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "Operation op-does-not-exist not found"


def test_health(client):
    body = client.get("/health", params={"echo": "hi"}).json()

    assert body["status"] == 200
    assert body["status_message"] == "OK"
    assert body["echo"] == "hi"
    assert body["path_echo"] is None
    assert body["timestamp"].endswith("Z")


def test_health_path_echo(client):
    assert client.get("/health/pantry").json()["path_echo"] == "pantry"


def test_database_health(client, fake_db):
    assert client.get("/health/db").json() == {"database": "ok"}
    assert fake_db.statements == [("SELECT 1", [])]


def test_database_health_down(client, fake_db):
    fake_db.unavailable = True

    assert client.get("/health/db").status_code == 503


def test_openapi_lists_every_collection(client):
    paths = client.get("/openapi.json").json()["paths"]

    collections = {
        "/units": "unit_id",
        "/unit-conversions": "unit_conversion_id",
        "/products": "product_id",
        "/spaces": "space_id",
        "/places": "place_id",
        "/stock-items": "stock_item_id",
        "/stock-entries": "stock_entry_id",
    }
    for collection, id_param in collections.items():
        assert set(paths[collection]) == {"get", "post"}
        assert set(paths[f"{collection}/{{{id_param}}}"]) == {"get", "put", "patch", "delete"}
