def test_create_unit(client, fake_db):
    response = client.post("/units", json={"singular": "gram", "plural": "grams"})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "New unit created"
    assert body["unit"]["id"] == 1
    assert body["unit"]["singular"] == "gram"
    assert body["unit"]["links"] == [{"rel": "self", "href": "/units/1"}]
    assert response.headers["location"].endswith("/units/1")
    assert response.headers["etag"]
    assert fake_db.commits == 1
    assert fake_db.rows("units")[0]["plural"] == "grams"


def test_create_unit_requires_both_names(client, fake_db):
    response = client.post("/units", json={"singular": "gram"})

    assert response.status_code == 422
    assert fake_db.statements == []


def test_list_units(client, fake_db):
    fake_db.seed("units", singular="gram", plural="grams")
    fake_db.seed("units", singular="kilogram", plural="kilograms")
    fake_db.seed("units", singular="cup", plural="cups")

    response = client.get("/units")
    assert response.status_code == 200
    assert [u["singular"] for u in response.json()] == ["gram", "kilogram", "cup"]

    filtered = client.get("/units", params={"singular": "GRAM"})
    assert [u["id"] for u in filtered.json()] == [1, 2]


def test_get_unit(client, fake_db):
    fake_db.seed("units", singular="cup", plural="cups")

    response = client.get("/units/1")

    assert response.status_code == 200
    assert response.json()["plural"] == "cups"
    assert response.headers["etag"]
    assert response.headers["last-modified"].endswith("GMT")


def test_get_unit_not_found(client):
    response = client.get("/units/42")

    assert response.status_code == 404
    assert response.json()["detail"] == "Unit not found"


def test_get_unit_if_none_match(client, fake_db):
    fake_db.seed("units", singular="cup", plural="cups")
    etag = client.get("/units/1").headers["etag"]

    response = client.get("/units/1", headers={"If-None-Match": etag})

    assert response.status_code == 304
    assert response.content == b""


def test_get_unit_if_modified_since(client, fake_db):
    fake_db.seed("units", singular="cup", plural="cups")
    last_modified = client.get("/units/1").headers["last-modified"]

    assert client.get("/units/1", headers={"If-Modified-Since": last_modified}).status_code == 304
    assert client.get(
        "/units/1", headers={"If-Modified-Since": "Sun, 01 Mar 2026 00:00:00 GMT"}
    ).status_code == 200


def test_patch_unit(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="kilo", plural="kilos")

    response = client.patch("/units/1", json={"singular": "kilogram"})

    assert response.status_code == 202
    accepted = response.json()
    assert accepted["status"] == "pending"
    assert accepted["message"] == "Unit update initiated"
    assert response.headers["location"] == accepted["status_url"]

    operation = wait_for_operation(accepted["status_url"])
    assert operation["status"] == "completed"
    assert operation["result"]["unit"]["singular"] == "kilogram"
    assert operation["result"]["unit"]["plural"] == "kilos"
    assert ("UPDATE units SET singular=%s WHERE id=%s", ["kilogram", 1]) in fake_db.statements

    polled = client.get(accepted["status_url"])
    assert polled.headers["etag"] == operation["result"]["etag"]
    assert client.get("/units/1").headers["etag"] == operation["result"]["etag"]


def test_patch_unit_without_fields_fails(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="kilo", plural="kilos")

    accepted = client.patch("/units/1", json={}).json()
    operation = wait_for_operation(accepted["status_url"])

    assert operation["status"] == "failed"
    assert operation["error"]["status_code"] == 400
    assert operation["error"]["message"] == "No fields to update"


def test_put_unit(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="kilo", plural="kilos")

    accepted = client.put("/units/1", json={"singular": "pound", "plural": "pounds"}).json()
    operation = wait_for_operation(accepted["status_url"])

    assert operation["status"] == "completed"
    assert fake_db.rows("units")[0]["singular"] == "pound"
    assert fake_db.rows("units")[0]["plural"] == "pounds"


def test_put_unit_not_found(client, wait_for_operation):
    accepted = client.put("/units/9", json={"singular": "pound", "plural": "pounds"}).json()
    operation = wait_for_operation(accepted["status_url"])

    assert operation["status"] == "failed"
    assert operation["error"] == {"type": "HTTPException", "message": "Unit not found", "status_code": 404}


def test_delete_unit(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="cup", plural="cups")

    response = client.delete("/units/1")
    assert response.status_code == 202

    operation = wait_for_operation(response.json()["status_url"])
    assert operation["status"] == "completed"
    assert operation["result"] == {"id": 1, "message": "Unit deleted successfully"}
    assert fake_db.rows("units") == []
    assert client.get("/units/1").status_code == 404


def test_delete_unit_twice(client, fake_db, wait_for_operation):
    fake_db.seed("units", singular="cup", plural="cups")
    wait_for_operation(client.delete("/units/1").json()["status_url"])

    operation = wait_for_operation(client.delete("/units/1").json()["status_url"])

    assert operation["status"] == "failed"
    assert operation["error"]["status_code"] == 404
