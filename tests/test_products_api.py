# tests/test_products_api.py
import logging

from fastapi.testclient import TestClient

from catalog_api.database import STORE, ProductStore, get_store
from catalog_api.main import app

AUTH = {"x-api-key": "your-secret-api-key"}

client = TestClient(app)

PEN = {"name": "Pen", "description": "Blue ink pen", "price": 1.5, "category": "Office", "inStock": True}


def _ids():
    return [p.id for p in STORE.all()]


def test_root_lists_endpoints():
    r = client.get("/")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["endpoints"]["products"] == "/api/products"


def test_create_get_delete_roundtrip():
    r = client.post("/api/products", json=PEN, headers=AUTH)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Product created successfully"
    created = body["data"]
    assert created["id"]
    assert {k: created[k] for k in PEN} == PEN

    r = client.get(f"/api/products/{created['id']}")
    assert r.status_code == 200
    assert r.json()["data"] == created

    r = client.delete(f"/api/products/{created['id']}", headers=AUTH)
    assert r.status_code == 200
    assert r.json()["data"] == created

    r = client.get(f"/api/products/{created['id']}")
    assert r.status_code == 404
    assert r.json() == {
        "success": False,
        "error": {"message": f"Product with ID {created['id']} not found", "statusCode": 404},
    }


def test_create_ignores_client_id_and_trims_text():
    r = client.post("/api/products", json={**PEN, "id": "mine", "name": "  Pen  "}, headers=AUTH)
    data = r.json()["data"]
    assert data["id"] != "mine"
    assert data["name"] == "Pen"
    assert len(set(_ids())) == 4


def test_create_reports_every_invalid_field():
    r = client.post("/api/products", json={"name": ""}, headers=AUTH)
    assert r.status_code == 400
    message = r.json()["error"]["message"]
    for field in ("Name", "Description", "Price", "Category", "inStock"):
        assert field in message
    assert len(STORE) == 3


def test_create_with_malformed_json():
    r = client.post(
        "/api/products",
        content=b"{not json",
        headers={**AUTH, "content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Request body must be valid JSON"


def test_mutations_require_api_key():
    before = _ids()
    target = before[0]
    for headers in ({}, {"x-api-key": "wrong"}):
        responses = [
            client.post("/api/products", json=PEN, headers=headers),
            client.put(f"/api/products/{target}", json=PEN, headers=headers),
            client.delete(f"/api/products/{target}", headers=headers),
        ]
        for r in responses:
            assert r.status_code == 401
            assert r.json()["error"] == {"message": "Invalid or missing API key", "statusCode": 401}
    assert _ids() == before
    assert STORE.find_by_id(target).name == "Laptop"


def test_auth_runs_before_validation():
    r = client.post("/api/products", json={}, headers={"x-api-key": "wrong"})
    assert r.status_code == 401


def test_configured_api_key(monkeypatch):
    from catalog_api.config import get_settings

    monkeypatch.setenv("API_KEY", "s3cret")
    get_settings.cache_clear()
    assert client.post("/api/products", json=PEN, headers=AUTH).status_code == 401
    assert client.post("/api/products", json=PEN, headers={"x-api-key": "s3cret"}).status_code == 201


def test_update_replaces_all_fields_and_keeps_id():
    target = _ids()[1]
    update = {"name": "Standing Desk", "description": "", "price": 450, "category": "Furniture", "inStock": False}
    r = client.put(f"/api/products/{target}", json=update, headers=AUTH)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Product updated successfully"
    assert body["data"] == {"id": target, **update, "price": 450.0}
    assert _ids()[1] == target


def test_update_missing_product():
    r = client.put("/api/products/nope", json=PEN, headers=AUTH)
    assert r.status_code == 404


def test_update_with_partial_payload_is_rejected():
    target = _ids()[0]
    r = client.put(f"/api/products/{target}", json={"price": 10}, headers=AUTH)
    assert r.status_code == 400
    assert STORE.find_by_id(target).price == 1299.99


def test_delete_missing_product_leaves_store_alone():
    before = _ids()
    r = client.delete("/api/products/does-not-exist", headers=AUTH)
    assert r.status_code == 404
    assert r.json()["error"]["statusCode"] == 404
    assert _ids() == before


def test_list_with_filters_and_pagination():
    r = client.get("/api/products", params={"category": "Electronics"})
    body = r.json()
    assert body["success"] is True
    assert [p["name"] for p in body["data"]] == ["Laptop"]

    body = client.get("/api/products", params={"page": "2", "limit": "1"}).json()
    assert body["count"] == 1
    assert body["data"][0]["name"] == "Desk Chair"
    assert body["total"] == 3
    assert body["totalPages"] == 3

    body = client.get("/api/products", params={"inStock": "false"}).json()
    assert [p["name"] for p in body["data"]] == ["Coffee Maker"]

    body = client.get("/api/products", params={"page": "abc"}).json()
    assert body["page"] == 1
    assert body["count"] == 3


def test_search():
    body = client.get("/api/products/search", params={"q": "laptop"}).json()
    assert body["count"] == 1
    assert body["query"] == "laptop"
    assert body["data"][0]["name"] == "Laptop"

    for params in ({}, {"q": ""}):
        r = client.get("/api/products/search", params=params)
        assert r.status_code == 400
        assert r.json()["error"]["message"] == 'Search query parameter "q" is required'


def test_stats_route():
    body = client.get("/api/products/stats").json()
    assert body["data"]["totalProducts"] == 3
    STORE.reset()
    body = client.get("/api/products/stats").json()
    assert body["data"]["averagePrice"] == 0
    assert body["data"]["totalValue"] == 0


def test_unknown_route_and_method():
    r = client.get("/api/nothing")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": {"message": "Route /api/nothing not found", "statusCode": 404}}

    r = client.patch("/api/products", json=PEN, headers=AUTH)
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Route /api/products not found"


def test_stack_only_in_development(monkeypatch):
    from catalog_api.config import get_settings

    assert "stack" not in client.get("/api/products/missing").json()["error"]

    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()
    error = client.get("/api/products/missing").json()["error"]
    assert error["statusCode"] == 404
    assert "ApiError" in error["stack"]


class ExplodingStore(ProductStore):
    def all(self):
        raise RuntimeError("disk on fire")


def test_unexpected_errors_become_500():
    app.dependency_overrides[get_store] = lambda: ExplodingStore()
    try:
        c = TestClient(app, raise_server_exceptions=False)
        r = c.get("/api/products")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {
        "success": False,
        "error": {"message": "Internal Server Error", "statusCode": 500},
    }


def test_unexpected_errors_do_not_escape_the_app():
    app.dependency_overrides[get_store] = lambda: ExplodingStore()
    try:
        r = client.get("/api/products/stats")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json()["error"] == {"message": "Internal Server Error", "statusCode": 500}


def test_huge_integer_price_is_a_validation_error():
    r = client.post(
        "/api/products",
        content=b'{"name":"Pen","description":"x","price":1' + b"0" * 400 + b',"category":"Office","inStock":true}',
        headers={**AUTH, "content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Price is required and must be a non-negative number"
    assert len(STORE) == 3


def test_trailing_slash_is_not_redirected():
    r = client.get("/api/products/", follow_redirects=False)
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Route /api/products/ not found"


def _pipeline_records(caplog):
    return [(r.levelname, r.getMessage()) for r in caplog.records if r.name == "catalog_api.pipeline"]


def test_one_access_line_per_request_and_one_error_line_per_failure(caplog):
    caplog.set_level(logging.INFO, logger="catalog_api.pipeline")

    client.get("/api/products", params={"page": "1"})
    assert _pipeline_records(caplog) == [("INFO", "GET /api/products?page=1")]

    caplog.clear()
    client.get("/api/nothing")
    assert _pipeline_records(caplog) == [
        ("INFO", "GET /api/nothing"),
        ("WARNING", "Error: Route /api/nothing not found (statusCode=404)"),
    ]

    caplog.clear()
    client.post("/api/products", json=PEN)
    assert _pipeline_records(caplog) == [
        ("INFO", "POST /api/products"),
        ("WARNING", "Error: Invalid or missing API key (statusCode=401)"),
    ]


def test_unexpected_error_logged_once(caplog):
    caplog.set_level(logging.INFO)
    app.dependency_overrides[get_store] = lambda: ExplodingStore()
    try:
        client.get("/api/products")
    finally:
        app.dependency_overrides.clear()
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert [r.getMessage() for r in errors] == ["Error: Internal Server Error (statusCode=500)"]
    assert errors[0].exc_info is None
