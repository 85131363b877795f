import pytest
from fastapi.testclient import TestClient

from stockroom.main import app
from stockroom.services.auth import AuthService, AuthSession
from stockroom.services.product_form import ProductFormService
from stockroom.services.scanner import ScannerRegistry
from stockroom.utils.api_client import ApiError
from stockroom.utils.deps import (
    get_api,
    get_auth_session,
    get_current_user,
    get_product_form,
    get_scanner_registry,
)

from tests.factories import CASABLANCA, RABAT, FakeInventoryApi, make_product, stock

USERS = [
    {"id": 7, "name": "Youssef", "secretKey": "k-123", "city": "Oujda", "dob": "1990-04-12"},
    {"id": 8, "name": "Salma", "secretKey": "k-456", "city": "Marrakesh"},
]


@pytest.fixture()
def api():
    return FakeInventoryApi(
        [
            make_product(id=1, name="Souris", price=50, barcode="111",
                         stocks=[stock(1999, 30, CASABLANCA), stock(2991, 5, RABAT)]),
            make_product(id=2, name="Écran", type="Électronique", price=900, solde=750, barcode="222",
                         supplier="Samsung", stocks=[stock(1999, 4, CASABLANCA)]),
            make_product(id=3, name="Clavier", price=120, barcode="333", stocks=[]),
        ],
        warehousemen=USERS,
    )


@pytest.fixture()
def session(api, storage):
    session = AuthSession(AuthService(api, storage))
    session.startup()
    return session


@pytest.fixture()
def scanners(api):
    return ScannerRegistry(api, reset_delay=60)


@pytest.fixture()
def client(api, session, scanners):
    # Lifespan is not run: shared objects come from the overrides
    app.dependency_overrides[get_api] = lambda: api
    app.dependency_overrides[get_auth_session] = lambda: session
    app.dependency_overrides[get_scanner_registry] = lambda: scanners
    app.dependency_overrides[get_product_form] = lambda: ProductFormService(api)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def signed_in(client, warehouseman):
    app.dependency_overrides[get_current_user] = lambda: warehouseman
    return client


def test_root(client):
    assert client.get("/").json() == {"message": "Stockroom API is running"}


def test_login_returns_profile_without_secret(client, session):
    response = client.post("/login", json={"secretKey": "k-123"})
    assert response.status_code == 200
    assert response.json() == {"id": 7, "name": "Youssef", "city": "Oujda", "dob": "1990-04-12"}
    assert session.user.id == 7


def test_login_with_wrong_key(client):
    response = client.post("/login", json={"secretKey": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_login_with_empty_key(client, api):
    response = client.post("/login", json={"secretKey": ""})
    assert response.status_code == 422
    assert response.json()["detail"] == {"secretKey": "secretKey is required"}
    assert api.calls == []


def test_protected_routes_need_a_session(client):
    for path in ("/products", "/stats", "/me", "/warehouses"):
        assert client.get(path).status_code == 401


def test_me_and_logout(client, session):
    client.post("/login", json={"secretKey": "k-123"})
    assert client.get("/me").json()["name"] == "Youssef"

    assert client.post("/logout").status_code == 200
    assert session.user is None
    assert client.get("/me").status_code == 401


def test_new_login_replaces_the_device_user(client, session, scanners):
    client.post("/login", json={"secretKey": "k-123"})
    client.post("/scanner/scan", json={"barcode": "999"})
    first_scanner = scanners.get(7)
    assert first_scanner.state == "not_found"

    assert client.post("/login", json={"secretKey": "k-456"}).status_code == 200
    assert session.user.id == 8
    assert client.get("/me").json()["name"] == "Salma"
    # The previous user's scanner was dropped and reset
    assert first_scanner.state == "idle"
    assert scanners.get(7) is not first_scanner


def test_product_list_keeps_backend_order_without_filters(signed_in):
    response = signed_in.get("/products")
    assert response.status_code == 200
    body = response.json()
    assert [v["product"]["id"] for v in body] == [1, 2, 3]
    assert body[1]["displayPrice"] == 750
    assert body[0]["stockStatus"] == {
        "totalStock": 35,
        "status": "En stock",
        "color": "bg-green-100 text-green-800",
    }
    assert body[2]["stockStatus"]["status"] == "Rupture de stock"


def test_product_list_filters_and_sorts(signed_in):
    response = signed_in.get("/products", params={"sort_by": "price", "sort_order": "desc"})
    assert [v["product"]["id"] for v in response.json()] == [2, 3, 1]

    response = signed_in.get("/products", params={"supplier": "sams"})
    assert [v["product"]["id"] for v in response.json()] == [2]


def test_product_search_matches_any_field(signed_in):
    response = signed_in.get("/products", params={"q": "clav"})
    assert [v["product"]["name"] for v in response.json()] == ["Clavier"]


def test_product_list_backend_failure(signed_in, api):
    api.fail_with = ApiError("GET /products failed with status 500", 500)
    response = signed_in.get("/products")
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch products"


def test_product_detail(signed_in):
    response = signed_in.get("/products/2")
    assert response.status_code == 200
    assert response.json()["product"]["name"] == "Écran"
    assert response.json()["stockStatus"]["status"] == "Stock faible"


def test_unknown_product_is_404(signed_in):
    response = signed_in.get("/products/404")
    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


def test_barcode_lookup(signed_in):
    assert signed_in.get("/products/barcode/222").json()["product"]["id"] == 2
    assert signed_in.get("/products/barcode/999").status_code == 404


def test_add_stock_records_editor(signed_in, api):
    response = signed_in.post("/products/1/stock/add", json={"quantity": "5", "warehouseId": "1999"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Stock added"
    assert body["stockStatus"]["totalStock"] == 40
    assert body["product"]["editedBy"][-1]["warehousemanId"] == 7

    name, product_id, changes = api.calls[-1]
    assert name == "update_product"
    assert [s["quantity"] for s in changes["stocks"]] == [35, 5]


def test_remove_stock_can_go_negative(signed_in):
    response = signed_in.post("/products/2/stock/remove", json={"quantity": "10", "warehouseId": "1999"})
    assert response.status_code == 200
    assert response.json()["product"]["stocks"][0]["quantity"] == -6


def test_incomplete_adjustment_is_rejected(signed_in, api):
    response = signed_in.post("/products/1/stock/add", json={"quantity": "", "warehouseId": "1999"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select warehouse and enter quantity"

    response = signed_in.post("/products/1/stock/add", json={"quantity": "abc", "warehouseId": "1999"})
    assert response.json()["detail"] == "Please enter valid quantity"
    # Rejected before the product is even fetched
    assert api.calls == []


def test_numeric_adjustment_values_are_accepted(signed_in):
    response = signed_in.post("/products/1/stock/add", json={"quantity": 5, "warehouseId": 1999})
    assert response.status_code == 200
    assert response.json()["stockStatus"]["totalStock"] == 40


def test_adjustment_on_unknown_warehouse(signed_in, api):
    response = signed_in.post("/products/3/stock/add", json={"quantity": "1", "warehouseId": "1999"})
    assert response.status_code == 404
    assert not any(call[0] == "update_product" for call in api.calls)


def test_unknown_stock_action(signed_in):
    response = signed_in.post("/products/1/stock/double", json={"quantity": "1", "warehouseId": "1999"})
    assert response.status_code == 422


def test_create_product(signed_in, api):
    response = signed_in.post("/products", json={
        "name": "Casque",
        "type": "Électronique",
        "barcode": "444",
        "price": "199.5",
        "supplier": "Sony",
        "stocks": [{"warehouseId": 1999, "quantity": "12"}],
    })
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Produit créé avec succès"
    assert body["product"]["stocks"][0]["name"] == "Gueliz B2"
    assert body["stockStatus"]["totalStock"] == 12
    assert api.calls[-1][0] == "create_product"


def test_create_product_with_errors(signed_in, api):
    response = signed_in.post("/products", json={"name": "Casque", "stocks": []})
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert errors["barcode"] == "Le code-barres est requis"
    assert "name" not in errors
    assert api.calls == []


@pytest.mark.parametrize(
    "price, message",
    [("-5", "Le prix doit être positif"), ("nan", "Le prix doit être un nombre"), ("inf", "Le prix doit être un nombre")],
)
def test_create_product_rejects_unusable_prices(signed_in, api, price, message):
    response = signed_in.post("/products", json={"name": "Cable", "barcode": "1", "price": price, "supplier": "S"})
    assert response.status_code == 400
    assert response.json()["errors"] == {"price": message}
    assert api.calls == []


def test_create_product_rejects_non_ascii_digit_quantity(signed_in, api):
    response = signed_in.post("/products", json={
        "name": "Cable", "barcode": "1", "price": "5", "supplier": "S",
        "stocks": [{"warehouseId": 1999, "quantity": "²"}],
    })
    assert response.status_code == 400
    assert response.json()["errors"] == {"stock-0": "La quantité doit être un entier"}
    assert api.calls == []


def test_backend_product_with_negative_price_does_not_break_the_catalog(signed_in, api):
    api.products[9] = make_product(id=9, name="Avoir", price=-5, barcode="999")
    response = signed_in.get("/products")
    assert response.status_code == 200
    assert response.json()[-1]["displayPrice"] == -5
    assert signed_in.get("/stats").status_code == 200


def test_product_types_and_warehouses(signed_in):
    assert "Informatique" in signed_in.get("/products/types").json()
    ids = [w["id"] for w in signed_in.get("/warehouses").json()]
    assert ids == [1999, 2991]


def test_scanner_unknown_barcode_flow(signed_in):
    outcome = signed_in.post("/scanner/scan", json={"barcode": "999"}).json()
    assert outcome["action"] == "prompt_create"
    assert outcome["state"] == "not_found"

    # Further reads are ignored until the user decides
    assert signed_in.post("/scanner/scan", json={"barcode": "999"}).json()["action"] == "ignored"

    assert signed_in.post("/scanner/create").json() == {"scannedBarcode": "999"}
    assert signed_in.post("/scanner/rescan").json() == {"state": "idle"}
    assert signed_in.post("/scanner/create").status_code == 409


def test_scanner_known_barcode_navigates(signed_in):
    outcome = signed_in.post("/scanner/scan", json={"barcode": "111"}).json()
    assert outcome["action"] == "navigate"
    assert outcome["product"]["id"] == 1
    assert signed_in.post("/scanner/focus").json() == {"state": "idle"}


def test_statistics(signed_in):
    response = signed_in.get("/stats")
    assert response.status_code == 200
    body = response.json()
    assert body["totalProducts"] == 3
    assert body["outOfStock"] == 1
    assert body["totalStockValue"] == 50 * 35 + 750 * 4
    assert body["stocksByCity"][0] == {"city": "Casablanca", "totalProducts": 2, "totalQuantity": 34}


def test_statistics_backend_failure(signed_in, api):
    api.fail_with = ApiError("GET /products failed: timeout")
    response = signed_in.get("/stats")
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch statistics"


def test_catalog_pdf(signed_in):
    response = signed_in.get("/reports/products.pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_empty_catalog_pdf(signed_in, api):
    api.products.clear()
    response = signed_in.get("/reports/products.pdf")
    assert response.status_code == 404
    assert response.json()["detail"] == "No products available to export."


def test_product_sheet_pdf(signed_in):
    response = signed_in.get("/products/2/pdf")
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
