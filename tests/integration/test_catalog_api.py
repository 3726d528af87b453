"""HTTP-level tests for the catalog endpoints."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from catalog.api.http.app import create_app
from catalog.entities.product import ProductRepository
from catalog.runtime.config.config_data import AppConfig

WIDGET = {
    "id": 0,
    "name": "Widget",
    "unitPrice": {"currency": {"symbol": "USD"}, "value": 9.99},
}


class TestProductPages:
    """HTML product list on /, /hello/{name} and /products."""

    @pytest.mark.parametrize("path", ["/", "/hello/anyone", "/products"])
    def test_empty_store_renders_page(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<ul>" in response.text
        assert "<li>" not in response.text

    @pytest.mark.parametrize("path", ["/", "/hello/anyone", "/products"])
    def test_lists_stored_products(self, client, path):
        client.post("/addProduct", json=WIDGET)

        response = client.get(path)

        assert "Widget: 9.99 USD" in response.text

    def test_names_are_html_escaped(self, client):
        client.post("/addProduct", json={**WIDGET, "name": "<b>bold</b>"})

        response = client.get("/products")

        assert "&lt;b&gt;bold&lt;/b&gt;" in response.text
        assert "<b>bold</b>" not in response.text

    def test_stylesheet_served(self, client):
        response = client.get("/main.css")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")


class TestAddProduct:
    def test_commit_failure_is_server_error(self, client, monkeypatch):
        """A write rejected at commit time must not be reported as added."""

        def failing_commit(self):
            raise IntegrityError("INSERT", {}, Exception("constraint failed"))

        monkeypatch.setattr(Session, "commit", failing_commit)

        response = client.post("/addProduct", json=WIDGET)

        assert response.status_code == 500
        assert "constraint failed" in response.text
        monkeypatch.undo()
        assert "Widget" not in client.get("/products").text

    def test_insert_failure_is_server_error(self, client, monkeypatch):
        def failing_create(self, product):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(ProductRepository, "create", failing_create)

        response = client.post("/addProduct", json=WIDGET)

        assert response.status_code == 500
        assert "database is locked" in response.text

    def test_add_product(self, client):
        response = client.post("/addProduct", json=WIDGET)

        assert response.status_code == 200
        assert response.text == "Product added"
        assert "Widget" in client.get("/products").text

    @pytest.mark.parametrize(
        "body",
        [
            b"{not json",
            b"",
            b'{"name": "Widget"}',
            b'{"id": 0, "name": "Widget", "unitPrice": {"currency": {"symbol": "USD"}, "value": "cheap"}}',
        ],
    )
    def test_malformed_body_rejected(self, client, body):
        response = client.post(
            "/addProduct", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.text == "Invalid product data"

    def test_no_field_validation(self, client):
        body = {"id": 7, "name": "", "unitPrice": {"currency": {"symbol": "XYZ"}, "value": -3}}

        response = client.post("/addProduct", json=body)

        assert response.status_code == 200
        assert ": -3.0 XYZ" in client.get("/products").text


class TestProductLookup:
    def test_returns_fixture_product(self, client):
        response = client.get("/product/Gadget")

        assert response.status_code == 200
        assert response.json() == {
            "id": 0,
            "name": "Gadget",
            "unitPrice": {"currency": {"symbol": "USD"}, "value": 20.0},
        }

    def test_does_not_read_the_store(self, client):
        client.post("/addProduct", json=WIDGET)

        response = client.get("/product/Widget")

        assert response.json()["unitPrice"]["value"] == 20.0


class TestTotalPrice:
    def test_total_price_with_flat_tax(self, client):
        response = client.get("/totalprice/Anything/5")

        assert response.status_code == 200
        assert response.json() == {
            "id": 0,
            "name": "Anything",
            "unitPrice": {"currency": {"symbol": "USD"}, "value": 120.0},
        }

    @pytest.mark.parametrize(("quantity", "expected"), [(0, 0.0), (1, 24.0), (-2, -48.0)])
    def test_quantity_flows_through(self, client, quantity, expected):
        response = client.get(f"/totalprice/Anything/{quantity}")

        assert response.json()["unitPrice"]["value"] == expected

    def test_large_quantity_total_is_exact(self, client):
        response = client.get("/totalprice/x/12345678901234567")

        assert response.json()["unitPrice"]["value"] == 296296293629629608
        assert "296296293629629608" in response.text

    def test_non_integer_quantity_is_not_found(self, client):
        response = client.get("/totalprice/Anything/abc")

        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_tax_rate_from_config(self, test_config):
        config = test_config.model_copy(
            update={
                "pricing": test_config.pricing.model_copy(
                    update={"flat_tax_rate": Decimal("0.5")}
                )
            }
        )

        with TestClient(create_app(config)) as client:
            response = client.get("/totalprice/Anything/1")

        assert response.json()["unitPrice"]["value"] == 30.0


class TestFinalPrice:
    def test_discount_applied_to_total(self, client):
        response = client.get("/finalprice/Anything/5/10")

        assert response.status_code == 200
        assert response.json()["unitPrice"] == {"currency": {"symbol": "USD"}, "value": 108.0}

    def test_fractional_discount(self, client):
        response = client.get("/finalprice/Anything/1/12.5")

        assert response.json()["unitPrice"]["value"] == 21.0

    def test_negative_discount_raises_price(self, client):
        response = client.get("/finalprice/Anything/1/-50")

        assert response.json()["unitPrice"]["value"] == 36

    @pytest.mark.parametrize("discount", ["abc", "1e3", "10%25", "1.2.3"])
    def test_non_numeric_discount_is_not_found(self, client, discount):
        response = client.get(f"/finalprice/Anything/1/{discount}")

        assert response.status_code == 404
        assert response.text == "Not Found"


class TestErrors:
    def test_unknown_path(self, client):
        response = client.get("/nonexistent")

        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_wrong_method_is_not_found(self, client):
        response = client.post("/products")

        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_store_error_surfaces_message_outside_production(self, client, monkeypatch):
        def broken(self):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(ProductRepository, "list_all", broken)

        response = client.get("/products")

        assert response.status_code == 500
        assert "disk I/O error" in response.text

    def test_store_error_hidden_in_production(self, test_config, monkeypatch):
        config = test_config.model_copy(update={"app": AppConfig(environment="production")})

        def broken(self):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(ProductRepository, "list_all", broken)

        with TestClient(create_app(config), raise_server_exceptions=False) as client:
            response = client.get("/products")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"

    def test_startup_fails_when_store_unreachable(self, test_config, tmp_path):
        unreachable = test_config.model_copy(
            update={
                "database": test_config.database.model_copy(
                    update={"url": f"sqlite:///{tmp_path / 'missing' / 'dir' / 'products.db'}"}
                )
            }
        )

        with pytest.raises(OperationalError):
            with TestClient(create_app(unreachable)):
                pass


class TestRequestTracing:
    def test_request_id_generated(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready(self, client):
        assert client.get("/ready").json() == {"status": "ready"}
