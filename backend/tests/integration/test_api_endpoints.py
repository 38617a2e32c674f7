"""
Integration Tests for API Endpoints

The app runs with in-memory document stores and a mocked S3 client; these
tests go through routing, auth, validation and the error envelope.

Tests for:
- Health check
- Public catalog listing and lookup
- Admin authentication (401 / 403)
- Admin product upload and batch delete
- Dealer registration, login and products
- Public form submissions
"""

import pytest
from botocore.exceptions import ClientError


@pytest.fixture
def admin_table(services):
    return services.catalog.admin_products


@pytest.fixture
def vendor_table(services):
    return services.catalog.vendor_products


@pytest.fixture
def seeded_catalog(admin_table, vendor_table, sample_admin_product, sample_vendor_product):
    admin_table.items.append(dict(sample_admin_product))
    vendor_table.items.append(dict(sample_vendor_product))


class TestHealthEndpoints:

    def test_health_check_returns_200(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"


class TestCatalogEndpoints:
    """Tests for the public product catalog"""

    def test_list_products_merges_sources(self, client, seeded_catalog):
        response = client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [item["id"] for item in data["items"]] == ["p1", "v1"]
        assert data["items"][1] == {
            "id": "v1",
            "name": "Desk Lamp",
            "price": 12.0,
            "image": "https://vendor-images-test.s3.eu-north-1.amazonaws.com/2_lamp.jpg",
        }

    def test_list_products_empty(self, client):
        response = client.get("/api/products")

        assert response.json() == {"success": True, "items": []}

    def test_get_product_prefers_admin(self, client, seeded_catalog, vendor_table):
        vendor_table.items.append({"productId": "p1", "name": "Vendor shadow"})

        response = client.get("/api/products/p1")

        assert response.status_code == 200
        assert response.json()["product"]["name"] == "Ceiling Fan"

    def test_get_vendor_product(self, client, seeded_catalog):
        response = client.get("/api/products/v1")

        assert response.json()["product"]["id"] == "v1"

    def test_get_missing_product_returns_404_envelope(self, client):
        response = client.get("/api/products/missing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Product not found"}


class TestAdminAuthentication:
    """Tests for admin route protection"""

    def test_missing_token_returns_401(self, client):
        response = client.get("/api/admin/products")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_invalid_token_returns_403(self, client):
        response = client.get("/api/admin/products", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Invalid token"}

    def test_non_admin_role_returns_403(self, client, token_issuer):
        token = token_issuer.create_admin_token("eve", "customer")

        response = client.get("/api/admin/products", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_super_admin_login(self, client):
        response = client.post("/api/admin/login", json={"username": "root", "password": "root-password"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["token"]

    def test_bad_login_returns_401(self, client):
        response = client.post("/api/admin/login", json={"username": "root", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    def test_added_admin_can_log_in(self, client, auth_headers_admin):
        created = client.post(
            "/api/admin/add-user", json={"username": "Sam", "password": "pw"}, headers=auth_headers_admin,
        )
        duplicate = client.post(
            "/api/admin/add-user", json={"username": "sam", "password": "pw"}, headers=auth_headers_admin,
        )
        login = client.post("/api/admin/login", json={"username": "sam", "password": "pw"})

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert login.status_code == 200


class TestAdminProducts:
    """Tests for admin product upload"""

    def test_upload_product(self, client, auth_headers_admin, admin_table, mock_s3_client):
        response = client.post(
            "/api/admin/products",
            data={"name": "Fan", "price": "19.99", "category": "Fans"},
            files={"image": ("fan.jpg", b"imagebytes", "image/jpeg")},
            headers=auth_headers_admin,
        )

        assert response.status_code == 201
        product = response.json()["product"]
        assert product["price"] == 19.99
        assert product["imageUrl"].startswith("https://product-images-test.s3.eu-north-1.amazonaws.com/products/")
        assert len(admin_table.items) == 1
        mock_s3_client.put_object.assert_called_once()

    def test_malformed_price_rejected_before_upload(self, client, auth_headers_admin, admin_table, mock_s3_client):
        response = client.post(
            "/api/admin/products",
            data={"name": "Fan", "price": "19.99abc"},
            files={"image": ("fan.jpg", b"imagebytes", "image/jpeg")},
            headers=auth_headers_admin,
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid price."}
        mock_s3_client.put_object.assert_not_called()
        assert admin_table.items == []

    def test_upload_failure_returns_502_and_writes_nothing(self, client, auth_headers_admin, admin_table, mock_s3_client):
        mock_s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        response = client.post(
            "/api/admin/products",
            data={"name": "Fan", "price": "10"},
            files={"image": ("fan.jpg", b"imagebytes", "image/jpeg")},
            headers=auth_headers_admin,
        )

        assert response.status_code == 502
        assert response.json()["error"] == "Image upload failed."
        assert admin_table.items == []

    def test_missing_fields(self, client, auth_headers_admin):
        response = client.post("/api/admin/products", data={"price": "10"}, headers=auth_headers_admin)

        assert response.status_code == 400
        assert response.json()["error"] == "Product name and price are required."


class TestBatchDelete:
    """Tests for POST /api/admin/batch-delete"""

    def test_batch_delete_products(self, client, auth_headers_admin, seeded_catalog, admin_table):
        admin_table.items.append({"productId": "p2", "name": "Bulb"})

        response = client.post(
            "/api/admin/batch-delete",
            json={"tableName": "Products", "ids": ["p1", "p2"]},
            headers=auth_headers_admin,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "2 items deleted successfully."}
        assert admin_table.batch_calls == [{"key_attribute": "productId", "ids": ["p1", "p2"], "chunk_size": 25}]
        assert admin_table.items == []

    def test_batch_delete_contact_messages(self, client, auth_headers_admin, memory_stores, test_settings):
        response = client.post(
            "/api/admin/batch-delete",
            json={"tableName": "Contact Messages", "ids": ["c1"]},
            headers=auth_headers_admin,
        )

        assert response.status_code == 200
        contacts = memory_stores[test_settings.DYNAMODB_CONTACT_TABLE]
        assert contacts.batch_calls[0]["key_attribute"] == "id"

    def test_invalid_table(self, client, auth_headers_admin, memory_stores):
        response = client.post(
            "/api/admin/batch-delete",
            json={"tableName": "NotARealTable", "ids": ["x"]},
            headers=auth_headers_admin,
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid table name specified."}
        assert all(not store.batch_calls for store in memory_stores.values())

    def test_empty_ids(self, client, auth_headers_admin):
        response = client.post(
            "/api/admin/batch-delete",
            json={"tableName": "Products", "ids": []},
            headers=auth_headers_admin,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Table name and a non-empty array of IDs are required."

    def test_requires_auth(self, client):
        response = client.post("/api/admin/batch-delete", json={"tableName": "Products", "ids": ["p1"]})

        assert response.status_code == 401


class TestAdminTableViews:

    def test_list_contacts(self, client, auth_headers_admin):
        client.post("/api/contact", json={"name": "Ann", "email": "ann@example.com", "message": "Hi"})

        response = client.get("/api/admin/contacts", headers=auth_headers_admin)

        assert response.status_code == 200
        assert [item["name"] for item in response.json()["data"]] == ["Ann"]

    def test_unknown_view_is_404(self, client, auth_headers_admin):
        response = client.get("/api/admin/unknown-things", headers=auth_headers_admin)

        assert response.status_code == 404


class TestDealerEndpoints:
    """Tests for dealer registration, login and products"""

    def test_register_and_login(self, client):
        registered = client.post(
            "/api/dealers", json={"name": "Acme", "email": "Sales@Acme.com", "phone": "123"},
        )
        login = client.post("/api/dealers/login", json={"email": "sales@acme.com", "phone": "123"})

        assert registered.status_code == 200
        assert login.status_code == 200
        assert login.json()["dealerId"] == registered.json()["dealerId"]

    def test_admin_edit_with_mixed_case_email_keeps_login(self, client, auth_headers_admin):
        dealer_id = client.post(
            "/api/dealers", json={"name": "Acme", "email": "sales@acme.com", "phone": "123"},
        ).json()["dealerId"]

        edited = client.put(
            f"/api/admin/dealers/{dealer_id}",
            json={"name": "Acme AB", "email": "New@Acme.COM", "phone": "123"},
            headers=auth_headers_admin,
        )
        login = client.post("/api/dealers/login", json={"email": "new@acme.com", "phone": "123"})

        assert edited.status_code == 200
        assert login.status_code == 200
        assert login.json()["dealerId"] == dealer_id

    def test_dealer_update_with_unstorable_price_is_400(self, client, vendor_table):
        vendor_table.items.append({"productId": "v9", "dealerId": "d1", "name": "Lamp", "price": 12.0})

        response = client.put("/api/dealer/products/v9", json={"name": "Lamp", "price": "1e400"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid price."}
        assert vendor_table.items[0]["price"] == 12.0

    def test_login_unknown_email(self, client):
        response = client.post("/api/dealers/login", json={"email": "x@y.z", "phone": "1"})

        assert response.status_code == 404

    def test_dealer_product_appears_in_catalog(self, client, vendor_table):
        response = client.post(
            "/api/dealer/products",
            data={"dealerId": "d1", "name": "Lamp", "price": "12"},
            files={"image": ("lamp.jpg", b"imagebytes", "image/jpeg")},
        )

        assert response.status_code == 201
        product_id = response.json()["product"]["productId"]

        catalog = client.get("/api/products").json()["items"]
        assert [item["id"] for item in catalog] == [product_id]
        assert client.get("/api/dealer/products/d1").json()["products"][0]["productId"] == product_id


class TestSubmissionEndpoints:

    def test_product_survey(self, client):
        response = client.post("/api/product-survey", json={"productName": "Fan", "rating": 5})

        assert response.status_code == 201
        assert response.json() == {"success": True, "message": "Survey saved successfully"}

    def test_product_survey_missing_rating(self, client):
        response = client.post("/api/product-survey", json={"productName": "Fan"})

        assert response.status_code == 400

    def test_business_order(self, client):
        response = client.post(
            "/api/business-orders",
            json={"name": "Ann", "email": "ann@example.com", "phone": "1", "selectedProducts": [{"id": "p1"}]},
        )

        assert response.status_code == 200
        assert response.json()["data"]["selectedProducts"] == [{"id": "p1"}]

    def test_malformed_body_uses_error_envelope(self, client):
        response = client.post("/api/contact", json={"name": ["not", "a", "string"]})

        assert response.status_code == 400
        assert response.json()["success"] is False
