"""HTTP-level tests: routing, auth, error mapping and the main flows."""

from datetime import datetime, timedelta
from decimal import Decimal

from conftest import PASSWORD, auth_headers, make_coupon, money
from storefront.models.download import DownloadGrant


class TestHealth:
    def test_healthcheck(self, client):
        response = client.get("/healthcheck")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "timestamp" in response.json()


class TestAuth:
    def test_register_and_login(self, client):
        response = client.post(
            "/auth/register",
            json={
                "email": "New.User@Example.com",
                "password": "long-enough-pw",
                "first_name": "New",
                "last_name": "User",
                "role": "admin",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new.user@example.com"
        # self-registration never grants admin
        assert body["role"] == "customer"
        assert "password_hash" not in body

        response = client.post(
            "/auth/login", json={"email": "new.user@example.com", "password": "long-enough-pw"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["first_name"] == "New"

    def test_duplicate_email(self, client, customer):
        response = client.post(
            "/auth/register",
            json={"email": customer.email, "password": "whatever-123", "first_name": "A", "last_name": "B"},
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "DuplicateValue"

    def test_wrong_password(self, client, customer):
        response = client.post("/auth/login", json={"email": customer.email, "password": "nope-nope"})
        assert response.status_code == 401

    def test_login_returns_user(self, client, customer):
        response = client.post("/auth/login", json={"email": customer.email, "password": PASSWORD})
        assert response.json()["user"]["id"] == customer.id

    def test_missing_token(self, client):
        assert client.get("/users/me").status_code == 401

    def test_admin_only_routes(self, client, customer_headers, admin_headers):
        assert client.get("/users/", headers=customer_headers).status_code == 403
        assert client.get("/users/", headers=admin_headers).status_code == 200

    def test_admin_can_create_admin(self, client, admin_headers):
        response = client.post(
            "/users/",
            headers=admin_headers,
            json={"email": "ops@example.com", "password": "long-enough-pw", "first_name": "O", "last_name": "P", "role": "admin"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_users_see_only_themselves(self, client, customer, other_customer, customer_headers):
        assert client.get(f"/users/{customer.id}", headers=customer_headers).status_code == 200
        assert client.get(f"/users/{other_customer.id}", headers=customer_headers).status_code == 403

    def test_unknown_user_is_404(self, client, admin_headers):
        response = client.get("/users/999", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "User with id 999 not found", "error_type": "UserNotFound"}


class TestCheckout:
    def test_checkout_with_coupon(self, client, customer_headers, product, save10):
        response = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": product.id, "quantity": 2, "price": "29.99"}], "coupon_code": "SAVE10"},
        )

        assert response.status_code == 201
        body = response.json()
        assert money(body["total_amount"]) == Decimal("59.98")
        assert money(body["discount_amount"]) == Decimal("6.00")
        assert money(body["final_amount"]) == Decimal("53.98")
        assert len(body["items"]) == 1

    def test_empty_order_is_rejected(self, client, customer_headers):
        response = client.post("/orders/", headers=customer_headers, json={"items": []})
        assert response.status_code == 422

    def test_unknown_product_is_404(self, client, customer_headers):
        response = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": 999, "quantity": 1, "price": "1.00"}]},
        )
        assert response.status_code == 404
        assert response.json()["error_type"] == "ProductNotFound"

    def test_error_kinds_map_to_status_codes(self, session, client, customer_headers, product):
        make_coupon(session, "SPENT", discount_amount=Decimal("1.00"), max_uses=1, current_uses=1)
        make_coupon(
            session, "STALE", discount_amount=Decimal("1.00"), expires_at=datetime.utcnow() - timedelta(days=1)
        )
        make_coupon(session, "BIG", discount_amount=Decimal("1.00"), min_order_amount=Decimal("1000.00"))

        def checkout(code):
            return client.post(
                "/orders/",
                headers=customer_headers,
                json={"items": [{"product_id": product.id, "quantity": 1, "price": "29.99"}], "coupon_code": code},
            )

        assert checkout("SPENT").status_code == 409
        assert checkout("STALE").status_code == 410
        assert checkout("BIG").status_code == 400
        assert checkout("NOPE").status_code == 404

    def test_orders_are_private(self, client, customer_headers, other_customer, product):
        created = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": product.id, "quantity": 1, "price": "29.99"}]},
        ).json()

        other = client.get(f"/orders/{created['id']}", headers=auth_headers(other_customer))
        assert other.status_code == 404

        mine = client.get("/orders/me", headers=customer_headers)
        assert [o["id"] for o in mine.json()] == [created["id"]]


class TestCoupons:
    def test_validate_endpoint(self, client, save10):
        response = client.post("/coupons/validate", json={"code": "SAVE10", "order_amount": "59.98"})
        body = response.json()
        assert body["valid"] is True
        assert money(body["discount"]) == Decimal("6.00")
        assert body["coupon"]["code"] == "SAVE10"

    def test_validate_failure_is_not_an_error(self, client, save10):
        response = client.post("/coupons/validate", json={"code": "SAVE10", "order_amount": "10.00"})
        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert money(response.json()["discount"]) == Decimal("0")

    def test_validate_rejects_sub_cent_amounts(self, client, save10):
        response = client.post("/coupons/validate", json={"code": "SAVE10", "order_amount": "50.005"})
        assert response.status_code == 422

    def test_admin_crud(self, client, admin_headers):
        created = client.post(
            "/coupons/", headers=admin_headers, json={"code": "WELCOME", "discount_amount": "5.00"}
        )
        assert created.status_code == 201
        coupon_id = created.json()["id"]

        patched = client.patch(f"/coupons/{coupon_id}", headers=admin_headers, json={"max_uses": 10})
        assert patched.json()["max_uses"] == 10
        assert money(patched.json()["discount_amount"]) == Decimal("5.00")

        assert client.get("/coupons/code/WELCOME", headers=admin_headers).status_code == 200
        assert client.delete(f"/coupons/{coupon_id}", headers=admin_headers).status_code == 200

    def test_invalid_definition(self, client, admin_headers):
        response = client.post("/coupons/", headers=admin_headers, json={"code": "NONE"})
        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidCouponDefinition"


class TestDownloadFlow:
    def test_paid_order_unlocks_download(self, session, client, customer_headers, admin_headers, digital_product):
        order = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": digital_product.id, "quantity": 1, "price": "19.99"}]},
        ).json()

        client.patch(f"/orders/{order['id']}/status", headers=admin_headers, json={"status": "completed"})
        assert client.get("/downloads/me", headers=customer_headers).json() == []

        client.patch(
            f"/orders/{order['id']}/payment-status", headers=admin_headers, json={"payment_status": "completed"}
        )
        grants = client.get("/downloads/me", headers=customer_headers).json()
        assert len(grants) == 1

        token = client.post(f"/downloads/{grants[0]['id']}/token", headers=customer_headers).json()
        assert token["expires_in"] == 900

        check = client.post("/downloads/token/validate", json={"token": token["token"]}).json()
        assert check == {"valid": True, "download_id": grants[0]["id"], "user_id": grants[0]["user_id"]}

        served = client.get("/downloads/file", params={"token": token["token"]})
        assert served.status_code == 200
        assert served.json()["download_url"] == digital_product.digital_file_url
        assert served.json()["download_count"] == 1

    def test_download_token_cannot_authenticate(self, session, client, customer, customer_headers,
                                                 digital_product, admin_headers):
        order = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": digital_product.id, "quantity": 1, "price": "19.99"}]},
        ).json()
        grant = client.post(
            "/downloads/",
            headers=admin_headers,
            json={"user_id": customer.id, "product_id": digital_product.id, "order_id": order["id"]},
        ).json()
        token = client.post(f"/downloads/{grant['id']}/token", headers=customer_headers).json()["token"]

        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_other_users_grant(self, session, client, customer, other_customer, customer_headers,
                                         digital_product, admin_headers):
        order = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": digital_product.id, "quantity": 1, "price": "19.99"}]},
        ).json()
        grant = client.post(
            "/downloads/",
            headers=admin_headers,
            json={"user_id": customer.id, "product_id": digital_product.id, "order_id": order["id"]},
        ).json()

        response = client.post(f"/downloads/{grant['id']}/token", headers=auth_headers(other_customer))
        assert response.status_code == 400
        assert response.json()["error_type"] == "DownloadAccessDenied"

    def test_limit_exceeded_is_409(self, session, client, customer, admin_headers, customer_headers, digital_product):
        order = client.post(
            "/orders/",
            headers=customer_headers,
            json={"items": [{"product_id": digital_product.id, "quantity": 1, "price": "19.99"}]},
        ).json()
        grant = client.post(
            "/downloads/",
            headers=admin_headers,
            json={"user_id": customer.id, "product_id": digital_product.id, "order_id": order["id"]},
        ).json()

        for _ in range(3):
            assert client.post(f"/downloads/{grant['id']}/increment", headers=admin_headers).status_code == 200

        response = client.post(f"/downloads/{grant['id']}/increment", headers=admin_headers)
        assert response.status_code == 409
        assert session.get(DownloadGrant, grant["id"]).download_count == 3

    def test_bad_token_is_rejected(self, client):
        response = client.get("/downloads/file", params={"token": "garbage"})
        assert response.status_code == 400
        assert response.json()["error_type"] == "DownloadTokenInvalid"


class TestCatalogRoutes:
    def test_public_listing_and_admin_writes(self, client, admin_headers, customer_headers, category):
        payload = {"name": "Guide", "price": "12.00", "category_id": category.id}
        assert client.post("/products/", headers=customer_headers, json=payload).status_code == 403

        created = client.post("/products/", headers=admin_headers, json=payload)
        assert created.status_code == 201

        listed = client.get("/products/").json()
        assert [p["name"] for p in listed] == ["Guide"]
        assert [p["name"] for p in client.get(f"/categories/{category.id}/products").json()] == ["Guide"]

    def test_null_for_required_field_is_422(self, client, admin_headers, product):
        response = client.patch(f"/products/{product.id}", headers=admin_headers, json={"name": None})
        assert response.status_code == 422


class TestCartRoutes:
    def test_add_merge_and_summary(self, client, customer_headers, product):
        client.post("/cart/add", headers=customer_headers, json={"product_id": product.id, "quantity": 1})
        client.post("/cart/add", headers=customer_headers, json={"product_id": product.id, "quantity": 2})

        summary = client.get("/cart/summary", headers=customer_headers).json()
        assert summary["item_count"] == 3
        assert money(summary["total"]) == Decimal("89.97")

        assert client.delete("/cart/clear", headers=customer_headers).json()["removed"] == 1


class TestContactAndSettings:
    def test_contact_submission(self, client, admin_headers):
        response = client.post(
            "/contact/",
            json={"name": "Pat", "email": "pat@example.com", "subject": "Hi", "message": "Question"},
        )
        assert response.json()["success"] is True

        listed = client.get("/contact/", headers=admin_headers).json()
        assert [s["subject"] for s in listed] == ["Hi"]

    def test_blank_fields_are_rejected(self, client):
        response = client.post(
            "/contact/",
            json={"name": "   ", "email": "pat@example.com", "subject": "Hi", "message": "Question"},
        )
        assert response.status_code == 422

    def test_settings_upsert_and_public(self, client, admin_headers):
        defaults = client.get("/settings/public").json()
        assert defaults["currency"] == "USD"

        client.put("/settings/", headers=admin_headers, json={"key": "currency", "value": "EUR"})
        client.put("/settings/", headers=admin_headers, json={"key": "currency", "value": "GBP"})
        client.put("/settings/", headers=admin_headers, json={"key": "internal_flag", "value": "on"})

        public = client.get("/settings/public").json()
        assert public["currency"] == "GBP"
        assert "internal_flag" not in public

        assert len(client.get("/settings/", headers=admin_headers).json()) == 2
        assert client.get("/settings/missing", headers=admin_headers).status_code == 404


class TestAnalyticsRoutes:
    def test_visit_and_chart(self, client, admin_headers):
        client.post("/admin/analytics/visits", json={"visitor_key": "abc", "path": "/"})
        chart = client.get("/admin/analytics/visitors", params={"days": 3}, headers=admin_headers).json()
        assert [d["visitors"] for d in chart] == [0, 0, 1]

    def test_sales_report_rejects_inverted_range(self, client, admin_headers):
        response = client.get(
            "/admin/analytics/sales",
            params={"start_date": "2026-02-01", "end_date": "2026-01-01"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_export(self, client, admin_headers):
        response = client.get("/admin/analytics/export", headers=admin_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert response.content[:2] == b"PK"
