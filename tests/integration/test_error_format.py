"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


def _assert_envelope(data, error_type):
    assert data["type"] == error_type
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for error in data["errors"]:
        assert set(error) == {"code", "detail", "attr"}


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/orders/")
        assert response.status_code == 401
        _assert_envelope(response.json(), "client_error")

    def test_malformed_json(self, auth_client):
        response = auth_client.post("/api/v1/orders/", data="{", content_type="application/json")
        assert response.status_code == 400
        _assert_envelope(response.json(), "client_error")

    def test_serializer_error_has_attr(self, auth_client):
        response = auth_client.post("/api/v1/orders/", {"items": "nope"}, format="json")
        assert response.status_code == 400
        data = response.json()
        _assert_envelope(data, "validation_error")
        assert data["errors"][0]["attr"] == "items"

    def test_domain_error_has_code(self, other_client, order):
        response = other_client.get(f"/api/v1/orders/{order.id}/")
        assert response.status_code == 403
        data = response.json()
        _assert_envelope(data, "client_error")
        assert data["errors"][0] == {
            "code": "forbidden",
            "detail": "You are not allowed to view this order.",
            "attr": None,
        }

    def test_dto_error_has_attr(self, admin_client):
        response = admin_client.post(
            "/api/v1/admin/products/",
            {"reference": "X-1", "name_en": "x", "name_fr": "x", "price": "-1"},
            format="json",
        )
        assert response.status_code == 400
        data = response.json()
        _assert_envelope(data, "validation_error")
        assert data["errors"][0]["attr"] == "price"

    def test_method_not_allowed(self, auth_client, order):
        response = auth_client.patch(f"/api/v1/orders/{order.id}/", {}, format="json")
        assert response.status_code == 405
        _assert_envelope(response.json(), "client_error")
