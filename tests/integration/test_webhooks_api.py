"""
Webhook subscription, listing, deletion and test delivery.
"""

import json
from urllib.parse import quote

import httpx
import pytest

from slant3d_mock.core.http import get_http_client

HOOK = "https://hooks.example.com/slant3d"


def _subscribe(client, auth_headers, end_point=HOOK):
    return client.post("/api/customer/subscribeWebhook", json={"endPoint": end_point}, headers=auth_headers)


@pytest.fixture
def delivered(app):
    """Route the outbound client through a MockTransport; yields the captured requests."""
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if request.url.host == "down.example.com":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(202, json={"ok": True})

    mock_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_http_client] = lambda: mock_client
    yield captured
    app.dependency_overrides.clear()


class TestSubscribe:
    def test_register(self, client, auth_headers, store):
        resp = _subscribe(client, auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Endpoint Configured", "endPoint": HOOK}
        webhook = store.webhooks.get(HOOK)
        assert webhook.api_key == "sl-test-key"
        assert webhook.delivery_attempts == []

    def test_duplicate_is_rejected(self, client, auth_headers, store):
        _subscribe(client, auth_headers)
        resp = _subscribe(client, auth_headers)

        assert resp.status_code == 400
        assert resp.json() == {"error": "Webhook endpoint already registered"}
        assert len(store.webhooks) == 1

    def test_missing_end_point(self, client, auth_headers):
        resp = client.post("/api/customer/subscribeWebhook", json={}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "Validation failed",
            "details": [{"field": "endPoint", "message": "Endpoint URL is required", "code": "REQUIRED_FIELD"}],
        }

    def test_invalid_url(self, client, auth_headers, store):
        resp = _subscribe(client, auth_headers, end_point="not a url")
        assert resp.status_code == 400
        assert resp.json()["details"][0]["code"] == "INVALID_URL"
        assert len(store.webhooks) == 0

    def test_malformed_json(self, client, auth_headers):
        resp = client.post(
            "/api/customer/subscribeWebhook",
            content="nope",
            headers={**auth_headers, "content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["details"][0]["code"] == "INVALID_JSON"


class TestListAndDelete:
    def test_list(self, client, auth_headers):
        _subscribe(client, auth_headers)
        _subscribe(client, auth_headers, end_point="https://other.example.com/hook")

        body = client.get("/api/webhooks", headers=auth_headers).json()

        assert body["totalCount"] == 2
        assert [w["endPoint"] for w in body["webhooks"]] == [HOOK, "https://other.example.com/hook"]

    def test_delete(self, client, auth_headers, store):
        _subscribe(client, auth_headers)

        resp = client.delete(f"/api/webhooks/{quote(HOOK, safe='')}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Webhook deleted successfully", "endPoint": HOOK}
        assert len(store.webhooks) == 0

    def test_delete_unknown(self, client, auth_headers):
        resp = client.delete(f"/api/webhooks/{quote(HOOK, safe='')}", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Webhook not found"}

    def test_can_register_again_after_delete(self, client, auth_headers):
        _subscribe(client, auth_headers)
        client.delete(f"/api/webhooks/{quote(HOOK, safe='')}", headers=auth_headers)
        assert _subscribe(client, auth_headers).status_code == 200


class TestDelivery:
    def test_sends_fixed_payload(self, client, delivered):
        resp = client.post("/api/webhooks/test", json={"endPoint": HOOK})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["statusCode"] == 202
        assert body["endPoint"] == HOOK
        assert body["payload"] == {
            "orderId": "1234567890",
            "status": "SHIPPED",
            "trackingNumber": "ABCDEF123456",
            "carrierCode": "usps",
        }
        (request,) = delivered
        assert str(request.url) == HOOK
        assert json.loads(request.content) == body["payload"]

    def test_unreachable_endpoint(self, client, delivered):
        resp = client.post("/api/webhooks/test", json={"endPoint": "https://down.example.com/hook"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Failed to deliver test payload"
        assert body["endPoint"] == "https://down.example.com/hook"
        assert "connection refused" in body["message"]

    def test_requires_end_point(self, client, delivered):
        resp = client.post("/api/webhooks/test", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "endPoint is required"}
        assert delivered == []

    def test_rejects_invalid_url(self, client, delivered):
        resp = client.post("/api/webhooks/test", json={"endPoint": "ftp:"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid URL format"}
