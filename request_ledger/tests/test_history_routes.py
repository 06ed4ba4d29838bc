"""
Tests for the history API routes, including execute-only and
execute-and-record.
"""

from datetime import datetime, timedelta

import httpx
import pytest
import structlog

from request_ledger.models.attempt import MAX_URL_LENGTH
from request_ledger.services.http_executor import RequestExecutor
from request_ledger.tests.helpers import get_test_client


TEST_DATABASE_URL = "sqlite:///./test_history_routes.db"


def remote_server(request: httpx.Request) -> httpx.Response:
    """Fake remote server used behind the executor."""
    if request.url.path == "/down":
        raise httpx.ConnectError("Connection refused")
    if request.url.path == "/slow":
        raise httpx.ReadTimeout("timed out")
    if request.url.path == "/fail":
        return httpx.Response(
            500,
            content=b'{"error": "boom"}',
            headers={"Content-Type": "application/json"}
        )
    return httpx.Response(200, json={"path": request.url.path, "method": request.method})


@pytest.fixture
def client():
    executor = RequestExecutor(transport=httpx.MockTransport(remote_server))
    with get_test_client(TEST_DATABASE_URL, executor=executor) as test_client:
        yield test_client


def record(client, method="GET", url="https://api.example.com/ok"):
    response = client.post("/api/history", json={"method": method, "url": url})
    assert response.status_code == 201
    return response.json()["data"]["history_id"]


class TestExecuteOnly:

    def test_execute_returns_result_without_recording(self, client):
        response = client.post("/api/history/execute", json={
            "method": "get",
            "url": "https://api.example.com/users"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["status_code"] == 200
        assert data["data"]["body_json"] == {"path": "/users", "method": "GET"}
        assert isinstance(data["data"]["elapsed_ms"], int)

        assert client.get("/api/history").json()["count"] == 0

    def test_execute_returns_remote_server_error_verbatim(self, client):
        response = client.post("/api/history/execute", json={
            "method": "GET",
            "url": "https://api.example.com/fail"
        })

        assert response.status_code == 200
        result = response.json()["data"]
        assert result["status_code"] == 500
        assert result["body"] == '{"error": "boom"}'
        assert result["headers"]["content-type"] == "application/json"

    def test_execute_missing_url_is_rejected(self, client):
        response = client.post("/api/history/execute", json={"method": "GET"})

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "url" in data["message"]

    def test_execute_transport_failure(self, client):
        response = client.post("/api/history/execute", json={
            "method": "GET",
            "url": "https://api.example.com/down"
        })

        assert response.status_code == 502
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "TRANSPORT_ERROR"
        assert "Connection refused" in data["error"]
        assert "data" not in data

    def test_execute_timeout(self, client):
        response = client.post("/api/history/execute", json={
            "method": "GET",
            "url": "https://api.example.com/slow",
            "timeout_ms": 100
        })

        assert response.status_code == 504
        assert response.json()["error_code"] == "TIMEOUT"

    def test_execute_rejects_non_positive_timeout(self, client):
        response = client.post("/api/history/execute", json={
            "method": "GET",
            "url": "https://api.example.com/ok",
            "timeout_ms": 0
        })

        assert response.status_code == 422
        assert "timeout_ms" in response.json()["message"]


class TestExecuteAndRecord:

    def test_execute_and_record_returns_result_and_history_id(self, client):
        response = client.post("/api/history", json={
            "method": "post",
            "url": "https://api.example.com/items",
            "headers": {"X-Test": "1"},
            "body": {"name": "widget"}
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status_code"] == 200
        history_id = data["history_id"]

        detail = client.get(f"/api/history/{history_id}").json()["data"]
        assert detail["method"] == "POST"
        assert detail["url"] == "https://api.example.com/items"
        assert detail["is_favorite"] is False
        for field in ("month", "day", "year", "time", "created_at"):
            assert detail[field]

    def test_remote_error_status_is_recorded(self, client):
        response = client.post("/api/history", json={
            "method": "GET",
            "url": "https://api.example.com/fail"
        })

        assert response.status_code == 201
        assert response.json()["data"]["status_code"] == 500
        assert client.get("/api/history").json()["count"] == 1

    def test_transport_failure_is_still_recorded(self, client):
        response = client.post("/api/history", json={
            "method": "GET",
            "url": "https://api.example.com/down"
        })

        assert response.status_code == 502
        history_id = response.json()["data"]["history_id"]
        assert client.get(f"/api/history/{history_id}").status_code == 200

    def test_invalid_method_is_neither_executed_nor_recorded(self, client):
        response = client.post("/api/history", json={
            "method": "FETCH",
            "url": "https://api.example.com/ok"
        })

        assert response.status_code == 422
        assert "method" in response.json()["message"]
        assert client.get("/api/history").json()["count"] == 0

    def test_overlong_url_is_neither_executed_nor_recorded(self):
        sent = []

        def counting_server(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return remote_server(request)

        executor = RequestExecutor(transport=httpx.MockTransport(counting_server))
        with get_test_client(TEST_DATABASE_URL, executor=executor) as test_client:
            response = test_client.post("/api/history", json={
                "method": "GET",
                "url": "https://api.example.com/" + "a" * MAX_URL_LENGTH
            })

            assert response.status_code == 422
            assert response.json()["error_code"] == "VALIDATION_ERROR"
            assert "url" in response.json()["message"]
            assert sent == []
            assert test_client.get("/api/history").json()["count"] == 0

    def test_created_at_is_reported_in_utc(self, client):
        history_id = record(client)

        created_at = client.get(f"/api/history/{history_id}").json()["data"]["created_at"]
        parsed = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        assert parsed.utcoffset() == timedelta(0)

        listed = client.get("/api/history").json()["items"][0]["created_at"]
        assert listed == created_at


class TestHistoryManagement:

    def test_list_paginates_with_total_count(self, client):
        ids = [record(client, url=f"https://api.example.com/{i}") for i in range(3)]

        response = client.get("/api/history", params={"limit": 2, "offset": 0})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [item["id"] for item in data["items"]] == [ids[2], ids[1]]

    def test_list_rejects_invalid_pagination(self, client):
        for params in ({"limit": "abc"}, {"limit": "-1"}, {"offset": "-3"}):
            response = client.get("/api/history", params=params)
            assert response.status_code == 422
            assert list(params)[0] in response.json()["message"]

    def test_get_missing_returns_404(self, client):
        response = client.get("/api/history/99999")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert "99999" in data["message"]

    def test_toggle_favorite(self, client):
        history_id = record(client)

        first = client.patch(f"/api/history/{history_id}/favorite")
        second = client.patch(f"/api/history/{history_id}/favorite")

        assert first.status_code == 200
        assert first.json()["data"]["is_favorite"] is True
        assert first.json()["message"] == "Added to favorites"
        assert second.json()["data"]["is_favorite"] is False
        assert second.json()["message"] == "Removed from favorites"

    def test_toggle_favorite_missing_returns_404(self, client):
        assert client.patch("/api/history/424242/favorite").status_code == 404

    def test_delete_single_record(self, client):
        history_id = record(client)
        record(client)

        response = client.delete(f"/api/history/{history_id}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "History record deleted",
            "data": {"id": history_id}
        }
        assert client.get("/api/history").json()["count"] == 1

    def test_delete_missing_leaves_records(self, client):
        record(client)

        response = client.delete("/api/history/99999")

        assert response.status_code == 404
        assert client.get("/api/history").json()["count"] == 1

    def test_clear_history(self, client):
        for _ in range(3):
            record(client)

        response = client.delete("/api/history")

        assert response.status_code == 200
        assert response.json()["data"] == {"removed_count": 3}
        assert client.get("/api/history").json() == {"items": [], "count": 0}

    def test_clear_empty_history(self, client):
        response = client.delete("/api/history")
        assert response.json()["data"] == {"removed_count": 0}


class TestServiceRoutes:

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Request Ledger"

    def test_health(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "ok"
        assert "timestamp" in data

    def test_echo(self, client):
        response = client.post("/api/echo", json={"hello": "world"}, headers={"X-Echo": "yes"})

        data = response.json()
        assert data["method"] == "POST"
        assert data["body"] == {"hello": "world"}
        assert data["headers"]["x-echo"] == "yes"

    def test_responses_carry_request_id(self, client):
        assert client.get("/api/health").headers.get("x-request-id")

    def test_caller_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"

    def test_ledger_events_carry_request_id(self, client):
        ledger = client.app.state.ledger
        store = ledger.store
        seen = []

        class ContextCapturingStore:
            def __getattr__(self, name):
                return getattr(store, name)

            def create(self, attempt):
                seen.append(structlog.contextvars.get_contextvars())
                return store.create(attempt)

        ledger.store = ContextCapturingStore()
        try:
            response = client.post("/api/history", json={
                "method": "GET",
                "url": "https://api.example.com/ok"
            })
        finally:
            ledger.store = store

        assert response.status_code == 201
        assert len(seen) == 1
        assert seen[0]["request_id"] == response.headers["x-request-id"]
        assert seen[0]["http_method"] == "POST"
        assert seen[0]["http_path"] == "/api/history"
