"""Tests for the settings endpoint."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from trustypcs.api.auth import create_access_token
from trustypcs.api.main import create_app
from trustypcs.config import AppSettings

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, PATCH, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value
    assert response.headers["content-type"].startswith("application/json")


def test_get_empty(client):
    """Test GET on an empty store."""
    response = client.get("/api/settings")
    assert response.status_code == 200
    assert response.json() == {"success": True, "settings": {}}
    assert_cors(response)


def test_options_preflight(client):
    """Test preflight returns an empty body with CORS headers."""
    response = client.options("/api/settings")
    assert response.status_code == 200
    assert response.text == ""
    assert_cors(response)


def test_patch_then_get(sql_client):
    """Test a batch update is reflected by GET."""
    response = sql_client.patch("/api/settings", json={"a": "1", "b": "2"})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Settings updated successfully",
        "settings": {"a": "1", "b": "2"},
    }
    assert_cors(response)

    settings = sql_client.get("/api/settings").json()["settings"]
    assert settings["a"] == "1"
    assert settings["b"] == "2"


def test_patch_coerces_values(client):
    """Test numbers and booleans are returned as strings."""
    response = client.patch("/api/settings", json={"max_photos": 10, "footer_show_links": True})
    assert response.json()["settings"] == {"max_photos": "10", "footer_show_links": "true"}


def test_patch_invalid_key(client):
    """Test an invalid key is rejected and not created."""
    response = client.patch("/api/settings", json={"foo!": "x"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid setting key: foo!"}
    assert_cors(response)
    assert "foo!" not in client.get("/api/settings").json()["settings"]


@pytest.mark.parametrize("api_client", ["client", "sql_client"])
def test_patch_invalid_key_after_valid_keys_is_atomic(api_client, request):
    """Test keys before an invalid one are not persisted."""
    api_client = request.getfixturevalue(api_client)
    api_client.patch("/api/settings", json={"a": "old"})

    response = api_client.patch(
        "/api/settings",
        content='{"a": "new", "b": "2", "bad-key": "3", "c": "4"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid setting key: bad-key"
    assert api_client.get("/api/settings").json()["settings"] == {"a": "old"}


def test_patch_invalid_json(client):
    """Test a non-JSON body."""
    response = client.patch("/api/settings", content="not json")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid JSON"}
    assert_cors(response)


def test_patch_rejects_nan(client):
    """Test non-standard JSON constants are not accepted."""
    response = client.patch("/api/settings", content='{"a": NaN}')
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON"


@pytest.mark.parametrize("body", ['"not json"', "[1, 2]", "42", "null", "true"])
def test_patch_non_object(client, body):
    """Test bodies that are JSON but not objects."""
    response = client.patch("/api/settings", content=body)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid settings format"}


def test_patch_empty_body(client):
    """Test an empty body is an empty update."""
    response = client.patch("/api/settings", content="")
    assert response.status_code == 200
    assert response.json()["settings"] == {}


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "TRACE", "PURGE"])
def test_method_not_allowed(client, method):
    """Test other methods are rejected."""
    response = client.request(method, "/api/settings")
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert_cors(response)


def test_get_single_setting(client, memory_store):
    """Test reading one setting."""
    memory_store.update_setting("website_name", "TrustyPCS")

    response = client.get("/api/settings/website_name")
    assert response.status_code == 200
    assert response.json() == {"success": True, "setting": {"key": "website_name", "value": "TrustyPCS"}}

    response = client.get("/api/settings/missing_key")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Setting not found"}


def test_store_failure_returns_500(broken_client):
    """Test persistence errors surface as 500 with the message."""
    response = broken_client.get("/api/settings")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database unavailable"}
    assert_cors(response)

    response = broken_client.patch("/api/settings", json={"a": "1"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database unavailable"}


def test_health(client):
    """Test health check."""
    assert client.get("/health").json() == {"status": "ok"}


def test_guard_requires_token(guarded_client):
    """Test writes need a token when the admin guard is on."""
    response = guarded_client.patch("/api/settings", json={"a": "1"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert_cors(response)

    response = guarded_client.patch(
        "/api/settings", json={"a": "1"}, headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_guard_rejects_members(guarded_client, guarded_config):
    """Test non-admin roles cannot write."""
    token = create_access_token(guarded_config, "user-1", "member")
    response = guarded_client.patch(
        "/api/settings", json={"a": "1"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Admin access required"}


def test_guard_rejects_expired_token(guarded_client, guarded_config):
    """Test expired tokens are treated as missing."""
    token = create_access_token(guarded_config, "admin-1", "admin", expires_delta=timedelta(minutes=-5))
    response = guarded_client.patch(
        "/api/settings", json={"a": "1"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


@pytest.mark.parametrize("role", ["admin", "moderator"])
def test_guard_allows_admins(guarded_client, guarded_config, memory_store, role):
    """Test admins and moderators can write."""
    token = create_access_token(guarded_config, "admin-1", role)
    response = guarded_client.patch(
        "/api/settings", json={"a": "1"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert memory_store.as_dict() == {"a": "1"}


def test_guard_accepts_cookie(guarded_client, guarded_config):
    """Test the access_token cookie is honoured."""
    token = create_access_token(guarded_config, "admin-1", "admin")
    guarded_client.cookies.set("access_token", token)
    response = guarded_client.patch("/api/settings", json={"a": "1"})
    assert response.status_code == 200


def test_guard_leaves_reads_open(guarded_client):
    """Test GET does not need a token."""
    assert guarded_client.get("/api/settings").status_code == 200


def test_method_not_allowed_on_single_setting(client):
    """Test writes to a single key path get the JSON 405."""
    response = client.put("/api/settings/website_name", json={"value": "x"})
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert_cors(response)


def test_other_paths_keep_default_errors(client):
    """Test unknown routes still get the framework's 404."""
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


def test_patch_deeply_nested_body(client):
    """Test bodies nested past the decoder's limit are invalid JSON."""
    response = client.patch("/api/settings", content="[" * 200000 + "]" * 200000)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid JSON"}
    assert_cors(response)


def test_unhandled_error_returns_json(memory_store):
    """Test errors escaping a route still come back as JSON with CORS headers."""
    app = create_app(store=memory_store, config=AppSettings())

    @app.get("/api/settings-debug/explode")
    def explode():
        raise RuntimeError("boom")

    response = TestClient(app, raise_server_exceptions=False).get("/api/settings-debug/explode")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "boom"}
    assert_cors(response)
