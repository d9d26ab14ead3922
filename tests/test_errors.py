# =============================================================================
# tests/test_errors.py - Terminal Error Responder Tests
# =============================================================================
# Every failure after the pipeline starts ends in one place. Outside
# development the client gets a generic message in the format it asked for:
# HTML clients are redirected home with a flash message, JSON clients get
# {"message": ...}, everyone else gets plain text.
# =============================================================================

import logging

import pytest
from fastapi.testclient import TestClient

from app.exceptions import ERROR_MESSAGE, ForbiddenError, resolve_status
from app.routers import default_routers
from lib.session_store import SessionStoreError
from tests.conftest import StatusError, read_session

JSON = {"Accept": "application/json"}
HTML = {"Accept": "text/html"}
TEXT = {"Accept": "text/plain"}


class TestResolveStatus:
    @pytest.mark.parametrize("exc,status", [
        (RuntimeError("x"), 500),
        (ForbiddenError(), 403),
        (StatusError(404), 404),
        (StatusError(200), 500),
        (StatusError("403"), 500),
    ])
    def test_resolve_status(self, exc, status):
        assert resolve_status(exc) == status


class TestNegotiatedErrors:
    def test_unhandled_error_is_500_json(self, client):
        response = client.get("/boom", headers=JSON)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"message": ERROR_MESSAGE}

    def test_plain_text(self, client):
        response = client.get("/boom", headers=TEXT)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == ERROR_MESSAGE

    def test_unacceptable_falls_back_to_text(self, client):
        response = client.get("/boom", headers={"Accept": "image/png"})

        assert response.status_code == 500
        assert response.text == ERROR_MESSAGE

    @pytest.mark.parametrize("path", ["/forbidden", "/status-403", "/http-403"])
    def test_error_status_is_kept(self, client, path):
        """status_code, status and HTTPException all carry their status through."""
        response = client.get(path, headers=JSON)

        assert response.status_code == 403
        assert response.json() == {"message": ERROR_MESSAGE}

    def test_html_redirects_home_with_flash(self, client, session_store, config):
        response = client.get("/boom", headers=HTML, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/"
        session = read_session(client, session_store, config)
        assert session["flash"] == {"errors": [{"msg": ERROR_MESSAGE}]}

    def test_wildcard_accept_is_treated_as_html(self, client):
        response = client.get("/boom", headers={"Accept": "*/*"}, follow_redirects=False)

        assert response.status_code == 302

    def test_flash_is_shown_on_the_home_page(self, make_app, probe_router):
        client = TestClient(make_app(routers=[probe_router] + default_routers()))

        response = client.get("/boom", headers=HTML)

        assert response.status_code == 200
        assert ERROR_MESSAGE in response.text

        # shown once
        assert ERROR_MESSAGE not in client.get("/", headers=HTML).text

    def test_error_responses_carry_security_headers(self, client):
        response = client.get("/boom", headers=JSON)

        assert response.headers["x-content-type-options"] == "nosniff"


class TestRoutingErrors:
    def test_unknown_route_keeps_framework_404(self, client):
        response = client.get("/no/such/page", headers=JSON)

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_wrong_method_keeps_framework_405(self, client):
        response = client.put("/boom", headers=JSON)

        assert response.status_code == 405

    def test_handler_raised_404_is_negotiated(self, client):
        """A matched handler's own 404 is an error like any other."""
        response = client.get("/missing-story", headers=JSON)

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"message": ERROR_MESSAGE}

    def test_handler_raised_404_redirects_html(self, client):
        response = client.get("/missing-story", headers=HTML, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/"


class TestErrorLogging:
    def test_server_errors_log_their_code(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.exceptions"):
            client.get("/forbidden", headers=JSON)

        assert "'code': 'FORBIDDEN'" in caplog.text
        assert "GET /forbidden failed with 403" in caplog.text

    def test_store_errors_log_their_suggestion(self, make_app, session_store, monkeypatch, caplog):
        async def broken_save(session_id, data, ttl_seconds):
            raise SessionStoreError("Redis is unreachable")

        monkeypatch.setattr(session_store, "save", broken_save)
        client = TestClient(make_app())

        with caplog.at_level(logging.ERROR, logger="app.exceptions"):
            client.get("/context", headers=JSON)

        assert "SESSION_STORE_ERROR" in caplog.text
        assert "DATABASE_URL" in caplog.text

    def test_to_dict_leaves_out_empty_fields(self):
        assert ForbiddenError().to_dict() == {"code": "FORBIDDEN", "message": "Forbidden"}
        assert SessionStoreError("down", details={"op": "ping"}).to_dict() == {
            "code": "SESSION_STORE_ERROR",
            "message": "down",
            "suggestion": "Check that the database is running and DATABASE_URL is correct",
            "details": {"op": "ping"},
        }


class TestStageErrors:
    def test_malformed_json_is_400(self, client):
        response = client.post(
            "/echo",
            content=b"{not json",
            headers={"Content-Type": "application/json", **JSON},
        )

        assert response.status_code == 400
        assert response.json() == {"message": ERROR_MESSAGE}

    def test_failing_session_save_is_500(self, make_app, session_store, monkeypatch):
        async def broken_save(session_id, data, ttl_seconds):
            raise SessionStoreError("Redis is unreachable")

        monkeypatch.setattr(session_store, "save", broken_save)
        client = TestClient(make_app())

        response = client.get("/context", headers=JSON)

        assert response.status_code == 500
        assert response.json() == {"message": ERROR_MESSAGE}


class TestVerboseErrors:
    """Development shows the traceback instead of the generic message."""

    @pytest.fixture
    def dev_client(self, make_app, config):
        dev_config = config.model_copy(update={
            "environment": "development",
            "verbose_errors": True,
        })
        return TestClient(make_app(config_override=dev_config))

    def test_traceback_page(self, dev_client):
        response = dev_client.get("/boom", headers=HTML)

        assert response.status_code == 500
        assert "RuntimeError" in response.text
        assert "boom" in response.text

    def test_status_is_kept(self, dev_client):
        response = dev_client.get("/forbidden", headers=TEXT)

        assert response.status_code == 403
        assert "ForbiddenError" in response.text
