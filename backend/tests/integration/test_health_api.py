"""Integration tests for the health endpoint and CLI wiring."""

from __future__ import annotations

from chatauth.core.container import get_auth_service
from chatauth.services._shared.errors import StoreUnavailableError


class TestHealth:
    def test_ok(self, client):
        resp = client.get("/api/v1/health")

        assert resp.status_code == 200
        payload = resp.get_json()
        assert payload["status"] == "ok"
        assert payload["db"] == "ok"
        assert payload["revocations"] == "ok"
        assert payload["revocations_backend"] == "InMemoryRevocationStore"

    def test_degraded_when_revocation_store_is_down(self, app, client, monkeypatch):
        def _down():
            raise StoreUnavailableError("revocations")

        with app.app_context():
            revocations = get_auth_service().revocations
        monkeypatch.setattr(revocations, "ping", _down)

        resp = client.get("/api/v1/health")

        assert resp.status_code == 503
        assert resp.get_json()["status"] == "degraded"
        assert resp.get_json()["revocations"] == "fail"


class TestCli:
    def test_init_db(self, app, db, monkeypatch):
        calls = []
        monkeypatch.setattr(db, "create_all", lambda: calls.append("create"))
        monkeypatch.setattr(db, "drop_all", lambda: calls.append("drop"))

        result = app.test_cli_runner().invoke(args=["auth", "init-db", "--drop"])

        assert result.exit_code == 0
        assert calls == ["drop", "create"]
        assert "Database schema created." in result.output
