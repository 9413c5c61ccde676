"""
Tests for app-level wiring: health check and startup.
"""
from fastapi.testclient import TestClient

import hireflow.main as main
from hireflow.main import app


class TestHealth:

    def test_reports_mongo_and_channel(self, monkeypatch):
        monkeypatch.setattr(main, "test_mongo_connection", lambda: True)

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "mongodb": "connected",
            "notificationChannel": main.settings.notification_channel,
        }

    def test_mongo_down(self, monkeypatch):
        monkeypatch.setattr(main, "test_mongo_connection", lambda: False)

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["mongodb"] == "disconnected"


class TestStartup:

    def test_indexes_created_on_startup(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main, "init_mongo_indexes", lambda: calls.append("indexes"))

        with TestClient(app):
            assert calls == ["indexes"]

    def test_index_failure_does_not_block_startup(self, monkeypatch):
        from pymongo.errors import ServerSelectionTimeoutError

        def unreachable():
            raise ServerSelectionTimeoutError("no servers")

        monkeypatch.setattr(main, "init_mongo_indexes", unreachable)
        monkeypatch.setattr(main, "test_mongo_connection", lambda: False)

        with TestClient(app) as client:
            assert client.get("/health").json()["mongodb"] == "disconnected"
