"""Unit tests for MongoConnectionManager (no server required)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from nosql_mapping.connection import MongoConnectionManager
from nosql_mapping.exceptions import MongoConnectionError


class TestLifecycle:
    def test_client_before_connect_raises(self):
        mgr = MongoConnectionManager()
        with pytest.raises(MongoConnectionError, match="Not connected"):
            _ = mgr.client

    def test_connect_is_idempotent(self):
        mgr = MongoConnectionManager("mongodb://localhost:27017", database="app")
        try:
            client = mgr.connect()
            assert mgr.connect() is client
            assert mgr.client is client
            assert mgr.database.name == "app"
        finally:
            mgr.close()
        with pytest.raises(MongoConnectionError):
            _ = mgr.client

    def test_database_from_url(self):
        mgr = MongoConnectionManager("mongodb://localhost:27017/shop")
        try:
            assert mgr.database.name == "shop"
        finally:
            mgr.close()

    def test_no_database_configured(self):
        mgr = MongoConnectionManager("mongodb://localhost:27017")
        try:
            with pytest.raises(MongoConnectionError, match="No database configured"):
                _ = mgr.database
        finally:
            mgr.close()

    def test_invalid_url(self):
        with pytest.raises(MongoConnectionError):
            MongoConnectionManager("not-a-mongo-url").connect()

    def test_close_without_connect(self):
        MongoConnectionManager().close()


class TestHealthCheck:
    def test_not_connected(self):
        assert MongoConnectionManager().health_check() is False

    def test_ping_ok(self):
        mgr = MongoConnectionManager()
        mgr._client = MagicMock()
        mgr._client.admin.command.return_value = {"ok": 1}
        assert mgr.health_check() is True
        mgr._client.admin.command.assert_called_once_with("ping")

    def test_ping_fails(self):
        mgr = MongoConnectionManager()
        mgr._client = MagicMock()
        mgr._client.admin.command.side_effect = ServerSelectionTimeoutError("down")
        assert mgr.health_check() is False
