"""PyMongo client lifecycle and health check."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from pymongo.database import Database

DEFAULT_URL = "mongodb://localhost:27017"


class MongoConnectionManager:
    """
    Owns one ``MongoClient`` for a template.

    Connection settings are plain constructor arguments; anything else in
    *client_options* is handed to ``MongoClient`` unchanged (pool sizes, TLS,
    ``tz_aware`` ...).  The client is created on the first ``connect()`` or
    ``database`` access, and PyMongo pools connections behind it.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        database: str | None = None,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        **client_options: Any,
    ) -> None:
        self.url = url
        self.database_name = database
        self._options: dict[str, Any] = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
            **client_options,
        }
        self._client: MongoClient[Any] | None = None

    def connect(self) -> MongoClient[Any]:
        """Return the shared client, creating it on first use."""
        if self._client is None:
            try:
                self._client = MongoClient(self.url, **self._options)
            except (PyMongoError, ValueError, TypeError) as e:
                raise MongoConnectionError(
                    f"Cannot create MongoDB client for {self.url!r}: {e}"
                ) from e
        return self._client

    @property
    def client(self) -> MongoClient[Any]:
        client = self._client
        if client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return client

    @property
    def database(self) -> Database[Any]:
        """Configured database, or the one named in the URL."""
        client = self.connect()
        if self.database_name:
            return client.get_database(self.database_name)
        try:
            return client.get_default_database()
        except ConfigurationError as e:
            raise MongoConnectionError(
                "No database configured; pass database= or put one in the URL"
            ) from e

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.close()

    def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        if self._client is None:
            return False
        try:
            self._client.admin.command("ping")
        except PyMongoError:
            return False
        return True
