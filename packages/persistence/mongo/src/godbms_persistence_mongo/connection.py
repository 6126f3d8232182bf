"""MongoConnector — Motor client lifecycle, pooling, health check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from godbms_core.engine import EngineKind

from .exceptions import MongoConnectionError
from .store import MongoStore

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

logger = logging.getLogger(__name__)


class MongoHandle:
    """Live document handle: Motor client plus the database holding collections."""

    def __init__(self, client: AsyncIOMotorClient[Any], database: str) -> None:
        if not database:
            raise MongoConnectionError("Database name must be set on the handle")
        self._client = client
        self._database = database
        self._stores: dict[str, MongoStore] = {}

    @property
    def kind(self) -> EngineKind:
        return EngineKind.DOCUMENT

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        return self._client

    @property
    def database(self) -> Any:
        return self._client.get_database(self._database)

    def store(self, model_name: str) -> MongoStore:
        store = self._stores.get(model_name)
        if store is None:
            store = MongoStore(self.database.get_collection(model_name))
            self._stores[model_name] = store
        return store


class MongoConnector:
    """Wrap the Motor client with lifecycle and health-check helpers.

    ``connect()`` pings the server before handing out a handle. Failures are
    logged and reported as ``None``; there is no reconnect.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        database: str = "godbms",
        *,
        name: str = "mongodb",
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        **kwargs: Any,
    ) -> None:
        self.name = name
        self._url = url
        self._database = database
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._kwargs = kwargs
        self._handle: MongoHandle | None = None

    def __repr__(self) -> str:
        return f"MongoConnector(name={self.name!r}, database={self._database!r})"

    @property
    def kind(self) -> EngineKind:
        return EngineKind.DOCUMENT

    @property
    def handle(self) -> MongoHandle | None:
        return self._handle

    async def _open(self) -> AsyncIOMotorClient[Any]:
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
        except ImportError as e:
            raise MongoConnectionError(
                "motor is required; install with motor>=3.3.0"
            ) from e
        try:
            client = AsyncIOMotorClient(
                self._url,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                connectTimeoutMS=self._connect_timeout_ms,
                **self._kwargs,
            )
        except Exception as e:
            raise MongoConnectionError(str(e)) from e
        try:
            await client.admin.command("ping")
        except Exception as e:
            client.close()
            raise MongoConnectionError(str(e)) from e
        return client

    async def connect(self) -> MongoHandle | None:
        """Create and cache the handle. Idempotent; None when unreachable."""
        if self._handle is not None:
            return self._handle
        try:
            client = await self._open()
        except MongoConnectionError:
            logger.exception("%s engine unavailable", self.name)
            return None
        self._handle = MongoHandle(client, self._database)
        logger.info("%s engine connected (database=%s)", self.name, self._database)
        return self._handle

    async def disconnect(self) -> None:
        """Close the client. Idempotent."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.client.close()
        except Exception:  # noqa: BLE001
            logger.exception("Error while disconnecting %s engine", self.name)
            return
        logger.info("%s engine disconnected", self.name)

    async def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        if self._handle is None:
            return False
        try:
            await self._handle.client.admin.command("ping")
            return True
        except Exception:  # noqa: BLE001
            return False
