"""EngineRegistry — resolves the active engines once, at process start."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from godbms_core.context import RequestContext
from godbms_core.engine import EngineKind
from godbms_core.exceptions import ConfigurationError
from godbms_core.settings import EngineSettings, get_settings

from .catalog import EngineCatalog

if TYPE_CHECKING:
    from sqlalchemy.orm import DeclarativeBase

    from godbms_core.ports import EngineConnector

logger = logging.getLogger(__name__)


def _resolve(
    catalog: EngineCatalog,
    kind: EngineKind,
    name: str | None,
    settings: EngineSettings,
    models: type[DeclarativeBase] | None,
) -> EngineConnector | None:
    if name is None:
        logger.info("No %s engine selected", kind.value)
        return None
    try:
        connector = catalog.build(kind, name, settings, models)
    except ConfigurationError:
        logger.exception("%s engine %r disabled", kind.value, name)
        return None
    logger.info("%s engine resolved to %r", kind.value, connector)
    return connector


@dataclass(frozen=True)
class EngineRegistry:
    """At most one connector per engine kind, plus the settings they came from.

    Build it once at startup, ``await start()`` it, and hand requests the
    result of :meth:`context`::

        registry = EngineRegistry.from_settings(models=Base)
        await registry.start()
        users = BasicModel("users", registry.context())
    """

    settings: EngineSettings
    relational: EngineConnector | None = None
    document: EngineConnector | None = None

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings | None = None,
        *,
        models: type[DeclarativeBase] | None = None,
        catalog: EngineCatalog | None = None,
    ) -> EngineRegistry:
        """Resolve ``RDB_ENGINE`` and ``DDB_ENGINE`` independently.

        An unknown engine name or a connector that cannot be configured is
        logged and leaves that kind inactive.
        """
        settings = settings or get_settings()
        catalog = catalog or EngineCatalog.default()
        return cls(
            settings=settings,
            relational=_resolve(
                catalog, EngineKind.RELATIONAL, settings.rdb_engine, settings, models
            ),
            document=_resolve(
                catalog, EngineKind.DOCUMENT, settings.ddb_engine, settings, models
            ),
        )

    def connector(self, kind: EngineKind) -> EngineConnector | None:
        return self.relational if kind is EngineKind.RELATIONAL else self.document

    def is_active(self, kind: EngineKind) -> bool:
        """True when *kind* has a connector holding a live handle."""
        connector = self.connector(kind)
        return connector is not None and connector.handle is not None

    def connectors(self) -> list[EngineConnector]:
        return [c for c in (self.relational, self.document) if c is not None]

    async def start(self) -> None:
        for connector in self.connectors():
            await connector.connect()

    async def stop(self) -> None:
        for connector in self.connectors():
            await connector.disconnect()

    def context(self, timeout: float | None = None) -> RequestContext:
        """Request context over the live handles.

        *timeout* overrides ``settings.query_timeout`` for this request.
        """
        db = self.relational.handle if self.relational is not None else None
        ddb = self.document.handle if self.document is not None else None
        return RequestContext(
            db=db,
            ddb=ddb,
            timeout=timeout if timeout is not None else self.settings.query_timeout,
        )
