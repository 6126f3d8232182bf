"""EngineCatalog — maps engine names to connector factories per engine kind."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from godbms_core.engine import EngineKind
from godbms_core.exceptions import ConfigurationError, UnknownEngineError
from godbms_core.ports import EngineConnector
from godbms_core.settings import EngineSettings
from godbms_persistence_mongo import MongoConnector
from godbms_persistence_sqlalchemy import SQLAlchemyConnector

if TYPE_CHECKING:
    from sqlalchemy.orm import DeclarativeBase

# (settings, declarative base or None) -> connector
ConnectorFactory = Callable[[EngineSettings, Any], EngineConnector]

RELATIONAL_ENGINES = ("mysql", "postgresql", "sqlite")
DOCUMENT_ENGINES = ("mongodb",)


def sqlalchemy_factory(name: str) -> ConnectorFactory:
    """Factory for a relational engine reached through SQLAlchemy."""

    def build(
        settings: EngineSettings, models: type[DeclarativeBase] | None
    ) -> EngineConnector:
        if not settings.rdb_url:
            raise ConfigurationError(
                f"{name} engine selected but RDB_URL (or DATABASE_URL) is not set"
            )
        if models is None:
            raise ConfigurationError(
                f"{name} engine selected but no declarative models were supplied"
            )
        return SQLAlchemyConnector(settings.rdb_url, models, name=name)

    return build


def mongo_factory(
    settings: EngineSettings, models: type[DeclarativeBase] | None
) -> EngineConnector:
    """Factory for the MongoDB document engine."""
    return MongoConnector(settings.ddb_url, settings.ddb_name)


class EngineCatalog:
    """Engine name -> connector factory, kept separately per engine kind.

    Names are case-insensitive. The default catalog knows the relational
    engines SQLAlchemy drives and ``mongodb``; more can be registered::

        catalog = EngineCatalog.default()
        catalog.register(EngineKind.RELATIONAL, "mariadb", sqlalchemy_factory("mariadb"))
    """

    def __init__(self) -> None:
        self._factories: dict[EngineKind, dict[str, ConnectorFactory]] = {
            kind: {} for kind in EngineKind
        }

    @classmethod
    def default(cls) -> EngineCatalog:
        catalog = cls()
        for name in RELATIONAL_ENGINES:
            catalog.register(EngineKind.RELATIONAL, name, sqlalchemy_factory(name))
        for name in DOCUMENT_ENGINES:
            catalog.register(EngineKind.DOCUMENT, name, mongo_factory)
        return catalog

    def register(
        self, kind: EngineKind, name: str, factory: ConnectorFactory
    ) -> None:
        self._factories[kind][name.lower()] = factory

    def names(self, kind: EngineKind) -> list[str]:
        return sorted(self._factories[kind])

    def has(self, kind: EngineKind, name: str) -> bool:
        return name.lower() in self._factories[kind]

    def build(
        self,
        kind: EngineKind,
        name: str,
        settings: EngineSettings,
        models: Any = None,
    ) -> EngineConnector:
        """Build the connector registered as *name*; raise if nobody registered it."""
        factory = self._factories[kind].get(name.lower())
        if factory is None:
            raise UnknownEngineError(kind, name)
        return factory(settings, models)
