"""Key-value persistence for component instances.

The document hands each component a plain dict to write into or read from;
a StateStore decides where those dicts live.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from csvulture.config import Settings, get_settings
from csvulture.models.component_state import Base, ComponentState

logger = logging.getLogger(__name__)


class StateStore(ABC):
    @abstractmethod
    def load(self, instance_id: str) -> dict[str, Any]:
        ...

    @abstractmethod
    def save(self, instance_id: str, component_guid: str, values: dict[str, Any]) -> None:
        ...


class MemoryStateStore(StateStore):
    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def load(self, instance_id: str) -> dict[str, Any]:
        return dict(self._data.get(instance_id, {}))

    def save(self, instance_id: str, component_guid: str, values: dict[str, Any]) -> None:
        self._data.setdefault(instance_id, {}).update(values)


class SqlStateStore(StateStore):
    """SQLAlchemy-backed store, one row per (instance, key)."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        Base.metadata.create_all(engine)
        self._session_factory = sessionmaker(engine, class_=Session, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SqlStateStore":
        settings = settings or get_settings()
        return cls(create_engine(settings.database_url, echo=False))

    def load(self, instance_id: str) -> dict[str, Any]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(ComponentState).where(ComponentState.instance_id == instance_id)
            ).all()
            return {row.key: json.loads(row.value) for row in rows}

    def save(self, instance_id: str, component_guid: str, values: dict[str, Any]) -> None:
        with self._session_factory() as db:
            existing = {
                row.key: row
                for row in db.scalars(
                    select(ComponentState).where(ComponentState.instance_id == instance_id)
                )
            }
            for key, value in values.items():
                encoded = json.dumps(value)
                row = existing.get(key)
                if row is None:
                    db.add(ComponentState(
                        instance_id=instance_id,
                        component_guid=component_guid,
                        key=key,
                        value=encoded,
                    ))
                else:
                    row.value = encoded
            db.commit()
        logger.debug(f"[state] saved {sorted(values)} for {instance_id}")
