"""Key-value persistence port.

Every collection lives under one namespaced key and is rewritten wholesale on
each mutation (last writer wins, no merge). There is no partial-write
recovery: a crash mid-write simply leaves the previous document in place.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Protocol

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.base import Base
from libs.db.models import StorageEntry
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    namespace: str

    def load(self, key: str) -> Optional[Any]: ...

    def save(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


def _namespaced(namespace: str, key: str) -> str:
    return f"{namespace}:{key}"


def _dumps(value: Any) -> str:
    # Callers hand over JSON-mode dumps; anything else is a bug, not data
    return json.dumps(value, ensure_ascii=False)


class SqlKeyValueStore:
    """Key-value store backed by the ``storage_entries`` table."""

    def __init__(self, session_factory: sessionmaker[Session], namespace: str):
        self.session_factory = session_factory
        self.namespace = namespace

    def create_schema(self) -> None:
        with self.session_factory() as session:
            Base.metadata.create_all(session.get_bind())

    def load(self, key: str) -> Optional[Any]:
        with self.session_factory() as session:
            entry = session.get(StorageEntry, _namespaced(self.namespace, key))
            if entry is None:
                return None
            return json.loads(entry.value)

    def save(self, key: str, value: Any) -> None:
        payload = _dumps(value)
        full_key = _namespaced(self.namespace, key)
        with self.session_factory() as session, session.begin():
            entry = session.get(StorageEntry, full_key)
            if entry is None:
                session.add(StorageEntry(key=full_key, value=payload))
            else:
                entry.value = payload
                entry.updated_at = utc_now()
        logger.debug("Saved %s (%d bytes)", full_key, len(payload))

    def delete(self, key: str) -> None:
        with self.session_factory() as session, session.begin():
            entry = session.get(StorageEntry, _namespaced(self.namespace, key))
            if entry is not None:
                session.delete(entry)

    def keys(self) -> list[str]:
        prefix = f"{self.namespace}:"
        with self.session_factory() as session:
            result = session.execute(
                select(StorageEntry.key).where(StorageEntry.key.startswith(prefix))
            )
            return sorted(key[len(prefix):] for key in result.scalars().all())


class InMemoryKeyValueStore:
    """Dict-backed store; values still round-trip through JSON text."""

    def __init__(self, namespace: str = "clubdesk"):
        self.namespace = namespace
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Optional[Any]:
        raw = self._data.get(_namespaced(self.namespace, key))
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[_namespaced(self.namespace, key)] = _dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(_namespaced(self.namespace, key), None)

    def keys(self) -> list[str]:
        prefix = f"{self.namespace}:"
        return sorted(k[len(prefix):] for k in self._data if k.startswith(prefix))

    def raw(self, key: str) -> Optional[str]:
        """Stored JSON text for ``key`` (test helper)."""
        return self._data.get(_namespaced(self.namespace, key))

    def put_raw(self, key: str, text: str) -> None:
        """Store arbitrary text under ``key``, bypassing serialization."""
        self._data[_namespaced(self.namespace, key)] = text
