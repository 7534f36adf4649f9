"""
Session stores for discovered-services state.

The manager only needs ``get``/``set``/``delete`` by key. Two adapters are
provided:
- MappingSessionStore: wraps a dict-like web framework session (and is the
  in-memory fake used by tests)
- SQLAlchemySessionStore: one row per (session_id, key) in
  ``discovery_session_entries``, value stored as JSON
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import delete
from sqlalchemy.orm import Session

from idp_discovery.core.logger import logger
from idp_discovery.models.database import DiscoverySessionEntry


@runtime_checkable
class SessionStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MappingSessionStore:
    """Adapter over any MutableMapping."""

    def __init__(self, data: MutableMapping[str, Any] | None = None) -> None:
        self.data: MutableMapping[str, Any] = {} if data is None else data

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self.data


class SQLAlchemySessionStore:
    """
    Database-backed session store.

    Args:
        db: SQLAlchemy session
        session_id: opaque id of the end-user session (cookie value etc.)
        autocommit: commit after every set/delete; disable to let the caller
            own the transaction
    """

    def __init__(self, db: Session, session_id: str, *, autocommit: bool = True) -> None:
        if not session_id:
            raise ValueError("session_id must not be empty")
        self.db = db
        self.session_id = session_id
        self.autocommit = autocommit

    def _find(self, key: str) -> DiscoverySessionEntry | None:
        return (
            self.db.query(DiscoverySessionEntry)
            .filter(
                DiscoverySessionEntry.session_id == self.session_id,
                DiscoverySessionEntry.key == key,
            )
            .first()
        )

    def _commit(self) -> None:
        if not self.autocommit:
            self.db.flush()
            return
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get(self, key: str) -> Any | None:
        entry = self._find(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any) -> None:
        # upsert: update in place when the row exists
        entry = self._find(key)
        if entry is not None:
            entry.value = value
        else:
            self.db.add(
                DiscoverySessionEntry(session_id=self.session_id, key=key, value=value)
            )
        self._commit()
        logger.debug("[SQLAlchemySessionStore] stored key=%s session_id=%s", key, self.session_id)

    def delete(self, key: str) -> None:
        self.db.execute(
            delete(DiscoverySessionEntry).where(
                DiscoverySessionEntry.session_id == self.session_id,
                DiscoverySessionEntry.key == key,
            )
        )
        self._commit()

    def clear(self) -> int:
        """Delete every key of this session id, returning the number of rows removed."""
        result = self.db.execute(
            delete(DiscoverySessionEntry).where(
                DiscoverySessionEntry.session_id == self.session_id
            )
        )
        self._commit()
        deleted_count = result.rowcount or 0
        if deleted_count > 0:
            logger.info(
                "Cleared %s discovery session entries for session_id=%s",
                deleted_count,
                self.session_id,
            )
        return deleted_count
