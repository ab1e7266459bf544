import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session

from app.models.store import StoreEntry

logger = logging.getLogger(__name__)


class StoreRepository:
    """
    Key-value document store backed by the store_entries table.

    - get/put whole JSON documents by key; last write wins.
    - A document that cannot be decoded is treated as missing.
    """

    def get(self, session: Session, key: str, default: Any = None) -> Any:
        """Return the decoded document stored under `key`, or `default`."""
        entry = session.get(StoreEntry, key)
        if entry is None:
            return default
        try:
            return json.loads(entry.value)
        except ValueError:
            logger.warning("Store entry %r holds invalid JSON; using default", key)
            return default

    def get_list(self, session: Session, key: str) -> list:
        """Like get(), but anything that is not a JSON array reads as []."""
        data = self.get(session, key, [])
        if isinstance(data, list):
            return data
        logger.warning("Store entry %r is not a list; treating as empty", key)
        return []

    def put(self, session: Session, key: str, value: Any) -> StoreEntry:
        """Serialize `value` and upsert it under `key`."""
        encoded = json.dumps(value, ensure_ascii=False, default=str)
        entry = session.get(StoreEntry, key)
        if entry is None:
            entry = StoreEntry(key=key, value=encoded)
        else:
            entry.value = encoded
            entry.updated_at = datetime.now(timezone.utc)
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry

    def delete(self, session: Session, key: str) -> bool:
        entry = session.get(StoreEntry, key)
        if entry is None:
            return False
        session.delete(entry)
        session.commit()
        return True
