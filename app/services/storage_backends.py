# app/services/storage_backends.py
"""
Key/value backing stores for the report store

The interface mirrors browser localStorage (string keys, string values) so the
report store can run against memory in tests and a database table in the app.
"""

from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from app.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)


class StorageQuotaError(Exception):
    """The backing store refused a write"""


class KeyValueStore:
    """Base interface for report storage backends"""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Dict-backed store; optional quota in characters across all values"""

    def __init__(self, quota: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.quota = quota

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.quota:
                raise StorageQuotaError(f"Quota of {self.quota} characters exceeded")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class DatabaseStore(KeyValueStore):
    """SQLAlchemy-backed store, one row per key in storage_entries"""

    def __init__(self, db: Session):
        self.db = db

    def _entry(self, key: str) -> Optional[StorageEntry]:
        return self.db.query(StorageEntry).filter(StorageEntry.key == key).first()

    def get_item(self, key: str) -> Optional[str]:
        entry = self._entry(key)
        return entry.value if entry else None

    def set_item(self, key: str, value: str) -> None:
        try:
            entry = self._entry(key)
            if entry:
                entry.value = value
            else:
                self.db.add(StorageEntry(key=key, value=value))
            self.db.commit()
        except Exception as e:
            logger.error(f"Error writing storage key {key}: {e}")
            self.db.rollback()
            raise

    def remove_item(self, key: str) -> None:
        try:
            self.db.query(StorageEntry).filter(StorageEntry.key == key).delete()
            self.db.commit()
        except Exception as e:
            logger.error(f"Error removing storage key {key}: {e}")
            self.db.rollback()
            raise

    def keys(self) -> List[str]:
        return [row[0] for row in self.db.query(StorageEntry.key).all()]
