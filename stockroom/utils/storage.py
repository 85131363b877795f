# stockroom/utils/storage.py
from typing import Callable, Optional

from sqlalchemy.orm import Session

from stockroom.database import SessionLocal
from stockroom.models.storage import StorageItem


class DeviceStorage:
    """Async-storage style key/value access backed by the local database."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            item = db.query(StorageItem).filter(StorageItem.key == key).first()
            return item.value if item else None
        finally:
            db.close()

    def set_item(self, key: str, value: str) -> None:
        db = self._session_factory()
        try:
            item = db.query(StorageItem).filter(StorageItem.key == key).first()
            if item:
                item.value = value
            else:
                db.add(StorageItem(key=key, value=value))
            db.commit()
        finally:
            db.close()

    def remove_item(self, key: str) -> None:
        db = self._session_factory()
        try:
            db.query(StorageItem).filter(StorageItem.key == key).delete()
            db.commit()
        finally:
            db.close()
