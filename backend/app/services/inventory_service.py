import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List

from app.config import settings
from app.models.item import Item
from app.repositories.item_repo import ItemRepository
from app.services.item_validation import clean_item_fields
from app.utils.transactions import smart_transaction
from filelock import FileLock, Timeout
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

log = logging.getLogger("inventory.service")


class InventoryException(Exception):
    pass


class ItemNotFound(InventoryException):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__("Item not found")


class ItemValidationError(InventoryException):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__("Missing or invalid fields: " + ", ".join(self.fields))


class StoreError(InventoryException):
    """Underlying storage failure; message is the raw driver error."""


class InventoryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ItemRepository(db)

    @contextmanager
    def _store_errors(self):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            # a concurrent writer can slip past the barcode pre-check
            if "barcode" in str(e.orig).lower():
                log.warning("barcode collision on write: %s", e.orig)
                raise ItemValidationError(["barcode"]) from e
            log.exception("integrity error")
            raise StoreError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("store error")
            raise StoreError(str(e)) from e

    def _lock_path(self, item_id: int) -> str:
        return os.path.join(settings.LOCK_DIR, f"item_{item_id}.lock")

    @contextmanager
    def _item_lock(self, item_id: int):
        os.makedirs(settings.LOCK_DIR, exist_ok=True)
        lock = FileLock(self._lock_path(item_id))
        try:
            with lock.acquire(timeout=10):
                yield
        except Timeout:
            raise StoreError("Could not acquire item lock; try again")

    def _discard_lock(self, item_id: int):
        # the row is gone, so later writers on this id fail with ItemNotFound anyway
        try:
            os.remove(self._lock_path(item_id))
        except OSError as e:
            log.debug("lock file for item id=%s kept: %s", item_id, e)

    def _clean(self, fields: Any, partial: bool) -> Dict:
        if not isinstance(fields, dict):
            raise ItemValidationError(["body"])
        clean, bad = clean_item_fields(fields, partial=partial)
        if bad:
            log.warning("rejected item payload, bad fields=%s", bad)
            raise ItemValidationError(bad)
        return clean

    def list_items(self) -> List[Item]:
        with self._store_errors():
            return self.repo.list()

    def get_item(self, item_id: int) -> Item:
        with self._store_errors():
            item = self.repo.get(item_id)
        if not item:
            raise ItemNotFound(item_id)
        return item

    def find_by_barcode(self, barcode: str) -> Item:
        with self._store_errors():
            item = self.repo.get_by_barcode(barcode)
        if not item:
            raise ItemNotFound(barcode)
        return item

    def create_item(self, fields: Dict) -> Item:
        clean = self._clean(fields, partial=False)
        with self._store_errors():
            if self.repo.barcode_taken(clean["barcode"]):
                log.warning("barcode %r already in use", clean["barcode"])
                raise ItemValidationError(["barcode"])
            item = self.repo.add(**clean)
            self.db.commit()
            self.db.refresh(item)
        log.info("created item id=%s barcode=%s", item.id, item.barcode)
        return item

    def update_item(self, item_id: int, fields: Dict) -> Item:
        """
        Merge-then-write under a per-item lock: fields omitted from `fields`
        keep their stored value. Raises ItemNotFound before touching anything
        when the row is absent.
        """
        with self._item_lock(item_id):
            with self._store_errors():
                with smart_transaction(self.db):
                    item = self.repo.get(item_id, for_update=True)
                    if not item:
                        log.warning("update of missing item id=%s", item_id)
                        raise ItemNotFound(item_id)
                    clean = self._clean(fields, partial=True)
                    if "barcode" in clean and self.repo.barcode_taken(
                        clean["barcode"], exclude_id=item_id
                    ):
                        raise ItemValidationError(["barcode"])
                    for key, value in clean.items():
                        setattr(item, key, value)
                    self.db.flush()
                # smart_transaction only opens a SAVEPOINT if a read already began the session
                self.db.commit()
                self.db.refresh(item)
        log.info("updated item id=%s fields=%s", item_id, sorted(clean))
        return item

    def delete_item(self, item_id: int) -> Dict:
        with self._item_lock(item_id):
            with self._store_errors():
                with smart_transaction(self.db):
                    removed = self.repo.delete(item_id)
                    if not removed:
                        log.warning("delete of missing item id=%s", item_id)
                        raise ItemNotFound(item_id)
                self.db.commit()
            self._discard_lock(item_id)
        log.info("deleted item id=%s", item_id)
        return {"message": "Item deleted successfully", "id": item_id}
