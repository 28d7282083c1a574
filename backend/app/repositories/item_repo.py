from typing import List, Optional

from app.models.item import Item
from sqlalchemy import delete
from sqlalchemy.orm import Session


class ItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: int, for_update: bool = False) -> Optional[Item]:
        qry = self.db.query(Item).filter(Item.id == item_id)
        if for_update:
            # sqlite compiles this to a plain SELECT; the file lock in the service covers it there
            qry = qry.with_for_update()
        return qry.first()

    def get_by_barcode(self, barcode: str) -> Optional[Item]:
        return self.db.query(Item).filter(Item.barcode == barcode).first()

    def barcode_taken(self, barcode: str, exclude_id: Optional[int] = None) -> bool:
        qry = self.db.query(Item.id).filter(Item.barcode == barcode)
        if exclude_id is not None:
            qry = qry.filter(Item.id != exclude_id)
        return qry.first() is not None

    def list(self) -> List[Item]:
        return self.db.query(Item).order_by(Item.id).all()

    def add(self, **fields) -> Item:
        item = Item(**fields)
        self.db.add(item)
        self.db.flush()  # ensure id assigned
        return item

    def delete(self, item_id: int) -> int:
        """Single DELETE statement; returns the number of rows removed."""
        result = self.db.execute(delete(Item).where(Item.id == item_id))
        return result.rowcount
