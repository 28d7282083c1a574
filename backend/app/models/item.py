from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, func
from app.db import Base


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_items_stock_nonnegative"),
        CheckConstraint("costprice >= 0", name="ck_items_costprice_nonnegative"),
        CheckConstraint("sellingprice >= 0", name="ck_items_sellingprice_nonnegative"),
        # ids are never handed out twice, even after the highest row is deleted
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    category = Column(String(128), nullable=True, index=True)
    stock = Column(Integer, default=0, nullable=False)
    costprice = Column(Numeric(10, 2), nullable=True)
    sellingprice = Column(Numeric(10, 2), nullable=True)
    barcode = Column(String(128), unique=True, index=True, nullable=True)
    format = Column(String(32), nullable=True)  # legacy symbology tag
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Item id={self.id} barcode={self.barcode} name={self.name}>"
