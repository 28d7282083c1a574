# backend/app/schemas/item_schema.py
from typing import Optional
from pydantic import BaseModel
from pydantic import ConfigDict

class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    category: Optional[str] = None
    stock: int
    costprice: Optional[float] = None
    sellingprice: Optional[float] = None
    barcode: Optional[str] = None
    format: Optional[str] = None


class DeletedOut(BaseModel):
    message: str
    id: int
