from typing import Any

from app.db import get_db
from app.schemas.item_schema import DeletedOut, ItemOut
from app.services.inventory_service import (
    InventoryException,
    InventoryService,
    ItemNotFound,
    ItemValidationError,
)
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

router = APIRouter(prefix="/items", tags=["items"])


def _http_error(e: InventoryException) -> HTTPException:
    if isinstance(e, ItemValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ItemNotFound):
        return HTTPException(status_code=404, detail=str(e))
    # StoreError: raw driver message goes back to the caller
    return HTTPException(status_code=500, detail=str(e))


def _out(item) -> dict:
    return ItemOut.model_validate(item).model_dump()


@router.get("", summary="List items")
def list_items(db: Session = Depends(get_db)):
    svc = InventoryService(db)
    try:
        return [_out(it) for it in svc.list_items()]
    except InventoryException as e:
        raise _http_error(e)


@router.post("", summary="Create item")
def create_item(payload: Any = Body(None), db: Session = Depends(get_db)):
    """
    payload: { "name": "Ball", "category": "Sports", "stock": 3,
               "costprice": 10, "sellingprice": 15, "barcode": "123" }
    returns the stored item including its id
    """
    svc = InventoryService(db)
    try:
        return _out(svc.create_item(payload))
    except InventoryException as e:
        raise _http_error(e)


@router.get("/barcode/{barcode}", summary="Get item by barcode")
def get_item_by_barcode(barcode: str, db: Session = Depends(get_db)):
    svc = InventoryService(db)
    try:
        return _out(svc.find_by_barcode(barcode))
    except InventoryException as e:
        raise _http_error(e)


@router.get("/{item_id}", summary="Get item")
def get_item(item_id: int, db: Session = Depends(get_db)):
    svc = InventoryService(db)
    try:
        return _out(svc.get_item(item_id))
    except InventoryException as e:
        raise _http_error(e)


@router.put("/{item_id}", summary="Update item (partial)")
def update_item(item_id: int, payload: Any = Body(None), db: Session = Depends(get_db)):
    """
    payload: any subset of the item fields, e.g. { "stock": 10 }
    omitted fields keep their stored value
    """
    svc = InventoryService(db)
    try:
        return _out(svc.update_item(item_id, {} if payload is None else payload))
    except InventoryException as e:
        raise _http_error(e)


@router.delete("/{item_id}", summary="Delete item", response_model=DeletedOut)
def delete_item(item_id: int, db: Session = Depends(get_db)):
    svc = InventoryService(db)
    try:
        return svc.delete_item(item_id)
    except InventoryException as e:
        raise _http_error(e)
