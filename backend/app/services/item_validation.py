"""Payload normalisation for item writes.

Clients send whatever their form produced: numbers, numeric strings,
blank strings for untouched inputs. ``clean_item_fields`` turns that into
column values and reports every field it could not accept.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Tuple

REQUIRED_FIELDS = ("name", "category", "stock", "costprice", "sellingprice", "barcode")
OPTIONAL_FIELDS = ("format",)
WRITABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS

_CENTS = Decimal("0.01")
# column ranges: Numeric(10, 2) prices, 64-bit signed stock
PRICE_LIMIT = Decimal("1e8")
MAX_STOCK = 2 ** 63 - 1


class _Invalid(Exception):
    pass


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise _Invalid()
    return value.strip()


def _barcode(value: Any) -> str:
    # numeric barcodes often arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _text(value)


def _stock(value: Any) -> int:
    if isinstance(value, bool):
        raise _Invalid()
    if isinstance(value, int):
        qty = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise _Invalid()
        qty = int(value)
    elif isinstance(value, str):
        try:
            qty = int(value.strip())
        except ValueError:
            raise _Invalid()
    else:
        raise _Invalid()
    if qty < 0 or qty > MAX_STOCK:
        raise _Invalid()
    return qty


def _price(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise _Invalid()
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite() or amount < 0:
            raise _Invalid()
        amount = amount.quantize(_CENTS)
    except InvalidOperation:
        raise _Invalid()
    if amount >= PRICE_LIMIT:
        raise _Invalid()
    return amount


_PARSERS = {
    "name": _text,
    "category": _text,
    "stock": _stock,
    "costprice": _price,
    "sellingprice": _price,
    "barcode": _barcode,
    "format": _text,
}


def clean_item_fields(payload: Dict[str, Any], partial: bool = False) -> Tuple[Dict[str, Any], List[str]]:
    """
    Returns (clean, bad_fields).

    partial=False: every REQUIRED_FIELDS entry must be present and non-blank.
    partial=True: only keys present in the payload are checked; a required
    field explicitly sent as blank/None is still rejected.
    Keys outside WRITABLE_FIELDS (including "id") are ignored.
    """
    clean: Dict[str, Any] = {}
    bad: List[str] = []
    for field in WRITABLE_FIELDS:
        if field not in payload:
            if not partial and field in REQUIRED_FIELDS:
                bad.append(field)
            continue
        value = payload[field]
        if _blank(value):
            if field in REQUIRED_FIELDS:
                bad.append(field)
            else:
                clean[field] = None
            continue
        try:
            clean[field] = _PARSERS[field](value)
        except _Invalid:
            bad.append(field)
    return clean, bad
