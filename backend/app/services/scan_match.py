from dataclasses import dataclass
from typing import Any, Iterable, Optional


def field_of(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a dict row, a pydantic model or an ORM instance."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def match(barcode: str, items: Iterable[Any]) -> Optional[Any]:
    """
    Exact barcode lookup over an already-loaded snapshot.
    Duplicate barcodes resolve to the first item in iteration order.
    Numeric barcodes compare by their string form, as the store keeps them.
    """
    if barcode is None:
        return None
    wanted = str(barcode)

    def _same(it) -> bool:
        value = field_of(it, "barcode")
        return value is not None and str(value) == wanted

    return next((it for it in items if _same(it)), None)


@dataclass(frozen=True)
class ScanForm:
    """Form state after a scan: prefilled from a match, blank otherwise."""
    barcode: str
    existing_id: Optional[int] = None
    name: str = ""
    category: str = ""
    stock: str = ""
    costprice: str = ""
    sellingprice: str = ""

    @property
    def is_update(self) -> bool:
        return self.existing_id is not None

    def payload(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "stock": self.stock,
            "costprice": self.costprice,
            "sellingprice": self.sellingprice,
            "barcode": self.barcode,
        }


def _as_input(value: Any) -> str:
    return "" if value is None else str(value)


def prefill_form(barcode: str, items: Iterable[Any]) -> ScanForm:
    found = match(barcode, items)
    if found is None:
        return ScanForm(barcode=barcode)
    return ScanForm(
        barcode=barcode,
        existing_id=field_of(found, "id"),
        name=_as_input(field_of(found, "name")),
        category=_as_input(field_of(found, "category")),
        stock=_as_input(field_of(found, "stock")),
        costprice=_as_input(field_of(found, "costprice")),
        sellingprice=_as_input(field_of(found, "sellingprice")),
    )
