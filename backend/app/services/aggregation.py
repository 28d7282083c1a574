"""
Report figures derived from an in-memory item list.

Every function here is pure: it takes the rows the caller already holds
(dicts from the API, ItemOut models or ORM rows) and recomputes from
scratch. Money is summed as Decimal so category totals reconcile exactly
with per-item figures.
"""
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.config import settings
from app.services.scan_match import field_of

# Items at or below this stock level are "low stock" in every view.
LOW_STOCK_THRESHOLD = settings.LOW_STOCK_THRESHOLD

MISC_CATEGORY = "Misc"
ALL_CATEGORIES = "All"
RANK_METRICS = ("revenue", "cost", "profit", "stock")
SORT_KEYS = ("name", "stock")


def _stock(item: Any) -> int:
    return int(field_of(item, "stock") or 0)


def _money(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _category(item: Any) -> str:
    cat = field_of(item, "category")
    if cat is None or not str(cat).strip():
        return MISC_CATEGORY
    return cat


def item_cost(item: Any) -> Decimal:
    return _money(field_of(item, "costprice")) * _stock(item)


def item_revenue(item: Any) -> Decimal:
    return _money(field_of(item, "sellingprice")) * _stock(item)


def totals(items: Sequence[Any]) -> Dict[str, int]:
    return {"count": len(items), "totalStock": sum(_stock(it) for it in items)}


def low_stock(items: Iterable[Any], threshold: Optional[int] = None) -> List[Any]:
    threshold = LOW_STOCK_THRESHOLD if threshold is None else threshold
    return [it for it in items if _stock(it) <= threshold]


def group_by_category(items: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = OrderedDict()
    for it in items:
        g = groups.setdefault(
            _category(it),
            {"stock": 0, "cost": Decimal("0"), "revenue": Decimal("0"), "profit": Decimal("0")},
        )
        g["stock"] += _stock(it)
        g["cost"] += item_cost(it)
        g["revenue"] += item_revenue(it)
    for g in groups.values():
        g["profit"] = g["revenue"] - g["cost"]
    return dict(groups)


def _metric(item: Any, by: str):
    if by == "stock":
        return _stock(item)
    if by == "cost":
        return item_cost(item)
    if by == "revenue":
        return item_revenue(item)
    return item_revenue(item) - item_cost(item)


def rank(items: Iterable[Any], by: str = "revenue", limit: int = 5, descending: bool = True) -> List[Any]:
    """Top performers with descending=True, bottom performers otherwise."""
    if by not in RANK_METRICS:
        raise ValueError(f"Unknown rank metric: {by}")
    ordered = sorted(items, key=lambda it: _metric(it, by), reverse=descending)
    return ordered[:limit]


def filter_and_sort(
    items: Iterable[Any],
    query: str = "",
    category: Optional[str] = ALL_CATEGORIES,
    sort_key: Optional[str] = "name",
) -> List[Any]:
    q = (query or "").strip()
    q_lower = q.lower()

    def _hit(it) -> bool:
        if not q:
            return True
        name = field_of(it, "name") or ""
        barcode = field_of(it, "barcode") or ""
        return q_lower in str(name).lower() or q in str(barcode)

    out = [
        it
        for it in items
        if _hit(it) and (category in (None, ALL_CATEGORIES) or field_of(it, "category") == category)
    ]
    if sort_key is None:
        return out
    if sort_key == "name":
        return sorted(out, key=lambda it: field_of(it, "name") or "")
    if sort_key == "stock":
        return sorted(out, key=_stock, reverse=True)
    raise ValueError(f"Unknown sort key: {sort_key}")


def categories(items: Iterable[Any]) -> List[str]:
    seen: List[str] = []
    for it in items:
        cat = _category(it)
        if cat not in seen:
            seen.append(cat)
    return seen


def cart_total(lines: Iterable[Any]) -> Decimal:
    return sum(
        (_money(field_of(line, "sellingprice")) * int(field_of(line, "qty") or 0) for line in lines),
        Decimal("0"),
    )
