"""
Dashboard state as a value plus a reducer.

Views never mutate shared lists: they dispatch an Action and render the
DashboardState that `reduce` hands back.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from app.services import aggregation
from app.services.scan_match import field_of

ITEMS_LOADED = "items_loaded"
LOAD_FAILED = "load_failed"
SEARCH_CHANGED = "search_changed"
CATEGORY_CHANGED = "category_changed"
SORT_CHANGED = "sort_changed"
EDIT_STARTED = "edit_started"
EDIT_CANCELLED = "edit_cancelled"
ITEM_SAVED = "item_saved"
ITEM_DELETED = "item_deleted"
NOTIFY = "notify"
NOTIFICATION_CLEARED = "notification_cleared"
CART_ADD = "cart_add"
CART_CHANGE_QTY = "cart_change_qty"
CART_REMOVE = "cart_remove"
CART_CLEARED = "cart_cleared"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


@dataclass(frozen=True)
class DashboardState:
    items: Tuple[Dict, ...] = ()
    search: str = ""
    category: str = aggregation.ALL_CATEGORIES
    sort_key: str = "name"
    editing: Optional[Dict] = None
    cart: Tuple[Dict, ...] = ()
    notification: str = ""
    errors: Tuple[str, ...] = ()


def _add_to_cart(cart: Tuple[Dict, ...], item: Dict) -> Tuple[Dict, ...]:
    item_id = field_of(item, "id")
    if any(line["id"] == item_id for line in cart):
        return tuple(
            {**line, "qty": line["qty"] + 1} if line["id"] == item_id else line
            for line in cart
        )
    line = {
        "id": item_id,
        "name": field_of(item, "name"),
        "sellingprice": field_of(item, "sellingprice"),
        "qty": 1,
    }
    return cart + (line,)


def reduce(state: DashboardState, action: Action) -> DashboardState:
    t, p = action.type, action.payload
    if t == ITEMS_LOADED:
        return replace(state, items=tuple(p))
    if t == LOAD_FAILED:
        return replace(state, notification="Failed to fetch items", errors=state.errors + (str(p),))
    if t == SEARCH_CHANGED:
        return replace(state, search=p or "")
    if t == CATEGORY_CHANGED:
        return replace(state, category=p or aggregation.ALL_CATEGORIES)
    if t == SORT_CHANGED:
        if p not in aggregation.SORT_KEYS:
            raise ValueError(f"Unknown sort key: {p}")
        return replace(state, sort_key=p)
    if t == EDIT_STARTED:
        return replace(state, editing=dict(p))
    if t == EDIT_CANCELLED:
        return replace(state, editing=None, notification="Edit cancelled")
    if t == ITEM_SAVED:
        items = tuple(p if it["id"] == p["id"] else it for it in state.items)
        if not any(it["id"] == p["id"] for it in state.items):
            items = items + (p,)
        return replace(state, items=items, editing=None, notification="Item updated")
    if t == ITEM_DELETED:
        items = tuple(it for it in state.items if it["id"] != p)
        return replace(state, items=items, editing=None, notification="Item deleted")
    if t == NOTIFY:
        return replace(state, notification=p)
    if t == NOTIFICATION_CLEARED:
        return replace(state, notification="")
    if t == CART_ADD:
        return replace(state, cart=_add_to_cart(state.cart, p))
    if t == CART_CHANGE_QTY:
        item_id, delta = p
        cart = tuple(
            {**line, "qty": max(1, line["qty"] + delta)} if line["id"] == item_id else line
            for line in state.cart
        )
        return replace(state, cart=cart)
    if t == CART_REMOVE:
        return replace(state, cart=tuple(line for line in state.cart if line["id"] != p))
    if t == CART_CLEARED:
        return replace(state, cart=())
    raise ValueError(f"Unknown action: {t}")


def visible_items(state: DashboardState):
    return aggregation.filter_and_sort(
        state.items, query=state.search, category=state.category, sort_key=state.sort_key
    )


def low_stock_items(state: DashboardState):
    return aggregation.low_stock(state.items)


def cart_total(state: DashboardState):
    return aggregation.cart_total(state.cart)
