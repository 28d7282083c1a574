import io
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app import cli
from app.client import state as st
from app.client.api_client import InventoryClient, InventoryClientError
from app.main import app
from app.reports.csv_export import DEFAULT_COLUMNS, items_to_csv


@pytest.fixture
def api():
    return InventoryClient(http=TestClient(app))


def test_client_round_trip(api, ball):
    created = api.create_item(ball)
    assert api.list_items() == [created]
    assert api.update_item(created["id"], {"stock": 10})["stock"] == 10
    assert api.get_by_barcode("123")["stock"] == 10
    assert api.delete_item(created["id"])["id"] == created["id"]


def test_client_surfaces_http_errors(api, ball):
    with pytest.raises(InventoryClientError) as exc:
        api.update_item(99, {"stock": 1})
    assert exc.value.status == 404
    assert str(exc.value) == "Item not found"

    with pytest.raises(InventoryClientError) as exc:
        api.create_item({**ball, "stock": "x"})
    assert exc.value.status == 400
    assert "stock" in str(exc.value)


def test_client_network_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://inventory.test", transport=httpx.MockTransport(handler))
    with pytest.raises(InventoryClientError) as exc:
        InventoryClient(http=http).list_items()
    assert exc.value.status is None
    assert len(calls) == 1


def test_csv_export_columns_and_blanks():
    rows = [
        {"id": 1, "name": "Ball", "stock": 3, "category": "Sports", "costprice": 10.0, "sellingprice": 15.0, "barcode": "123"},
        {"id": 2, "name": "Mystery, large", "stock": 0, "category": None, "costprice": None, "sellingprice": None, "barcode": None},
    ]
    lines = items_to_csv(rows).splitlines()
    assert lines[0] == ",".join(DEFAULT_COLUMNS)
    assert lines[1] == "1,Ball,3,Sports,10.0,15.0,123"
    assert lines[2] == '2,"Mystery, large",0,,,,'
    assert items_to_csv(rows, columns=("name", "stock")).splitlines()[1] == "Ball,3"


def test_reducer_filters_edits_and_deletes():
    items = [
        {"id": 1, "name": "Ball", "category": "Sports", "stock": 3, "barcode": "123"},
        {"id": 2, "name": "Apple", "category": "Food", "stock": 9, "barcode": "456"},
    ]
    s = st.reduce(st.DashboardState(), st.Action(st.ITEMS_LOADED, items))
    s = st.reduce(s, st.Action(st.SEARCH_CHANGED, "ba"))
    assert [it["id"] for it in st.visible_items(s)] == [1]
    assert [it["id"] for it in st.low_stock_items(s)] == [1]

    s = st.reduce(s, st.Action(st.EDIT_STARTED, items[0]))
    s = st.reduce(s, st.Action(st.ITEM_SAVED, {**items[0], "stock": 10}))
    assert s.editing is None
    assert s.notification == "Item updated"
    assert st.low_stock_items(s) == []

    s = st.reduce(s, st.Action(st.ITEM_DELETED, 1))
    assert [it["id"] for it in s.items] == [2]
    assert s.notification == "Item deleted"
    assert st.reduce(s, st.Action(st.NOTIFICATION_CLEARED)).notification == ""


def test_reducer_does_not_mutate_previous_state():
    first = st.reduce(st.DashboardState(), st.Action(st.ITEMS_LOADED, [{"id": 1, "name": "Ball", "stock": 1}]))
    second = st.reduce(first, st.Action(st.ITEM_DELETED, 1))
    assert len(first.items) == 1
    assert second.items == ()


def test_reducer_cart():
    ball = {"id": 1, "name": "Ball", "sellingprice": 15}
    s = st.DashboardState()
    s = st.reduce(s, st.Action(st.CART_ADD, ball))
    s = st.reduce(s, st.Action(st.CART_ADD, ball))
    assert s.cart[0]["qty"] == 2
    s = st.reduce(s, st.Action(st.CART_CHANGE_QTY, (1, -5)))
    assert s.cart[0]["qty"] == 1
    assert st.cart_total(s) == 15
    s = st.reduce(s, st.Action(st.CART_REMOVE, 1))
    assert s.cart == ()


def test_reducer_rejects_unknown_action():
    with pytest.raises(ValueError):
        st.reduce(st.DashboardState(), st.Action("explode"))


def test_cli_add_report_and_export(api, ball, tmp_path):
    out = io.StringIO()
    assert cli.main(["add", "--name", "Ball", "--category", "Sports", "--stock", "3",
                     "--costprice", "10", "--sellingprice", "15", "--barcode", "123"],
                    client=api, out=out) == 0
    assert json.loads(out.getvalue())["id"] == 1

    out = io.StringIO()
    assert cli.main(["report"], client=api, out=out) == 0
    report = json.loads(out.getvalue())
    assert report["count"] == 1
    assert report["lowStock"] == ["Ball"]
    assert report["categories"]["Sports"] == {"stock": 3, "cost": 30.0, "revenue": 45.0, "profit": 15.0}

    target = tmp_path / "items.csv"
    out = io.StringIO()
    assert cli.main(["export-csv", "--out", str(target)], client=api, out=out) == 0
    assert target.read_text(encoding="utf-8").splitlines()[1].startswith("1,Ball,3,Sports")


def test_cli_scan_match_and_errors(api, ball, capsys):
    api.create_item(ball)
    out = io.StringIO()
    assert cli.main(["scan-match", "123"], client=api, out=out) == 0
    assert json.loads(out.getvalue())["existing_id"] == 1

    assert cli.main(["delete", "42"], client=api, out=io.StringIO()) == 1
    assert "Item not found" in capsys.readouterr().err
