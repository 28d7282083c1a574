from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from app.client.api_client import InventoryClient
from app.client.scanner import (
    CameraError,
    IncompleteScanForm,
    camera_session,
    save_scan,
    scan_once,
)
from app.main import app
from app.services.scan_match import ScanForm, match, prefill_form

BALL = {"id": 1, "name": "Ball", "category": "Sports", "stock": 3, "costprice": 10.0, "sellingprice": 15.0, "barcode": "123"}


class FakeCamera:
    def __init__(self):
        self.released = False

    def release(self):
        self.released = True


def test_match_returns_item_with_equal_barcode():
    assert match("123", [BALL]) is BALL
    assert match("12", [BALL]) is None
    assert match("999", []) is None


def test_match_duplicate_barcode_takes_first():
    twin = {**BALL, "id": 2}
    assert match("123", [BALL, twin])["id"] == 1


def test_prefill_form_for_known_barcode():
    form = prefill_form("123", [BALL])
    assert form.is_update
    assert form.existing_id == 1
    assert form.name == "Ball"
    assert form.stock == "3"
    assert form.sellingprice == "15.0"


def test_prefill_form_for_unknown_barcode_is_blank():
    form = prefill_form("999", [BALL])
    assert form == ScanForm(barcode="999")
    assert not form.is_update


def test_scan_once_stops_at_first_code_and_releases_camera():
    camera = FakeCamera()
    seen = []

    def decode(cam):
        for code in ["", "123", "456"]:
            seen.append(code)
            yield code

    form = scan_once(lambda: camera, decode, [BALL])
    assert form.existing_id == 1
    assert seen == ["", "123"]
    assert camera.released


def test_scan_once_returns_none_when_stream_ends():
    camera = FakeCamera()
    assert scan_once(lambda: camera, lambda cam: iter([]), [BALL]) is None
    assert camera.released


def test_camera_released_on_decoder_error():
    camera = FakeCamera()

    def decode(cam):
        raise RuntimeError("decoder crashed")
        yield  # pragma: no cover

    with pytest.raises(RuntimeError):
        scan_once(lambda: camera, decode, [BALL])
    assert camera.released


def test_camera_permission_error_is_camera_error():
    def denied():
        raise PermissionError("Permission denied")

    with pytest.raises(CameraError) as exc:
        with camera_session(denied):
            pass
    assert "Permission denied" in str(exc.value)


def test_save_scan_creates_then_updates():
    client = InventoryClient(http=TestClient(app))
    new_form = ScanForm(barcode="123", name="Ball", category="Sports", stock="3", costprice="10", sellingprice="15")
    created = save_scan(client, new_form)
    assert created["id"] == 1

    rescanned = prefill_form("123", client.list_items())
    assert rescanned.is_update
    updated = save_scan(client, replace(rescanned, stock="8"))
    assert updated["stock"] == 8
    assert len(client.list_items()) == 1


def test_save_scan_requires_every_field():
    client = InventoryClient(http=TestClient(app))
    with pytest.raises(IncompleteScanForm) as exc:
        save_scan(client, ScanForm(barcode="123", name="Ball"))
    assert exc.value.fields == ["category", "stock", "costprice", "sellingprice"]


def test_match_compares_barcodes_as_text():
    numeric = {**BALL, "barcode": 123}
    assert match("123", [numeric]) is numeric
    assert match(123, [BALL]) is BALL
    assert match("None", [{**BALL, "barcode": None}]) is None
