"""
Scan-to-form workflow.

Decoding is someone else's job: `decode(camera)` is any callable that
yields barcode strings as frames come in (a zxing/pyzbar wrapper, a test
list). This module owns the camera lifetime and what happens to the
first code it produces.
"""
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Optional

from app.client.api_client import InventoryClient
from app.services.scan_match import ScanForm, prefill_form

log = logging.getLogger("inventory.client")


class CameraError(Exception):
    pass


class IncompleteScanForm(ValueError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__("Please fill all fields and scan a barcode: " + ", ".join(self.fields))


@contextmanager
def camera_session(open_camera: Callable[[], Any]) -> Iterator[Any]:
    """
    Acquire a camera handle and release it however the block exits:
    match found, user stop (GeneratorExit/KeyboardInterrupt) or error.
    """
    try:
        camera = open_camera()
    except (OSError, RuntimeError) as e:
        raise CameraError(str(e) or "Failed to access camera.") from e
    try:
        yield camera
    finally:
        camera.release()
        log.debug("camera released")


def scan_once(
    open_camera: Callable[[], Any],
    decode: Callable[[Any], Iterable[str]],
    items: Iterable[Any],
) -> Optional[ScanForm]:
    """Stop at the first decoded barcode and return the prefilled form; None if the stream ends first."""
    with camera_session(open_camera) as camera:
        codes = iter(decode(camera))
        try:
            barcode = next((c for c in codes if c), None)
        finally:
            close = getattr(codes, "close", None)
            if close is not None:
                close()
    if barcode is None:
        return None
    form = prefill_form(barcode, items)
    log.info("scanned %s (%s)", barcode, "existing item" if form.is_update else "new item")
    return form


def save_scan(client: InventoryClient, form: ScanForm) -> dict:
    payload = form.payload()
    missing = [k for k, v in payload.items() if not str(v).strip()]
    if missing:
        raise IncompleteScanForm(missing)
    if form.is_update:
        return client.update_item(form.existing_id, payload)
    return client.create_item(payload)
