import importlib.util
import json
import os

from app.db import SessionLocal
from app.services.inventory_service import InventoryService

_SCRIPT = os.path.join(os.path.dirname(__file__), "..", "scripts", "seed_items.py")
_spec = importlib.util.spec_from_file_location("seed_items", _SCRIPT)
seed_items = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(seed_items)


def test_seed_creates_updates_and_skips(tmp_path, ball):
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"items": [
        ball,
        {**ball, "name": "Bat", "barcode": "456"},
        {**ball, "stock": 9},
        {"name": "Broken"},
    ]}), encoding="utf-8")

    counts = seed_items.seed_from_file(str(path))
    assert counts == {"created": 2, "updated": 1, "skipped": 1}

    db = SessionLocal()
    try:
        items = InventoryService(db).list_items()
        assert [(it.name, it.stock) for it in items] == [("Ball", 9), ("Bat", 3)]
    finally:
        db.close()
