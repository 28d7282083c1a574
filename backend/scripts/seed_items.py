#!/usr/bin/env python3
"""
Seed items from a JSON file: either a list of item objects or {"items": [...]}.
Rows whose barcode already exists are updated in place, others are created.

Usage:
    python scripts/seed_items.py --file demo_items.json
"""
import argparse
import json
import logging
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import settings
from app.db import SessionLocal, init_db
from app.logging_config import configure_logging
from app.services.inventory_service import InventoryService, ItemNotFound, ItemValidationError

log = logging.getLogger("inventory.seed")


def _entries(data):
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    if isinstance(data, list):
        return data
    raise ValueError("expected a list of items or an object with an 'items' list")


def seed_from_file(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    counts = {"created": 0, "updated": 0, "skipped": 0}
    db = SessionLocal()
    try:
        svc = InventoryService(db)
        for n, entry in enumerate(_entries(data), start=1):
            barcode = entry.get("barcode")
            try:
                try:
                    existing = svc.find_by_barcode(str(barcode)) if barcode is not None else None
                except ItemNotFound:
                    existing = None
                if existing:
                    svc.update_item(existing.id, entry)
                    counts["updated"] += 1
                else:
                    svc.create_item(entry)
                    counts["created"] += 1
            except ItemValidationError as e:
                log.warning("entry %s skipped: %s", n, e)
                counts["skipped"] += 1
    finally:
        db.close()
    log.info("seeded items: %s", counts)
    return counts


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", required=True, help="Path to item json")
    args = parser.parse_args()
    configure_logging(settings.LOG_LEVEL)
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)
    init_db()
    seed_from_file(args.file)
