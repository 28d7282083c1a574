#!/usr/bin/env python3
"""
Command-line front end for the inventory API.

Usage:
    inventory serve --port 5000
    inventory list --search ball --category Sports --sort stock
    inventory add --name Ball --category Sports --stock 3 --costprice 10 --sellingprice 15 --barcode 123
    inventory update 1 --stock 10
    inventory report
    inventory export-csv --out items.csv
"""
import argparse
import json
import sys
from decimal import Decimal

from app.client.api_client import InventoryClient, InventoryClientError
from app.config import settings
from app.logging_config import configure_logging
from app.reports.csv_export import items_to_csv, write_csv
from app.services import aggregation
from app.services.scan_match import prefill_form

ITEM_FIELDS = ("name", "category", "stock", "costprice", "sellingprice", "barcode")


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def _dump(obj, out):
    out.write(json.dumps(obj, indent=2, default=_json_default) + "\n")


def _fields_from(args) -> dict:
    return {f: getattr(args, f) for f in ITEM_FIELDS if getattr(args, f, None) is not None}


def _print_table(items, out):
    out.write(f"{'ID':>4}  {'NAME':<24} {'CATEGORY':<14} {'STOCK':>6}  BARCODE\n")
    for it in items:
        out.write(
            f"{it['id']:>4}  {str(it['name'])[:24]:<24} {str(it.get('category') or '')[:14]:<14} "
            f"{it['stock']:>6}  {it.get('barcode') or ''}\n"
        )


def cmd_serve(args, client, out):
    from app.main import run

    run(host=args.host, port=args.port)
    return 0


def cmd_list(args, client, out):
    items = aggregation.filter_and_sort(
        client.list_items(), query=args.search, category=args.category, sort_key=args.sort
    )
    _print_table(items, out)
    return 0


def cmd_add(args, client, out):
    _dump(client.create_item(_fields_from(args)), out)
    return 0


def cmd_update(args, client, out):
    _dump(client.update_item(args.id, _fields_from(args)), out)
    return 0


def cmd_delete(args, client, out):
    _dump(client.delete_item(args.id), out)
    return 0


def cmd_report(args, client, out):
    items = client.list_items()
    report = {
        **aggregation.totals(items),
        "lowStock": [it["name"] for it in aggregation.low_stock(items)],
        "categories": aggregation.group_by_category(items),
        "top": [it["name"] for it in aggregation.rank(items, by=args.by, limit=args.limit)],
        "bottom": [
            it["name"] for it in aggregation.rank(items, by=args.by, limit=args.limit, descending=False)
        ],
    }
    _dump(report, out)
    return 0


def cmd_low_stock(args, client, out):
    _print_table(aggregation.low_stock(client.list_items(), args.threshold), out)
    return 0


def cmd_export_csv(args, client, out):
    items = client.list_items()
    if args.out:
        n = write_csv(items, args.out)
        out.write(f"Exported {n} items to {args.out}\n")
    else:
        out.write(items_to_csv(items))
    return 0


def cmd_scan_match(args, client, out):
    form = prefill_form(args.barcode, client.list_items())
    _dump({"update": form.is_update, **form.payload(), "existing_id": form.existing_id}, out)
    return 0


def _add_item_options(p, required: bool):
    p.add_argument("--name", required=required)
    p.add_argument("--category", required=required)
    p.add_argument("--stock", required=required)
    p.add_argument("--costprice", required=required)
    p.add_argument("--sellingprice", required=required)
    p.add_argument("--barcode", required=required)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inventory", description="Inventory tracker")
    parser.add_argument("--api", default=settings.API_BASE_URL, help="API base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="run the REST API")
    p.add_argument("--host", default=settings.APP_HOST)
    p.add_argument("--port", type=int, default=settings.APP_PORT)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("list", help="list items")
    p.add_argument("--search", default="")
    p.add_argument("--category", default=aggregation.ALL_CATEGORIES)
    p.add_argument("--sort", choices=aggregation.SORT_KEYS, default="name")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("add", help="create an item")
    _add_item_options(p, required=True)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("update", help="update some fields of an item")
    p.add_argument("id", type=int)
    _add_item_options(p, required=False)
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("delete", help="delete an item")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("report", help="totals, low stock and category figures")
    p.add_argument("--by", choices=aggregation.RANK_METRICS, default="revenue")
    p.add_argument("--limit", type=int, default=5)
    p.set_defaults(func=cmd_report)

    p = sub.add_parser("low-stock", help="items at or below the threshold")
    p.add_argument("--threshold", type=int, default=aggregation.LOW_STOCK_THRESHOLD)
    p.set_defaults(func=cmd_low_stock)

    p = sub.add_parser("export-csv", help="write the item list as CSV")
    p.add_argument("--out", "-o", help="file path (stdout if omitted)")
    p.set_defaults(func=cmd_export_csv)

    p = sub.add_parser("scan-match", help="look up a scanned barcode in the current list")
    p.add_argument("barcode")
    p.set_defaults(func=cmd_scan_match)

    return parser


def main(argv=None, client: InventoryClient = None, out=None) -> int:
    configure_logging(settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)
    out = out or sys.stdout
    client = client or InventoryClient(base_url=args.api)
    try:
        return args.func(args, client, out)
    except InventoryClientError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
