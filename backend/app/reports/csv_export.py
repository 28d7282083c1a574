import csv
import io
from typing import Any, Iterable, Sequence

from app.services.scan_match import field_of

DEFAULT_COLUMNS = ("id", "name", "stock", "category", "costprice", "sellingprice", "barcode")


def items_to_csv(items: Iterable[Any], columns: Sequence[str] = DEFAULT_COLUMNS) -> str:
    """Serialize the current item list; missing values become empty cells."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(list(columns))
    for item in items:
        row = []
        for col in columns:
            value = field_of(item, col)
            row.append("" if value is None else value)
        writer.writerow(row)

    return output.getvalue()


def write_csv(items: Iterable[Any], path: str, columns: Sequence[str] = DEFAULT_COLUMNS) -> int:
    rows = list(items)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(items_to_csv(rows, columns))
    return len(rows)
