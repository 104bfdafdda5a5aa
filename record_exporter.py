"""Serialize an extracted record into a one-row Excel workbook."""
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from coffee_record import CoffeeRecord


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, record field, column width)
COLUMNS = (
    ("URL", "url", 50),
    ("PriceEUR", "price", 12),
    ("WeightG", "weight", 10),
    ("Flavor", "flavor", 50),
    ("Processing", "processing", 14),
    ("Farmer", "farmer", 28),
)


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, (str, int, float)):
        return value
    return str(value)


def build_workbook(record: Union[CoffeeRecord, Mapping[str, Any]], url: Optional[str] = None,
                   sheet_name: str = "Coffee") -> Workbook:
    if isinstance(record, CoffeeRecord):
        values = record.known_fields()
    else:
        values = dict(record)
    values["url"] = url if url is not None else values.get("url")

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name
    sheet.append([header for header, _, _ in COLUMNS])
    sheet.append([_cell_value(values.get(key)) for _, key, _ in COLUMNS])
    for index, (_, _, width) in enumerate(COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width
    return workbook


def export_record_bytes(record: Union[CoffeeRecord, Mapping[str, Any]], url: Optional[str] = None,
                        sheet_name: str = "Coffee") -> bytes:
    buf = BytesIO()
    build_workbook(record, url, sheet_name).save(buf)
    return buf.getvalue()


def export_record(record: Union[CoffeeRecord, Mapping[str, Any]], path: Union[str, Path],
                  url: Optional[str] = None, sheet_name: str = "Coffee") -> Path:
    """Write the workbook to ``path`` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_workbook(record, url, sheet_name).save(path)
    return path
