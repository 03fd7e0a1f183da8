from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from .domain import ReportKind

BOM = "\ufeff"
QUOTE = '"'
NEEDS_QUOTES = (",", QUOTE, "\n", "\r")


def _as_mapping(row: Any) -> Mapping[str, Any]:
    if isinstance(row, Mapping):
        return row
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        return {f.name: getattr(row, f.name) for f in dataclasses.fields(row)}
    raise TypeError(f"Cannot export row of type {type(row).__name__}")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _field(text: str) -> str:
    if any(ch in text for ch in NEEDS_QUOTES):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def _line(cells: Iterable[str]) -> str:
    return ",".join(_field(c) for c in cells)


def export_csv(rows: Sequence[Any]) -> Optional[bytes]:
    """Serialize rows (mappings or dataclasses) to UTF-8 CSV with a BOM.

    Columns come from the first row. Returns None for an empty collection so
    no header-only document is ever produced.
    """
    if not rows:
        return None

    records = [_as_mapping(r) for r in rows]
    header = list(records[0].keys())

    lines = [_line(header)]
    lines.extend(_line(_cell(rec.get(col)) for col in header) for rec in records)
    return (BOM + "\n".join(lines) + "\n").encode("utf-8")


def export_filename(prefix: str, kind: ReportKind | str, date_from: date | str, date_to: date | str) -> str:
    kind = ReportKind.parse(kind)
    start = date_from.isoformat() if isinstance(date_from, date) else str(date_from)
    end = date_to.isoformat() if isinstance(date_to, date) else str(date_to)
    return f"{prefix}_{kind.value.upper()}_{start}_to_{end}.csv"
