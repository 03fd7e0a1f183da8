"""Turn raw storage rows into canonical domain records.

Rows reach us either from the Postgres tables (snake_case columns) or from
older client payloads that used camelCase keys. Every spelling is resolved
here, once, and every missing or non-numeric value is replaced by an explicit
default, so the aggregation and projection code only ever sees one shape.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from .domain import Customer, Part, Vehicle, WorkOrder

ZERO = Decimal(0)


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def as_decimal(value: Any) -> Decimal:
    """Numeric value of ``value``, or 0 when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else ZERO
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            return ZERO
        return parsed if parsed.is_finite() else ZERO
    return ZERO


def as_int(value: Any) -> int:
    """Integer value of ``value`` (fractions truncated), or 0."""
    return int(as_decimal(value))


def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def _status(value: Any) -> Optional[str]:
    text = as_text(value)
    return text.upper() if text else None


def work_order_from_row(row: Mapping[str, Any]) -> WorkOrder:
    return WorkOrder(
        id=as_text(row.get("id")),
        order_number=as_text(_pick(row, "order_number", "orderNumber")),
        status=_status(row.get("status")),
        total_amount=as_decimal(_pick(row, "total_amount", "totalAmount")),
        labor_cost=as_decimal(_pick(row, "labor_cost", "laborCost")),
        created_at=as_datetime(_pick(row, "created_at", "createdAt")),
        issue_description=as_text(_pick(row, "issue_description", "issueDescription")),
        customer_id=as_text(_pick(row, "customer_id", "customerId")),
        vehicle_id=as_text(_pick(row, "vehicle_id", "vehicleId")),
    )


def part_from_row(row: Mapping[str, Any]) -> Part:
    return Part(
        id=as_text(row.get("id")),
        sku=as_text(row.get("sku")),
        name=as_text(row.get("name")),
        category=as_text(row.get("category")),
        cost_price=as_decimal(_pick(row, "cost_price", "costPrice")),
        sale_price=as_decimal(_pick(row, "sale_price", "salePrice")),
        stock_level=as_int(_pick(row, "stock_level", "stockLevel")),
        min_stock=as_int(_pick(row, "min_stock", "minStock")),
    )


def customer_from_row(row: Mapping[str, Any]) -> Customer:
    ctype = as_text(row.get("type"))
    return Customer(
        id=as_text(row.get("id")),
        name=as_text(row.get("name")),
        phone=as_text(row.get("phone")),
        province=as_text(row.get("province")),
        type=ctype.upper() if ctype else None,
    )


def vehicle_from_row(row: Mapping[str, Any]) -> Vehicle:
    return Vehicle(
        id=as_text(row.get("id")),
        customer_id=as_text(_pick(row, "customer_id", "customerId")),
        brand=as_text(row.get("brand")),
        model=as_text(row.get("model")),
        vin=as_text(row.get("vin")),
    )


def normalize_work_orders(rows: Iterable[Mapping[str, Any]]) -> tuple[WorkOrder, ...]:
    return tuple(work_order_from_row(r) for r in rows)


def normalize_parts(rows: Iterable[Mapping[str, Any]]) -> tuple[Part, ...]:
    return tuple(part_from_row(r) for r in rows)


def normalize_customers(rows: Iterable[Mapping[str, Any]]) -> tuple[Customer, ...]:
    return tuple(customer_from_row(r) for r in rows)
