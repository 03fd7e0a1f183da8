from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from shopdesk.normalize import (
    as_datetime,
    as_decimal,
    as_int,
    as_text,
    customer_from_row,
    part_from_row,
    vehicle_from_row,
    work_order_from_row,
)


@pytest.mark.parametrize("value, expected", [
    (None, Decimal(0)),
    ("", Decimal(0)),
    ("abc", Decimal(0)),
    (True, Decimal(0)),
    (float("nan"), Decimal(0)),
    (float("inf"), Decimal(0)),
    ("NaN", Decimal(0)),
    (12, Decimal(12)),
    (0.1, Decimal("0.1")),
    (" 1,250.75 ", Decimal("1250.75")),
    (Decimal("3.30"), Decimal("3.30")),
    ([1], Decimal(0)),
])
def test_as_decimal_substitutes_zero(value, expected):
    assert as_decimal(value) == expected


def test_as_int_truncates():
    assert as_int("7.9") == 7
    assert as_int(None) == 0


def test_as_text():
    assert as_text("  hi ") == "hi"
    assert as_text("   ") is None
    assert as_text(5) == "5"


def test_as_datetime():
    assert as_datetime("2026-10-19T03:00:00Z") == datetime(2026, 10, 19, 3, tzinfo=timezone.utc)
    assert as_datetime("2026-10-19") == datetime(2026, 10, 19)
    assert as_datetime(date(2026, 1, 2)) == datetime(2026, 1, 2)
    assert as_datetime("yesterday") is None
    assert as_datetime(12345) is None


def test_work_order_accepts_both_spellings():
    snake = work_order_from_row({
        "id": 7, "order_number": "WO-1", "status": "in_progress", "total_amount": "10",
        "labor_cost": 4, "created_at": "2026-10-19T10:00:00", "issue_description": "x",
        "customer_id": "c", "vehicle_id": "v",
    })
    camel = work_order_from_row({
        "id": 7, "orderNumber": "WO-1", "status": "IN_PROGRESS", "totalAmount": 10,
        "laborCost": "4", "createdAt": "2026-10-19T10:00:00", "issueDescription": "x",
        "customerId": "c", "vehicleId": "v",
    })
    assert snake == camel
    assert snake.id == "7"
    assert snake.status == "IN_PROGRESS"


def test_snake_case_wins_over_camel_case():
    wo = work_order_from_row({"total_amount": 1, "totalAmount": 2})
    assert wo.total_amount == 1


def test_part_defaults():
    p = part_from_row({"sku": "A"})
    assert p.stock_level == 0 and p.min_stock == 0
    assert p.cost_price == 0 and p.sale_price == 0
    assert p.is_low_stock


def test_part_camel_case():
    p = part_from_row({"stockLevel": "4", "minStock": 2, "costPrice": 1.5})
    assert (p.stock_level, p.min_stock, p.cost_price) == (4, 2, Decimal("1.5"))
    assert not p.is_low_stock


def test_customer_type_upper():
    c = customer_from_row({"name": "Fleet Co", "phone": "02", "type": "fleet"})
    assert c.type == "FLEET"
    assert customer_from_row({}).type is None


def test_vehicle_from_either_spelling():
    v = vehicle_from_row({"id": "v1", "customerId": "c1", "brand": " I-Motor ", "model": "Vapor CBS", "vin": ""})
    assert (v.id, v.customer_id, v.brand, v.model, v.vin) == ("v1", "c1", "I-Motor", "Vapor CBS", None)
    assert v.label == "I-Motor Vapor CBS"
    assert vehicle_from_row({"customer_id": "c2"}).customer_id == "c2"
    assert vehicle_from_row({}).label == ""
