from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
import requests

from shopdesk.config import BusinessConfig

BANGKOK = ZoneInfo("Asia/Bangkok")
TODAY = date(2026, 10, 19)


def fixed_clock(tz):
    return datetime(2026, 10, 19, 15, 30, tzinfo=BANGKOK).astimezone(tz)


class FakeWorkOrderRepo:
    def __init__(self, rows=(), detail=None):
        self.rows = list(rows)
        self.detail = detail
        self.between_calls = []
        self.status_updates = []

    def list_recent(self, conn, limit=None):
        return list(self.rows)

    def list_between(self, conn, date_from, date_to, tz_name):
        self.between_calls.append((date_from, date_to, tz_name))
        return list(self.rows)

    def get_detail(self, conn, order_id):
        return self.detail

    def set_status(self, conn, *, order_id, status):
        self.status_updates.append((order_id, status))


class FakePartRepo:
    def __init__(self, rows=()):
        self.rows = list(rows)

    def list(self, conn, limit=None):
        return list(self.rows)

    def list_low_stock(self, conn):
        return [r for r in self.rows if (r.get("stock_level") or 0) <= (r.get("min_stock") or 0)]


class FakeCustomerRepo:
    def __init__(self, rows=()):
        self.rows = list(rows)

    def list(self, conn, limit=None):
        return list(self.rows)


class FakeSystemConfigRepo:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def get(self, conn, key):
        return self.values.get(key)

    def set(self, conn, key, value):
        self.values[key] = value


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response


class FakeDb:
    """Stands in for shopdesk.db.Db; records when transactions open and commit."""

    def __init__(self, events=None):
        self.events = events if events is not None else []

    @contextmanager
    def session(self):
        yield None

    @contextmanager
    def transaction(self):
        self.events.append("begin")
        yield None
        self.events.append("commit")


class RecordingSession(FakeSession):
    """FakeSession that logs each push into a shared event list."""

    def __init__(self, events):
        super().__init__()
        self.events = events

    def post(self, url, **kwargs):
        self.events.append("push")
        return super().post(url, **kwargs)


class FakeCursor:
    def __init__(self, rows=(), rowcount=1):
        self.description = []
        self.rows = list(rows)
        self.rowcount = rowcount

    def fetchall(self):
        return list(self.rows)

    def fetchone(self):
        return self.rows[0] if self.rows else None


class RecordingConn:
    """psycopg connection stand-in that keeps every (sql, params) it executes."""

    def __init__(self):
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        return FakeCursor()


@pytest.fixture
def business():
    return BusinessConfig(timezone="Asia/Bangkok", export_prefix="IMOTOR_Report", currency="THB")


@pytest.fixture
def order_rows():
    return [
        {
            "id": "wo2",
            "order_number": "IM-WO-26-002",
            "status": "PENDING",
            "total_amount": 300,
            "labor_cost": 300,
            "created_at": datetime(2026, 10, 19, 9, 0, tzinfo=BANGKOK),
            "issue_description": "Brake squeal at low speed, front left caliper",
        },
        {
            "id": "wo1",
            "order_number": "IM-WO-26-001",
            "status": "COMPLETED",
            "total_amount": "500",
            "labor_cost": "200",
            "created_at": datetime(2026, 10, 18, 14, 0, tzinfo=BANGKOK),
            "issue_description": "Battery check",
        },
    ]


@pytest.fixture
def part_rows():
    return [
        {"id": "p1", "sku": "IM-BATT-LITH", "name": "Lithium Battery Pack 72V", "category": "Battery",
         "cost_price": 25000, "sale_price": 35000, "stock_level": 2, "min_stock": 2},
        {"id": "p2", "sku": "IM-CTRL-3000", "name": "Motor Controller 3000W", "category": "Electronics",
         "cost_price": 8500, "sale_price": 12500, "stock_level": 10, "min_stock": 3},
    ]
