from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

CustomerType = Literal["INDIVIDUAL", "FLEET"]


class ValidationError(Exception):
    pass


class WorkOrderStatus(str, Enum):
    PENDING = "PENDING"
    DIAGNOSING = "DIAGNOSING"
    WAITING_PARTS = "WAITING_PARTS"
    IN_PROGRESS = "IN_PROGRESS"
    QC = "QC"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


CLOSED_STATUSES = frozenset({WorkOrderStatus.COMPLETED.value, WorkOrderStatus.CANCELLED.value})


class ReportKind(str, Enum):
    SERVICE = "service"
    INVENTORY = "inventory"
    REVENUE = "revenue"

    @classmethod
    def parse(cls, value: str | ReportKind | None) -> ReportKind:
        if isinstance(value, ReportKind):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown report kind: {value!r} (expected one of: {', '.join(k.value for k in cls)})"
            ) from None


@dataclass(frozen=True)
class WorkOrder:
    id: Optional[str]
    order_number: Optional[str]
    status: Optional[str]
    total_amount: Decimal
    labor_cost: Decimal
    created_at: Optional[datetime]
    issue_description: Optional[str]
    customer_id: Optional[str]
    vehicle_id: Optional[str]

    @property
    def is_completed(self) -> bool:
        return self.status == WorkOrderStatus.COMPLETED.value

    @property
    def is_cancelled(self) -> bool:
        return self.status == WorkOrderStatus.CANCELLED.value

    @property
    def is_in_progress(self) -> bool:
        # a missing status is treated as open work
        return self.status not in CLOSED_STATUSES


@dataclass(frozen=True)
class Part:
    id: Optional[str]
    sku: Optional[str]
    name: Optional[str]
    category: Optional[str]
    cost_price: Decimal
    sale_price: Decimal
    stock_level: int
    min_stock: int

    @property
    def is_low_stock(self) -> bool:
        return self.stock_level <= self.min_stock


@dataclass(frozen=True)
class Customer:
    id: Optional[str]
    name: Optional[str]
    phone: Optional[str]
    province: Optional[str]
    type: Optional[CustomerType]


@dataclass(frozen=True)
class Vehicle:
    id: Optional[str]
    customer_id: Optional[str]
    brand: Optional[str]
    model: Optional[str]
    vin: Optional[str]

    @property
    def label(self) -> str:
        return " ".join(p for p in (self.brand, self.model) if p)


@dataclass(frozen=True)
class DashboardSummary:
    today_income: Decimal = Decimal(0)
    total_orders: int = 0
    total_customers: int = 0
    in_progress_count: int = 0
    completed_count: int = 0
    low_stock_count: int = 0
    total_parts: int = 0


@dataclass(frozen=True)
class ServiceReportSummary:
    total_orders: int = 0
    completed: int = 0
    revenue: Decimal = Decimal(0)
    labor: Decimal = Decimal(0)
    efficiency: int = 0


@dataclass(frozen=True)
class InventoryReportSummary:
    total_skus: int = 0
    total_stock: int = 0
    low_stock_items: int = 0
    inventory_value: Decimal = Decimal(0)


ReportSummary = ServiceReportSummary | InventoryReportSummary


@dataclass(frozen=True)
class ReportRow:
    """One line of the report table and of the printable report.

    ``timestamp`` is only set for order-based reports. ``figure`` is the billed
    amount for orders and the on-hand quantity for parts.
    """

    label: str
    detail: str
    timestamp: Optional[datetime]
    tag: str
    figure: Decimal | int
