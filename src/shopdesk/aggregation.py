from __future__ import annotations

from datetime import date, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from .domain import (
    Customer,
    DashboardSummary,
    InventoryReportSummary,
    Part,
    ReportKind,
    ReportSummary,
    ServiceReportSummary,
    WorkOrder,
)


def local_day(order: WorkOrder, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar day the order was opened on, in the shop's timezone.

    Naive timestamps are taken to be shop-local already.
    """
    created = order.created_at
    if created is None:
        return None
    if tz is not None and created.tzinfo is not None:
        created = created.astimezone(tz)
    return created.date()


def efficiency_rate(completed: int, total: int) -> int:
    """Completed share as a whole percentage, halves rounded up; 0 for no orders."""
    if total <= 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def dashboard_summary(
    work_orders: Sequence[WorkOrder],
    parts: Sequence[Part],
    customers: Sequence[Customer],
    *,
    today: date,
    tz: Optional[tzinfo] = None,
) -> DashboardSummary:
    today_income = Decimal(0)
    in_progress = 0
    completed = 0
    for wo in work_orders:
        if local_day(wo, tz) == today:
            today_income += wo.total_amount
        if wo.is_completed:
            completed += 1
        elif wo.is_in_progress:
            in_progress += 1

    return DashboardSummary(
        today_income=today_income,
        total_orders=len(work_orders),
        total_customers=len(customers),
        in_progress_count=in_progress,
        completed_count=completed,
        low_stock_count=sum(1 for p in parts if p.is_low_stock),
        total_parts=len(parts),
    )


def service_summary(work_orders: Sequence[WorkOrder]) -> ServiceReportSummary:
    completed = sum(1 for wo in work_orders if wo.is_completed)
    return ServiceReportSummary(
        total_orders=len(work_orders),
        completed=completed,
        revenue=sum((wo.total_amount for wo in work_orders), Decimal(0)),
        labor=sum((wo.labor_cost for wo in work_orders), Decimal(0)),
        efficiency=efficiency_rate(completed, len(work_orders)),
    )


def inventory_summary(parts: Sequence[Part]) -> InventoryReportSummary:
    return InventoryReportSummary(
        total_skus=len(parts),
        total_stock=sum(p.stock_level for p in parts),
        low_stock_items=sum(1 for p in parts if p.is_low_stock),
        inventory_value=sum((p.cost_price * p.stock_level for p in parts), Decimal(0)),
    )


def report_summary(
    kind: ReportKind | str,
    work_orders: Sequence[WorkOrder] = (),
    parts: Sequence[Part] = (),
) -> ReportSummary:
    kind = ReportKind.parse(kind)
    if kind is ReportKind.INVENTORY:
        return inventory_summary(parts)
    return service_summary(work_orders)
