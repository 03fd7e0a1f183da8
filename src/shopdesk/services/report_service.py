from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from psycopg import Connection

from ..aggregation import dashboard_summary, report_summary
from ..config import BusinessConfig
from ..domain import (
    DashboardSummary,
    Part,
    ReportKind,
    ReportRow,
    ReportSummary,
    ValidationError,
    WorkOrder,
)
from ..export import export_csv, export_filename
from ..normalize import normalize_customers, normalize_parts, normalize_work_orders
from ..projection import project_rows
from ..repositories.customer_repo import CustomerRepository
from ..repositories.part_repo import PartRepository
from ..repositories.work_order_repo import WorkOrderRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportResult:
    kind: ReportKind
    date_from: date
    date_to: date
    summary: ReportSummary
    rows: list[ReportRow]
    records: tuple[WorkOrder, ...] | tuple[Part, ...]


@dataclass(frozen=True)
class ExportDocument:
    filename: str
    content: bytes
    mimetype: str = "text/csv; charset=utf-8"


class ReportService:
    def __init__(
        self,
        *,
        work_order_repo: WorkOrderRepository,
        part_repo: PartRepository,
        customer_repo: CustomerRepository,
        business: BusinessConfig,
        clock: Optional[Callable[[ZoneInfo], datetime]] = None,
    ) -> None:
        self.work_order_repo = work_order_repo
        self.part_repo = part_repo
        self.customer_repo = customer_repo
        self.business = business
        self.tz = ZoneInfo(business.timezone)
        self._clock = clock or datetime.now

    def today(self) -> date:
        return self._clock(self.tz).date()

    def dashboard(self, conn: Connection) -> DashboardSummary:
        work_orders = normalize_work_orders(self.work_order_repo.list_recent(conn))
        parts = normalize_parts(self.part_repo.list(conn))
        customers = normalize_customers(self.customer_repo.list(conn))
        summary = dashboard_summary(work_orders, parts, customers, today=self.today(), tz=self.tz)
        log.info(
            "Dashboard: %s orders, %s in progress, %s low-stock parts",
            summary.total_orders,
            summary.in_progress_count,
            summary.low_stock_count,
        )
        return summary

    def report(self, conn: Connection, kind: ReportKind | str, date_from: date, date_to: date) -> ReportResult:
        kind = ReportKind.parse(kind)
        if date_from > date_to:
            raise ValidationError(f"Start date {date_from} is after end date {date_to}.")

        if kind is ReportKind.INVENTORY:
            records = normalize_parts(self.part_repo.list(conn))
            summary = report_summary(kind, parts=records)
        else:
            records = normalize_work_orders(
                self.work_order_repo.list_between(conn, date_from, date_to, self.business.timezone)
            )
            summary = report_summary(kind, work_orders=records)

        log.info("Report %s %s..%s: %s records", kind.value, date_from, date_to, len(records))
        return ReportResult(
            kind=kind,
            date_from=date_from,
            date_to=date_to,
            summary=summary,
            rows=project_rows(kind, records),
            records=records,
        )

    def export(
        self, conn: Connection, kind: ReportKind | str, date_from: date, date_to: date
    ) -> ExportDocument | None:
        result = self.report(conn, kind, date_from, date_to)
        content = export_csv(result.records)
        if content is None:
            log.info("Export %s skipped: no records", result.kind.value)
            return None
        return ExportDocument(
            filename=export_filename(self.business.export_prefix, result.kind, date_from, date_to),
            content=content,
        )

    def low_stock_alerts(self, conn: Connection) -> list[str]:
        parts = normalize_parts(self.part_repo.list_low_stock(conn))
        return [
            f"{p.name or p.sku or '-'} ({p.sku or '-'}): {p.stock_level} left, minimum {p.min_stock}"
            for p in parts
            if p.is_low_stock
        ]
