from __future__ import annotations

from typing import Optional, Sequence

from .domain import Part, ReportKind, ReportRow, WorkOrder

PLACEHOLDER = "-"
DETAIL_MAX_LEN = 30
ELLIPSIS = "..."


def truncate(text: Optional[str], limit: int = DETAIL_MAX_LEN) -> str:
    if not text:
        return PLACEHOLDER
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def order_row(wo: WorkOrder) -> ReportRow:
    return ReportRow(
        label=wo.order_number or PLACEHOLDER,
        detail=truncate(wo.issue_description),
        timestamp=wo.created_at,
        tag=wo.status or PLACEHOLDER,
        figure=wo.total_amount,
    )


def part_row(part: Part) -> ReportRow:
    return ReportRow(
        label=part.sku or PLACEHOLDER,
        detail=part.name or PLACEHOLDER,
        timestamp=None,
        tag=part.category or PLACEHOLDER,
        figure=part.stock_level,
    )


def project_rows(kind: ReportKind | str, records: Sequence[WorkOrder] | Sequence[Part]) -> list[ReportRow]:
    # order is preserved; callers sort at fetch time
    kind = ReportKind.parse(kind)
    if kind is ReportKind.INVENTORY:
        return [part_row(p) for p in records]
    return [order_row(wo) for wo in records]
