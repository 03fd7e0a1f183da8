"""LINE Flex message for work-order status changes.

The builder is pure data shaping; ``LineNotifier`` makes one push call and
reports failure with ``NotificationError``. Nothing is queued or retried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

import requests

from .domain import WorkOrderStatus

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

BLUE = "#2563eb"
ORANGE = "#f59e0b"
GREEN = "#10b981"
RED = "#ef4444"


class NotificationError(Exception):
    pass


@dataclass(frozen=True)
class WorkOrderNotice:
    order_number: str
    status: str
    customer_name: str
    customer_phone: str
    vehicle_model: str
    province: str
    issue: str
    creator: str
    mechanic: Optional[str] = None


def status_banner(status: Optional[str]) -> tuple[str, str]:
    """Header colour and caption for a work-order status."""
    status = (status or "").upper()
    if status in (WorkOrderStatus.IN_PROGRESS.value, WorkOrderStatus.DIAGNOSING.value):
        return ORANGE, "กำลังดำเนินการซ่อม"
    if status == WorkOrderStatus.COMPLETED.value:
        return GREEN, "ซ่อมเสร็จสิ้น"
    if status == WorkOrderStatus.CANCELLED.value:
        return RED, "ยกเลิกงาน"
    return BLUE, "สร้างงานใหม่"


def thai_date(d: date) -> str:
    # th-TH locale: day/month/Buddhist-era year
    return f"{d.day}/{d.month}/{d.year + 543}"


def _text(text: str, **style: Any) -> dict:
    return {"type": "text", "text": text or "-", **style}


def _detail_line(label: str, value: str, **style: Any) -> dict:
    return {
        "type": "box",
        "layout": "horizontal",
        "contents": [
            _text(label, size="xs", color="#888888", flex=2),
            _text(value, size="xs", color="#111111", weight="bold", flex=4, align="end", **style),
        ],
    }


def build_work_order_message(notice: WorkOrderNotice, created_on: date) -> dict:
    color, caption = status_banner(notice.status)
    header = {
        "type": "box",
        "layout": "vertical",
        "contents": [
            _text("I-MOTOR SERVICE", weight="bold", color="#ffffff", size="sm"),
            _text(caption, weight="bold", color="#ffffff", size="xl", margin="md"),
            _text(f"เลขที่ใบงาน: {notice.order_number}", color="#ffffffcc", size="xs", margin="sm"),
        ],
        "backgroundColor": color,
        "paddingAll": "20px",
    }
    customer = {
        "type": "box",
        "layout": "horizontal",
        "contents": [
            {
                "type": "box",
                "layout": "vertical",
                "contents": [
                    _text("ลูกค้า", size="xs", color="#aaaaaa", weight="bold"),
                    _text(notice.customer_name, size="sm", color="#111111", weight="bold"),
                ],
                "flex": 1,
            },
            {
                "type": "box",
                "layout": "vertical",
                "contents": [
                    _text("โทรศัพท์", size="xs", color="#aaaaaa", weight="bold", align="end"),
                    _text(notice.customer_phone, size="sm", color="#111111", weight="bold", align="end"),
                ],
                "flex": 1,
            },
        ],
    }
    details = {
        "type": "box",
        "layout": "vertical",
        "margin": "lg",
        "spacing": "sm",
        "contents": [
            _detail_line("รถ/รุ่น", notice.vehicle_model),
            _detail_line("พื้นที่", notice.province),
            _detail_line("รายการ", notice.issue, wrap=True),
        ],
    }
    mechanic = {
        "type": "box",
        "layout": "vertical",
        "margin": "lg",
        "backgroundColor": "#f8f9fa",
        "paddingAll": "10px",
        "cornerRadius": "md",
        "contents": [
            _text("เจ้าหน้าที่ผู้รับผิดชอบ", size="xxs", color="#aaaaaa", weight="bold", margin="none"),
            _text(notice.mechanic or "รอระบุช่าง", size="xs", color="#333333", weight="bold"),
        ],
    }
    footer = {
        "type": "box",
        "layout": "vertical",
        "contents": [
            _text(f"วันที่สร้าง: {thai_date(created_on)}", size="xxs", color="#aaaaaa", align="center"),
            _text(f"ผู้ทำรายการ: {notice.creator}", size="xxs", color="#aaaaaa", align="center", margin="xs"),
        ],
    }
    return {
        "type": "flex",
        "altText": f"I-MOTOR: {caption} [{notice.order_number}]",
        "contents": {
            "type": "bubble",
            "size": "giga",
            "header": header,
            "body": {
                "type": "box",
                "layout": "vertical",
                "contents": [customer, {"type": "separator", "margin": "lg"}, details, mechanic],
            },
            "footer": footer,
        },
    }


class LineNotifier:
    def __init__(
        self,
        *,
        access_token: str,
        group_id: str,
        endpoint: str = "https://api.line.me/v2/bot/message/push",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not access_token or not group_id:
            raise NotificationError("LINE access token and group id must be configured.")
        self.access_token = access_token
        self.group_id = group_id
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def push(self, message: dict) -> None:
        try:
            response = self.session.post(
                self.endpoint,
                json={"to": self.group_id, "messages": [message]},
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            log.warning("LINE push failed: %s", e)
            raise NotificationError(f"LINE push failed: {e}") from e
        log.info("LINE push sent: %s", message.get("altText"))
