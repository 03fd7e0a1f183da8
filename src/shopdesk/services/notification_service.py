from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import requests
from psycopg import Connection

from ..config import LineConfig
from ..domain import ValidationError, WorkOrderStatus
from ..normalize import as_datetime, as_text, vehicle_from_row
from ..notifications import LineNotifier, NotificationError, WorkOrderNotice, build_work_order_message
from ..repositories.system_config_repo import SystemConfigRepository
from ..repositories.work_order_repo import WorkOrderRepository

log = logging.getLogger(__name__)

TOKEN_KEY = "LINE_ACCESS_TOKEN"
GROUP_KEY = "LINE_GROUP_ID"


def notice_from_detail(detail: dict, creator: str) -> WorkOrderNotice:
    vehicle = vehicle_from_row({
        "id": detail.get("vehicle_id"),
        "customer_id": detail.get("vehicle_customer_id"),
        "brand": detail.get("vehicle_brand"),
        "model": detail.get("vehicle_model"),
        "vin": detail.get("vehicle_vin"),
    })
    return WorkOrderNotice(
        order_number=as_text(detail.get("order_number")) or "-",
        status=as_text(detail.get("status")) or WorkOrderStatus.PENDING.value,
        customer_name=as_text(detail.get("customer_name")) or "-",
        customer_phone=as_text(detail.get("customer_phone")) or "-",
        vehicle_model=vehicle.label or "-",
        province=as_text(detail.get("province")) or "-",
        issue=as_text(detail.get("issue_description")) or "-",
        creator=creator,
        mechanic=as_text(detail.get("mechanic_name")),
    )


class NotificationService:
    def __init__(
        self,
        *,
        work_order_repo: WorkOrderRepository,
        system_config_repo: SystemConfigRepository,
        line: LineConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.work_order_repo = work_order_repo
        self.system_config_repo = system_config_repo
        self.line = line
        # one pooled HTTP session shared by every push
        self.session = session or requests.Session()

    def notifier(self, conn: Connection) -> LineNotifier:
        # config.toml wins; the system_config table is the fallback
        token = self.line.access_token or self.system_config_repo.get(conn, TOKEN_KEY) or ""
        group_id = self.line.group_id or self.system_config_repo.get(conn, GROUP_KEY) or ""
        return LineNotifier(
            access_token=token,
            group_id=group_id,
            endpoint=self.line.endpoint,
            session=self.session,
        )

    def save_credentials(self, conn: Connection, *, access_token: str, group_id: str) -> None:
        if not access_token.strip() or not group_id.strip():
            raise ValidationError("Access token and group id cannot be empty.")
        self.system_config_repo.set(conn, TOKEN_KEY, access_token.strip())
        self.system_config_repo.set(conn, GROUP_KEY, group_id.strip())

    def notify(self, conn: Connection, *, order_id: str, creator: str) -> dict:
        detail = self.work_order_repo.get_detail(conn, order_id)
        if detail is None:
            raise ValidationError(f"Unknown work order: {order_id}")

        created = as_datetime(detail.get("created_at"))
        message = build_work_order_message(
            notice_from_detail(detail, creator),
            created.date() if created else date.today(),
        )
        self.notifier(conn).push(message)
        return message

    def update_status(self, conn: Connection, *, order_id: str, status: str) -> str:
        try:
            status = WorkOrderStatus((status or "").strip().upper()).value
        except ValueError:
            raise ValidationError(f"Unknown work order status: {status!r}") from None

        self.work_order_repo.set_status(conn, order_id=order_id, status=status)
        return status

    def announce(self, conn: Connection, *, order_id: str, creator: str) -> bool:
        """Push the current state of an order to LINE after a committed status change.

        Returns True when a message went out. A LINE failure is logged, not raised.
        """
        if not self.line.enabled:
            return False
        try:
            self.notify(conn, order_id=order_id, creator=creator)
        except NotificationError as e:
            log.warning("Status of %s changed, notification not sent: %s", order_id, e)
            return False
        return True
