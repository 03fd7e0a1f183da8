from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path

import requests

from .config import AppConfig
from .db import Db, schema_script
from .domain import InventoryReportSummary, ReportKind, ValidationError
from .notifications import NotificationError
from .repositories.customer_repo import CustomerRepository
from .repositories.part_repo import PartRepository
from .repositories.system_config_repo import SystemConfigRepository
from .repositories.work_order_repo import WorkOrderRepository
from .services.notification_service import NotificationService
from .services.report_service import ReportResult, ReportService

log = logging.getLogger(__name__)

def _prompt(msg: str) -> str:
    return input(msg).strip()


def _prompt_date(msg: str, default: date) -> date:
    raw = _prompt(f"{msg} [{default.isoformat()}]: ")
    return date.fromisoformat(raw) if raw else default


def build_services(cfg: AppConfig) -> tuple[ReportService, NotificationService]:
    work_order_repo = WorkOrderRepository(cfg.company_id)
    report_service = ReportService(
        work_order_repo=work_order_repo,
        part_repo=PartRepository(cfg.company_id),
        customer_repo=CustomerRepository(cfg.company_id),
        business=cfg.business,
    )
    notification_service = NotificationService(
        work_order_repo=work_order_repo,
        system_config_repo=SystemConfigRepository(),
        line=cfg.line,
        session=requests.Session(),
    )
    return report_service, notification_service


def print_report(result: ReportResult, currency: str) -> None:
    s = result.summary
    if isinstance(s, InventoryReportSummary):
        print(
            f"SKUs={s.total_skus} stock={s.total_stock} low={s.low_stock_items} "
            f"value={s.inventory_value:,.2f} {currency}"
        )
    else:
        print(
            f"orders={s.total_orders} completed={s.completed} revenue={s.revenue:,.2f} {currency} "
            f"labor={s.labor:,.2f} {currency} efficiency={s.efficiency}%"
        )
    for r in result.rows:
        when = r.timestamp.strftime("%Y-%m-%d %H:%M") if r.timestamp else ""
        print(f"  {r.label:<16} {r.detail:<34} {when:<16} {r.tag:<14} {r.figure}")


def run_cli(db: Db, cfg: AppConfig) -> None:
    report_service, notification_service = build_services(cfg)
    currency = cfg.business.currency

    while True:
        print(f"\n=== {cfg.name} ===")
        print("1) Dashboard")
        print("2) Report (service / revenue / inventory)")
        print("3) Export report CSV")
        print("4) Low-stock alerts")
        print("5) Change work order status (+ LINE notification)")
        print("6) Resend LINE notification")
        print("7) Save LINE credentials")
        print("8) Show database repair script")
        print("0) Exit")

        choice = _prompt("> ")
        try:
            if choice == "0":
                return

            elif choice == "1":
                with db.session() as conn:
                    s = report_service.dashboard(conn)
                print(f"Today's income:  {s.today_income:,.2f} {currency}")
                print(f"In progress:     {s.in_progress_count}")
                print(f"Completed:       {s.completed_count}")
                print(f"Orders total:    {s.total_orders}")
                print(f"Customers:       {s.total_customers}")
                print(f"Parts low/total: {s.low_stock_count}/{s.total_parts}")

            elif choice in ("2", "3"):
                kind = ReportKind.parse(_prompt("kind (service/revenue/inventory): ") or "service")
                today = report_service.today()
                d1 = _prompt_date("from", today - timedelta(days=30))
                d2 = _prompt_date("to", today)

                if choice == "2":
                    with db.session() as conn:
                        result = report_service.report(conn, kind, d1, d2)
                    print_report(result, currency)
                else:
                    with db.session() as conn:
                        doc = report_service.export(conn, kind, d1, d2)
                    if doc is None:
                        print("Nothing to export for this period.")
                    else:
                        out = Path(_prompt(f"save to [{doc.filename}]: ") or doc.filename)
                        out.write_bytes(doc.content)
                        print(f"Saved {out} ({len(doc.content)} bytes)")

            elif choice == "4":
                with db.session() as conn:
                    alerts = report_service.low_stock_alerts(conn)
                if not alerts:
                    print("All parts above minimum stock.")
                for a in alerts:
                    print(f"  ! {a}")

            elif choice == "5":
                order_id = _prompt("work order id: ")
                status = _prompt("new status: ")
                creator = _prompt("your name: ") or cfg.name
                with db.transaction() as conn:
                    status = notification_service.update_status(conn, order_id=order_id, status=status)
                # the push runs only after the status change is committed
                with db.session() as conn:
                    sent = notification_service.announce(conn, order_id=order_id, creator=creator)
                print(f"Status updated to {status}." + (" LINE notified." if sent else ""))

            elif choice == "6":
                order_id = _prompt("work order id: ")
                creator = _prompt("your name: ") or cfg.name
                with db.session() as conn:
                    notification_service.notify(conn, order_id=order_id, creator=creator)
                print("Notification sent.")

            elif choice == "7":
                token = _prompt("LINE access token: ")
                group_id = _prompt("LINE group id: ")
                with db.transaction() as conn:
                    notification_service.save_credentials(conn, access_token=token, group_id=group_id)
                print("Saved.")

            elif choice == "8":
                print(schema_script())

            else:
                print("Unknown choice.")

        except ValidationError as e:
            print(f"[INPUT ERROR] {e}")
        except NotificationError as e:
            print(f"[LINE ERROR] {e}")
        except ValueError as e:
            print(f"[VALUE ERROR] {e}")
        except Exception as e:
            log.exception("Unhandled error in menu choice %s", choice)
            print(f"[ERROR] {type(e).__name__}: {e}")
