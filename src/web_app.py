from __future__ import annotations

import logging
import os
from datetime import date, timedelta

from flask import Flask, Response, flash, redirect, render_template, request, url_for

from shopdesk.cli import build_services
from shopdesk.config import AppConfig, ConfigError, load_config
from shopdesk.db import Db, DbError, schema_script
from shopdesk.domain import InventoryReportSummary, ReportKind, ValidationError, WorkOrderStatus
from shopdesk.logging_setup import configure_logging
from shopdesk.notifications import NotificationError
from shopdesk.services.notification_service import NotificationService
from shopdesk.services.report_service import ReportService

log = logging.getLogger("shopdesk.web")

app = Flask(__name__, template_folder="../templates")
app.secret_key = os.environ.get("SHOPDESK_SECRET_KEY", "change-this-secret-key-in-production")

db: Db = None
cfg: AppConfig = None
report_service: ReportService = None
notification_service: NotificationService = None


def init_app(config: AppConfig) -> Flask:
    global db, cfg, report_service, notification_service
    cfg = config
    db = Db(config.db)
    report_service, notification_service = build_services(config)
    return app


def _report_args() -> tuple[ReportKind, date, date]:
    kind = ReportKind.parse(request.args.get("kind", "service"))
    today = report_service.today()
    try:
        d1 = date.fromisoformat(request.args.get("start") or (today - timedelta(days=30)).isoformat())
        d2 = date.fromisoformat(request.args.get("end") or today.isoformat())
    except ValueError as e:
        raise ValidationError(f"Invalid date: {e}") from e
    return kind, d1, d2


@app.route("/")
def index():
    try:
        with db.session() as conn:
            summary = report_service.dashboard(conn)
            alerts = report_service.low_stock_alerts(conn)
        return render_template("index.html", summary=summary, alerts=alerts, currency=cfg.business.currency)
    except DbError as e:
        flash(f"DB error: {e}", "danger")
        return render_template("index.html", summary=None, alerts=[], currency=cfg.business.currency)


@app.route("/reports")
def reports():
    return _render_report("reports.html")


@app.route("/reports/print")
def reports_print():
    return _render_report("reports_print.html")


def _render_report(template: str):
    try:
        kind, d1, d2 = _report_args()
        with db.session() as conn:
            result = report_service.report(conn, kind, d1, d2)
        return render_template(
            template,
            result=result,
            is_inventory=isinstance(result.summary, InventoryReportSummary),
            kinds=list(ReportKind),
            company=cfg.name,
            currency=cfg.business.currency,
        )
    except ValidationError as e:
        flash(f"Validation error: {e}", "warning")
    except DbError as e:
        flash(f"DB error: {e}", "danger")
    return redirect(url_for("index"))


@app.route("/reports/export")
def reports_export():
    try:
        kind, d1, d2 = _report_args()
        with db.session() as conn:
            doc = report_service.export(conn, kind, d1, d2)
    except ValidationError as e:
        flash(f"Validation error: {e}", "warning")
        return redirect(url_for("index"))
    except DbError as e:
        flash(f"DB error: {e}", "danger")
        return redirect(url_for("index"))

    if doc is None:
        flash("Nothing to export for the selected period.", "warning")
        return redirect(url_for("reports", kind=kind.value, start=d1.isoformat(), end=d2.isoformat()))

    return Response(
        doc.content,
        mimetype=doc.mimetype,
        headers={"Content-Disposition": f'attachment; filename="{doc.filename}"'},
    )


@app.route("/settings/schema")
def settings_schema():
    return render_template("schema.html", script=schema_script())


@app.route("/orders/<order_id>/status", methods=["POST"])
def orders_status(order_id):
    status = request.form.get("status", "").strip()
    creator = request.form.get("creator", "").strip() or cfg.name
    try:
        with db.transaction() as conn:
            status = notification_service.update_status(conn, order_id=order_id, status=status)
        with db.session() as conn:
            sent = notification_service.announce(conn, order_id=order_id, creator=creator)
        flash(f"Work order {order_id} set to {status}" + (", LINE notified" if sent else ""), "success")
    except ValidationError as e:
        flash(f"Validation error: {e}", "warning")
    except ValueError as e:
        flash(f"Error: {e}", "danger")
    except DbError as e:
        flash(f"DB error: {e}", "danger")
    return redirect(request.referrer or url_for("index"))


@app.route("/orders/<order_id>/notify", methods=["POST"])
def orders_notify(order_id):
    creator = request.form.get("creator", "").strip() or cfg.name
    try:
        with db.session() as conn:
            notification_service.notify(conn, order_id=order_id, creator=creator)
        flash(f"LINE notification sent for {order_id}", "success")
    except ValidationError as e:
        flash(f"Validation error: {e}", "warning")
    except NotificationError as e:
        flash(f"LINE error: {e}", "danger")
    except DbError as e:
        flash(f"DB error: {e}", "danger")
    return redirect(request.referrer or url_for("index"))


@app.context_processor
def _template_globals():
    return {"statuses": [s.value for s in WorkOrderStatus]}


if __name__ == "__main__":
    try:
        config = load_config("config.toml")
        configure_logging(config.log_level, config.log_dir)
        init_app(config)
        app.run(debug=True, host="127.0.0.1", port=5000)
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}")
        raise SystemExit(2)
