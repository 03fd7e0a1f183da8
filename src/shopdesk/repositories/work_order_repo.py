from __future__ import annotations

from datetime import date, timedelta

from psycopg import Connection

_COLUMNS = """
    id, order_number, status, issue_description, labor_cost, total_amount,
    customer_id, vehicle_id, mechanic_id, created_at, updated_at
"""


class WorkOrderRepository:
    def __init__(self, company_id: str) -> None:
        self.company_id = company_id

    def list_recent(self, conn: Connection, limit: int | None = None) -> list[dict]:
        # LIMIT NULL means no limit in Postgres
        cur = conn.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_orders
            WHERE company_id = %s
            ORDER BY created_at DESC
            LIMIT %s;
            """,
            (self.company_id, limit),
        )
        cols = [d.name for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]

    def list_between(self, conn: Connection, date_from: date, date_to: date, tz_name: str) -> list[dict]:
        # both ends inclusive, compared on the shop's local calendar
        cur = conn.execute(
            f"""
            SELECT {_COLUMNS}
            FROM work_orders
            WHERE company_id = %s
              AND created_at >= (%s::date)::timestamp AT TIME ZONE %s
              AND created_at < (%s::date)::timestamp AT TIME ZONE %s
            ORDER BY created_at DESC;
            """,
            (self.company_id, date_from, tz_name, date_to + timedelta(days=1), tz_name),
        )
        cols = [d.name for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]

    def get_detail(self, conn: Connection, order_id: str) -> dict | None:
        cur = conn.execute(
            """
            SELECT
              wo.id, wo.order_number, wo.status, wo.issue_description, wo.created_at,
              c.name AS customer_name, c.phone AS customer_phone, c.province,
              wo.vehicle_id, v.customer_id AS vehicle_customer_id,
              v.brand AS vehicle_brand, v.model AS vehicle_model, v.vin AS vehicle_vin,
              m.name AS mechanic_name
            FROM work_orders wo
            LEFT JOIN customers c ON c.id = wo.customer_id
            LEFT JOIN vehicles v ON v.id = wo.vehicle_id
            LEFT JOIN users m ON m.id = wo.mechanic_id
            WHERE wo.company_id = %s AND wo.id = %s;
            """,
            (self.company_id, order_id),
        )
        row = cur.fetchone()
        if not row:
            return None
        cols = [d.name for d in cur.description]
        return dict(zip(cols, row))

    def set_status(self, conn: Connection, *, order_id: str, status: str) -> None:
        cur = conn.execute(
            """
            UPDATE work_orders
            SET status = %s, updated_at = now()
            WHERE company_id = %s AND id = %s;
            """,
            (status, self.company_id, order_id),
        )
        if cur.rowcount != 1:
            raise ValueError("Work order not found: %s" % order_id)
