from __future__ import annotations

from psycopg import Connection


class CustomerRepository:
    def __init__(self, company_id: str) -> None:
        self.company_id = company_id

    def list(self, conn: Connection, limit: int | None = None) -> list[dict]:
        cur = conn.execute(
            """
            SELECT id, name, phone, province, type
            FROM customers
            WHERE company_id = %s
            ORDER BY name
            LIMIT %s;
            """,
            (self.company_id, limit),
        )
        cols = [d.name for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]
