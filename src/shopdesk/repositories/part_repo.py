from __future__ import annotations

from psycopg import Connection


class PartRepository:
    def __init__(self, company_id: str) -> None:
        self.company_id = company_id

    def list(self, conn: Connection, limit: int | None = None) -> list[dict]:
        cur = conn.execute(
            """
            SELECT id, sku, name, category, cost_price, sale_price, stock_level, min_stock
            FROM parts
            WHERE company_id = %s
            ORDER BY sku
            LIMIT %s;
            """,
            (self.company_id, limit),
        )
        cols = [d.name for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]

    def list_low_stock(self, conn: Connection) -> list[dict]:
        cur = conn.execute(
            """
            SELECT id, sku, name, category, cost_price, sale_price, stock_level, min_stock
            FROM parts
            WHERE company_id = %s
              AND COALESCE(stock_level, 0) <= COALESCE(min_stock, 0)
            ORDER BY stock_level, sku;
            """,
            (self.company_id,),
        )
        cols = [d.name for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]
