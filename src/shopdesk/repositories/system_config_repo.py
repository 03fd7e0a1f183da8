from __future__ import annotations

from psycopg import Connection


class SystemConfigRepository:
    def get(self, conn: Connection, key: str) -> str | None:
        cur = conn.execute(
            "SELECT config_value FROM system_config WHERE config_key = %s;",
            (key,),
        )
        row = cur.fetchone()
        if not row or row[0] is None:
            return None
        return str(row[0])

    def set(self, conn: Connection, key: str, value: str) -> None:
        conn.execute(
            """
            INSERT INTO system_config(config_key, config_value, updated_at)
            VALUES (%s, %s, now())
            ON CONFLICT (config_key) DO UPDATE SET
              config_value = EXCLUDED.config_value,
              updated_at = now();
            """,
            (key, value),
        )
